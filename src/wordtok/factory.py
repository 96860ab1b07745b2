"""Factory functions for creating tokenizers."""

from pathlib import Path

from .special import DEFAULT_SPECIAL_TOKENS
from .tokenizer import Tokenizer


def get_tokenizer(lower: bool = True, special_toks: list[str] | None = None) -> Tokenizer:
    """
    Create an untrained tokenizer.

    :param lower: Apply NFC + lowercasing to text before splitting.
    :param special_toks: Ordered special tokens; defaults to
        ``<PAD> <UNK> <BOS> <EOS> <SEP>``.
    :return: Tokenizer ready for :meth:`Tokenizer.train`.
    :raises SpecialTokenError: If ``special_toks`` is invalid.

    .. code-block:: python

        tokenizer = get_tokenizer()
        tokenizer.train(corpus, min_frequency=2, max_merges=1000)
    """
    if special_toks is None:
        special_toks = list(DEFAULT_SPECIAL_TOKENS)
    return Tokenizer(lower=lower, special_toks=special_toks)


def from_pretrained(model_path: str | Path) -> Tokenizer:
    """
    Load a trained tokenizer from a JSON artifact.

    Case folding and special tokens are taken from the artifact.

    :param model_path: Path to the artifact file.
    :return: Loaded tokenizer.
    :raises ModelLoadError: If the file is missing or not JSON.
    :raises MalformedArtifactError: If the contents do not match the schema.

    .. code-block:: python

        tokenizer = from_pretrained("vocab.json")
        ids = tokenizer.encode("hello world")
    """
    tokenizer = Tokenizer()
    tokenizer.load(model_path)
    return tokenizer


__all__ = ["get_tokenizer", "from_pretrained"]
