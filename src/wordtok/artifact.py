"""
Persisted tokenizer artifact: schema, validation and JSON file I/O.

The artifact is a single record::

    {
      "meta": {"lower": true, "specialTokens": ["<PAD>", "<UNK>", ...]},
      "vocab": {"<PAD>": 0, "<UNK>": 1, ..., "▁low": 5},
      "merges": [["▁l", "o"], ["▁lo", "w"]]
    }
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final
import json
import logging

from .errors import MalformedArtifactError, ModelLoadError, SpecialTokenError
from .special import validate_special_tokens
from .types import MergeTable
from .vocab import Vocabulary

ARTIFACT_SUFFIX: Final[str] = ".json"

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Artifact:
    """Everything needed to rebuild a trained tokenizer."""

    lower: bool
    special_toks: list[str]
    vocab: Vocabulary
    merges: MergeTable

    def to_dict(self) -> dict[str, Any]:
        """Return the artifact as plain JSON-compatible data."""
        return {
            "meta": {"lower": self.lower, "specialTokens": list(self.special_toks)},
            "vocab": self.vocab.to_dict(),
            "merges": [[left, right] for left, right in self.merges],
        }

    @classmethod
    def from_dict(cls, obj: object) -> "Artifact":
        """
        Validate plain data and build an artifact from it.

        ``merges`` may be omitted and defaults to an empty table. Vocab
        entries with unusable ids are skipped (see
        :meth:`Vocabulary.from_mapping`).

        :raises MalformedArtifactError: If a required field is missing or has
            the wrong type.
        """
        if not isinstance(obj, dict):
            raise MalformedArtifactError("artifact must be an object")

        meta = obj.get("meta")
        if not isinstance(meta, dict):
            raise MalformedArtifactError("missing or invalid meta", field="meta")

        lower = meta.get("lower")
        if not isinstance(lower, bool):
            raise MalformedArtifactError("expected a boolean", field="meta.lower")

        try:
            special_toks = validate_special_tokens(meta.get("specialTokens"))
        except SpecialTokenError as e:
            raise MalformedArtifactError(str(e), field="meta.specialTokens") from e

        raw_vocab = obj.get("vocab")
        if not isinstance(raw_vocab, dict):
            raise MalformedArtifactError("missing or invalid vocab", field="vocab")

        raw_merges = obj.get("merges", [])
        if not isinstance(raw_merges, list):
            raise MalformedArtifactError("expected a list", field="merges")

        merges: MergeTable = []
        for idx, entry in enumerate(raw_merges):
            if (
                not isinstance(entry, (list, tuple))
                or len(entry) != 2
                or not all(isinstance(p, str) and p for p in entry)
            ):
                raise MalformedArtifactError(
                    f"merge must be a pair of non-empty strings, got {entry!r}",
                    field=f"merges[{idx}]",
                )
            merges.append((entry[0], entry[1]))

        vocab = Vocabulary.from_mapping(special_toks, raw_vocab)

        return cls(lower=lower, special_toks=special_toks, vocab=vocab, merges=merges)


def write_artifact(path: str | Path, artifact: Artifact) -> Path:
    """Write an artifact as UTF-8 JSON, creating parent directories."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    log.debug(f"writing artifact to {out_path}")
    with out_path.open("w", encoding="utf-8", newline="\n") as f:
        json.dump(artifact.to_dict(), f, ensure_ascii=False, indent=2)
        f.write("\n")
    return out_path


def read_artifact(path: str | Path) -> Artifact:
    """
    Read and validate an artifact file.

    :raises ModelLoadError: If the file does not exist or is not valid JSON.
    :raises MalformedArtifactError: If the JSON does not match the schema.
    """
    in_path = Path(path)
    if not in_path.is_file():
        raise ModelLoadError("artifact filepath does not exist", model_path=str(in_path))

    log.debug(f"reading artifact from {in_path}")
    try:
        with in_path.open("r", encoding="utf-8") as f:
            obj = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ModelLoadError(f"artifact is not valid JSON: {e}", model_path=str(in_path)) from e

    try:
        return Artifact.from_dict(obj)
    except MalformedArtifactError as e:
        e.model_path = str(in_path)
        raise


__all__ = ["ARTIFACT_SUFFIX", "Artifact", "write_artifact", "read_artifact"]
