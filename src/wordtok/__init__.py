"""WordTok: word-level BPE tokenization library."""

from ._bpe import WORD_START
from .artifact import Artifact
from .errors import (
    MalformedArtifactError,
    ModelLoadError,
    SpecialTokenError,
    TrainingError,
    UnknownIdError,
    UnknownTokenError,
    VocabularyError,
    WordTokError,
)
from .factory import from_pretrained, get_tokenizer
from .special import (
    BOS_TOKEN,
    DEFAULT_SPECIAL_TOKENS,
    EOS_TOKEN,
    PAD_TOKEN,
    SEP_TOKEN,
    UNK_TOKEN,
)
from .tokenizer import Tokenizer
from .trainer import BPETrainingResult, TrainingConfig, train_bpe
from .vocab import Vocabulary

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("wordtok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Tokenizer",
    "Vocabulary",
    "Artifact",
    "TrainingConfig",
    "BPETrainingResult",
    "train_bpe",
    "get_tokenizer",
    "from_pretrained",
    "WORD_START",
    "PAD_TOKEN",
    "UNK_TOKEN",
    "BOS_TOKEN",
    "EOS_TOKEN",
    "SEP_TOKEN",
    "DEFAULT_SPECIAL_TOKENS",
    "WordTokError",
    "VocabularyError",
    "UnknownTokenError",
    "UnknownIdError",
    "SpecialTokenError",
    "TrainingError",
    "ModelLoadError",
    "MalformedArtifactError",
]
