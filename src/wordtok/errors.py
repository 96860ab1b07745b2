"""Custom exception hierarchy for wordtok tokenization errors."""

from .types import Piece, TokenId


class WordTokError(Exception):
    """Base exception for all wordtok errors."""


class VocabularyError(WordTokError):
    """Raised when vocabulary operations fail."""

    def __init__(
        self,
        message: str,
        *,
        invalid_tok: Piece | TokenId | None = None,
    ) -> None:
        """Initialize with an optional offending token that gets appended to the message."""
        extra = ""
        if invalid_tok is not None:
            extra = f" (invalid token: {invalid_tok!r})"
        super().__init__(message + extra)
        self.invalid_tok = invalid_tok


class UnknownTokenError(VocabularyError):
    """Raised when a piece has no id in the vocabulary."""


class UnknownIdError(VocabularyError):
    """Raised when an id has no piece in the vocabulary."""


class SpecialTokenError(WordTokError):
    """Raised when special token configuration is invalid."""

    def __init__(self, message: str, *, found_tokens: set[str] | None = None) -> None:
        """Initialize with optional found_tokens that get appended to the message."""
        if found_tokens:
            message = f"{message} (found: {', '.join(sorted(found_tokens))})"
        super().__init__(message)
        self.found_tokens = found_tokens


class TrainingError(WordTokError):
    """Raised when tokenizer training is misconfigured."""

    def __init__(self, message: str, *, value: object = None) -> None:
        if value is not None:
            message = f"{message} (got {value!r})"
        super().__init__(message)
        self.value = value


class ModelLoadError(WordTokError):
    """Raised when loading a tokenizer artifact fails."""

    def __init__(self, message: str, *, model_path: str | None = None) -> None:
        extra = ""
        if model_path:
            extra = f" (path: {model_path})"
        super().__init__(message + extra)
        self.model_path = model_path


class MalformedArtifactError(ModelLoadError):
    """Raised when an artifact does not match the expected structure."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        model_path: str | None = None,
    ) -> None:
        """
        Initialize MalformedArtifactError with the offending field.

        Args:
            message: Error message.
            field: Dotted path of the artifact field that failed validation.
            model_path: Path of the artifact file, when loaded from disk.
        """
        if field:
            message = f"{message} (field: {field})"
        super().__init__(message, model_path=model_path)
        self.field = field
