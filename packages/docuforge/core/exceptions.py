"""
Custom exceptions for DocuForge.

Every engine raises a subclass of :class:`DocuForgeError` so callers can
handle failures from any tool with a single ``except`` clause.
"""


class DocuForgeError(Exception):
    """Base exception for all DocuForge errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown DocuForge error occurred."


class DecodeError(DocuForgeError):
    """Raised when source bytes are malformed or not the declared format."""

    @property
    def default_message(self) -> str:
        return "Unable to decode the source document."


class EncodeError(DocuForgeError):
    """Raised when an encoder fails to produce output bytes."""

    @property
    def default_message(self) -> str:
        return "Unable to encode the output document."


class UnsupportedFormatError(DocuForgeError):
    """Raised when a MIME type is not supported by the requested operation."""

    @property
    def default_message(self) -> str:
        return "Unsupported file format for this operation."


class InsufficientInputError(DocuForgeError):
    """Raised when an operation receives fewer inputs than it requires."""

    @property
    def default_message(self) -> str:
        return "Not enough input documents were provided."


class ExternalServiceError(DocuForgeError):
    """Raised when a delegated extraction call fails or reports an error."""

    @property
    def default_message(self) -> str:
        return "The external extraction service failed."


class DocumentFinalizedError(DocuForgeError):
    """Raised when a serialized PDF document model is modified again."""

    @property
    def default_message(self) -> str:
        return "The document has already been serialized and can no longer change."


__all__ = [
    "DocuForgeError",
    "DecodeError",
    "EncodeError",
    "UnsupportedFormatError",
    "InsufficientInputError",
    "ExternalServiceError",
    "DocumentFinalizedError",
]
