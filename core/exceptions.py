from typing import Optional

class CustomException(Exception):
    """
    Base exception for the work-plan Q&A system.

    Supports:
    - error chaining
    - contextual metadata
    - readable logging
    """

    def __init__(
        self,
        message: str,
        error: Optional[Exception] = None,
        context: Optional[dict] = None,
    ):
        self.message = message
        self.original_error = error
        self.context = context or {}

        error_msg = message

        if error:
            error_msg += f" | RootError: {repr(error)}"

        if self.context:
            error_msg += f" | Context: {self.context}"

        super().__init__(error_msg)


class ValidationError(CustomException):
    """Client supplied an unusable question. Never retried."""


class ConfigurationError(CustomException):
    pass


class DocumentLoadError(CustomException):
    """A source PDF is missing, unreadable or not a PDF."""


class EmbeddingProviderError(CustomException):
    pass


class RetrievalError(CustomException):
    pass


class SynthesisError(CustomException):
    pass
