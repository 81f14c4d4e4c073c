from __future__ import annotations


class HandleSuggestionError(RuntimeError):
    """Base class for failures rendered to the client as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidPayloadError(HandleSuggestionError):
    """Raised when the request body is not a usable JSON object."""

    status_code = 400


class InvalidNameError(HandleSuggestionError):
    """Raised when the submitted name is missing or too short."""

    status_code = 400


class ServerMisconfiguredError(HandleSuggestionError):
    """Raised when the DeepSeek API key is not configured."""

    status_code = 500


class UpstreamRequestFailedError(HandleSuggestionError):
    """Raised when the completion call fails or returns a non-success status."""

    status_code = 502


class EmptyUpstreamResponseError(HandleSuggestionError):
    """Raised when the completion succeeds without any message content."""

    status_code = 502


class MalformedUpstreamContentError(HandleSuggestionError):
    """Raised when the message content is not valid JSON."""

    status_code = 502


class InvalidSuggestionStructureError(HandleSuggestionError):
    """Raised when decoded content has no usable ``suggestions`` array."""

    status_code = 502


class UnexpectedFailureError(HandleSuggestionError):
    """Raised when the completion call fails in a way no other error covers."""

    status_code = 502
