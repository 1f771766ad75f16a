"""Custom exceptions for Quill."""


class QuillError(Exception):
    """Base exception for all Quill errors."""

    pass


class FetchError(QuillError):
    """Exception raised when a page cannot be fetched (network error, non-2xx, browser failure)."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class FetchTimeoutError(FetchError):
    """Exception raised when a fetch exceeds its timeout."""

    pass


class SearchAPIError(QuillError):
    """Exception raised when the search API request fails."""

    pass


class GenerationError(QuillError):
    """Base exception for text generation errors."""

    pass


class GenerationAuthError(GenerationError):
    """Exception raised when the generation API rejects the credentials (401)."""

    pass


class PersistenceError(QuillError):
    """Exception raised when the article store rejects or cannot serve a request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class BootstrapError(QuillError):
    """Exception raised when the article store is unreachable at startup.

    This is the only error that aborts a whole run.
    """

    pass
