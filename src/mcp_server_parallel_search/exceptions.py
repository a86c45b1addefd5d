"""Custom exceptions for the parallel search MCP server."""


class ParallelSearchError(Exception):
    """Base exception for parallel search errors."""

    pass


class ConfigurationError(ParallelSearchError):
    """Raised when a required setting (e.g. the search API key) is missing."""

    pass


class UpstreamError(ParallelSearchError):
    """Raised when the search provider does not answer with a success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AllFetchesFailedError(ParallelSearchError):
    """Raised when every page fetch of a non-empty URL list failed."""

    def __init__(self, reasons: list[str]) -> None:
        super().__init__(f"All {len(reasons)} page fetches failed; no content could be retrieved")
        self.reasons = reasons
