"""Errors raised by the blog content pipeline."""

from typing import Optional


class BlogSyncError(Exception):
    """Base exception for all pipeline errors."""


class UpstreamError(BlogSyncError):
    """The content repository was unreachable or answered with something unusable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ContentNotFoundError(UpstreamError):
    """The content repository answered 404 for the requested path."""

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class FrontMatterError(BlogSyncError):
    """A post file has a malformed or incomplete front matter block."""

    def __init__(self, message: str, line: int):
        super().__init__(f"{message} (line {line})")
        self.line = line


class StoreError(BlogSyncError):
    """A post store transaction failed and was rolled back."""


class VerificationError(BlogSyncError):
    """A webhook delivery carried a bad or missing signature."""


class ValidationError(BlogSyncError):
    """A webhook payload did not have the expected shape."""
