"""
Exceptions raised by the SharePoint fluent client.
"""

from __future__ import annotations


class SharePointError(Exception):
    """Base class for all SharePoint client errors."""


class SharePointConfigurationError(SharePointError):
    """Raised when a request is sent before .api() or .admin_api() was called."""

    def __init__(self, message: str | None = None):
        if message is None:
            message = "You must call .api() or .admin_api() before making a request."
        super().__init__(message)


class SharePointAuthError(SharePointError):
    """Raised when no access token could be obtained."""


class SharePointRequestError(SharePointError):
    """Raised when a SharePoint API request fails and errors are not ignored."""

    def __init__(
        self,
        message: str,
        *,
        method: str,
        endpoint: str,
        status_code: int | None = None,
        code: str | None = None,
        body: str | None = None,
        url: str | None = None,
    ):
        self.method = method
        self.endpoint = endpoint
        self.status_code = status_code
        self.code = code
        self.body = body
        self.url = url
        self.reason = message
        super().__init__(self._format(message))

    def _format(self, message: str) -> str:
        text = f"Microsoft SharePoint API Error at: {self.method} {self.endpoint}"
        if self.status_code:
            text += f" (Status: {self.status_code})"
        if self.code:
            text += f" (Code: {self.code})"
        return f"{text} - {message}"
