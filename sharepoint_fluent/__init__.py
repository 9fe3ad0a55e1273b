"""
sharepoint-fluent: fluent async client for the SharePoint REST API.

Connect once, then build requests against site or tenant admin endpoints
with a chainable builder.

Example:
    >>> import sharepoint_fluent
    >>> sp = sharepoint_fluent.connect_with_token("contoso.sharepoint.com", token)
    >>> lists = await sp.api("mysite", "web/lists").select("Title").get()
"""

from sharepoint_fluent.auth import (
    AzureAppCredentials,
    SharePointAuthOptions,
    fetch_access_token,
)
from sharepoint_fluent.client import HttpMethod, SharePointClient
from sharepoint_fluent.connect import connect_with_sharepoint, connect_with_token
from sharepoint_fluent.exceptions import (
    SharePointAuthError,
    SharePointConfigurationError,
    SharePointError,
    SharePointRequestError,
)
from sharepoint_fluent.stages import ConfiguredStage, InitialStage

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Connecting
    "connect_with_sharepoint",
    "connect_with_token",
    "fetch_access_token",
    "AzureAppCredentials",
    "SharePointAuthOptions",
    # Request builder
    "SharePointClient",
    "HttpMethod",
    "InitialStage",
    "ConfiguredStage",
    # Errors
    "SharePointError",
    "SharePointAuthError",
    "SharePointConfigurationError",
    "SharePointRequestError",
]
