"""
Entry points that return a ready-to-use SharePointClient.
"""

from __future__ import annotations

import httpx

from sharepoint_fluent.auth import SharePointAuthOptions, fetch_access_token
from sharepoint_fluent.client import SharePointClient
from sharepoint_fluent.exceptions import SharePointAuthError

_ODATA_VERBOSE = "application/json;odata=verbose"


def build_default_headers(access_token: str) -> dict[str, str]:
    return {
        "Accept": _ODATA_VERBOSE,
        "Content-Type": _ODATA_VERBOSE,
        "Authorization": f"Bearer {access_token}",
    }


async def connect_with_sharepoint(
    options: SharePointAuthOptions,
    *,
    http_client: httpx.AsyncClient | None = None,
    timeout: float = 30.0,
) -> SharePointClient:
    """
    Obtain an access token with the app credentials and refresh token, and
    return a client authenticated with it.

    Raises:
        SharePointAuthError: If no access token could be obtained.
    """
    access_token = await fetch_access_token(
        options, http_client=http_client, timeout=timeout
    )
    if not access_token:
        raise SharePointAuthError("Failed to obtain access token for SharePoint.")
    return SharePointClient(
        options.site_hostname,
        build_default_headers(access_token),
        http_client=http_client,
        timeout=timeout,
    )


def connect_with_token(
    site_hostname: str,
    access_token: str,
    *,
    http_client: httpx.AsyncClient | None = None,
    timeout: float = 30.0,
) -> SharePointClient:
    """Return a client for a caller that already holds a valid access token."""
    return SharePointClient(
        site_hostname,
        build_default_headers(access_token),
        http_client=http_client,
        timeout=timeout,
    )
