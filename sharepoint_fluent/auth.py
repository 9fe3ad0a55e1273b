"""
Access token exchange against the Entra ID (Azure AD) token endpoint.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

_TOKEN_ENDPOINT_TEMPLATE = (
    "https://login.microsoftonline.com/{tenant_id}/oauth2/v2.0/token"
)
DEFAULT_SCOPE = "https://microsoft.sharepoint.com/.default"
DEFAULT_GRANT_TYPE = "refresh_token"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AzureAppCredentials:
    """Client id and secret of an Entra ID application."""

    client_id: str
    client_secret: str


@dataclass(frozen=True)
class SharePointAuthOptions:
    """Everything needed to obtain a token and reach a SharePoint tenant."""

    site_hostname: str
    tenant_id: str
    refresh_token: str
    app_credentials: AzureAppCredentials
    scope: str | None = None
    grant_type: str | None = None


def build_token_url(tenant_id: str) -> str:
    return _TOKEN_ENDPOINT_TEMPLATE.format(tenant_id=tenant_id)


def build_token_payload(options: SharePointAuthOptions) -> dict[str, str]:
    """Form fields sent to the token endpoint."""
    return {
        "client_id": options.app_credentials.client_id,
        "client_secret": options.app_credentials.client_secret,
        "refresh_token": options.refresh_token,
        "grant_type": options.grant_type or DEFAULT_GRANT_TYPE,
        "scope": options.scope or DEFAULT_SCOPE,
    }


async def fetch_access_token(
    options: SharePointAuthOptions,
    *,
    http_client: httpx.AsyncClient | None = None,
    timeout: float = 30.0,
) -> str | None:
    """
    Exchange the configured refresh token for an access token.

    Failures are logged and reported as ``None``; turning a missing token
    into an error is left to the caller.
    """
    token_url = build_token_url(options.tenant_id)
    logger.info(f"Fetching access token from {token_url}")
    payload = build_token_payload(options)
    headers = {"Content-Type": "application/x-www-form-urlencoded"}

    try:
        if http_client is not None:
            response = await http_client.post(token_url, data=payload, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.post(token_url, data=payload, headers=headers)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        logger.error(
            f"[SharePoint Token Error] ({status}) {_describe_token_error(exc.response, exc)}"
        )
        return None
    except httpx.HTTPError as exc:
        logger.error(f"[SharePoint Token Error] {exc}")
        return None

    try:
        data = response.json()
    except ValueError:
        logger.error("[SharePoint Token Error] Invalid token response JSON")
        return None

    access_token = data.get("access_token") if isinstance(data, dict) else None
    if not access_token:
        logger.error("[SharePoint Token Error] Token response missing access_token")
        return None
    return access_token


def _describe_token_error(response: httpx.Response, exc: Exception) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        description = data.get("error_description") or data.get("error")
        if description:
            return str(description)
    return str(exc)
