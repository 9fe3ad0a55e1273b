"""
Load connection settings from the environment (optionally a .env file).

Variables:
    sp_site_hostname   e.g. contoso.sharepoint.com
    sp_tenant_id       Entra ID tenant id
    sp_client_id       app registration client id
    sp_client_secret   app registration client secret
    sp_refresh_token   refresh token exchanged for an access token
    sp_scope           optional, defaults to the SharePoint Online scope
    sp_grant_type      optional, defaults to refresh_token
    sp_access_token    optional, skips the token exchange in the CLI
"""

from __future__ import annotations

import os
from pathlib import Path

import dotenv

from sharepoint_fluent.auth import AzureAppCredentials, SharePointAuthOptions


def load_env(env_file: str | Path | None = None) -> None:
    if env_file is None:
        dotenv.load_dotenv()
    else:
        dotenv.load_dotenv(env_file)


def get_required_env(key: str) -> str:
    value = os.getenv(key)
    if not value:
        raise ValueError(f"Missing required environment variable: {key}")
    return value


def load_auth_options(env_file: str | Path | None = None) -> SharePointAuthOptions:
    load_env(env_file)
    return SharePointAuthOptions(
        site_hostname=get_required_env("sp_site_hostname"),
        tenant_id=get_required_env("sp_tenant_id"),
        refresh_token=get_required_env("sp_refresh_token"),
        app_credentials=AzureAppCredentials(
            client_id=get_required_env("sp_client_id"),
            client_secret=get_required_env("sp_client_secret"),
        ),
        scope=os.getenv("sp_scope") or None,
        grant_type=os.getenv("sp_grant_type") or None,
    )
