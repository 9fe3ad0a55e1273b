import unittest

import pytest

from sharepoint_fluent.config import get_required_env, load_auth_options

tc = unittest.TestCase()

_KEYS = [
    "sp_site_hostname",
    "sp_tenant_id",
    "sp_client_id",
    "sp_client_secret",
    "sp_refresh_token",
    "sp_scope",
    "sp_grant_type",
]


@pytest.fixture
def clean_env(monkeypatch):
    # recorded so values loaded from a .env file are undone on teardown
    for key in _KEYS:
        monkeypatch.setenv(key, "placeholder")
        monkeypatch.delenv(key)
    return monkeypatch


def test_get_required_env_missing_raises(clean_env) -> None:
    with tc.assertRaises(ValueError) as exc:
        get_required_env("sp_tenant_id")

    tc.assertIn("sp_tenant_id", str(exc.exception))


def test_load_auth_options_from_env_file(clean_env, tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "sp_site_hostname=contoso.sharepoint.com\n"
        "sp_tenant_id=tenant-123\n"
        "sp_client_id=client-abc\n"
        "sp_client_secret=secret-xyz\n"
        "sp_refresh_token=refresh-xyz\n"
    )

    options = load_auth_options(env_file)

    tc.assertEqual(options.site_hostname, "contoso.sharepoint.com")
    tc.assertEqual(options.tenant_id, "tenant-123")
    tc.assertEqual(options.refresh_token, "refresh-xyz")
    tc.assertEqual(options.app_credentials.client_id, "client-abc")
    tc.assertEqual(options.app_credentials.client_secret, "secret-xyz")
    tc.assertIsNone(options.scope)
    tc.assertIsNone(options.grant_type)


def test_load_auth_options_reads_optional_values(clean_env, tmp_path) -> None:
    for key in _KEYS:
        clean_env.setenv(key, f"{key}-value")

    options = load_auth_options(tmp_path / "missing.env")

    tc.assertEqual(options.scope, "sp_scope-value")
    tc.assertEqual(options.grant_type, "sp_grant_type-value")


def test_load_auth_options_missing_value_raises(clean_env, tmp_path) -> None:
    clean_env.setenv("sp_site_hostname", "contoso.sharepoint.com")

    with tc.assertRaises(ValueError):
        load_auth_options(tmp_path / "missing.env")
