"""
Fluent SharePoint REST client for site and tenant admin endpoints.

A request is built by picking a target with ``api`` or ``admin_api``, chaining
query modifiers and finishing with one of the HTTP verbs::

    items = await sp.api("mysite", "web/lists/getbytitle('Tasks')/items") \\
        .select(["Id", "Title"]) \\
        .filter("Status eq 'Open'") \\
        .top(10) \\
        .get()

The client keeps the state of exactly one request at a time and clears it
after every verb call, so one instance can be reused for any number of
sequential requests. Concurrent requests need separate instances (see
``clone``).
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Mapping, Sequence

import httpx

from sharepoint_fluent.exceptions import (
    SharePointConfigurationError,
    SharePointRequestError,
)
from sharepoint_fluent.stages import ConfiguredStage

_SHAREPOINT_SUFFIX = ".sharepoint.com"
_ADMIN_SUFFIX = "-admin.sharepoint.com"
_UNKNOWN_ERROR = "Unknown SharePoint API error"
# httpx.InvalidURL is not an httpx.HTTPError
_TRANSPORT_ERRORS = (httpx.HTTPError, httpx.InvalidURL)

logger = logging.getLogger(__name__)


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class SharePointClient:
    """Builds, sends and error-handles one SharePoint REST request at a time."""

    def __init__(
        self,
        site_hostname: str,
        headers: Mapping[str, str],
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._site_hostname = site_hostname
        self._headers = dict(headers)
        self._http_client = http_client
        self._timeout = timeout
        self._reset()

    @property
    def site_hostname(self) -> str:
        return self._site_hostname

    @property
    def headers(self) -> dict[str, str]:
        """Default headers sent with every request."""
        return dict(self._headers)

    def clone(self) -> SharePointClient:
        """Return a fresh client sharing hostname, headers and transport."""
        return SharePointClient(
            self._site_hostname,
            self._headers,
            http_client=self._http_client,
            timeout=self._timeout,
        )

    # Initial stage

    def api(self, site_name: str, endpoint: str) -> ConfiguredStage:
        """Start a request against ``/sites/{site_name}/_api/{endpoint}``."""
        self._reset()
        self._site_name = site_name
        self._endpoint = endpoint
        self._initialized = True
        return self

    def admin_api(self, endpoint: str) -> ConfiguredStage:
        """Start a request against the tenant admin site."""
        self._reset()
        self._endpoint = endpoint
        self._is_admin = True
        self._initialized = True
        return self

    # Configured stage

    def set_headers(self, overrides: Mapping[str, str]) -> ConfiguredStage:
        """
        Set headers for this request only.

        The overrides replace any overrides set earlier in the same chain and
        win over the default headers on key collisions.
        """
        self._temp_headers = dict(overrides)
        return self

    def ignore(self) -> ConfiguredStage:
        """Log a warning and return None instead of raising on failure."""
        self._should_ignore_errors = True
        return self

    def select(self, fields: str | Sequence[str]) -> ConfiguredStage:
        self._query_params["$select"] = _join_fields(fields)
        return self

    def filter(self, condition: str) -> ConfiguredStage:
        """Set a raw OData ``$filter`` condition. The value is not escaped."""
        self._query_params["$filter"] = condition
        return self

    def expand(self, fields: str | Sequence[str]) -> ConfiguredStage:
        self._query_params["$expand"] = _join_fields(fields)
        return self

    def order_by(self, field: str, ascending: bool = True) -> ConfiguredStage:
        direction = "asc" if ascending else "desc"
        self._query_params["$orderby"] = f"{field} {direction}"
        return self

    def top(self, count: int) -> ConfiguredStage:
        self._query_params["$top"] = str(count)
        return self

    def skip(self, count: int) -> ConfiguredStage:
        self._query_params["$skip"] = str(count)
        return self

    def raw_query(self, params: Mapping[str, Any]) -> ConfiguredStage:
        """Add query parameters verbatim, overwriting keys already set."""
        for key, value in params.items():
            self._query_params[key] = _stringify(value)
        return self

    # HTTP verbs

    async def get(self) -> Any:
        return await self._make_request(HttpMethod.GET)

    async def post(self, data: Any = None) -> Any:
        return await self._make_request(HttpMethod.POST, data)

    async def put(self, data: Any = None) -> Any:
        return await self._make_request(HttpMethod.PUT, data)

    async def patch(self, data: Any = None) -> Any:
        return await self._make_request(HttpMethod.PATCH, data)

    async def delete(self) -> Any:
        return await self._make_request(HttpMethod.DELETE)

    # URL building

    def build_base_url(self) -> str:
        """URL of the selected endpoint without the query string."""
        if self._is_admin:
            tenant = self._site_hostname.removesuffix(_SHAREPOINT_SUFFIX)
            return f"https://{tenant}{_ADMIN_SUFFIX}/_api/{self._endpoint}"
        return (
            f"https://{self._site_hostname}/sites/{self._site_name}"
            f"/_api/{self._endpoint}"
        )

    def build_query_string(self) -> str:
        if not self._query_params:
            return ""
        query = "&".join(f"{key}={value}" for key, value in self._query_params.items())
        return f"?{query}"

    def build_url(self) -> str:
        return f"{self.build_base_url()}{self.build_query_string()}"

    # Internals

    def _reset(self) -> None:
        self._site_name = ""
        self._endpoint = ""
        self._is_admin = False
        self._temp_headers: dict[str, str] = {}
        self._should_ignore_errors = False
        self._initialized = False
        self._query_params: dict[str, str] = {}

    async def _make_request(self, method: HttpMethod, data: Any = None) -> Any:
        try:
            if not self._initialized:
                raise SharePointConfigurationError()

            endpoint = self._endpoint
            url = self.build_url()
            headers = {**self._headers, **self._temp_headers}
            content = None
            if method is not HttpMethod.GET:
                if data is not None:
                    content = _serialize_body(method, endpoint, url, data)
                headers["X-RequestDigest"] = await self._get_request_digest(
                    method, endpoint
                )

            try:
                response = await self._send(
                    method.value, url, headers=headers, content=content
                )
            except _TRANSPORT_ERRORS as exc:
                raise _to_request_error(method, endpoint, url, exc) from exc
            return _parse_body(response)
        except SharePointRequestError as exc:
            if not self._should_ignore_errors:
                raise
            self._warn_ignored(method, exc.endpoint, exc.code, exc.reason)
            return None
        finally:
            self._reset()

    async def _get_request_digest(self, method: HttpMethod, endpoint: str) -> str:
        """Fetch a form digest, required by SharePoint for write requests."""
        url = f"https://{self._site_hostname}/_api/contextinfo"
        try:
            response = await self._send("POST", url, headers=dict(self._headers))
        except _TRANSPORT_ERRORS as exc:
            raise _to_request_error(method, endpoint, url, exc) from exc

        try:
            return response.json()["d"]["GetContextWebInformation"]["FormDigestValue"]
        except (ValueError, KeyError, TypeError) as exc:
            raise SharePointRequestError(
                "Request digest missing from contextinfo response",
                method=method.value,
                endpoint=endpoint,
                status_code=response.status_code,
                body=response.text,
                url=url,
            ) from exc

    async def _send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        content: str | None = None,
    ) -> httpx.Response:
        logger.debug(f"Sending {method} {url}")
        if self._http_client is not None:
            response = await self._http_client.request(
                method, url, headers=headers, content=content
            )
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.request(
                    method, url, headers=headers, content=content
                )
        response.raise_for_status()
        return response

    @staticmethod
    def _warn_ignored(
        method: HttpMethod, endpoint: str, code: str | None, message: str
    ) -> None:
        code_part = f" (Code: {code})" if code else ""
        logger.warning(
            f"Ignoring SharePoint error for: {method.value} {endpoint}{code_part} - {message}"
        )


def _to_request_error(
    method: HttpMethod,
    endpoint: str,
    url: str,
    exc: httpx.HTTPError | httpx.InvalidURL,
) -> SharePointRequestError:
    status_code = None
    code = None
    body = None
    message = str(exc)
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        body = exc.response.text
        code, remote_message = _parse_remote_error(exc.response)
        message = remote_message or f"Request failed with status code {status_code}"
    return SharePointRequestError(
        message or _UNKNOWN_ERROR,
        method=method.value,
        endpoint=endpoint,
        status_code=status_code,
        code=code,
        body=body,
        url=url,
    )


def _serialize_body(method: HttpMethod, endpoint: str, url: str, data: Any) -> str:
    try:
        return json.dumps(data)
    except (TypeError, ValueError) as exc:
        raise SharePointRequestError(
            f"Request body is not JSON serializable: {exc}",
            method=method.value,
            endpoint=endpoint,
            url=url,
        ) from exc


def _join_fields(fields: str | Sequence[str]) -> str:
    if isinstance(fields, str):
        return fields
    return ",".join(fields)


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _parse_body(response: httpx.Response) -> Any:
    if not response.content:
        return ""
    try:
        return response.json()
    except ValueError:
        return response.text


def _parse_remote_error(response: httpx.Response) -> tuple[str | None, str | None]:
    """Read ``code`` and ``message.value`` from a SharePoint error envelope."""
    try:
        data = response.json()
    except ValueError:
        return None, None
    if not isinstance(data, dict):
        return None, None

    error = data.get("error") or data.get("odata.error")
    if not isinstance(error, dict):
        return None, None

    code = error.get("code")
    message = error.get("message")
    if isinstance(message, dict):
        message = message.get("value")
    return (str(code) if code else None), (str(message) if message else None)
