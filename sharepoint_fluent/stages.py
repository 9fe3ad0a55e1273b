"""
Typing views of the fluent request protocol.

``InitialStage`` only lets a caller pick a target; once a target is picked the
``ConfiguredStage`` exposes query modifiers and the HTTP verbs. Both views are
implemented by the same ``SharePointClient`` object.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence


class ConfiguredStage(Protocol):
    """Stage reached after selecting a site or admin endpoint."""

    def set_headers(self, overrides: Mapping[str, str]) -> ConfiguredStage:
        """Replace the per-request header overrides."""
        ...

    def ignore(self) -> ConfiguredStage:
        """Return None instead of raising when this request fails."""
        ...

    def select(self, fields: str | Sequence[str]) -> ConfiguredStage: ...

    def filter(self, condition: str) -> ConfiguredStage: ...

    def expand(self, fields: str | Sequence[str]) -> ConfiguredStage: ...

    def order_by(self, field: str, ascending: bool = True) -> ConfiguredStage: ...

    def top(self, count: int) -> ConfiguredStage: ...

    def skip(self, count: int) -> ConfiguredStage: ...

    def raw_query(self, params: Mapping[str, Any]) -> ConfiguredStage: ...

    async def get(self) -> Any: ...

    async def post(self, data: Any = None) -> Any: ...

    async def put(self, data: Any = None) -> Any: ...

    async def patch(self, data: Any = None) -> Any: ...

    async def delete(self) -> Any: ...


class InitialStage(Protocol):
    """Entry points of a request."""

    def api(self, site_name: str, endpoint: str) -> ConfiguredStage:
        """Target ``/sites/{site_name}/_api/{endpoint}``."""
        ...

    def admin_api(self, endpoint: str) -> ConfiguredStage:
        """Target the tenant admin host's ``/_api/{endpoint}``."""
        ...
