from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Sequence

from sharepoint_fluent.client import HttpMethod, SharePointClient
from sharepoint_fluent.config import get_required_env, load_auth_options, load_env
from sharepoint_fluent.connect import connect_with_sharepoint, connect_with_token
from sharepoint_fluent.stages import ConfiguredStage


def _key_value(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {raw!r}")
    return key, value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sharepoint-fluent",
        description="Send a SharePoint REST request and emit the JSON response to stdout.",
    )
    parser.add_argument(
        "method",
        type=str.upper,
        choices=[method.value for method in HttpMethod],
        help="HTTP method.",
    )
    parser.add_argument("endpoint", help="Endpoint path relative to _api/.")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--site", help="Site name, targets /sites/<site>/_api/.")
    target.add_argument(
        "--admin", action="store_true", help="Target the tenant admin site."
    )
    parser.add_argument("--select", nargs="+", help="Fields for $select.")
    parser.add_argument("--filter", help="Raw OData $filter condition.")
    parser.add_argument("--expand", nargs="+", help="Fields for $expand.")
    parser.add_argument("--order-by", help="Field for $orderby.")
    parser.add_argument(
        "--desc", action="store_true", help="Sort --order-by descending."
    )
    parser.add_argument("--top", type=int, help="Value for $top.")
    parser.add_argument("--skip", type=int, help="Value for $skip.")
    parser.add_argument(
        "--query",
        type=_key_value,
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Extra query parameter, may be repeated.",
    )
    parser.add_argument(
        "--header",
        type=_key_value,
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Header for this request, may be repeated.",
    )
    parser.add_argument("--data", help="JSON request body for write methods.")
    parser.add_argument(
        "--ignore",
        action="store_true",
        help="Print null instead of failing when the request fails.",
    )
    parser.add_argument("--env-file", type=Path, help="Path to a .env file.")
    parser.add_argument("--verbose", action="store_true", help="Debug logging.")
    return parser


async def _connect(env_file: Path | None) -> SharePointClient:
    load_env(env_file)
    access_token = os.getenv("sp_access_token")
    if access_token:
        return connect_with_token(get_required_env("sp_site_hostname"), access_token)
    return await connect_with_sharepoint(load_auth_options(env_file))


def _configure(request: ConfiguredStage, args: argparse.Namespace) -> ConfiguredStage:
    if args.select:
        request = request.select(args.select)
    if args.filter:
        request = request.filter(args.filter)
    if args.expand:
        request = request.expand(args.expand)
    if args.order_by:
        request = request.order_by(args.order_by, ascending=not args.desc)
    if args.top is not None:
        request = request.top(args.top)
    if args.skip is not None:
        request = request.skip(args.skip)
    if args.query:
        request = request.raw_query(dict(args.query))
    if args.header:
        request = request.set_headers(dict(args.header))
    if args.ignore:
        request = request.ignore()
    return request


async def _run(args: argparse.Namespace) -> Any:
    sp = await _connect(args.env_file)
    if args.admin:
        request = sp.admin_api(args.endpoint)
    else:
        request = sp.api(args.site, args.endpoint)
    request = _configure(request, args)

    data = json.loads(args.data) if args.data else None
    if args.method == HttpMethod.GET.value:
        return await request.get()
    if args.method == HttpMethod.DELETE.value:
        return await request.delete()
    send = getattr(request, args.method.lower())
    return await send(data)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        result = asyncio.run(_run(args))
        json.dump(result, sys.stdout)
        sys.stdout.write("\n")
        return 0
    except Exception as exc:
        print(f"sharepoint-fluent: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
