# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""restclient CLI: issue a single request and print the response."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from ..client import SUPPORTED_METHODS, RestClient
from ..config import HttpSettings, load_http_settings
from ..errors import RestClientError, TransportError, error_category_to_reason
from ..http import HttpResponse, create_default_transport
from ..log import setup_logging

CLI_TEXT_TRUNCATION_BYTES = 4096


def _header_arg(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected 'Name: value', got {raw!r}")
    return name.strip(), value.strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="restclient", description="Issue one HTTP request and print the response")
    parser.add_argument("method", type=str.upper, choices=SUPPORTED_METHODS, help="HTTP method")
    parser.add_argument("url", help="Absolute URL, or a path when --host is given")
    parser.add_argument("--host", help="Host prepended to the URL (e.g. https://example.com)")
    parser.add_argument("--cert", help="Client certificate file (PEM)")
    parser.add_argument("--key", help="Client certificate key file (PEM)")
    parser.add_argument("--ca", help="CA bundle used to verify the server when --cert is set")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument(
        "-H",
        "--header",
        dest="headers",
        action="append",
        type=_header_arg,
        default=[],
        help="Request header, repeatable ('Name: value')",
    )
    parser.add_argument("-d", "--data", help="Request body")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of a raw response dump",
    )
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    parser.add_argument("--log-level", help="Logging level (defaults to RESTCLIENT_LOG_LEVEL or WARNING)")
    return parser


def _truncate_text_bytes(text: str, max_bytes: int) -> str:
    raw = text.encode("utf-8")
    if len(raw) <= max_bytes:
        return text
    suffix = "...[truncated]"
    suffix_bytes = suffix.encode("utf-8")
    keep = max_bytes - len(suffix_bytes)
    if keep <= 0:
        return suffix_bytes[:max_bytes].decode("utf-8", errors="ignore")
    prefix = raw[:keep].decode("utf-8", errors="ignore")
    return prefix + suffix


def _response_payload(response: HttpResponse) -> dict[str, Any]:
    return {
        "ok": response.ok,
        "status_code": response.status_code,
        "reason": response.reason,
        "url": response.url,
        "headers": dict(response.headers),
        "body": _truncate_text_bytes(response.text, CLI_TEXT_TRUNCATION_BYTES),
    }


def _print_json(data: dict[str, Any]) -> None:
    json.dump(data, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _pretty_print(data: dict[str, Any]) -> None:
    print(f"HTTP {data['status_code']} {data['reason']}".rstrip())
    for name, value in data["headers"].items():
        print(f"{name}: {value}")
    if data["body"]:
        print()
        print(data["body"])


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings: HttpSettings = load_http_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False

    client = RestClient(
        host=args.host,
        cert=args.cert,
        key=args.key,
        ca=args.ca,
        timeout=args.timeout,
        settings=settings,
        transport=create_default_transport(settings),
    )
    with client:
        try:
            client.request(args.method, args.url, args.data, dict(args.headers))
        except TransportError as exc:
            print(f"error: {error_category_to_reason(exc.category)}: {exc}", file=sys.stderr)
            return 1
        except RestClientError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1

    payload = _response_payload(client.last_response)
    if args.json:
        payload["config"] = client.config.to_dict()
        _print_json(payload)
    else:
        _pretty_print(payload)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
