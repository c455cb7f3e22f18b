#!/usr/bin/env python3
"""
Command-line client for a running URL shortener service.

Usage:
    python url_shortener_cli.py shorten <url> [--validity MINUTES] [--shortcode CODE]
    python url_shortener_cli.py stats <shortcode>
    python url_shortener_cli.py list
    python url_shortener_cli.py health

Options:
    --server URL   Service base URL (default: $URL_SHORTENER_SERVER or http://localhost:5000)
"""

import argparse
import asyncio
import json
import os
import sys
from typing import Any, Dict, Optional

import httpx

DEFAULT_SERVER = "http://localhost:5000"


class URLShortenerCLI:
    """Command-line interface for URL shortener."""

    def __init__(
        self,
        server_url: str = DEFAULT_SERVER,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize CLI.

        Args:
            server_url: Base URL of the running service
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests pass an ASGI transport)
        """
        self.server_url = server_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.server_url,
            timeout=self.timeout,
            transport=self.transport,
        )

    @staticmethod
    def _emit(payload: Dict[str, Any], error: bool = False) -> int:
        print(json.dumps(payload, indent=2), file=sys.stderr if error else sys.stdout)
        return 1 if error else 0

    async def _request(self, method: str, path: str, **kwargs) -> int:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            return self._emit({"success": False, "error": f"Request failed: {e}"}, error=True)

        try:
            data = response.json()
        except ValueError:
            data = {"body": response.text}

        if response.is_success:
            return self._emit({"success": True, **data})
        return self._emit(
            {
                "success": False,
                "status": response.status_code,
                "error": data.get("error", response.reason_phrase),
                "code": data.get("code"),
            },
            error=True,
        )

    async def shorten(
        self,
        url: str,
        validity: Optional[int] = None,
        shortcode: Optional[str] = None,
    ) -> int:
        """Shorten a URL."""
        body: Dict[str, Any] = {"url": url}
        if validity is not None:
            body["validity"] = validity
        if shortcode:
            body["shortcode"] = shortcode
        return await self._request("POST", "/shorturls", json=body)

    async def stats(self, shortcode: str) -> int:
        """Get statistics for a shortcode."""
        return await self._request("GET", f"/shorturls/{shortcode}")

    async def list_urls(self) -> int:
        """List all registered URLs."""
        return await self._request("GET", "/api/urls")

    async def health(self) -> int:
        """Check service health."""
        return await self._request("GET", "/health")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="URL Shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--server",
        default=os.getenv("URL_SHORTENER_SERVER", DEFAULT_SERVER),
        help="Service base URL",
    )
    parser.add_argument("--timeout", type=float, default=10.0, help="Request timeout (seconds)")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")
    subparsers.required = True

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--validity", type=int, help="Validity in minutes (default 30)")
    shorten_parser.add_argument("--shortcode", help="Custom shortcode (3-10 alphanumeric)")

    stats_parser = subparsers.add_parser("stats", help="Get statistics for a shortcode")
    stats_parser.add_argument("shortcode", help="Shortcode to inspect")

    subparsers.add_parser("list", help="List all URLs")
    subparsers.add_parser("health", help="Check service health")

    return parser


async def run(args: argparse.Namespace, cli: Optional[URLShortenerCLI] = None) -> int:
    cli = cli or URLShortenerCLI(server_url=args.server, timeout=args.timeout)

    if args.command == "shorten":
        return await cli.shorten(args.url, validity=args.validity, shortcode=args.shortcode)
    if args.command == "stats":
        return await cli.stats(args.shortcode)
    if args.command == "list":
        return await cli.list_urls()
    return await cli.health()


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
