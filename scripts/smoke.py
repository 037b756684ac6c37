#!/usr/bin/env python3
"""Smoke check for a running hello-world service (local, container or cluster).

Usage:
  python scripts/smoke.py --base-url http://127.0.0.1:8081 --expect "Hello, World!"

After the edit/rebuild/redeploy loop:
  python scripts/smoke.py --base-url "$(minikube service hello-world --url)" --expect "Hi World."

Environment fallbacks:
  HELLO_BASE_URL, HELLO_EXPECT
"""
from __future__ import annotations

import argparse
import os
import sys

import httpx

DEFAULT_BASE_URL = "http://127.0.0.1:8081"
DEFAULT_EXPECT = "Hello, World!"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Hello World smoke check")
    parser.add_argument("--base-url", default=os.getenv("HELLO_BASE_URL", DEFAULT_BASE_URL))
    parser.add_argument("--expect", default=os.getenv("HELLO_EXPECT", DEFAULT_EXPECT))
    parser.add_argument("--timeout", type=float, default=10.0)
    parser.add_argument("--quiet", action="store_true")
    return parser.parse_args(argv)


def exit_with(message: str, code: int = 1) -> None:
    print(message, file=sys.stderr)
    raise SystemExit(code)


def check_greeting(client: httpx.Client, expect: str) -> str | None:
    """Return None when GET / answers 200 with exactly `expect`, else the reason."""
    try:
        response = client.get("/")
    except httpx.HTTPError as exc:
        return f"Request failed: {exc}"

    if response.status_code != 200:
        return f"Unexpected status: HTTP {response.status_code} {response.text}"
    if response.text != expect:
        return f"Unexpected body: {response.text!r} (expected {expect!r})"
    return None


def main(argv: list[str] | None = None, transport: httpx.BaseTransport | None = None) -> None:
    args = parse_args(argv)
    base_url = args.base_url.rstrip("/")

    with httpx.Client(base_url=base_url, timeout=args.timeout, transport=transport) as client:
        failure = check_greeting(client, args.expect)

    if failure:
        exit_with(failure)

    if not args.quiet:
        print(f"Smoke test passed: GET {base_url}/ -> {args.expect!r}")


if __name__ == "__main__":
    main()
