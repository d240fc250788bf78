#!/usr/bin/env python3
"""Find public email addresses for a domain through a running EmailSpy API."""

import argparse
import os
import sys

from dotenv import load_dotenv

load_dotenv()

from emailspy.client import POLL_INTERVAL_SECONDS, POLL_TIMEOUT_SECONDS, EmailCheckError, EmailSpyClient  # noqa: E402


def describe_results(domain, data):
    """Return printable lines for a completed result of any shape."""
    emails = data.get("emails") if isinstance(data, dict) else None
    if not isinstance(emails, list):
        emails = []
    emails = [entry for entry in emails if isinstance(entry, dict)]
    if not emails:
        return [f"No public emails found for {domain}"]

    lines = [f"✅ {len(emails)} emails found for {domain}"]
    for entry in emails:
        websites = ", ".join(str(site) for site in entry.get("websites") or [])
        lines.append(f"   {entry.get('email')}  ({websites})")
    return lines


def main() -> int:
    parser = argparse.ArgumentParser(description="Find public emails for a domain")
    parser.add_argument("domain", help="Domain to search, e.g. example.com")
    parser.add_argument(
        "--api-url",
        default=os.getenv("PUBLIC_BASE_URL", "http://localhost:5050"),
        help="Base URL of the EmailSpy API",
    )
    parser.add_argument("--interval", type=float, default=POLL_INTERVAL_SECONDS, help="Seconds between polls")
    parser.add_argument("--timeout", type=float, default=POLL_TIMEOUT_SECONDS, help="Seconds to wait for results")
    parser.add_argument("--sort", choices=["email", "sources"], default="email", help="Result ordering")
    parser.add_argument("--order", choices=["asc", "desc"], default="asc")
    args = parser.parse_args()

    client = EmailSpyClient(args.api_url)
    try:
        data = client.check_domain(
            args.domain,
            interval=args.interval,
            timeout=args.timeout,
            sort=args.sort,
            order=args.order,
        )
    except EmailCheckError as exc:
        print(f"❌ {exc}", file=sys.stderr)
        return 1

    for line in describe_results(args.domain, data):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
