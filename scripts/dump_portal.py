#!/usr/bin/env python3
"""Dump the portal's collections and admin statistics.

Builds a portal from ``TRAVELPORTAL_*`` environment variables (fixtures,
storage path), optionally logs in, and prints every collection plus the
admin statistics. Passwords are redacted.

Usage
-----
::

    python scripts/dump_portal.py
    python scripts/dump_portal.py --json --output portal.json
    python scripts/dump_portal.py --login john@example.com customer123

Options::

    --collection NAME    Only dump this collection (e.g. bookings)
    --login EMAIL PASS   Log in before dumping and report the session
    --logout             Clear any persisted session before dumping
    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from travelportal import CollectionName, Portal, PortalConfig  # noqa: E402
from travelportal._redact import redact_for_log  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _format_row(row: dict[str, Any], indent: int = 2) -> str:
    prefix = " " * indent
    return "\n".join(f"{prefix}{key}: {value}" for key, value in row.items())


def _dump_collection(name: str, rows: list[dict[str, Any]], out: list[str]) -> None:
    out.append(_section(f"{name} ({len(rows)})"))
    for row in rows:
        out.append(_format_row(row))
        out.append("")


def main() -> None:
    parser = argparse.ArgumentParser(description="Dump travelportal collections and statistics")
    parser.add_argument(
        "--collection",
        choices=[name.value for name in CollectionName],
        help="Only dump this collection (default: all)",
    )
    parser.add_argument("--login", nargs=2, metavar=("EMAIL", "PASSWORD"), help="Log in before dumping")
    parser.add_argument("--logout", action="store_true", help="Clear the persisted session first")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    result: dict[str, Any] = {}
    out: list[str] = []

    with Portal(PortalConfig.from_env()) as portal:
        if args.logout:
            portal.logout()
        if args.login:
            login = portal.login(*args.login)
            if not login.success:
                print(f"Login failed: {login.message}", file=sys.stderr)
                sys.exit(1)

        principal = portal.session.current_user
        result["session"] = redact_for_log(principal) if principal is not None else None
        out.append(_section("SESSION"))
        if principal is None:
            out.append("  anonymous")
        else:
            out.append(f"  {principal.name} <{principal.email}> ({principal.role})")

        dumped = portal.data.dump()
        if args.collection:
            dumped = {args.collection: dumped[args.collection]}
        result["collections"] = redact_for_log(dumped)
        for name, rows in result["collections"].items():
            _dump_collection(name, rows, out)

        stats = portal.statistics().model_dump()
        result["statistics"] = stats
        out.append(_section("STATISTICS"))
        out.append(_format_row(stats))

    # ── Output ──
    payload = json.dumps(result, indent=2, default=str, ensure_ascii=False) if args.json_mode else "\n".join(out)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        print(payload)


if __name__ == "__main__":
    main()
