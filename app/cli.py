"""
Command-line entry point for cron-driven generation.

    python -m app.cli generate                     # today, all users
    python -m app.cli generate --date 2024-03-15   # a specific date
    python -m app.cli generate --user-id 7         # one user only

Prints the run summary as JSON. Exit code 1 when generation fails.
"""
from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from typing import Optional, Sequence

from app.core.config import settings
from app.core.deps import get_calendar
from app.core.errors import GenerationError
from app.core.logging import setup_logging
from app.db.base import SessionLocal
from app.services.generator import generate_for_date


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="app.cli", description="Activity tracker maintenance")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate activity logs for a date")
    gen.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Target date YYYY-MM-DD (default: today in the configured timezone)",
    )
    gen.add_argument("--user-id", type=int, default=None, help="Limit to one user")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    setup_logging(settings.LOG_LEVEL)

    target = args.date or get_calendar().today()
    db = SessionLocal()
    try:
        result = generate_for_date(db, target, user_id=args.user_id)
    except GenerationError as exc:
        print(json.dumps(exc.to_dict()), file=sys.stderr)
        return 1
    finally:
        db.close()

    print(json.dumps({
        "date": str(result.target_date),
        "created": result.created,
        "frequencies": result.frequency_names,
    }))
    return 0


if __name__ == "__main__":
    sys.exit(main())
