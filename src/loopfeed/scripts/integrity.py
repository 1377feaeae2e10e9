# src/loopfeed/scripts/integrity.py
"""Report (and optionally repair) counter drift and orphaned comments.

Run periodically, e.g. from cron:

    python -m loopfeed.scripts.integrity            # report only
    python -m loopfeed.scripts.integrity --repair   # fix what was found
"""
from __future__ import annotations

import argparse
import logging
import sys

from loopfeed.core.settings import settings
from loopfeed.db.session import SessionLocal
from loopfeed.services.integrity import IntegrityReport, run_integrity_check


def print_report(report: IntegrityReport) -> None:
    for comment_id in report.orphan_comment_ids:
        print(f"[integrity] orphan comment {comment_id}")
    for drift in report.drifts:
        print(
            f"[integrity] {drift.entity} {drift.entity_id} {drift.field}: "
            f"stored={drift.stored} actual={drift.actual}"
        )
    if report.repaired:
        print(
            f"[integrity] repaired: removed {report.removed_comments} comments, "
            f"fixed {len(report.drifts)} counters"
        )
    elif report.clean:
        print("[integrity] no problems found")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check denormalized counters and comment trees")
    parser.add_argument(
        "--repair",
        action="store_true",
        help="Delete orphaned comment subtrees and rewrite drifted counters.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level.upper())
    with SessionLocal() as db:
        report = run_integrity_check(db, repair=args.repair)
    print_report(report)
    # Non-zero exit lets cron surface unrepaired problems.
    return 0 if report.clean or report.repaired else 1


if __name__ == "__main__":
    sys.exit(main())
