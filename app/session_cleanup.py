"""
Expired-session cleanup job. Run from cron, e.g. hourly:

  0 * * * * cd /path/to/gatekeeper && .venv/bin/python -m app.session_cleanup

Use --dry-run to report live and expired session counts without deleting anything.
"""

import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.services.session_cleanup import count_sessions, purge_expired_sessions

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Delete auth sessions whose expiry has passed.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report session counts; delete nothing",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    db = SessionLocal()
    try:
        if args.dry_run:
            live, expired = count_sessions(db)
            logger.info("Session cleanup dry run: live=%s, expired=%s", live, expired)
            return 0
        sessions_deleted = purge_expired_sessions(db, get_settings())
        live, _ = count_sessions(db)
        logger.info(
            "Session cleanup completed: sessions_deleted=%s, live_remaining=%s",
            sessions_deleted,
            live,
        )
        return 0
    except Exception as e:
        logger.exception("Session cleanup job failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
