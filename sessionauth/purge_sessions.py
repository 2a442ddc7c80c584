"""
CLI entrypoint for the expired-session purge. Run from cron, e.g.:

  python -m sessionauth.purge_sessions

Or hourly: 0 * * * * cd /path/to/sessionauth && .venv/bin/python -m sessionauth.purge_sessions
"""

import logging
import sys

from sessionauth.core.config import Settings, get_settings
from sessionauth.core.database import SessionLocal
from sessionauth.services.sessions import purge_expired_sessions

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def run_purge(settings: Settings) -> int:
    """Delete expired sessions unless SESSION_PURGE_ENABLED is off. Returns rows deleted."""
    if not settings.SESSION_PURGE_ENABLED:
        logger.info("Session purge is disabled (SESSION_PURGE_ENABLED=false); skipping.")
        return 0
    db = SessionLocal()
    try:
        return purge_expired_sessions(db)
    finally:
        db.close()


def main() -> int:
    """Run the purge once; exit status 1 on failure."""
    try:
        sessions_deleted = run_purge(get_settings())
        logger.info("Session purge completed: sessions_deleted=%s", sessions_deleted)
        return 0
    except Exception as e:
        logger.exception("Session purge failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
