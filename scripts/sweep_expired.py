import argparse
import logging
import sys
from datetime import date
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sekolah.core.access import locations_for_role
from sekolah.core.constants import UserRole
from sekolah.core.logging import setup_logging
from sekolah.database import SessionLocal
from sekolah.services.obat_service import sweep_expired

logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(
        description="Zero out stock of expired medicines and record the removals.",
    )
    parser.add_argument(
        "--role",
        choices=[role.value for role in UserRole],
        default=UserRole.ADMIN.value,
        help="Limit the sweep to the locations of this role (default: all).",
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Treat this ISO date as today.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    db = SessionLocal()
    try:
        count = sweep_expired(db, locations_for_role(args.role), args.date)
    finally:
        db.close()
    logger.info("Expired medicines zeroed: %s", count)


if __name__ == "__main__":
    main()
