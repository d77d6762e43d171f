#!/usr/bin/env python3
"""Create the itinerary tables in the local PostgreSQL database.

Runs the Alembic migrations from this checkout against the AURORA_* settings
in your environment (or .env).

Usage:
    python scripts/migrate_local.py [revision]
"""

import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent.parent

# Add src to path for layover imports
sys.path.insert(0, str(ROOT / "src"))

from layover.services.migration import run_migrations  # noqa: E402


def main() -> None:
    load_dotenv(ROOT / ".env")
    logging.basicConfig(level=logging.INFO)
    os.environ.setdefault("ALEMBIC_DIR", str(ROOT))

    revision = sys.argv[1] if len(sys.argv) > 1 else "head"
    result = run_migrations(revision)
    print(f"✓ Migrated to {result['revision']}")


if __name__ == "__main__":
    main()
