"""Create or evolve the schema and seed the default tenants and admin accounts.

Usage:
    python -m scripts.bootstrap_db
Runs the same routine as application startup against DATABASE_URL. Safe to
run repeatedly. All imports use app.*.
"""

import asyncio
import sys

from app.core.config import get_settings
from app.domain.exceptions import BootstrapException
from app.infrastructure.persistence.bootstrap import bootstrap_database
from app.infrastructure.persistence.database import dispose_engine, get_engine
from app.shared.telemetry.logging import setup_logging


async def main() -> None:
    """Run the bootstrap routine once and print what changed."""
    settings = get_settings()
    setup_logging()
    try:
        report = await bootstrap_database(get_engine(), settings)
    except BootstrapException as e:
        print(e.message, file=sys.stderr)
        sys.exit(1)
    finally:
        await dispose_engine()
    if not report.changed:
        print("Database already up to date")
        return
    print(f"Tables created: {', '.join(report.tables_created) or '-'}")
    print(f"Columns added: {', '.join(report.columns_added) or '-'}")
    print(f"Tenants seeded: {', '.join(report.tenants_seeded) or '-'}")
    print(f"Users seeded: {', '.join(report.users_seeded) or '-'}")


if __name__ == "__main__":
    asyncio.run(main())
