from __future__ import annotations

import importlib
import logging

from itp_admin.database.bootstrap import apply_seed_sql, ensure_demo_staff
from itp_admin.settings import get_settings_module

logger = logging.getLogger("itp_admin.scripts.seed_db")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config)
    ensure_demo_staff(db_config)
    logger.info(
        "Seeded database -> %s@%s:%s/%s",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )


if __name__ == "__main__":
    main()
