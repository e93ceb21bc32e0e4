from __future__ import annotations

import importlib

from hr_payroll.config import get_settings_module
from hr_payroll.database.bootstrap import apply_seed_sql, ensure_default_config


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_default_config(db_config)
    apply_seed_sql(db_config)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
