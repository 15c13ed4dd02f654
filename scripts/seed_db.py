from __future__ import annotations

import importlib

from dayflow.config import get_settings_module
from dayflow.database.bootstrap import ensure_demo_users


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_users(db_config)

    print(
        "OK: Demo accounts ready -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
        " (admin@dayflow.local / admin123, employee@dayflow.local / employee123)"
    )


if __name__ == "__main__":
    main()
