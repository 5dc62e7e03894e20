from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.punch_system.punch_system.database.bootstrap import apply_schema, list_tables, missing_tables


def main() -> int:
    db_config = dict(importlib.import_module(get_settings_module()).DB_CONFIG)
    target = f"{db_config.get('database')} on {db_config.get('host')}:{db_config.get('port', 3306)}"

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")

    missing = missing_tables(list_tables(db_config))
    if missing:
        print(f"Punch schema incomplete in {target}: missing {', '.join(missing)}", file=sys.stderr)
        return 1
    print(f"Punch schema ready in {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
