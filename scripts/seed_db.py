from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.punch_system.punch_system.database.bootstrap import apply_seed_sql


def main() -> None:
    db_config = dict(importlib.import_module(get_settings_module()).DB_CONFIG)
    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    # Demo tenant: techvaseegrah, badges LF3643 / LF3644 / LF3650.
    print(f"Demo workers loaded into {db_config.get('database')}")


if __name__ == "__main__":
    main()
