from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.dayflow.dayflow.container import build_container
from src.dayflow.dayflow.storage.bootstrap import initialize_data


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(data_dir=settings.DATA_DIR, upload_dir=settings.UPLOAD_DIR)

    ok = initialize_data(
        container.store,
        container.employees_repo,
        upload_dir=container.upload_dir,
        seed_admin=bool(getattr(settings, "SEED_ADMIN", True)),
    )
    if not ok:
        raise SystemExit(f"Could not initialise {container.store.data_dir}")

    changed = container.workflow_service.reconcile_statuses()
    print(f"OK: Data ready in {container.store.data_dir} (status fixes={changed})")


if __name__ == "__main__":
    main()
