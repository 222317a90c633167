"""Back up the JSON collections.

Note: each collection is copied while its lock is held, so every file in the
backup is a complete snapshot (collections are not copied at the same instant).
"""

from __future__ import annotations

import importlib
import json
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.dayflow.dayflow.storage.record_store import JsonRecordStore


def backup_collections(store: JsonRecordStore, out_dir: Path) -> list[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for collection in store.collections:
        with store.locked(collection) as snapshot:
            target = out_dir / f"{collection}.json"
            target.write_text(json.dumps(snapshot.records, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        written.append(target)
    return written


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    store = JsonRecordStore(settings.DATA_DIR)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_dir = REPO_ROOT / "backups" / f"dayflow_{ts}"
    files = backup_collections(store, out_dir)
    print(f"OK: Backup created: {out_dir} ({len(files)} collections)")


if __name__ == "__main__":
    main()
