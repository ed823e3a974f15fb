"""Minimal hello-world demo for the CloudCrud operation layer."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

# Allow running directly from the repo without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

try:
    from cloudcrud.core.cloudcrud import CloudCrud
    from cloudcrud.core.exceptions import CloudCrudError
except ImportError as exc:
    print("CloudCrud not found. Install the package or run from the repo root.")
    print(f"Import error: {exc}")
    sys.exit(1)


def _show(label: str, envelope: dict) -> None:
    print(f"[{label}] {json.dumps(envelope, indent=2)}")


async def main() -> int:
    crud = await CloudCrud.create()

    await crud.run("createTable", {"className": "Task"})

    created = await crud.run("createRecord", {"className": "Task", "data": {"title": "A"}})
    object_id = created["objectId"]
    print(f"[hello] created Task {object_id}")

    await crud.run(
        "batchCreateRecords",
        {
            "className": "Task",
            "records": [
                {"title": "B", "priority": 2},
                {"title": "C", "priority": 5},
                {"title": "D", "priority": 8},
            ],
        },
    )
    await crud.run(
        "updateRecord",
        {"className": "Task", "objectId": object_id, "data": {"done": True}},
    )

    _show(
        "readTable",
        await crud.run(
            "readTable",
            {"className": "Task", "filters": {"priority": {"$gte": 3}}, "limit": 10},
        ),
    )
    _show("countRecords", await crud.run("countRecords", {"className": "Task"}))
    _show("getTableSchema", await crud.run("getTableSchema", {"className": "Task"}))

    try:
        await crud.run("deleteRecord", {"className": "Task", "objectId": "missing"})
    except CloudCrudError as exc:
        print(f"[error] {type(exc).__name__}: {exc}")

    _show("healthCheck", await crud.run("healthCheck"))
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
