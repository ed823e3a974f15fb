"""Test helpers and shared constants."""

TASKS = [
    {"title": "Write docs", "priority": 1, "done": False, "tags": ["docs"]},
    {"title": "Fix parser", "priority": 5, "done": True, "tags": ["bug", "parser"]},
    {"title": "Ship release", "priority": 3, "done": False},
    {"title": "Triage issues", "priority": 8, "done": False, "tags": ["bug"]},
]


def user_fields(record: dict) -> dict:
    """Strip built-in fields from a materialized record."""
    return {
        key: value
        for key, value in record.items()
        if key not in ("objectId", "createdAt", "updatedAt", "ACL")
    }
