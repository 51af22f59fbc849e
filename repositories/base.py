"""
repositories/base.py
--------------------
Shared plumbing for the entity repositories.
"""

from typing import Any, Mapping, Optional

from pydantic import BaseModel

from db import Database, utcnow


def diff_changes(current: BaseModel, patch: BaseModel) -> dict[str, Any]:
    """Fields of `patch` that were supplied and differ from `current`.

    Unset and None values are skipped, so a partial update never clears a
    stored field.
    """
    changes = {}
    for name, value in patch.model_dump(exclude_none=True).items():
        if getattr(current, name, None) != value:
            changes[name] = value
    return changes


class BaseRepository:
    table: str = ""
    # API field name -> column name, for every column an update may touch
    updatable: Mapping[str, str] = {}
    touch_updated_at = True

    def __init__(self, db: Database):
        self.db = db

    def _update(self, record_id: str, changes: Mapping[str, Any]) -> bool:
        """Apply a non-empty `changes` mapping to one row. Returns False when no row matched."""
        unknown = set(changes) - set(self.updatable)
        if unknown:
            raise ValueError(f"Cannot update {', '.join(sorted(unknown))} on {self.table}")

        assignments = [f"{self.updatable[name]} = ?" for name in changes]
        params = list(changes.values())
        if self.touch_updated_at:
            assignments.append("updated_at = ?")
            params.append(utcnow())
        params.append(record_id)

        query = f"UPDATE {self.table} SET {', '.join(assignments)} WHERE id = ?"
        return self.db.execute(query, params) > 0

    def _delete(self, record_id: str) -> bool:
        return self.db.execute(f"DELETE FROM {self.table} WHERE id = ?", (record_id,)) > 0

    def _count(self, where: str = "", params: tuple = ()) -> int:
        row: Optional[dict] = self.db.fetch_one(f"SELECT COUNT(*) AS total FROM {self.table} {where}", params)
        return int(row["total"]) if row else 0


def like_pattern(term: str) -> str:
    return f"%{term.lower()}%"
