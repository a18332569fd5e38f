"""
Audit ledger: immutable history of entity updates.

Each update writes one history row holding a JSON snapshot of the entity
as it was before the update, the acting account and a timestamp. The row
is inserted on the caller's connection so it commits or rolls back
together with the update it describes.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..schema.types import EntityDef, format_timestamp, utc_now

logger = logging.getLogger(__name__)


@dataclass
class HistoryEntry:
    """One recorded pre-image.

    Attributes:
        history_id: Unique history row id
        key: Key of the entity the snapshot belongs to
        account_id: Account that performed the update
        data: Snapshot of the entity before the update
        timestamp: When the update happened (UTC)
    """

    history_id: uuid.UUID
    key: tuple
    account_id: uuid.UUID
    data: dict[str, Any]
    timestamp: datetime


class AuditLedger:
    """Writes and reads <table>_history rows."""

    def record(
        self,
        conn: sqlite3.Connection,
        entity_def: EntityDef,
        entity: Any,
        account_id: uuid.UUID,
    ) -> HistoryEntry:
        """Insert a snapshot of `entity` on the caller's connection.

        Must run inside the transaction of the update it documents.
        """
        entry = HistoryEntry(
            history_id=uuid.uuid4(),
            key=entity_def.key_of(entity),
            account_id=account_id,
            data=entity_def.to_snapshot(entity),
            timestamp=utc_now(),
        )
        columns = [entity_def.history_id_column, *entity_def.key, "account_id", "data", "timestamp"]
        placeholders = ", ".join("?" for _ in columns)
        key_values = [col.to_db(v) for col, v in zip(entity_def.key_columns, entry.key)]
        conn.execute(
            f"INSERT INTO {entity_def.history_table} ({', '.join(columns)}) VALUES ({placeholders})",
            (
                str(entry.history_id),
                *key_values,
                str(account_id),
                json.dumps(entry.data, sort_keys=True),
                format_timestamp(entry.timestamp),
            ),
        )
        logger.debug(
            f"Recorded {entity_def.name} history",
            extra={"history_id": str(entry.history_id), "account_id": str(account_id)},
        )
        return entry

    def entries(self, conn: sqlite3.Connection, entity_def: EntityDef, key: Any) -> list[HistoryEntry]:
        """History of one entity, oldest first."""
        values = entity_def.normalize_key(key)
        where = " AND ".join(f"{name} = ?" for name in entity_def.key)
        params = tuple(col.to_db(v) for col, v in zip(entity_def.key_columns, values))
        rows = conn.execute(
            f"SELECT * FROM {entity_def.history_table} WHERE {where} ORDER BY timestamp ASC, rowid ASC",
            params,
        ).fetchall()
        return [
            HistoryEntry(
                history_id=uuid.UUID(row[entity_def.history_id_column]),
                key=tuple(col.from_db(row[col.name]) for col in entity_def.key_columns),
                account_id=uuid.UUID(row["account_id"]),
                data=json.loads(row["data"]),
                timestamp=datetime.fromisoformat(row["timestamp"]),
            )
            for row in rows
        ]
