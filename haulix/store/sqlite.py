"""SQLite-backed document store for single-host deployments."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from haulix.store.backend import DocumentStore, StoreDocument


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _json_dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=True)


class SqliteDocumentStore(DocumentStore):
    """
    Documents stored as JSON rows keyed by (collection path, id).

    Change notification is in-process: subscribers see writes made through
    this store instance.
    """

    def __init__(self, db_path: str | Path) -> None:
        super().__init__()
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            str(self._db_path),
            check_same_thread=False,
            timeout=30.0,
        )
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode = WAL")
        self._conn.execute("PRAGMA synchronous = NORMAL")
        self._conn.execute("PRAGMA busy_timeout = 30000")
        self._initialize_schema()

    def _initialize_schema(self) -> None:
        with self._lock:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    path TEXT NOT NULL,
                    doc_id TEXT NOT NULL,
                    data_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (path, doc_id)
                );

                CREATE INDEX IF NOT EXISTS idx_documents_path ON documents (path);
                """
            )
            self._conn.commit()

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def add(self, path: str, data: dict[str, Any]) -> str:
        doc_id = self.new_id()
        self.set(path, doc_id, data)
        return doc_id

    def set(self, path: str, doc_id: str, data: dict[str, Any]) -> None:
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO documents (path, doc_id, data_json, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (path, doc_id)
                DO UPDATE SET data_json = excluded.data_json, updated_at = excluded.updated_at
                """,
                (path, doc_id, _json_dumps(data), _utc_now_iso()),
            )
            self._conn.commit()
        self._notify(path)

    def update(self, path: str, doc_id: str, changes: dict[str, Any]) -> None:
        with self._lock:
            current = self.get(path, doc_id)
            if current is None:
                raise KeyError(f"No document {doc_id} in {path}")
            current.update(changes)
            self._conn.execute(
                "UPDATE documents SET data_json = ?, updated_at = ? WHERE path = ? AND doc_id = ?",
                (_json_dumps(current), _utc_now_iso(), path, doc_id),
            )
            self._conn.commit()
        self._notify(path)

    def delete(self, path: str, doc_id: str) -> None:
        with self._lock:
            self._conn.execute(
                "DELETE FROM documents WHERE path = ? AND doc_id = ?",
                (path, doc_id),
            )
            self._conn.commit()
        self._notify(path)

    def get(self, path: str, doc_id: str) -> Optional[dict[str, Any]]:
        with self._lock:
            row = self._conn.execute(
                "SELECT data_json FROM documents WHERE path = ? AND doc_id = ?",
                (path, doc_id),
            ).fetchone()
        if row is None:
            return None
        return json.loads(row["data_json"])

    def _read_collection(self, path: str) -> list[StoreDocument]:
        rows = self._conn.execute(
            "SELECT doc_id, data_json FROM documents WHERE path = ? ORDER BY rowid",
            (path,),
        ).fetchall()
        return [StoreDocument(id=row["doc_id"], data=json.loads(row["data_json"])) for row in rows]
