"""Data Access Layer for the planner's persisted state.

The planner persists a single document: the full trip list serialized to
JSON under one namespace key of the ``metadata`` table. ``load_trips``
treats a missing key or an undecodable document as "no state" so a corrupt
store never prevents startup.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from tripplanner.models import Trip

from .schema import BASIC_UTC_NOW

logger = logging.getLogger("tripplanner.db")

_TRIP_LIST = TypeAdapter(List[Trip])


class Database:
    def __init__(self, db_path: Path, namespace: str = "savedTrips"):
        self.db_path = db_path
        self.namespace = namespace

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    # ------------------------------------------------------------------
    # Key/value helpers
    def get_value(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT value FROM metadata WHERE key = ?", (key,))
            row = cur.fetchone()
            return row[0] if row else None

    def set_value(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                f"""
                INSERT INTO metadata (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                    updated_at = ({BASIC_UTC_NOW})
                """,
                (key, value),
            )
            conn.commit()

    # ------------------------------------------------------------------
    # Trip list persistence
    def save_trips(self, trips: Sequence[Trip]) -> None:
        payload = _TRIP_LIST.dump_json(list(trips)).decode("utf-8")
        self.set_value(self.namespace, payload)
        logger.debug("saved %d trips under %s", len(trips), self.namespace)

    def load_trips(self) -> List[Trip]:
        raw = self.get_value(self.namespace)
        if raw is None:
            return []
        try:
            return _TRIP_LIST.validate_json(raw)
        except (ValidationError, ValueError) as exc:
            logger.warning("discarding undecodable trip state under %s: %s", self.namespace, exc)
            return []
