"""
Scenario Storage Layer - Persistent Data Management
SQLite key-value store for named ROI scenarios.

Standards:
- Upsert semantics keyed by scenario id (save overwrites the whole record)
- created_at is stamped on every save, never preserved from a prior version
- JSON document column plus indexed summary columns for listing
- Deleting an unknown id is a no-op
"""

import sqlite3
import logging
from typing import List, Optional, Dict, Any
from pathlib import Path
from datetime import datetime, timezone

from invoice_roi.core.models import ScenarioInput, ScenarioRecord, ScenarioSummary

logger = logging.getLogger("ScenarioStorage")
logger.setLevel(logging.INFO)


class ScenarioStorage:
    """
    Storage adapter for scenarios.

    Tables:
    - scenarios: one row per scenario id, full record in data_json
    """

    def __init__(self, db_path: Path):
        """Initialize storage, creating the database file and schema."""
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()
        logger.info(f"ScenarioStorage initialized: {self.db_path}")

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _init_db(self):
        """Create tables and indexes if they don't exist."""
        conn = self._connect()
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS scenarios (
                id TEXT PRIMARY KEY,
                scenario_name TEXT,
                created_at TEXT NOT NULL,
                data_json TEXT NOT NULL
            )
        """)
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_scenarios_created
            ON scenarios(created_at DESC)
        """)

        conn.commit()
        conn.close()
        logger.debug("Database schema initialized")

    # ========================================================================
    # SCENARIO OPERATIONS
    # ========================================================================

    def save(self, scenario: ScenarioInput) -> ScenarioRecord:
        """
        Save or overwrite a scenario (upsert by id).

        Args:
            scenario: Validated scenario; must carry an id

        Returns:
            The stored ScenarioRecord with a fresh created_at
        """
        if not scenario.id:
            raise ValueError("Scenario id is required for save")

        record = ScenarioRecord(
            **scenario.model_dump(exclude={"created_at"}),
            created_at=datetime.now(timezone.utc).isoformat()
        )

        conn = self._connect()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO scenarios (id, scenario_name, created_at, data_json)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    scenario_name = excluded.scenario_name,
                    created_at = excluded.created_at,
                    data_json = excluded.data_json
            """, (
                record.id,
                record.scenario_name,
                record.created_at,
                record.model_dump_json()
            ))

            conn.commit()
            logger.info(f"Scenario saved: {record.id}")
            return record

        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to save scenario {record.id}: {e}")
            raise
        finally:
            conn.close()

    def get(self, scenario_id: str) -> Optional[ScenarioRecord]:
        """
        Retrieve a scenario by id.

        Returns:
            ScenarioRecord if found, None otherwise
        """
        conn = self._connect()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT data_json FROM scenarios WHERE id = ?
            """, (scenario_id,))

            row = cursor.fetchone()
            if row:
                logger.debug(f"Scenario retrieved: {scenario_id}")
                return ScenarioRecord.model_validate_json(row[0])

            logger.debug(f"Scenario not found: {scenario_id}")
            return None

        except Exception as e:
            logger.error(f"Failed to retrieve scenario {scenario_id}: {e}")
            raise
        finally:
            conn.close()

    def list(self) -> List[ScenarioSummary]:
        """
        List stored scenarios, newest first.

        An overwritten scenario keeps the position of its first save.

        Only id, scenario_name and created_at are returned.
        """
        conn = self._connect()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, scenario_name, created_at FROM scenarios
                ORDER BY rowid DESC
            """)
            rows = cursor.fetchall()

            summaries = [
                ScenarioSummary(id=row[0], scenario_name=row[1] or "", created_at=row[2])
                for row in rows
            ]
            logger.debug(f"Listed {len(summaries)} scenarios")
            return summaries

        except Exception as e:
            logger.error(f"Failed to list scenarios: {e}")
            raise
        finally:
            conn.close()

    def delete(self, scenario_id: str) -> None:
        """Hard delete a scenario. Unknown ids are ignored."""
        conn = self._connect()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                DELETE FROM scenarios WHERE id = ?
            """, (scenario_id,))
            deleted = cursor.rowcount > 0
            conn.commit()

            if deleted:
                logger.info(f"Scenario deleted: {scenario_id}")
            else:
                logger.debug(f"Scenario not found for deletion: {scenario_id}")

        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to delete scenario {scenario_id}: {e}")
            raise
        finally:
            conn.close()

    # ========================================================================
    # UTILITY METHODS
    # ========================================================================

    def get_stats(self) -> Dict[str, Any]:
        """Storage statistics for the health check."""
        conn = self._connect()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT COUNT(*) FROM scenarios")
            count = cursor.fetchone()[0]

            return {
                "total_scenarios": count,
                "database_size_mb": round(self.db_path.stat().st_size / (1024 * 1024), 2),
                "database_path": str(self.db_path)
            }

        except Exception as e:
            logger.error(f"Failed to get stats: {e}")
            raise
        finally:
            conn.close()
