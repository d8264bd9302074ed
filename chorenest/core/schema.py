"""SQLite schema management (code-first approach)."""

import logging

from chorenest.core import db_client


logger = logging.getLogger(__name__)


# Central list of all collections in the schema
COLLECTIONS = [
    "chores",
    "schedule_rules",
    "schedule_exceptions",
    "schedule_templates",
]


TABLE_SCHEMAS: dict[str, str] = {
    "chores": """CREATE TABLE IF NOT EXISTS chores (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created TEXT NOT NULL DEFAULT (datetime('now')),
        updated TEXT NOT NULL DEFAULT (datetime('now')),
        name TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        status TEXT NOT NULL DEFAULT 'ACTIVE'
            CHECK (status IN ('ACTIVE', 'INACTIVE', 'COMPLETED', 'DELETED')),
        schedule_type TEXT DEFAULT 'SIMPLE',
        recurrence_pattern TEXT,
        interval_value INTEGER NOT NULL DEFAULT 1 CHECK (interval_value >= 1),
        weekdays TEXT NOT NULL DEFAULT '[]',
        month_days TEXT NOT NULL DEFAULT '[]',
        months TEXT NOT NULL DEFAULT '[]',
        start_date TEXT,
        end_date TEXT,
        is_time_sensitive INTEGER NOT NULL DEFAULT 0,
        time_of_day TEXT,
        next_occurrence TEXT
    )""",
    "schedule_rules": """CREATE TABLE IF NOT EXISTS schedule_rules (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created TEXT NOT NULL DEFAULT (datetime('now')),
        updated TEXT NOT NULL DEFAULT (datetime('now')),
        chore_id INTEGER NOT NULL REFERENCES chores(id) ON DELETE CASCADE,
        rule_type TEXT NOT NULL,
        rule_value TEXT NOT NULL DEFAULT '{}',
        priority INTEGER NOT NULL DEFAULT 1
    )""",
    "schedule_exceptions": """CREATE TABLE IF NOT EXISTS schedule_exceptions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created TEXT NOT NULL DEFAULT (datetime('now')),
        updated TEXT NOT NULL DEFAULT (datetime('now')),
        chore_id INTEGER NOT NULL REFERENCES chores(id) ON DELETE CASCADE,
        exception_date TEXT NOT NULL,
        rescheduled_date TEXT,
        reason TEXT
    )""",
    "schedule_templates": """CREATE TABLE IF NOT EXISTS schedule_templates (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created TEXT NOT NULL DEFAULT (datetime('now')),
        updated TEXT NOT NULL DEFAULT (datetime('now')),
        name TEXT NOT NULL,
        description TEXT,
        schedule_type TEXT NOT NULL,
        schedule_config TEXT NOT NULL DEFAULT '{}'
    )""",
}

INDEXES: list[str] = [
    "CREATE INDEX IF NOT EXISTS idx_chores_status ON chores (status)",
    "CREATE INDEX IF NOT EXISTS idx_chores_next_occurrence ON chores (next_occurrence)",
    "CREATE INDEX IF NOT EXISTS idx_schedule_rules_chore_priority ON schedule_rules (chore_id, priority)",
    "CREATE INDEX IF NOT EXISTS idx_schedule_exceptions_chore_date ON schedule_exceptions (chore_id, exception_date)",
    "CREATE INDEX IF NOT EXISTS idx_schedule_templates_name ON schedule_templates (name)",
]


async def init_db(*, db_path: str | None = None) -> None:
    """Create all tables and indexes if they do not exist yet."""
    conn = await db_client.get_connection(db_path=db_path)

    for table_name in COLLECTIONS:
        await conn.execute(TABLE_SCHEMAS[table_name])
        logger.debug("Ensured table", extra={"table": table_name})

    for index_sql in INDEXES:
        await conn.execute(index_sql)

    await conn.commit()
    logger.info("Database schema initialized", extra={"tables": len(COLLECTIONS), "indexes": len(INDEXES)})
