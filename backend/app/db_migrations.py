from __future__ import annotations

import logging

from sqlalchemy import Engine

logger = logging.getLogger(__name__)


# Columns added after the first schema; older SQLite files lack them.
_TABLE_COLUMNS: dict[str, list[tuple[str, str]]] = {
    "users": [
        ("department", "TEXT NULL"),
        ("grade", "TEXT NULL"),
        ("bio", "TEXT NULL"),
    ],
    "user_skills": [
        ("description", "TEXT NULL"),
    ],
    "projects": [
        ("status", "TEXT NOT NULL DEFAULT 'active'"),
    ],
}

_INDEXES: list[tuple[str, str]] = [
    ("user_skills", "CREATE INDEX IF NOT EXISTS idx_user_skills_skill_level ON user_skills (skill_id, level DESC)"),
    ("project_skills", "CREATE INDEX IF NOT EXISTS idx_project_skills_skill ON project_skills (skill_id)"),
    ("projects", "CREATE INDEX IF NOT EXISTS idx_projects_creator_created ON projects (creator_id, created_at DESC)"),
]


def run_db_migrations(engine: Engine) -> None:
    if not str(engine.url).startswith("sqlite"):
        return

    with engine.begin() as conn:
        columns_by_table = {
            table_name: _columns_of(conn, table_name)
            for table_name in {*_TABLE_COLUMNS, *(table for table, _ in _INDEXES)}
        }

        for table_name, wanted in _TABLE_COLUMNS.items():
            present = columns_by_table[table_name]
            # PRAGMA table_info is empty for a table create_all has not made yet.
            if not present:
                continue
            for column_name, ddl in wanted:
                if column_name not in present:
                    logger.info("adding column %s.%s", table_name, column_name)
                    conn.exec_driver_sql(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {ddl}")
                    present.add(column_name)

        for table_name, stmt in _INDEXES:
            if columns_by_table[table_name]:
                conn.exec_driver_sql(stmt)


def _columns_of(conn, table_name: str) -> set[str]:
    return {str(row[1]) for row in conn.exec_driver_sql(f"PRAGMA table_info({table_name})").all()}
