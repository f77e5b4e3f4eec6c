"""데이터베이스 인프라 (BreakPointSource, SpindleCache 구현)."""

from yarn_guardian.infra.database.sql_break_point_source import (
    SqlBreakPointSource,
    create_source_engine,
)
from yarn_guardian.infra.database.sqlite_spindle_cache import (
    SqliteSpindleCache,
)

__all__ = [
    "SqlBreakPointSource",
    "SqliteSpindleCache",
    "create_source_engine",
]
