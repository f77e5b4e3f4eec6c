"""SQLite 기반 SpindleCache 구현체.

면별 거리값/단사값 스냅샷과 스위치/대기 포인트 ID를 로컬 SQLite 파일에 저장한다.
면 단위 교체는 DELETE + INSERT를 하나의 트랜잭션으로 수행하므로
읽는 쪽은 항상 이전 또는 새 스냅샷 하나만 본다.
"""

from __future__ import annotations

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from yarn_guardian.usecase.ports.spindle_cache import SpindleCache

logger = logging.getLogger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS spindle_distance_cache (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        side_number INTEGER NOT NULL,
        spindle_index INTEGER NOT NULL,
        distance_value REAL NOT NULL
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS ix_spindle_distance_side
        ON spindle_distance_cache (side_number, spindle_index)
    """,
    """
    CREATE TABLE IF NOT EXISTS side_value (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        side_number INTEGER NOT NULL,
        value INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS switch_point_cache (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        side_number INTEGER NOT NULL,
        switch_point_id INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS wait_point_cache (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        machine_id INTEGER NOT NULL,
        wait_point_id INTEGER NOT NULL
    )
    """,
)


class SqliteSpindleCache(SpindleCache):
    """SpindleCache의 SQLite 구현체.

    Args:
        engine: SQLite Engine. 테이블이 없으면 생성한다.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._create_schema()

    @classmethod
    def from_path(cls, path: str) -> SqliteSpindleCache:
        """파일 경로로 캐시를 연다. ':memory:'는 지원하지 않는다."""
        engine = create_engine(
            f"sqlite:///{path}",
            connect_args={'check_same_thread': False},
        )
        return cls(engine)

    def replace_distance_values(
        self, side_number: int, values: list[float]
    ) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                text(
                    'DELETE FROM spindle_distance_cache '
                    'WHERE side_number = :side_number'
                ),
                {'side_number': side_number},
            )
            if values:
                conn.execute(
                    text(
                        'INSERT INTO spindle_distance_cache '
                        '(side_number, spindle_index, distance_value) '
                        'VALUES (:side_number, :spindle_index, :distance_value)'
                    ),
                    [
                        {
                            'side_number': side_number,
                            'spindle_index': index,
                            'distance_value': float(value),
                        }
                        for index, value in enumerate(values)
                    ],
                )
        logger.debug(
            'Distance cache replaced: side=%d, count=%d',
            side_number, len(values),
        )

    def get_distance_value(
        self, side_number: int, spindle: int
    ) -> float | None:
        if spindle < 1:
            return None
        with self._engine.connect() as conn:
            value = conn.execute(
                text(
                    'SELECT distance_value FROM spindle_distance_cache '
                    'WHERE side_number = :side_number '
                    'AND spindle_index = :spindle_index'
                ),
                {'side_number': side_number, 'spindle_index': spindle - 1},
            ).scalar()
        return None if value is None else float(value)

    def replace_side_break_values(
        self, side_number: int, values: list[int]
    ) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                text('DELETE FROM side_value WHERE side_number = :side_number'),
                {'side_number': side_number},
            )
            if values:
                conn.execute(
                    text(
                        'INSERT INTO side_value (side_number, value) '
                        'VALUES (:side_number, :value)'
                    ),
                    [
                        {'side_number': side_number, 'value': int(value)}
                        for value in values
                    ],
                )
        logger.debug(
            'Break value cache replaced: side=%d, count=%d',
            side_number, len(values),
        )

    def get_side_break_values(self, side_number: int) -> list[int]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(
                    'SELECT value FROM side_value '
                    'WHERE side_number = :side_number ORDER BY id'
                ),
                {'side_number': side_number},
            ).fetchall()
        return [int(row[0]) for row in rows]

    def replace_switch_point_id(self, side_number: int, point_id: int) -> None:
        self._replace_point(
            'switch_point_cache', 'side_number', side_number,
            'switch_point_id', point_id,
        )

    def get_switch_point_id(self, side_number: int) -> int | None:
        return self._get_point(
            'switch_point_cache', 'side_number', side_number,
            'switch_point_id',
        )

    def replace_wait_point_id(self, machine_id: int, point_id: int) -> None:
        self._replace_point(
            'wait_point_cache', 'machine_id', machine_id,
            'wait_point_id', point_id,
        )

    def get_wait_point_id(self, machine_id: int) -> int | None:
        return self._get_point(
            'wait_point_cache', 'machine_id', machine_id, 'wait_point_id',
        )

    # 테이블/컬럼명은 이 모듈의 상수에서만 온다

    def _replace_point(
        self, table: str, key_column: str, key: int,
        value_column: str, point_id: int,
    ) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                text(f'DELETE FROM {table} WHERE {key_column} = :key'),
                {'key': key},
            )
            conn.execute(
                text(
                    f'INSERT INTO {table} ({key_column}, {value_column}) '
                    'VALUES (:key, :point_id)'
                ),
                {'key': key, 'point_id': int(point_id)},
            )
        logger.debug('%s replaced: %s=%d -> %d', table, key_column, key, point_id)

    def _get_point(
        self, table: str, key_column: str, key: int, value_column: str
    ) -> int | None:
        with self._engine.connect() as conn:
            value = conn.execute(
                text(
                    f'SELECT {value_column} FROM {table} '
                    f'WHERE {key_column} = :key ORDER BY id DESC LIMIT 1'
                ),
                {'key': key},
            ).scalar()
        return None if value is None else int(value)

    def _create_schema(self) -> None:
        with self._engine.begin() as conn:
            for statement in _SCHEMA:
                conn.execute(text(statement))
