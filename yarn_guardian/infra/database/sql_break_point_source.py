"""SQLAlchemy 기반 BreakPointSource 구현체.

생산 DB(MySQL 등)에서 스위치 포인트, 대기 포인트, 단사 스핀들,
스핀들 거리값을 조회한다.

테이블:
    switch_points(side_number, switch_point_id)
    agv_wait_points(machine_id, wait_point_id)
    data{machine}_update(deviceId, value)
    spindle_distances(side_number, spindle_no, distance_value)
"""

from __future__ import annotations

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from yarn_guardian.domain.entities.repair_task import (
    device_side_for_side,
    machine_number_for_side,
)
from yarn_guardian.usecase.ports.break_point_source import BreakPointSource

logger = logging.getLogger(__name__)


def create_source_engine(url: str) -> Engine:
    """데이터 소스 URL로 Engine을 만든다."""
    if url.startswith('sqlite'):
        return create_engine(
            url, connect_args={'check_same_thread': False}
        )
    return create_engine(url, pool_pre_ping=True, pool_recycle=3600)


class SqlBreakPointSource(BreakPointSource):
    """BreakPointSource의 SQL 구현체.

    Args:
        engine: SQLAlchemy Engine.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def from_url(cls, url: str) -> SqlBreakPointSource:
        return cls(create_source_engine(url))

    def get_switch_point_id_by_side(self, side_number: int) -> int | None:
        return self._scalar_int(
            'SELECT switch_point_id FROM switch_points '
            'WHERE side_number = :side_number LIMIT 1',
            side_number=side_number,
        )

    def get_wait_point_id_by_machine(self, machine_id: int) -> int | None:
        return self._scalar_int(
            'SELECT wait_point_id FROM agv_wait_points '
            'WHERE machine_id = :machine_id LIMIT 1',
            machine_id=machine_id,
        )

    def get_non_zero_break_values_by_side(self, side_number: int) -> list[int]:
        """data{machine}_update 테이블에서 면의 단사 스핀들을 조회한다.

        value 컬럼은 문자열로 저장되므로 정수 변환에 실패한 행은 버린다.
        """
        machine = machine_number_for_side(side_number)
        device_id = device_side_for_side(side_number).value
        # 테이블명은 정수에서만 만들어진다
        sql = text(
            f"SELECT value FROM data{int(machine)}_update "
            "WHERE deviceId = :device_id AND value != '0'"
        )

        with self._engine.connect() as conn:
            rows = conn.execute(sql, {'device_id': device_id}).fetchall()

        values: list[int] = []
        for (raw,) in rows:
            try:
                value = int(str(raw).strip())
            except ValueError:
                logger.warning(
                    'Skipping non-numeric break value %r (side=%d)',
                    raw, side_number,
                )
                continue
            if value != 0:
                values.append(value)
        return values

    def get_distance_values_by_side(self, side_number: int) -> list[float]:
        sql = text(
            'SELECT distance_value FROM spindle_distances '
            'WHERE side_number = :side_number ORDER BY spindle_no'
        )
        with self._engine.connect() as conn:
            rows = conn.execute(sql, {'side_number': side_number}).fetchall()
        return [float(row[0]) for row in rows]

    def _scalar_int(self, sql: str, **params: int) -> int | None:
        with self._engine.connect() as conn:
            value = conn.execute(text(sql), params).scalar()
        if value is None:
            return None
        return int(value)
