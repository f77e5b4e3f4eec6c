"""단사 데이터 소스 포트 인터페이스.

관계형 DB에 저장된 스위치 포인트, 대기 포인트, 단사 스핀들, 스핀들 거리를
조회한다.
"""

from abc import ABC, abstractmethod


class BreakPointSource(ABC):
    """단사 데이터 조회 인터페이스."""

    @abstractmethod
    def get_switch_point_id_by_side(self, side_number: int) -> int | None:
        """면번호의 스위치 포인트 ID를 조회한다.

        Args:
            side_number: 면번호.

        Returns:
            포인트 ID 또는 미등록 시 None.
        """

    @abstractmethod
    def get_wait_point_id_by_machine(self, machine_id: int) -> int | None:
        """기계 ID의 AGV 대기 포인트 ID를 조회한다.

        Args:
            machine_id: 기계 ID.

        Returns:
            포인트 ID 또는 미등록 시 None.
        """

    @abstractmethod
    def get_non_zero_break_values_by_side(self, side_number: int) -> list[int]:
        """면번호의 0이 아닌 단사 스핀들 번호를 조회한다."""

    @abstractmethod
    def get_distance_values_by_side(self, side_number: int) -> list[float]:
        """면번호의 스핀들 거리값을 스핀들 순서대로 조회한다."""
