"""로컬 스핀들 캐시 포트 인터페이스.

면별 거리값/단사값 스냅샷과 최근 조회한 스위치/대기 포인트 ID를 저장한다.
교체는 항상 면 단위 전체 교체이며 부분 갱신은 없다.
"""

from abc import ABC, abstractmethod


class SpindleCache(ABC):
    """면별 스냅샷 캐시 인터페이스."""

    @abstractmethod
    def replace_distance_values(
        self, side_number: int, values: list[float]
    ) -> None:
        """면의 거리값 스냅샷을 원자적으로 교체한다.

        Args:
            side_number: 면번호.
            values: 스핀들 1번부터의 거리값 목록.
        """

    @abstractmethod
    def get_distance_value(
        self, side_number: int, spindle: int
    ) -> float | None:
        """스핀들의 거리값을 조회한다.

        Args:
            side_number: 면번호.
            spindle: 스핀들 번호 (1부터 시작, 목록 위치 spindle - 1).

        Returns:
            거리값 또는 없으면 None.
        """

    @abstractmethod
    def replace_side_break_values(
        self, side_number: int, values: list[int]
    ) -> None:
        """면의 단사 스핀들 스냅샷을 원자적으로 교체한다."""

    @abstractmethod
    def get_side_break_values(self, side_number: int) -> list[int]:
        """면의 단사 스핀들 스냅샷을 조회한다."""

    @abstractmethod
    def replace_switch_point_id(self, side_number: int, point_id: int) -> None:
        """면의 스위치 포인트 ID를 교체 저장한다."""

    @abstractmethod
    def get_switch_point_id(self, side_number: int) -> int | None:
        """면의 캐시된 스위치 포인트 ID (없으면 None)."""

    @abstractmethod
    def replace_wait_point_id(self, machine_id: int, point_id: int) -> None:
        """기계의 대기 포인트 ID를 교체 저장한다."""

    @abstractmethod
    def get_wait_point_id(self, machine_id: int) -> int | None:
        """기계의 캐시된 대기 포인트 ID (없으면 None)."""
