"""보수 작업 엔티티."""

from dataclasses import dataclass, field

from yarn_guardian.domain.enums import DeviceSide, SortOrder
from yarn_guardian.domain.exceptions import MessageValidationError


def machine_number_for_side(side_number: int) -> int:
    """면번호에 대응하는 정방기 번호 (홀수: (n+1)/2, 짝수: n/2)."""
    return (side_number + 1) // 2


def device_side_for_side(side_number: int) -> DeviceSide:
    """면번호에 대응하는 정방기 면 (홀수 right, 짝수 left)."""
    return DeviceSide.RIGHT if side_number % 2 == 1 else DeviceSide.LEFT


def sort_break_points(values: list[int], order: SortOrder) -> list[int]:
    """0을 제외한 단사 지점을 주어진 방향으로 정렬한다.

    Args:
        values: 데이터 소스에서 조회한 스핀들 번호 목록.
        order: 정렬 방향.

    Returns:
        정렬된 새 목록.
    """
    non_zero = [v for v in values if v != 0]
    return sorted(non_zero, reverse=order == SortOrder.DESC)


@dataclass
class RepairTaskDescriptor:
    """백엔드가 지시한 보수 작업.

    Args:
        side_number: 면번호 (1부터 시작).
        task_id: 작업 식별자.
        client_id: 원본 메시지의 clientId.
        module: 원본 메시지의 module.
        service: 원본 메시지의 service.
    """

    side_number: int
    task_id: str
    client_id: int = 0
    module: str = ''
    service: str = ''

    @property
    def machine_number(self) -> int:
        return machine_number_for_side(self.side_number)

    @property
    def device_side(self) -> DeviceSide:
        return device_side_for_side(self.side_number)

    @property
    def next_side_number(self) -> int:
        """턴백 후 처리할 반대 면번호."""
        return self.side_number + 1

    def validate(self) -> None:
        """작업 유효성을 검증한다.

        Raises:
            MessageValidationError: 면번호가 1 미만이거나 task_id가 비었을 때.
        """
        if self.side_number < 1:
            raise MessageValidationError(
                f"면번호는 1 이상이어야 합니다: {self.side_number}"
            )
        if not self.task_id:
            raise MessageValidationError("TaskId가 비어 있습니다.")


@dataclass
class RepairReport:
    """워크플로 1회 실행 결과.

    Args:
        task_id: 작업 식별자.
        side_numbers: 처리한 면번호 목록.
        repaired: (면번호, 스핀들) 보수 완료 목록.
        missed: (면번호, 스핀들) 거리 캐시 누락으로 건너뛴 목록.
    """

    task_id: str
    side_numbers: list[int] = field(default_factory=list)
    repaired: list[tuple[int, int]] = field(default_factory=list)
    missed: list[tuple[int, int]] = field(default_factory=list)
