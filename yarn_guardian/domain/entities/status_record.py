"""백엔드 상태 보고 엔티티."""

from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass
class StatusRecord:
    """주기적으로 백엔드에 보내는 로봇 상태.

    Args:
        robot_id: 로봇 식별자.
        status: 상태 문자열.
        power: 배터리 잔량 (%), 조회 실패 시 0.
        speed: 주행 속도, 조회 실패 시 0.
        current_lane_id: 현재 작업 중인 면번호 (없으면 0).
        current_position: 현재 위치 표현 (스핀들 거리 레지스터 값).
        direction: 진행 방향 (right/left).
        timestamp: UTC 타임스탬프.
        type: 메시지 유형.
    """

    robot_id: str
    status: str = 'working'
    power: float = 0.0
    speed: float = 0.0
    current_lane_id: int = 0
    current_position: str = ''
    direction: str = ''
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    type: str = 'status_report'
