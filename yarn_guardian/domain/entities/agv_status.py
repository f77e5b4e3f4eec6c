"""AGV 상태 및 통신 프레임 엔티티."""

from dataclasses import dataclass, field


@dataclass
class AgvStatus:
    """AGV 상태 조회(0xAF) 응답의 도메인 모델.

    모든 필드는 독립적으로 선택적이다. 응답이 짧아 특정 블록을
    읽을 수 없으면 해당 블록의 필드만 None으로 남는다.

    Args:
        x: X 좌표.
        y: Y 좌표.
        velocity: 주행 속도.
        battery_percent: 배터리 잔량 (%, 0~100).
        operational_status: 운행 상태 코드 (0x00 = 대기).
        last_point_id: 마지막 통과 경로점 ID.
    """

    x: float | None = None
    y: float | None = None
    velocity: float | None = None
    battery_percent: float | None = None
    operational_status: int | None = None
    last_point_id: int | None = None

    @property
    def is_available(self) -> bool:
        """하나 이상의 필드가 채워져 있는지 여부."""
        return any(
            value is not None
            for value in (
                self.x,
                self.y,
                self.velocity,
                self.battery_percent,
                self.operational_status,
                self.last_point_id,
            )
        )


@dataclass(frozen=True)
class AgvFrameHeader:
    """AGV 통신 프레임 고정 헤더 (28바이트).

    Args:
        auth_code: 인증 코드 (16바이트).
        protocol_version: 프로토콜 버전.
        frame_kind: 0x00 요청, 0x01 응답.
        sequence: 통신 시퀀스 번호 (u16).
        service_code: 서비스 코드.
        command_code: 명령 코드.
        execution_code: 실행 코드 (요청 시 0).
        payload_length: 데이터 영역 길이.
    """

    auth_code: bytes
    protocol_version: int
    frame_kind: int
    sequence: int
    service_code: int
    command_code: int
    execution_code: int
    payload_length: int


@dataclass(frozen=True)
class AgvCommandFrame:
    """헤더 + 데이터 영역으로 구성된 AGV 프레임."""

    header: AgvFrameHeader
    payload: bytes = field(default=b'')
