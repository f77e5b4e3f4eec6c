"""설정 포트 인터페이스.

애플리케이션 설정의 로딩을 추상화한다.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from yarn_guardian.domain.enums import SortOrder


@dataclass(frozen=True)
class MqttConfig:
    """MQTT 브로커 접속 설정.

    Args:
        broker_host: 브로커 호스트 주소.
        broker_port: 브로커 포트 번호.
        keepalive_sec: 연결 유지 간격 (초).
        reconnect_max_delay_sec: 재연결 최대 대기 시간 (초).
        client_id: MQTT 클라이언트 ID (빈 문자열이면 자동 생성).
        command_topic: 수신 토픽 템플릿 ({machine_id} 치환).
        report_topic: 송신 토픽 템플릿 ({machine_id} 치환).
        qos: 송수신 QoS.
    """

    broker_host: str = 'localhost'
    broker_port: int = 1883
    keepalive_sec: int = 60
    reconnect_max_delay_sec: int = 60
    client_id: str = ''
    command_topic: str = 'yarn_guardian/{machine_id}/command'
    report_topic: str = 'yarn_guardian/{machine_id}/report'
    qos: int = 1


@dataclass(frozen=True)
class AgvConfig:
    """AGV UDP 접속 설정.

    Args:
        ip: AGV IP 주소.
        port: AGV UDP 포트.
        reply_timeout_sec: 응답 대기 시간 (초).
        auth_code: 16바이트 인증 코드 (hex 문자열).
    """

    ip: str = '192.168.100.178'
    port: int = 17804
    reply_timeout_sec: float = 3.0
    auth_code: str = '00' * 16


@dataclass(frozen=True)
class PlcAddressMap:
    """오케스트레이터가 사용하는 PLC 심볼 주소 표.

    PLC 프로그램의 할당과 일치해야 한다.
    """

    switch_point_arrived: str = 'M500'
    trigger_rollers: str = 'M501'
    move_trigger: str = 'M502'
    turn_back: str = 'M503'
    switch_point_feedback: str = 'M504'
    spindle_arrival: str = 'M600'
    repair_done: str = 'M601'
    turn_back_feedback: str = 'M602'
    spindle_position: str = 'D500'


@dataclass(frozen=True)
class PlcConfig:
    """PLC Modbus TCP 접속 설정.

    Args:
        ip: PLC IP 주소.
        port: Modbus TCP 포트.
        slave_id: Modbus slave(unit) ID.
        connect_timeout_sec: 접속 타임아웃 (초).
        addresses: 심볼 주소 표.
    """

    ip: str = '192.168.1.10'
    port: int = 502
    slave_id: int = 17
    connect_timeout_sec: float = 3.0
    addresses: PlcAddressMap = field(default_factory=PlcAddressMap)


@dataclass(frozen=True)
class DatabaseConfig:
    """데이터베이스 설정.

    Args:
        source_url: 단사 데이터 소스 SQLAlchemy URL.
        cache_path: 로컬 SQLite 캐시 파일 경로.
    """

    source_url: str = 'mysql+pymysql://root:@localhost:3306/yarn_guardian'
    cache_path: str = 'yarn_guardian_cache.db'


@dataclass(frozen=True)
class RepairConfig:
    """보수 워크플로 설정.

    Args:
        machine_id: 이 로봇이 담당하는 기계 ID (대기 포인트 조회 키).
        odd_sort_order: 홀수 면 단사 정렬 방향.
        even_sort_order: 짝수 면 단사 정렬 방향.
        odd_trigger_rollers: 홀수 면 롤러 트리거 값.
        even_trigger_rollers: 짝수 면 롤러 트리거 값.
        switch_point_spindle: 면 전환 시 위치 기록에 쓰는 스핀들 번호.
        poll_interval_sec: coil/도착 폴링 간격 (초).
        max_poll_attempts: 폴링 최대 횟수 (0이면 무제한).
    """

    machine_id: int = 1
    odd_sort_order: SortOrder = SortOrder.ASC
    even_sort_order: SortOrder = SortOrder.DESC
    odd_trigger_rollers: bool = True
    even_trigger_rollers: bool = False
    switch_point_spindle: int = 1
    poll_interval_sec: float = 2.0
    max_poll_attempts: int = 900

    def sort_order_for(self, side_number: int) -> SortOrder:
        """면번호 홀짝에 따른 정렬 방향."""
        if side_number % 2 == 1:
            return self.odd_sort_order
        return self.even_sort_order

    def trigger_rollers_for(self, side_number: int) -> bool:
        """면번호 홀짝에 따른 롤러 트리거 값."""
        if side_number % 2 == 1:
            return self.odd_trigger_rollers
        return self.even_trigger_rollers


@dataclass(frozen=True)
class StatusReportConfig:
    """주기 상태 보고 설정.

    Args:
        robot_id: 상태 보고에 쓰는 로봇 ID.
        interval_ms: 보고 주기 (ms).
        auto_start: 기동 시 주기 보고 시작 여부.
    """

    robot_id: str = 'yarn_guardian_01'
    interval_ms: int = 1000
    auto_start: bool = True


@dataclass(frozen=True)
class AppConfig:
    """애플리케이션 전체 설정."""

    mqtt: MqttConfig = field(default_factory=MqttConfig)
    agv: AgvConfig = field(default_factory=AgvConfig)
    plc: PlcConfig = field(default_factory=PlcConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    repair: RepairConfig = field(default_factory=RepairConfig)
    status_report: StatusReportConfig = field(
        default_factory=StatusReportConfig
    )
    log_level: str = 'INFO'


class ConfigPort(ABC):
    """설정 로더 인터페이스."""

    @abstractmethod
    def load(self) -> AppConfig:
        """설정을 로드한다.

        Returns:
            AppConfig. 항목이 없으면 기본값을 사용한다.
        """
