"""Yarn Guardian 도메인 열거형 정의."""

from enum import IntEnum, StrEnum


class DeviceSide(StrEnum):
    """정방기 면(좌/우) 구분. 홀수 면번호는 right, 짝수는 left."""

    RIGHT = 'right'
    LEFT = 'left'


class SortOrder(StrEnum):
    """단사 지점 정렬 방향."""

    ASC = 'Asc'
    DESC = 'Desc'


class PlcAddressKind(StrEnum):
    """PLC 주소 종류."""

    COIL = 'M'
    REGISTER = 'D'


class AgvOperationalStatus(IntEnum):
    """AGV 운행 상태 코드 (RunningStatusInfo)."""

    IDLE = 0x00


class WorkflowState(StrEnum):
    """보수 워크플로 상태."""

    IDLE = 'IDLE'
    NAVIGATING_TO_SWITCH_POINT = 'NAVIGATING_TO_SWITCH_POINT'
    AWAITING_SWITCH_POINT_FEEDBACK = 'AWAITING_SWITCH_POINT_FEEDBACK'
    PROCESSING_SIDE = 'PROCESSING_SIDE'
    TURNING_BACK = 'TURNING_BACK'
    AWAITING_TURN_BACK_FEEDBACK = 'AWAITING_TURN_BACK_FEEDBACK'
    WRITING_WAIT_SWITCH_VALUE = 'WRITING_WAIT_SWITCH_VALUE'
    NAVIGATING_TO_WAIT_POINT = 'NAVIGATING_TO_WAIT_POINT'
    AWAITING_WAIT_POINT_ARRIVAL = 'AWAITING_WAIT_POINT_ARRIVAL'
    FAILED = 'FAILED'


class ModuleName(StrEnum):
    """메시지 버스 envelope의 module 값."""

    SCHEDULE = 'schedule'
    AGV = 'agv'


class ServiceName(StrEnum):
    """메시지 버스 envelope의 service 값."""

    GET_SCHEDULE = 'get_schedule'
    START_REPAIR_TASK = 'start_repair_task'
    STATUS_REPORT = 'status_report'
    START_REQUEST = 'start_request'
    TASK_ACK = 'task_ack'
    START_ACK = 'start_ack'
    STATUS_ACK = 'status_ack'
