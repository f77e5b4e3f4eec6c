"""Yarn Guardian 도메인 엔티티."""

from yarn_guardian.domain.entities.agv_status import (
    AgvCommandFrame,
    AgvFrameHeader,
    AgvStatus,
)
from yarn_guardian.domain.entities.envelope import DispatchResult, Envelope
from yarn_guardian.domain.entities.messages import (
    GetScheduleMessage,
    InboundMessage,
    StartRepairTaskMessage,
    StatusReportMessage,
    parse_inbound_message,
)
from yarn_guardian.domain.entities.repair_task import (
    RepairReport,
    RepairTaskDescriptor,
)
from yarn_guardian.domain.entities.status_record import StatusRecord

__all__ = [
    'AgvCommandFrame',
    'AgvFrameHeader',
    'AgvStatus',
    'DispatchResult',
    'Envelope',
    'GetScheduleMessage',
    'InboundMessage',
    'RepairReport',
    'RepairTaskDescriptor',
    'StartRepairTaskMessage',
    'StatusRecord',
    'StatusReportMessage',
    'parse_inbound_message',
]
