"""수신 메시지 변형 (service 이름으로 구분되는 tagged union).

envelope의 content를 service별 스키마로 해석한다.
알 수 없는 service는 UnknownServiceError로 구분한다.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from yarn_guardian.domain.entities.envelope import Envelope
from yarn_guardian.domain.entities.repair_task import RepairTaskDescriptor
from yarn_guardian.domain.enums import ServiceName
from yarn_guardian.domain.exceptions import (
    MessageValidationError,
    UnknownServiceError,
)

# 구버전 백엔드 TaskAssignment는 면번호를 spinningMachineId로 보낸다
_SIDE_NUMBER_KEYS = ('SideNumber', 'sideNumber', 'side_number', 'spinningMachineId')
_TASK_ID_KEYS = ('TaskId', 'taskId', 'task_id')


@dataclass(frozen=True)
class GetScheduleMessage:
    """주기 상태 보고 중지 요청."""

    envelope: Envelope


@dataclass(frozen=True)
class StartRepairTaskMessage:
    """보수 작업 시작 요청."""

    envelope: Envelope
    descriptor: RepairTaskDescriptor


@dataclass(frozen=True)
class StatusReportMessage:
    """즉시 상태 보고 요청."""

    envelope: Envelope


@dataclass(frozen=True)
class AckMessage:
    """백엔드의 start_request/상태 보고 수신 확인."""

    envelope: Envelope


InboundMessage = (
    GetScheduleMessage
    | StartRepairTaskMessage
    | StatusReportMessage
    | AckMessage
)

_ACK_SERVICES = frozenset({ServiceName.START_ACK, ServiceName.STATUS_ACK})


def _pick(content: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in content:
            return content[key]
    return None


def _parse_descriptor(envelope: Envelope) -> RepairTaskDescriptor:
    content = envelope.content
    if not isinstance(content, dict):
        raise MessageValidationError(
            f"start_repair_task content는 object여야 합니다: {content!r}"
        )

    side_raw = _pick(content, _SIDE_NUMBER_KEYS)
    task_raw = _pick(content, _TASK_ID_KEYS)
    if side_raw is None or task_raw is None:
        raise MessageValidationError(
            f"SideNumber/TaskId 누락: {sorted(content)}"
        )

    try:
        side_number = int(side_raw)
    except (TypeError, ValueError) as e:
        raise MessageValidationError(
            f"SideNumber가 정수가 아닙니다: {side_raw!r}"
        ) from e

    descriptor = RepairTaskDescriptor(
        side_number=side_number,
        task_id=str(task_raw),
        client_id=envelope.client_id,
        module=envelope.module,
        service=envelope.service,
    )
    descriptor.validate()
    return descriptor


def parse_inbound_message(envelope: Envelope) -> InboundMessage:
    """envelope을 service별 메시지 변형으로 해석한다.

    Args:
        envelope: 수신 envelope.

    Returns:
        해석된 메시지 변형.

    Raises:
        UnknownServiceError: 알 수 없는 service일 때.
        MessageValidationError: content 스키마가 맞지 않을 때.
    """
    service = envelope.service
    if service == ServiceName.GET_SCHEDULE:
        return GetScheduleMessage(envelope)
    if service == ServiceName.START_REPAIR_TASK:
        return StartRepairTaskMessage(envelope, _parse_descriptor(envelope))
    if service == ServiceName.STATUS_REPORT:
        return StatusReportMessage(envelope)
    if service in _ACK_SERVICES:
        return AckMessage(envelope)
    raise UnknownServiceError(f"Unexpected Service! [{service}]")
