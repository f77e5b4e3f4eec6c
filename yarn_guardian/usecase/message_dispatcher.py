"""수신 메시지 분배 유스케이스.

백엔드 envelope을 service별 메시지로 해석해 보수 워크플로 또는
상태 보고기로 보낸다.
"""

from __future__ import annotations

import logging

from yarn_guardian.domain.entities.envelope import DispatchResult, Envelope
from yarn_guardian.domain.entities.messages import (
    AckMessage,
    GetScheduleMessage,
    StartRepairTaskMessage,
    StatusReportMessage,
    parse_inbound_message,
)
from yarn_guardian.domain.enums import ModuleName, ServiceName
from yarn_guardian.domain.exceptions import (
    MessageValidationError,
    UnknownServiceError,
    WorkflowAbortedError,
)
from yarn_guardian.usecase.ports.message_channel import MessageChannel
from yarn_guardian.usecase.repair_task_orchestrator import (
    RepairTaskOrchestrator,
)
from yarn_guardian.usecase.status_reporter import StatusReporter

logger = logging.getLogger(__name__)

_KNOWN_MODULES = frozenset(m.value for m in ModuleName)

TASK_ACK_STATUS = 'Received'


class MessageDispatcher:
    """수신 envelope 분배기.

    Args:
        orchestrator: 보수 워크플로 실행기.
        reporter: 상태 보고기.
        channel: 응답 송신 채널.
    """

    def __init__(
        self,
        orchestrator: RepairTaskOrchestrator,
        reporter: StatusReporter,
        channel: MessageChannel,
    ) -> None:
        self._orchestrator = orchestrator
        self._reporter = reporter
        self._channel = channel

    def dispatch(self, envelope: Envelope) -> DispatchResult:
        """envelope 하나를 처리한다.

        백엔드 수신 확인(start_ack, status_ack)은 debug 로그만 남긴다.

        Returns:
            처리 결과. 알 수 없는 module/service 또는 content 오류,
            워크플로 실패 시 code=1.
        """
        if envelope.module not in _KNOWN_MODULES:
            logger.warning('Unexpected module: %s', envelope.module)
            return DispatchResult.error(
                f"Unexpected Module! [{envelope.module}]"
            )

        try:
            message = parse_inbound_message(envelope)
        except UnknownServiceError as e:
            logger.warning('%s', e)
            return DispatchResult.error(str(e))
        except MessageValidationError as e:
            logger.warning('Invalid %s content: %s', envelope.service, e)
            reply = envelope.failed(str(e))
            self._channel.send(reply)
            return DispatchResult(code=1, message=str(e), replies=[reply])

        if isinstance(message, AckMessage):
            logger.debug(
                'Backend ack received: %s %s',
                envelope.service, envelope.content,
            )
            return DispatchResult(message='ack received')

        if isinstance(message, GetScheduleMessage):
            self._reporter.stop()
            return DispatchResult(message='status reporting stopped')

        if isinstance(message, StatusReportMessage):
            self._reporter.sample_and_send()
            return DispatchResult(message='status reported')

        return self._start_repair_task(message)

    def _start_repair_task(
        self, message: StartRepairTaskMessage
    ) -> DispatchResult:
        descriptor = message.descriptor
        ack = Envelope(
            module=ModuleName.AGV.value,
            service=ServiceName.TASK_ACK.value,
            content={'TaskId': descriptor.task_id, 'Status': TASK_ACK_STATUS},
            client_id=descriptor.client_id,
            msg=TASK_ACK_STATUS,
        )
        self._channel.send(ack)

        try:
            report = self._orchestrator.execute_repair_task_workflow(
                descriptor
            )
        except WorkflowAbortedError as e:
            reply = message.envelope.failed(str(e))
            self._channel.send(reply)
            return DispatchResult(code=1, message=str(e), replies=[ack, reply])

        reply = message.envelope.success(content=report)
        self._channel.send(reply)
        return DispatchResult(
            message=f'task {descriptor.task_id} completed',
            replies=[ack, reply],
        )
