"""주기 상태 보고 유스케이스.

AGV/PLC 상태를 샘플링해 status_report envelope으로 백엔드에 보낸다.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
import threading

from yarn_guardian.domain.entities.envelope import Envelope
from yarn_guardian.domain.entities.repair_task import device_side_for_side
from yarn_guardian.domain.entities.status_record import StatusRecord
from yarn_guardian.domain.enums import ModuleName, ServiceName
from yarn_guardian.domain.exceptions import DomainError
from yarn_guardian.usecase.ports.agv_gateway import AgvGateway
from yarn_guardian.usecase.ports.config_port import StatusReportConfig
from yarn_guardian.usecase.ports.message_channel import MessageChannel
from yarn_guardian.usecase.ports.plc_gateway import PlcGateway

logger = logging.getLogger(__name__)


class StatusReporter:
    """주기 상태 보고기.

    start()는 보고 스레드를 시작하고 stop()은 현재 tick이 끝난 뒤
    스레드를 종료하고 join한다. tick 실패는 로그만 남기고 다음 tick을
    계속한다.

    Args:
        agv_gateway: AGV 통신 포트.
        plc_gateway: PLC 통신 포트.
        channel: 송신 채널.
        config: 상태 보고 설정.
        current_side: 작업 중인 면번호를 반환하는 함수 (없으면 None).
    """

    def __init__(
        self,
        agv_gateway: AgvGateway,
        plc_gateway: PlcGateway,
        channel: MessageChannel,
        config: StatusReportConfig,
        current_side: Callable[[], int | None] = lambda: None,
    ) -> None:
        self._agv = agv_gateway
        self._plc = plc_gateway
        self._channel = channel
        self._config = config
        self._current_side = current_side

        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """보고 스레드를 시작한다. 이미 실행 중이면 무시한다."""
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name='status-reporter',
                daemon=True,
            )
            self._thread.start()
        logger.info(
            'Status reporting started (interval=%dms)',
            self._config.interval_ms,
        )

    def stop(self) -> None:
        """보고 스레드를 멈추고 종료를 기다린다."""
        with self._lock:
            thread = self._thread
            self._thread = None
            self._stop_event.set()

        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join()
        logger.info('Status reporting stopped')

    def sample_and_send(self) -> StatusRecord:
        """상태를 한 번 샘플링해 송신한다.

        Returns:
            송신한 StatusRecord.
        """
        status = self._agv.query_detailed_status()

        try:
            position = self._plc.get_spindle_position()
        except DomainError as e:
            logger.debug('Spindle position unavailable: %s', e)
            position = None

        side = self._current_side()
        record = StatusRecord(
            robot_id=self._config.robot_id,
            power=status.battery_percent or 0.0,
            speed=status.velocity or 0.0,
            current_lane_id=side or 0,
            current_position='' if position is None else f'{position:g}',
            direction=device_side_for_side(side).value if side else '',
        )

        self._channel.send(
            Envelope(
                module=ModuleName.AGV.value,
                service=ServiceName.STATUS_REPORT.value,
                content=record,
            )
        )
        return record

    def _run(self, stop_event: threading.Event) -> None:
        interval = self._config.interval_ms / 1000.0
        while not stop_event.is_set():
            try:
                self.sample_and_send()
            except Exception:
                logger.exception('Status report tick failed')
            if stop_event.wait(interval):
                break
