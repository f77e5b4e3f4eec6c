"""Yarn Guardian 애플리케이션 조립.

설정으로부터 인프라 구현체를 만들고 유스케이스에 주입한다.
수신 envelope은 paho 네트워크 스레드를 막지 않도록 executor에서
처리한다. 보수 작업은 워크플로 전용 워커에서, 상태 보고 제어와 스케줄
조회는 별도 워커에서 실행되어 진행 중인 작업을 기다리지 않는다.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from datetime import UTC, datetime
import logging

from yarn_guardian.domain.entities.envelope import DispatchResult, Envelope
from yarn_guardian.domain.enums import ModuleName, ServiceName
from yarn_guardian.infra.agv.udp_agv_transport import UdpAgvTransport
from yarn_guardian.infra.database.sql_break_point_source import (
    SqlBreakPointSource,
)
from yarn_guardian.infra.database.sqlite_spindle_cache import (
    SqliteSpindleCache,
)
from yarn_guardian.infra.mqtt.mqtt_client import MqttClient
from yarn_guardian.infra.mqtt.mqtt_message_channel import MqttMessageChannel
from yarn_guardian.infra.plc.modbus_plc_transport import ModbusPlcTransport
from yarn_guardian.usecase.message_dispatcher import MessageDispatcher
from yarn_guardian.usecase.ports.agv_gateway import AgvGateway
from yarn_guardian.usecase.ports.break_point_source import BreakPointSource
from yarn_guardian.usecase.ports.config_port import AppConfig
from yarn_guardian.usecase.ports.message_channel import MessageChannel
from yarn_guardian.usecase.ports.plc_gateway import PlcGateway
from yarn_guardian.usecase.ports.spindle_cache import SpindleCache
from yarn_guardian.usecase.repair_task_orchestrator import (
    RepairTaskOrchestrator,
)
from yarn_guardian.usecase.status_reporter import StatusReporter

logger = logging.getLogger(__name__)


class YarnGuardianApp:
    """프로세스 수명 동안의 구성 요소 묶음.

    구현체를 인자로 넘기면 설정 대신 그것을 사용한다.

    Args:
        config: 애플리케이션 설정.
        agv_gateway: AGV 포트 구현체.
        plc_gateway: PLC 포트 구현체.
        break_point_source: 단사 데이터 소스 구현체.
        spindle_cache: 캐시 구현체.
        channel: 메시지 채널 구현체.
        mqtt_client: MQTT 클라이언트 (channel 미지정 시 사용).
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        agv_gateway: AgvGateway | None = None,
        plc_gateway: PlcGateway | None = None,
        break_point_source: BreakPointSource | None = None,
        spindle_cache: SpindleCache | None = None,
        channel: MessageChannel | None = None,
        mqtt_client: MqttClient | None = None,
    ) -> None:
        self._config = config
        machine_id = config.repair.machine_id

        self._agv = agv_gateway or UdpAgvTransport(config.agv)
        self._plc = plc_gateway or ModbusPlcTransport(config.plc)
        self._source = break_point_source or SqlBreakPointSource.from_url(
            config.database.source_url
        )
        self._cache = spindle_cache or SqliteSpindleCache.from_path(
            config.database.cache_path
        )

        self._mqtt_client = mqtt_client
        if channel is None:
            if self._mqtt_client is None:
                self._mqtt_client = MqttClient(
                    config.mqtt,
                    client_id=config.mqtt.client_id
                    or f'yarn_guardian_{machine_id}',
                )
            channel = MqttMessageChannel(
                self._mqtt_client, config.mqtt, machine_id
            )
        self._channel = channel

        self.orchestrator = RepairTaskOrchestrator(
            agv_gateway=self._agv,
            plc_gateway=self._plc,
            break_point_source=self._source,
            spindle_cache=self._cache,
            repair_config=config.repair,
            addresses=config.plc.addresses,
        )
        self.reporter = StatusReporter(
            agv_gateway=self._agv,
            plc_gateway=self._plc,
            channel=self._channel,
            config=config.status_report,
            current_side=lambda: self.orchestrator.current_side_number,
        )
        self.dispatcher = MessageDispatcher(
            self.orchestrator, self.reporter, self._channel
        )

        # 보수 작업은 한 번에 하나. 그 외 요청은 작업 중에도 바로 처리한다.
        self._workflow_executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix='workflow'
        )
        self._control_executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix='control'
        )

    def start(self) -> None:
        """연결을 열고 수신/보고를 시작한다."""
        if not self._plc.connect():
            logger.warning('PLC not reachable at startup, retried per task')

        self._channel.set_handler(self.on_envelope)
        if self._mqtt_client is not None:
            self._mqtt_client.connect()

        self.send_start_request()

        if self._config.status_report.auto_start:
            self.reporter.start()
        logger.info(
            'Yarn Guardian started (machine=%d)',
            self._config.repair.machine_id,
        )

    def send_start_request(self) -> Envelope:
        """기동 알림(start_request)을 보낸다."""
        envelope = Envelope(
            module=ModuleName.SCHEDULE.value,
            service=ServiceName.START_REQUEST.value,
            content={
                'MachineId': self._config.repair.machine_id,
                'TimeStamp': datetime.now(UTC).isoformat(),
            },
        )
        self._channel.send(envelope)
        return envelope

    def on_envelope(self, envelope: Envelope) -> Future:
        """수신 envelope을 executor에 넘긴다.

        start_repair_task는 워크플로 executor에서 순서대로 실행하고,
        나머지(get_schedule, status_report, 오류 응답)는 워크플로와
        별개인 control executor에서 바로 처리한다.
        """
        logger.info(
            'Envelope received: %s/%s', envelope.module, envelope.service
        )
        if envelope.service == ServiceName.START_REPAIR_TASK:
            executor = self._workflow_executor
        else:
            executor = self._control_executor
        return executor.submit(self._dispatch, envelope)

    def shutdown(self) -> None:
        """보고 중지 → 실행 중 워크플로 대기 → 연결 해제 순으로 종료한다."""
        logger.info('Shutting down')
        self.reporter.stop()
        self._control_executor.shutdown(wait=True)
        self._workflow_executor.shutdown(wait=True)
        self._plc.disconnect()
        self._agv.stop()
        if self._mqtt_client is not None:
            self._mqtt_client.disconnect()

    def _dispatch(self, envelope: Envelope) -> DispatchResult | None:
        try:
            result = self.dispatcher.dispatch(envelope)
        except Exception:
            logger.exception(
                'Dispatch failed: %s/%s', envelope.module, envelope.service
            )
            return None

        if result.ok:
            logger.info('Dispatch done: %s', result.message)
        else:
            logger.warning('Dispatch error: %s', result.message)
        return result
