"""MQTT 기반 MessageChannel 구현체.

command 토픽에서 envelope을 받고 report 토픽으로 envelope을 보낸다.
토픽 형식: yarn_guardian/{machine_id}/command, yarn_guardian/{machine_id}/report
"""

from __future__ import annotations

import logging

from yarn_guardian.domain.entities.envelope import Envelope
from yarn_guardian.domain.exceptions import MessageValidationError
from yarn_guardian.infra.mqtt.message_serializer import (
    deserialize_envelope,
    serialize_envelope,
)
from yarn_guardian.infra.mqtt.mqtt_client import MqttClient
from yarn_guardian.usecase.ports.config_port import MqttConfig
from yarn_guardian.usecase.ports.message_channel import (
    EnvelopeHandler,
    MessageChannel,
)

logger = logging.getLogger(__name__)


class MqttMessageChannel(MessageChannel):
    """MessageChannel의 MQTT 구현체.

    Args:
        mqtt_client: MQTT 클라이언트 래퍼.
        config: MQTT 설정 (토픽 템플릿, QoS).
        machine_id: 토픽에 들어갈 기계 ID.
    """

    def __init__(
        self,
        mqtt_client: MqttClient,
        config: MqttConfig,
        machine_id: int,
    ) -> None:
        self._client = mqtt_client
        self._qos = config.qos
        self._command_topic = config.command_topic.format(
            machine_id=machine_id
        )
        self._report_topic = config.report_topic.format(machine_id=machine_id)
        self._handler: EnvelopeHandler | None = None

    @property
    def command_topic(self) -> str:
        return self._command_topic

    @property
    def report_topic(self) -> str:
        return self._report_topic

    def send(self, envelope: Envelope) -> None:
        """envelope을 report 토픽으로 발행한다."""
        self._client.publish(
            self._report_topic, serialize_envelope(envelope), qos=self._qos
        )
        logger.debug(
            'Envelope sent: %s/%s (code=%d)',
            envelope.module, envelope.service, envelope.code,
        )

    def set_handler(self, handler: EnvelopeHandler) -> None:
        """핸들러를 등록하고 command 토픽을 구독한다."""
        self._handler = handler
        self._client.subscribe(
            self._command_topic, self._on_payload, qos=self._qos
        )

    def _on_payload(self, topic: str, payload: bytes) -> None:
        try:
            envelope = deserialize_envelope(payload)
        except MessageValidationError as e:
            logger.warning('Invalid envelope on %s: %s', topic, e)
            return

        if self._handler is not None:
            self._handler(envelope)
