"""MQTT 메시지 채널 인프라 (MessageChannel 구현)."""

from yarn_guardian.infra.mqtt.mqtt_client import MqttClient
from yarn_guardian.infra.mqtt.mqtt_message_channel import MqttMessageChannel

__all__ = ["MqttClient", "MqttMessageChannel"]
