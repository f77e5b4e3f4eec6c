"""YAML 파일 기반 설정 로더 구현체."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from yarn_guardian.domain.enums import SortOrder
from yarn_guardian.usecase.ports.config_port import (
    AgvConfig,
    AppConfig,
    ConfigPort,
    DatabaseConfig,
    MqttConfig,
    PlcAddressMap,
    PlcConfig,
    RepairConfig,
    StatusReportConfig,
)

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = (
    Path(__file__).resolve().parent.parent.parent.parent
    / "config"
    / "config.yaml"
)


def _section(params: dict[str, Any], name: str) -> dict[str, Any]:
    data = params.get(name) or {}
    if not isinstance(data, dict):
        logger.warning("Config section '%s' is not a mapping, ignored", name)
        return {}
    return data


def _sort_order(value: Any, default: SortOrder) -> SortOrder:
    """'Asc'/'Desc' (대소문자 무시)를 SortOrder로 변환한다."""
    if value is None:
        return default
    for order in SortOrder:
        if str(value).lower() == order.value.lower():
            return order
    logger.warning("Unknown sort order %r, using %s", value, default.value)
    return default


_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0"})


def _flag(value: Any, default: bool) -> bool:
    """YAML bool 또는 'true'/'false' 류 문자열을 bool로 변환한다."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    logger.warning("Unknown boolean %r, using %s", value, default)
    return default


class YamlConfigLoader(ConfigPort):
    """ConfigPort의 YAML 파일 구현체.

    YAML 파일에서 설정을 읽어 AppConfig로 변환한다.
    파일이 없거나 형식이 잘못되면 기본값을 사용한다.

    Args:
        config_path: YAML 설정 파일 경로. None이면 기본 경로 사용.
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self._path = Path(config_path) if config_path else _DEFAULT_CONFIG_PATH

    def load(self) -> AppConfig:
        """YAML 파일에서 설정을 로드한다."""
        params = self._read_yaml()

        mqtt_data = _section(params, "mqtt")
        agv_data = _section(params, "agv")
        plc_data = _section(params, "plc")
        address_data = _section(plc_data, "addresses")
        db_data = _section(params, "database")
        repair_data = _section(params, "repair")
        report_data = _section(params, "status_report")

        mqtt_defaults = MqttConfig()
        agv_defaults = AgvConfig()
        plc_defaults = PlcConfig()
        db_defaults = DatabaseConfig()
        repair_defaults = RepairConfig()
        report_defaults = StatusReportConfig()

        addresses = PlcAddressMap(
            **{
                key: str(value)
                for key, value in address_data.items()
                if key in PlcAddressMap.__dataclass_fields__
            }
        )

        config = AppConfig(
            mqtt=MqttConfig(
                broker_host=mqtt_data.get(
                    "broker_host", mqtt_defaults.broker_host
                ),
                broker_port=mqtt_data.get(
                    "broker_port", mqtt_defaults.broker_port
                ),
                keepalive_sec=mqtt_data.get(
                    "keepalive_sec", mqtt_defaults.keepalive_sec
                ),
                reconnect_max_delay_sec=mqtt_data.get(
                    "reconnect_max_delay_sec",
                    mqtt_defaults.reconnect_max_delay_sec,
                ),
                client_id=mqtt_data.get("client_id", mqtt_defaults.client_id),
                command_topic=mqtt_data.get(
                    "command_topic", mqtt_defaults.command_topic
                ),
                report_topic=mqtt_data.get(
                    "report_topic", mqtt_defaults.report_topic
                ),
                qos=mqtt_data.get("qos", mqtt_defaults.qos),
            ),
            agv=AgvConfig(
                ip=agv_data.get("ip", agv_defaults.ip),
                port=agv_data.get("port", agv_defaults.port),
                reply_timeout_sec=agv_data.get(
                    "reply_timeout_sec", agv_defaults.reply_timeout_sec
                ),
                auth_code=str(
                    agv_data.get("auth_code", agv_defaults.auth_code)
                ),
            ),
            plc=PlcConfig(
                ip=plc_data.get("ip", plc_defaults.ip),
                port=plc_data.get("port", plc_defaults.port),
                slave_id=plc_data.get("slave_id", plc_defaults.slave_id),
                connect_timeout_sec=plc_data.get(
                    "connect_timeout_sec", plc_defaults.connect_timeout_sec
                ),
                addresses=addresses,
            ),
            database=DatabaseConfig(
                source_url=db_data.get("source_url", db_defaults.source_url),
                cache_path=db_data.get("cache_path", db_defaults.cache_path),
            ),
            repair=RepairConfig(
                machine_id=repair_data.get(
                    "machine_id", repair_defaults.machine_id
                ),
                odd_sort_order=_sort_order(
                    repair_data.get("odd_sort_order"),
                    repair_defaults.odd_sort_order,
                ),
                even_sort_order=_sort_order(
                    repair_data.get("even_sort_order"),
                    repair_defaults.even_sort_order,
                ),
                odd_trigger_rollers=_flag(
                    repair_data.get("odd_trigger_rollers"),
                    repair_defaults.odd_trigger_rollers,
                ),
                even_trigger_rollers=_flag(
                    repair_data.get("even_trigger_rollers"),
                    repair_defaults.even_trigger_rollers,
                ),
                switch_point_spindle=repair_data.get(
                    "switch_point_spindle",
                    repair_defaults.switch_point_spindle,
                ),
                poll_interval_sec=repair_data.get(
                    "poll_interval_sec", repair_defaults.poll_interval_sec
                ),
                max_poll_attempts=repair_data.get(
                    "max_poll_attempts", repair_defaults.max_poll_attempts
                ),
            ),
            status_report=StatusReportConfig(
                robot_id=str(
                    report_data.get("robot_id", report_defaults.robot_id)
                ),
                interval_ms=report_data.get(
                    "interval_ms", report_defaults.interval_ms
                ),
                auto_start=_flag(
                    report_data.get("auto_start"), report_defaults.auto_start
                ),
            ),
            log_level=str(params.get("log_level", "INFO")).upper(),
        )

        logger.info("Config loaded from %s", self._path)
        return config

    def _read_yaml(self) -> dict[str, Any]:
        """YAML 파일을 dict로 읽는다."""
        if not self._path.exists():
            logger.warning(
                "Config file not found: %s, using defaults", self._path
            )
            return {}

        with open(self._path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                logger.warning("YAML parse error (%s), using defaults", e)
                return {}

        if not isinstance(data, dict):
            logger.warning("Invalid YAML format, using defaults")
            return {}

        # yarn_guardian: 최상위 키 아래 또는 평탄한 구조 모두 허용
        params = data.get("yarn_guardian", data)
        return params if isinstance(params, dict) else {}
