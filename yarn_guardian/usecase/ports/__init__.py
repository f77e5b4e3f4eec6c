"""유스케이스 포트 인터페이스 (ABC).

infra 레이어에서 구현해야 하는 추상 인터페이스를 정의한다.
"""

from yarn_guardian.usecase.ports.agv_gateway import AgvGateway
from yarn_guardian.usecase.ports.break_point_source import BreakPointSource
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
from yarn_guardian.usecase.ports.message_channel import (
    EnvelopeHandler,
    MessageChannel,
)
from yarn_guardian.usecase.ports.plc_gateway import PlcGateway
from yarn_guardian.usecase.ports.spindle_cache import SpindleCache

__all__ = [
    "AgvConfig",
    "AgvGateway",
    "AppConfig",
    "BreakPointSource",
    "ConfigPort",
    "DatabaseConfig",
    "EnvelopeHandler",
    "MessageChannel",
    "MqttConfig",
    "PlcAddressMap",
    "PlcConfig",
    "PlcGateway",
    "RepairConfig",
    "SpindleCache",
    "StatusReportConfig",
]
