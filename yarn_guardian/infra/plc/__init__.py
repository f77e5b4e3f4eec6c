"""PLC Modbus 통신 인프라 (PlcGateway 구현)."""

from yarn_guardian.infra.plc.modbus_plc_transport import ModbusPlcTransport

__all__ = ["ModbusPlcTransport"]
