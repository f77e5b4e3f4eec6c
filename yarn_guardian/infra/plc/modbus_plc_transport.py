"""pymodbus 기반 PlcGateway 구현체.

Modbus TCP로 PLC coil / holding register를 읽고 쓴다.
연결 핸들은 이 클래스만 소유하며, 모든 wire 호출은 하나의 lock으로
직렬화된다 (한 번에 하나의 요청).
"""

from __future__ import annotations

import logging
import threading

from pymodbus.client import ModbusTcpClient
from pymodbus.exceptions import ModbusException

from yarn_guardian.domain.exceptions import (
    NotConnectedError,
    TransportFailureError,
)
from yarn_guardian.infra.plc.plc_register_codec import (
    decode_float,
    decode_int16,
    encode_float,
    encode_int16,
    parse_coil_address,
    parse_register_address,
)
from yarn_guardian.usecase.ports.config_port import PlcAddressMap, PlcConfig
from yarn_guardian.usecase.ports.plc_gateway import PlcGateway

logger = logging.getLogger(__name__)


class ModbusPlcTransport(PlcGateway):
    """PlcGateway의 Modbus TCP 구현체.

    Args:
        config: PLC 접속 설정. None이면 기본값 사용.
    """

    def __init__(self, config: PlcConfig | None = None) -> None:
        config = config or PlcConfig()
        self._ip = config.ip
        self._port = config.port
        self._slave_id = config.slave_id
        self._timeout = config.connect_timeout_sec
        self._addresses: PlcAddressMap = config.addresses
        self._lock = threading.Lock()
        self._client: ModbusTcpClient | None = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def addresses(self) -> PlcAddressMap:
        return self._addresses

    def configure(self, ip: str, port: int = 502, slave_id: int = 17) -> None:
        """접속 대상을 변경한다. 연결 중이면 먼저 끊는다."""
        self.disconnect()
        with self._lock:
            self._ip = ip
            self._port = port
            self._slave_id = slave_id
        logger.info(
            'PLC configured: %s:%d (slave=%d)', ip, port, slave_id
        )

    def connect(self) -> bool:
        """PLC에 연결한다. 실패 시 False (예외 없음)."""
        with self._lock:
            if self._connected:
                return True

            self._client = ModbusTcpClient(
                self._ip, port=self._port, timeout=self._timeout
            )
            try:
                self._connected = bool(self._client.connect())
            except (ModbusException, OSError) as e:
                logger.error('PLC connect error: %s', e)
                self._connected = False

            if self._connected:
                logger.info('PLC connected: %s:%d', self._ip, self._port)
            else:
                logger.error(
                    'PLC connect failed: %s:%d', self._ip, self._port
                )
                self._client.close()
                self._client = None
            return self._connected

    def disconnect(self) -> None:
        with self._lock:
            if not self._connected:
                return
            self._client.close()
            self._client = None
            self._connected = False
        logger.info('PLC disconnected')

    def read_coil(self, address: str) -> bool:
        index = parse_coil_address(address)
        with self._lock:
            client = self._require_client()
            rr = self._call(
                address, client.read_coils, index, count=1,
                device_id=self._slave_id,
            )
            return bool(rr.bits[0])

    def write_coil(self, address: str, value: bool) -> None:
        index = parse_coil_address(address)
        with self._lock:
            client = self._require_client()
            self._call(
                address, client.write_coil, index, bool(value),
                device_id=self._slave_id,
            )
        logger.debug('PLC write coil %s=%s', address, value)

    def read_register(self, address: str) -> int:
        index = parse_register_address(address)
        with self._lock:
            client = self._require_client()
            rr = self._call(
                address, client.read_holding_registers, index, count=1,
                device_id=self._slave_id,
            )
            return decode_int16(rr.registers[0])

    def write_register(self, address: str, value: int) -> None:
        index = parse_register_address(address)
        word = encode_int16(value)
        with self._lock:
            client = self._require_client()
            self._call(
                address, client.write_register, index, word,
                device_id=self._slave_id,
            )
        logger.debug('PLC write register %s=%d', address, value)

    def read_register_float(self, address: str) -> float:
        index = parse_register_address(address)
        with self._lock:
            client = self._require_client()
            rr = self._call(
                address, client.read_holding_registers, index, count=2,
                device_id=self._slave_id,
            )
            word_high, word_low = rr.registers[0], rr.registers[1]
        return decode_float(word_high, word_low)

    def write_register_float(self, address: str, value: float) -> None:
        index = parse_register_address(address)
        word_high, word_low = encode_float(value)
        with self._lock:
            client = self._require_client()
            self._call(
                address, client.write_registers, index, [word_high, word_low],
                device_id=self._slave_id,
            )
        logger.debug('PLC write float %s=%s', address, value)

    def get_spindle_position(self) -> float:
        return self.read_register_float(self._addresses.spindle_position)

    # -- lock 보유 상태에서만 호출 --

    def _require_client(self) -> ModbusTcpClient:
        if not self._connected or self._client is None:
            raise NotConnectedError('PLC가 연결되지 않았습니다.')
        return self._client

    def _call(self, address: str, method, *args, **kwargs):
        """pymodbus 호출을 실행하고 오류 응답을 TransportFailureError로 바꾼다."""
        try:
            response = method(*args, **kwargs)
        except (ModbusException, OSError) as e:
            raise TransportFailureError(
                f"PLC request failed at {address}: {e}"
            ) from e

        if response.isError():
            raise TransportFailureError(
                f"PLC error response at {address}: {response}"
            )
        return response
