"""UDP 기반 AgvGateway 구현체.

AGV와 요청/응답 1:1 UDP 통신을 수행한다.
소켓, 시퀀스 번호, 도착 추적 상태는 이 클래스만 소유하며
모든 변경은 하나의 lock 아래에서 일어난다.
"""

from __future__ import annotations

import logging
import socket
import threading
import time

from yarn_guardian.domain.entities.agv_status import AgvStatus
from yarn_guardian.domain.enums import AgvOperationalStatus
from yarn_guardian.domain.exceptions import MalformedResponseError
from yarn_guardian.infra.agv.agv_link_codec import (
    CMD_NAVIGATE,
    CMD_QUERY_STATUS,
    SEQUENCE_MODULUS,
    decode_frame,
    decode_status,
    encode_navigate,
    encode_status_query,
)
from yarn_guardian.usecase.ports.agv_gateway import AgvGateway
from yarn_guardian.usecase.ports.config_port import AgvConfig

logger = logging.getLogger(__name__)

_RECV_BUFFER_SIZE = 4096


class UdpAgvTransport(AgvGateway):
    """AgvGateway의 UDP 구현체.

    configure() 없이 송신하면 설정값(기본 192.168.100.178:17804)으로
    자동 구성한다.

    Args:
        config: AGV 접속 설정. None이면 기본값 사용.
    """

    def __init__(self, config: AgvConfig | None = None) -> None:
        self._config = config or AgvConfig()
        self._auth_code = bytes.fromhex(self._config.auth_code)
        self._reply_timeout = self._config.reply_timeout_sec
        self._lock = threading.Lock()
        self._socket: socket.socket | None = None
        self._endpoint: tuple[str, int] | None = None
        self._sequence = 0
        self._target_point_id: int | None = None
        self._tracking_arrival = False

    @property
    def endpoint(self) -> tuple[str, int] | None:
        """현재 구성된 (ip, port)."""
        return self._endpoint

    @property
    def is_tracking_arrival(self) -> bool:
        """도착 추적 활성 여부."""
        with self._lock:
            return self._tracking_arrival

    def configure(self, ip: str | None = None, port: int | None = None) -> None:
        """UDP 소켓을 (재)생성한다.

        Args:
            ip: AGV IP. None이면 설정값.
            port: AGV 포트. None이면 설정값.
        """
        with self._lock:
            self._open_socket(ip or self._config.ip, port or self._config.port)

    def navigate_to_point(self, point_id: int) -> bool:
        """0x16 명령으로 지정 포인트까지 주행을 요청한다.

        응답을 기다려 소켓에 남지 않게 한다. 응답이 없으면 송신 성공으로
        보고, 실행 코드가 0이 아니면 거부로 본다.
        """
        with self._lock:
            self._ensure_configured()
            sequence = self._next_sequence()
            packet = encode_navigate(point_id, sequence, self._auth_code)
            if not self._send(packet):
                self._tracking_arrival = False
                logger.error('AGV navigate send failed: point=%d', point_id)
                return False

            reply = self._receive_reply(CMD_NAVIGATE, sequence)
            if reply is None:
                logger.warning(
                    'AGV navigate reply missing: point=%d', point_id
                )
            else:
                execution = decode_frame(reply).header.execution_code
                if execution != 0x00:
                    self._tracking_arrival = False
                    logger.error(
                        'AGV navigate rejected: point=%d, exec=0x%02X',
                        point_id, execution,
                    )
                    return False

            self._target_point_id = point_id
            self._tracking_arrival = True
            logger.info('AGV navigate sent: point=%d', point_id)
            return True

    def query_detailed_status(self) -> AgvStatus:
        """0xAF 명령으로 상태를 조회한다. 실패 시 빈 AgvStatus."""
        with self._lock:
            return self._query_status()

    def has_reached_target(self) -> bool:
        """대기 상태이고 마지막 통과점이 목표이면 True (one-shot)."""
        with self._lock:
            if not self._tracking_arrival:
                return False

            status = self._query_status()
            if (
                status.operational_status == AgvOperationalStatus.IDLE
                and status.last_point_id == self._target_point_id
            ):
                self._tracking_arrival = False
                logger.info(
                    'AGV reached target point %d', self._target_point_id
                )
                return True
            return False

    def stop(self) -> None:
        """소켓을 닫고 도착 추적을 해제한다."""
        with self._lock:
            self._close_socket()
            self._tracking_arrival = False
        logger.info('AGV transport stopped')

    # -- lock 보유 상태에서만 호출 --

    def _open_socket(self, ip: str, port: int) -> None:
        self._close_socket()
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.settimeout(self._reply_timeout)
        self._socket = sock
        self._endpoint = (ip, port)
        logger.info('AGV transport configured: %s:%d', ip, port)

    def _close_socket(self) -> None:
        if self._socket is not None:
            try:
                self._socket.close()
            except OSError:
                logger.warning('AGV socket close failed', exc_info=True)
            self._socket = None

    def _ensure_configured(self) -> None:
        if self._socket is None:
            self._open_socket(self._config.ip, self._config.port)

    def _next_sequence(self) -> int:
        sequence = self._sequence
        self._sequence = (sequence + 1) % SEQUENCE_MODULUS
        return sequence

    def _send(self, packet: bytes) -> bool:
        try:
            self._socket.sendto(packet, self._endpoint)
        except OSError as e:
            logger.error('AGV send error to %s: %s', self._endpoint, e)
            return False
        return True

    def _receive_reply(self, command_code: int, sequence: int) -> bytes | None:
        """명령 코드와 시퀀스가 요청과 같은 응답을 기다린다.

        늦게 도착한 이전 응답이나 손상된 datagram은 버리고
        reply_timeout_sec 안에서 계속 기다린다.

        Returns:
            응답 버퍼 전체. 시간 초과나 소켓 오류 시 None.
        """
        deadline = time.monotonic() + self._reply_timeout
        try:
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise TimeoutError
                self._socket.settimeout(remaining)
                data, _ = self._socket.recvfrom(_RECV_BUFFER_SIZE)
                try:
                    header = decode_frame(data).header
                except MalformedResponseError as e:
                    logger.warning('AGV reply dropped: %s', e)
                    continue
                if (
                    header.command_code == command_code
                    and header.sequence == sequence
                ):
                    return data
                logger.debug(
                    'AGV stale reply discarded: cmd=0x%02X seq=%d '
                    '(waiting for cmd=0x%02X seq=%d)',
                    header.command_code, header.sequence,
                    command_code, sequence,
                )
        except TimeoutError:
            logger.warning(
                'AGV reply timeout: cmd=0x%02X seq=%d (%.1fs)',
                command_code, sequence, self._reply_timeout,
            )
        except OSError as e:
            logger.error('AGV receive error: %s', e)
        return None

    def _query_status(self) -> AgvStatus:
        self._ensure_configured()
        sequence = self._next_sequence()
        packet = encode_status_query(sequence, self._auth_code)
        if not self._send(packet):
            return AgvStatus()

        data = self._receive_reply(CMD_QUERY_STATUS, sequence)
        if data is None:
            return AgvStatus()

        try:
            return decode_status(data)
        except MalformedResponseError as e:
            logger.warning('AGV status decode failed: %s', e)
            return AgvStatus()
