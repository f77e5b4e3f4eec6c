"""AGV UDP 프레임 인코딩/디코딩.

28바이트 고정 헤더 + 데이터 영역으로 구성된 AGV 통신 프레임을
바이트 버퍼와 도메인 모델 사이에서 변환한다. I/O는 없다.

모든 다중 바이트 필드는 little-endian이다.
"""

from __future__ import annotations

import struct

from yarn_guardian.domain.entities.agv_status import (
    AgvCommandFrame,
    AgvFrameHeader,
    AgvStatus,
)
from yarn_guardian.domain.exceptions import MalformedResponseError

# -- 헤더 --

HEADER_LENGTH = 28
AUTH_CODE_LENGTH = 16

PROTOCOL_VERSION = 0x01
FRAME_KIND_REQUEST = 0x00
FRAME_KIND_RESPONSE = 0x01
SERVICE_CODE = 0x10

CMD_NAVIGATE = 0x16
CMD_QUERY_STATUS = 0xAF

SEQUENCE_MODULUS = 0x10000

# auth(16) version kind seq(u16) service cmd exec reserved len(u16) reserved(2)
_HEADER_STRUCT = struct.Struct('<16sBBHBBBBH2x')

# -- 0x16 네비게이션 데이터 영역 --

POINT_ID_FIELD_LENGTH = 8
# 동작(시작), 방식(경로점), 경로 지정 없음, 교통 관리 없음
_NAVIGATE_FLAGS = b'\x00\x00\x00\x00'

# -- 0xAF 상태 응답 오프셋 (버퍼 시작 기준) --

_LOCATION_OFFSET = HEADER_LENGTH + 0x04
_LOCATION_MIN_LENGTH = _LOCATION_OFFSET + 16
_RUNNING_OFFSET = HEADER_LENGTH + 0x24
_RUNNING_MIN_LENGTH = _RUNNING_OFFSET + 14
_RUNNING_STATUS_OFFSET = _RUNNING_OFFSET + 0x0D
_TASK_OFFSET = HEADER_LENGTH + 0x38
_TASK_HEADER_LENGTH = 12
_TASK_ENTRY_LENGTH = 8


def _normalize_auth_code(auth_code: bytes) -> bytes:
    if len(auth_code) != AUTH_CODE_LENGTH:
        raise ValueError(
            f"auth_code는 {AUTH_CODE_LENGTH}바이트여야 합니다: {len(auth_code)}"
        )
    return auth_code


def encode_header(
    command_code: int,
    sequence: int,
    payload_length: int,
    auth_code: bytes = bytes(AUTH_CODE_LENGTH),
) -> bytes:
    """요청 프레임 헤더를 만든다.

    Args:
        command_code: 명령 코드.
        sequence: 시퀀스 번호 (16비트로 잘린다).
        payload_length: 데이터 영역 바이트 수.
        auth_code: 16바이트 인증 코드.

    Returns:
        28바이트 헤더.
    """
    return _HEADER_STRUCT.pack(
        _normalize_auth_code(auth_code),
        PROTOCOL_VERSION,
        FRAME_KIND_REQUEST,
        sequence % SEQUENCE_MODULUS,
        SERVICE_CODE,
        command_code,
        0x00,
        0x00,
        payload_length,
    )


def encode_navigate(
    target_point_id: int,
    sequence: int,
    auth_code: bytes = bytes(AUTH_CODE_LENGTH),
) -> bytes:
    """0x16 경로점 네비게이션 명령을 만든다.

    포인트 ID는 10진 ASCII 문자열로 8바이트 필드에 기록한다.
    짧으면 0으로 채우고 길면 잘라낸다.

    Args:
        target_point_id: 목표 포인트 ID (u32).
        sequence: 시퀀스 번호.
        auth_code: 16바이트 인증 코드.

    Returns:
        40바이트 프레임.
    """
    if target_point_id < 0:
        raise ValueError(f"포인트 ID는 음수일 수 없습니다: {target_point_id}")

    ascii_id = str(target_point_id).encode('ascii')[:POINT_ID_FIELD_LENGTH]
    payload = _NAVIGATE_FLAGS + ascii_id.ljust(POINT_ID_FIELD_LENGTH, b'\x00')
    header = encode_header(CMD_NAVIGATE, sequence, len(payload), auth_code)
    return header + payload


def encode_status_query(
    sequence: int, auth_code: bytes = bytes(AUTH_CODE_LENGTH)
) -> bytes:
    """0xAF 상태 조회 명령을 만든다 (데이터 영역 없음)."""
    return encode_header(CMD_QUERY_STATUS, sequence, 0, auth_code)


def decode_frame(data: bytes) -> AgvCommandFrame:
    """버퍼를 헤더와 데이터 영역으로 분리한다.

    Raises:
        MalformedResponseError: 헤더보다 짧거나 길이 필드가 버퍼를 넘을 때.
    """
    if len(data) < HEADER_LENGTH:
        raise MalformedResponseError(
            f"AGV frame too short: {len(data)} bytes"
        )

    (
        auth_code,
        version,
        kind,
        sequence,
        service,
        command,
        execution,
        _reserved,
        payload_length,
    ) = _HEADER_STRUCT.unpack_from(data, 0)

    end = HEADER_LENGTH + payload_length
    if end > len(data):
        raise MalformedResponseError(
            f"AGV payload length {payload_length} exceeds buffer "
            f"({len(data) - HEADER_LENGTH} bytes)"
        )

    header = AgvFrameHeader(
        auth_code=auth_code,
        protocol_version=version,
        frame_kind=kind,
        sequence=sequence,
        service_code=service,
        command_code=command,
        execution_code=execution,
        payload_length=payload_length,
    )
    return AgvCommandFrame(header=header, payload=bytes(data[HEADER_LENGTH:end]))


def parse_navigate_target(payload: bytes) -> int:
    """0x16 데이터 영역에서 목표 포인트 ID를 읽는다.

    Raises:
        MalformedResponseError: 필드가 짧거나 숫자가 아닐 때.
    """
    start = len(_NAVIGATE_FLAGS)
    field = payload[start:start + POINT_ID_FIELD_LENGTH]
    if len(field) != POINT_ID_FIELD_LENGTH:
        raise MalformedResponseError(
            f"navigate payload too short: {len(payload)} bytes"
        )

    digits = field.rstrip(b'\x00')
    if not digits.isdigit():
        raise MalformedResponseError(f"invalid point id field: {field!r}")
    return int(digits.decode('ascii'))


def decode_status(data: bytes) -> AgvStatus:
    """0xAF 상태 응답을 AgvStatus로 변환한다.

    각 블록은 독립적으로 길이를 검사하며, 짧은 버퍼는
    해당 블록 필드만 None으로 남긴다.

    Args:
        data: 수신 버퍼 전체 (헤더 포함).

    Returns:
        디코딩된 상태.

    Raises:
        MalformedResponseError: 버퍼가 28바이트 헤더보다 짧을 때.
    """
    if len(data) < HEADER_LENGTH:
        raise MalformedResponseError(
            f"AGV status response too short: {len(data)} bytes"
        )

    status = AgvStatus()
    size = len(data)

    if size >= _LOCATION_MIN_LENGTH:
        status.x, status.y = struct.unpack_from('<ff', data, _LOCATION_OFFSET)
        (status.last_point_id,) = struct.unpack_from(
            '<I', data, _LOCATION_OFFSET + 0x0C
        )

    if size >= _RUNNING_MIN_LENGTH:
        (status.velocity,) = struct.unpack_from('<f', data, _RUNNING_OFFSET)
        status.operational_status = data[_RUNNING_STATUS_OFFSET]

    # 배터리 블록 위치는 가변 길이 작업 블록 길이에 따라 정해진다
    task_length = 0
    if size >= _TASK_OFFSET + _TASK_HEADER_LENGTH:
        point_count = data[_TASK_OFFSET + 8]
        path_count = data[_TASK_OFFSET + 9]
        task_length = (
            _TASK_HEADER_LENGTH
            + _TASK_ENTRY_LENGTH * point_count
            + _TASK_ENTRY_LENGTH * path_count
        )

    battery_offset = _TASK_OFFSET + task_length
    if task_length > 0 and size >= battery_offset + 4:
        (soc,) = struct.unpack_from('<f', data, battery_offset)
        status.battery_percent = soc * 100.0

    return status
