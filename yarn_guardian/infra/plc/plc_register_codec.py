"""PLC 주소 파싱 및 레지스터 값 변환.

- "M500" / "D500" 형식의 심볼 주소를 Modbus 주소 번호로 변환
- float32 <-> 16비트 레지스터 2개 변환
- signed 16비트 변환

I/O는 없다.
"""

from __future__ import annotations

import re
import struct

from yarn_guardian.domain.enums import PlcAddressKind
from yarn_guardian.domain.exceptions import InvalidAddressError
from yarn_guardian.domain.value_objects.plc_address import (
    MAX_ADDRESS_INDEX,
    PlcAddress,
)

_ADDRESS_RE = re.compile(r'([MmDd])([0-9]+)')


def parse_address(text: str) -> PlcAddress:
    """'M'(coil) 또는 'D'(register) 접두사 주소를 파싱한다.

    Args:
        text: 주소 문자열 (e.g. "M500", "d12").

    Returns:
        PlcAddress.

    Raises:
        InvalidAddressError: 형식이 틀리거나 7999를 넘을 때.
    """
    match = _ADDRESS_RE.fullmatch(text or '')
    if match is None:
        raise InvalidAddressError(f"잘못된 PLC 주소: {text!r}")

    prefix, digits = match.groups()
    index = int(digits)
    if index > MAX_ADDRESS_INDEX:
        raise InvalidAddressError(
            f"PLC 주소 범위 초과 (최대 {MAX_ADDRESS_INDEX}): {text!r}"
        )
    return PlcAddress(PlcAddressKind(prefix.upper()), index)


def parse_coil_address(text: str) -> int:
    """'M' 주소를 coil 번호로 변환한다.

    Raises:
        InvalidAddressError: coil 주소가 아닐 때.
    """
    address = parse_address(text)
    if address.kind != PlcAddressKind.COIL:
        raise InvalidAddressError(f"coil 주소가 아닙니다 (M 필요): {text!r}")
    return address.index


def parse_register_address(text: str) -> int:
    """'D' 주소를 holding register 번호로 변환한다.

    Raises:
        InvalidAddressError: register 주소가 아닐 때.
    """
    address = parse_address(text)
    if address.kind != PlcAddressKind.REGISTER:
        raise InvalidAddressError(
            f"register 주소가 아닙니다 (D 필요): {text!r}"
        )
    return address.index


def decode_float(word_high: int, word_low: int) -> float:
    """레지스터 2개를 float32로 조립한다.

    바이트 순서: lo(word_low), hi(word_low), lo(word_high), hi(word_high)
    를 little-endian float로 해석한다.
    """
    raw = struct.pack('<HH', word_low & 0xFFFF, word_high & 0xFFFF)
    return struct.unpack('<f', raw)[0]


def encode_float(value: float) -> tuple[int, int]:
    """float32를 (word_high, word_low)로 분해한다. decode_float의 역."""
    word_low, word_high = struct.unpack('<HH', struct.pack('<f', value))
    return word_high, word_low


def decode_int16(word: int) -> int:
    """16비트 레지스터 값을 signed 정수로 해석한다."""
    return struct.unpack('<h', struct.pack('<H', word & 0xFFFF))[0]


def encode_int16(value: int) -> int:
    """signed 16비트 정수를 레지스터 값(0~65535)으로 변환한다.

    Raises:
        ValueError: -32768 ~ 32767 범위를 벗어날 때.
    """
    if not -0x8000 <= value <= 0x7FFF:
        raise ValueError(f"int16 범위 초과: {value}")
    return value & 0xFFFF
