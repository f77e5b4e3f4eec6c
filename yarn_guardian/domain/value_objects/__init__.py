"""Yarn Guardian 값 객체 (불변, 동등성 기반 비교)."""

from yarn_guardian.domain.value_objects.plc_address import (
    MAX_ADDRESS_INDEX,
    PlcAddress,
)

__all__ = [
    'MAX_ADDRESS_INDEX',
    'PlcAddress',
]
