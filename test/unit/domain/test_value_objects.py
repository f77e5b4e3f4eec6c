"""PlcAddress 값 객체 테스트."""

import pytest

from yarn_guardian.domain.enums import PlcAddressKind
from yarn_guardian.domain.exceptions import InvalidAddressError
from yarn_guardian.domain.value_objects.plc_address import (
    MAX_ADDRESS_INDEX,
    PlcAddress,
)


class TestPlcAddress:
    def test_coil_factory(self):
        addr = PlcAddress.coil(500)
        assert addr.kind == PlcAddressKind.COIL
        assert addr.is_coil
        assert str(addr) == "M500"

    def test_register_factory(self):
        addr = PlcAddress.register(12)
        assert not addr.is_coil
        assert str(addr) == "D12"

    def test_bounds(self):
        PlcAddress.coil(0)
        PlcAddress.register(MAX_ADDRESS_INDEX)

    @pytest.mark.parametrize("index", [-1, MAX_ADDRESS_INDEX + 1])
    def test_out_of_range_rejected(self, index):
        with pytest.raises(InvalidAddressError):
            PlcAddress.coil(index)

    def test_frozen(self):
        addr = PlcAddress.coil(1)
        with pytest.raises(AttributeError):
            addr.index = 2
