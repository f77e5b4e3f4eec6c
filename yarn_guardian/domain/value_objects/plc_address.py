"""PLC 주소 값 객체."""

from dataclasses import dataclass

from yarn_guardian.domain.enums import PlcAddressKind
from yarn_guardian.domain.exceptions import InvalidAddressError

# M/D 영역 하드웨어 최대 주소
MAX_ADDRESS_INDEX = 7999


@dataclass(frozen=True)
class PlcAddress:
    """코일(M) 또는 레지스터(D) 주소.

    Args:
        kind: 주소 종류.
        index: 0 ~ 7999 범위의 주소 번호.

    Raises:
        InvalidAddressError: index가 범위를 벗어날 때.
    """

    kind: PlcAddressKind
    index: int

    def __post_init__(self) -> None:
        if not 0 <= self.index <= MAX_ADDRESS_INDEX:
            raise InvalidAddressError(
                f"PLC 주소 범위 초과: {self.kind.value}{self.index}"
            )

    @classmethod
    def coil(cls, index: int) -> 'PlcAddress':
        return cls(PlcAddressKind.COIL, index)

    @classmethod
    def register(cls, index: int) -> 'PlcAddress':
        return cls(PlcAddressKind.REGISTER, index)

    @property
    def is_coil(self) -> bool:
        return self.kind == PlcAddressKind.COIL

    def __str__(self) -> str:
        return f"{self.kind.value}{self.index}"
