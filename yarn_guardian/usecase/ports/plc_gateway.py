"""PLC 게이트웨이 포트 인터페이스.

M(coil)/D(register) 주소 체계로 PLC를 읽고 쓰기 위한 추상 인터페이스.
"""

from abc import ABC, abstractmethod


class PlcGateway(ABC):
    """PLC 통신 인터페이스.

    주소는 "M500", "D500" 같은 문자열로 전달한다.
    """

    @abstractmethod
    def connect(self) -> bool:
        """PLC에 연결한다. 이미 연결되어 있으면 즉시 True."""

    @abstractmethod
    def disconnect(self) -> None:
        """PLC 연결을 끊는다. 연결되지 않았으면 아무 일도 하지 않는다."""

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """연결 여부."""

    @abstractmethod
    def read_coil(self, address: str) -> bool:
        """coil 값을 읽는다.

        Raises:
            NotConnectedError: 연결 전 호출 시.
            InvalidAddressError: 주소 형식이 잘못되었을 때.
            TransportFailureError: PLC가 오류 응답을 보냈을 때.
        """

    @abstractmethod
    def write_coil(self, address: str, value: bool) -> None:
        """coil 값을 쓴다."""

    @abstractmethod
    def read_register(self, address: str) -> int:
        """holding register를 signed 16-bit로 읽는다."""

    @abstractmethod
    def write_register(self, address: str, value: int) -> None:
        """holding register에 signed 16-bit 값을 쓴다."""

    @abstractmethod
    def read_register_float(self, address: str) -> float:
        """연속된 두 register를 float32로 읽는다."""

    @abstractmethod
    def write_register_float(self, address: str, value: float) -> None:
        """float32 값을 연속된 두 register에 쓴다."""

    @abstractmethod
    def get_spindle_position(self) -> float:
        """스핀들 위치 register 값을 읽는다."""
