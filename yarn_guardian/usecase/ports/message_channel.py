"""메시지 채널 포트 인터페이스.

백엔드와 envelope을 주고받는 송수신 채널을 추상화한다.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from yarn_guardian.domain.entities.envelope import Envelope

EnvelopeHandler = Callable[[Envelope], None]


class MessageChannel(ABC):
    """envelope 송수신 인터페이스."""

    @abstractmethod
    def send(self, envelope: Envelope) -> None:
        """envelope을 송신한다. 호출자를 블로킹하지 않는다."""

    @abstractmethod
    def set_handler(self, handler: EnvelopeHandler) -> None:
        """수신 envelope 콜백을 등록한다.

        Args:
            handler: 디코딩된 envelope을 받는 콜백.
        """
