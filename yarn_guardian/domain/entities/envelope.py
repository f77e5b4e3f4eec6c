"""메시지 버스 envelope 엔티티."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# 백엔드 규약: 성공 응답 code=1, 실패 응답 code=0
CODE_SUCCESS = 1
CODE_FAILED = 0


@dataclass
class Envelope:
    """백엔드와 주고받는 공통 메시지 봉투.

    Args:
        module: 대상 모듈 이름 (e.g. "agv").
        service: 서비스 이름 (e.g. "start_repair_task").
        content: 서비스별 페이로드.
        client_id: 송신 클라이언트 ID.
        code: 응답 결과 코드.
        msg: 응답 메시지.
    """

    module: str
    service: str
    content: Any = None
    client_id: int = 0
    code: int = CODE_SUCCESS
    msg: str = ''

    @property
    def successful(self) -> bool:
        return self.code == CODE_SUCCESS

    def success(self, content: Any = None, msg: str = 'success') -> Envelope:
        """같은 라우팅 정보로 성공 응답을 만든다."""
        return Envelope(
            module=self.module,
            service=self.service,
            content=content,
            client_id=self.client_id,
            code=CODE_SUCCESS,
            msg=msg,
        )

    def failed(self, msg: str = 'failed') -> Envelope:
        """같은 라우팅 정보로 실패 응답을 만든다."""
        return Envelope(
            module=self.module,
            service=self.service,
            client_id=self.client_id,
            code=CODE_FAILED,
            msg=msg,
        )


@dataclass
class DispatchResult:
    """수신 메시지 처리 결과.

    Args:
        code: 0 처리 완료, 1 오류.
        message: 결과 설명.
        replies: 처리 중 송신한 응답 envelope 목록.
    """

    code: int = 0
    message: str = ''
    replies: list[Envelope] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.code == 0

    @classmethod
    def error(cls, message: str) -> DispatchResult:
        return cls(code=1, message=message)
