"""Yarn Guardian 도메인 예외 정의."""


class DomainError(Exception):
    """도메인 계층 기본 예외."""


class InvalidAddressError(DomainError):
    """PLC 심볼 주소 형식이 잘못되었을 때."""


class NotConnectedError(DomainError):
    """PLC 연결 전에 코일/레지스터 접근 시."""


class MalformedResponseError(DomainError):
    """AGV 응답 버퍼가 고정 헤더보다 짧거나 손상되었을 때."""


class TransportFailureError(DomainError):
    """네트워크 송수신 또는 프로토콜 오류 응답 시."""


class PollTimeoutError(DomainError):
    """폴링 대기 조건이 최대 시도 횟수 안에 충족되지 않았을 때."""


class WorkflowAbortedError(DomainError):
    """보수 워크플로 실행 중 복구 불가능한 오류 발생 시."""


class UnknownServiceError(DomainError):
    """수신 메시지의 service 이름을 알 수 없을 때."""


class MessageValidationError(DomainError):
    """수신 메시지 content 스키마 검증 실패 시."""
