"""AGV 게이트웨이 포트 인터페이스.

보수 로봇(AGV)에 주행 명령을 보내고 상태를 조회하기 위한 추상 인터페이스.
"""

from abc import ABC, abstractmethod

from yarn_guardian.domain.entities.agv_status import AgvStatus


class AgvGateway(ABC):
    """AGV 통신 인터페이스.

    전송 계층 오류는 예외 대신 False 또는 빈 AgvStatus로 흡수한다.
    """

    @abstractmethod
    def navigate_to_point(self, point_id: int) -> bool:
        """지정 포인트로 주행 명령을 전송한다.

        Args:
            point_id: 목표 포인트 ID.

        Returns:
            전송 성공 여부. 성공 시 도착 추적이 활성화된다.
        """

    @abstractmethod
    def query_detailed_status(self) -> AgvStatus:
        """AGV 상세 상태를 조회한다.

        Returns:
            디코딩된 상태. 실패 시 모든 필드가 None인 AgvStatus.
        """

    @abstractmethod
    def has_reached_target(self) -> bool:
        """마지막 주행 목표에 도착했는지 확인한다.

        도착이 확인되면 추적을 해제한다 (one-shot).
        """

    @abstractmethod
    def stop(self) -> None:
        """네트워크 자원을 해제한다."""
