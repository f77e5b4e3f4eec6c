"""Yarn Guardian 유스케이스 레이어.

도메인 로직을 포트를 통해 조율하는 애플리케이션 서비스를 정의한다.
domain 레이어만 의존하며, infra 레이어 의존성은 없다.
"""

from yarn_guardian.usecase.message_dispatcher import MessageDispatcher
from yarn_guardian.usecase.repair_task_orchestrator import (
    RepairTaskOrchestrator,
)
from yarn_guardian.usecase.status_reporter import StatusReporter

__all__ = [
    "MessageDispatcher",
    "RepairTaskOrchestrator",
    "StatusReporter",
]
