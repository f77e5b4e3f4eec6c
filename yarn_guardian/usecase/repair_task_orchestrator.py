"""단사 보수 워크플로 유스케이스.

백엔드가 지시한 면(side)에 대해 AGV 주행, PLC 신호, 단사 데이터 처리를
순서대로 실행한다.

흐름:
    스위치 포인트 주행 → 도착 대기 → 스위치 도착 신호/피드백
    → 면 N 단사 처리 → 턴백 신호/피드백 → 면 N+1 단사 처리
    → 스위치 포인트 위치 기록 → 대기 포인트 주행 → 도착 대기
"""

from __future__ import annotations

from collections.abc import Callable
import logging
import threading
import time

from yarn_guardian.domain.entities.repair_task import (
    RepairReport,
    RepairTaskDescriptor,
    sort_break_points,
)
from yarn_guardian.domain.enums import WorkflowState
from yarn_guardian.domain.exceptions import (
    PollTimeoutError,
    TransportFailureError,
    WorkflowAbortedError,
)
from yarn_guardian.usecase.ports.agv_gateway import AgvGateway
from yarn_guardian.usecase.ports.break_point_source import BreakPointSource
from yarn_guardian.usecase.ports.config_port import (
    PlcAddressMap,
    RepairConfig,
)
from yarn_guardian.usecase.ports.plc_gateway import PlcGateway
from yarn_guardian.usecase.ports.spindle_cache import SpindleCache

logger = logging.getLogger(__name__)


class RepairTaskOrchestrator:
    """단사 보수 워크플로 실행기.

    한 번에 하나의 워크플로만 실행한다. 진행 중 상태(현재 면번호,
    남은 단사 목록, 워크플로 상태)만 소유하며 통신 자원은 주입받는다.

    Args:
        agv_gateway: AGV 통신 포트.
        plc_gateway: PLC 통신 포트.
        break_point_source: 단사 데이터 소스.
        spindle_cache: 면별 스냅샷 캐시.
        repair_config: 워크플로 설정.
        addresses: PLC 심볼 주소 표.
        sleep: 폴링 대기 함수 (테스트 주입용).
    """

    def __init__(
        self,
        agv_gateway: AgvGateway,
        plc_gateway: PlcGateway,
        break_point_source: BreakPointSource,
        spindle_cache: SpindleCache,
        repair_config: RepairConfig,
        addresses: PlcAddressMap,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._agv = agv_gateway
        self._plc = plc_gateway
        self._source = break_point_source
        self._cache = spindle_cache
        self._config = repair_config
        self._addresses = addresses
        self._sleep = sleep

        self._run_lock = threading.Lock()
        self._state = WorkflowState.IDLE
        self._current_side: int | None = None
        self._remaining: list[int] = []

    @property
    def state(self) -> WorkflowState:
        """현재 워크플로 상태."""
        return self._state

    @property
    def current_side_number(self) -> int | None:
        """처리 중인 면번호 (없으면 None)."""
        return self._current_side

    @property
    def remaining_break_points(self) -> list[int]:
        """현재 면에서 아직 처리하지 않은 단사 스핀들."""
        return list(self._remaining)

    # -- 단사 데이터 --

    def load_break_points(self, side_number: int) -> list[int]:
        """면의 단사 목록을 불러와 캐시를 교체하고 정렬해 반환한다.

        Args:
            side_number: 면번호.

        Returns:
            홀짝 설정에 따라 정렬된 단사 스핀들 목록 (0 제외).
        """
        values = [
            v for v in self._source.get_non_zero_break_values_by_side(
                side_number
            )
            if v != 0
        ]
        self._cache.replace_side_break_values(side_number, values)

        distances = self._source.get_distance_values_by_side(side_number)
        self._cache.replace_distance_values(side_number, distances)

        ordered = sort_break_points(
            values, self._config.sort_order_for(side_number)
        )
        logger.info(
            'Side %d break points loaded: %s (%d distances)',
            side_number, ordered, len(distances),
        )
        return ordered

    def process_all_break_points(
        self, side_number: int
    ) -> tuple[list[int], list[int]]:
        """면의 모든 단사를 앞에서부터 하나씩 처리한다.

        Args:
            side_number: 면번호.

        Returns:
            (보수 완료 스핀들, 거리값 누락으로 건너뛴 스핀들).
        """
        self._state = WorkflowState.PROCESSING_SIDE
        self._current_side = side_number
        self._remaining = self.load_break_points(side_number)

        repaired: list[int] = []
        missed: list[int] = []
        if not self._remaining:
            logger.info('Side %d has no break points, skipped', side_number)
            return repaired, missed

        while self._remaining:
            spindle = self._remaining.pop(0)
            if self.process_single_break_point(side_number, spindle):
                repaired.append(spindle)
            else:
                missed.append(spindle)

        logger.info(
            'Side %d done: repaired=%s, missed=%s',
            side_number, repaired, missed,
        )
        return repaired, missed

    def process_single_break_point(
        self, side_number: int, spindle: int
    ) -> bool:
        """스핀들 하나를 보수한다.

        위치 이동 후 롤러를 트리거하고 보수 완료 coil을 기다린다.

        Returns:
            보수 완료 시 True, 캐시에 거리값이 없으면 False.

        Raises:
            PollTimeoutError: 도착/완료 coil이 제한 시간 안에 켜지지 않을 때.
        """
        if not self._move_to_spindle(side_number, spindle):
            return False

        self._plc.write_coil(
            self._addresses.trigger_rollers,
            self._config.trigger_rollers_for(side_number),
        )
        self._poll_coil(
            self._addresses.repair_done,
            f'repair done (side={side_number}, spindle={spindle})',
        )
        logger.info('Spindle repaired: side=%d, spindle=%d', side_number, spindle)
        return True

    def write_switch_point_value(self, side_number: int, spindle: int) -> bool:
        """스핀들 위치까지만 이동한다 (롤러/완료 단계 없음).

        Returns:
            이동 완료 시 True, 캐시에 거리값이 없으면 False.
        """
        return self._move_to_spindle(side_number, spindle)

    # -- 전체 워크플로 --

    def execute_repair_task_workflow(
        self, descriptor: RepairTaskDescriptor
    ) -> RepairReport:
        """보수 작업 전체를 실행한다.

        Args:
            descriptor: 백엔드가 지시한 작업.

        Returns:
            처리 결과.

        Raises:
            WorkflowAbortedError: 어느 단계에서든 오류가 나면 원인을 연결해
                다시 던진다. 이미 수행된 물리 동작은 되돌리지 않는다.
        """
        descriptor.validate()
        with self._run_lock:
            report = RepairReport(task_id=descriptor.task_id)
            logger.info(
                'Repair workflow started: task=%s, side=%d (machine %d, %s)',
                descriptor.task_id,
                descriptor.side_number,
                descriptor.machine_number,
                descriptor.device_side.value,
            )
            try:
                self._run_workflow(descriptor, report)
            except WorkflowAbortedError:
                self._state = WorkflowState.FAILED
                logger.exception(
                    'Repair workflow aborted: task=%s', descriptor.task_id
                )
                raise
            except Exception as e:
                failed_in = self._state
                self._state = WorkflowState.FAILED
                logger.exception(
                    'Repair workflow failed: task=%s', descriptor.task_id
                )
                raise WorkflowAbortedError(
                    f"Task {descriptor.task_id} aborted in "
                    f"{failed_in.value}: {e}"
                ) from e
            finally:
                self._current_side = None
                self._remaining = []

            self._state = WorkflowState.IDLE
            logger.info(
                'Repair workflow completed: task=%s, repaired=%d, missed=%d',
                descriptor.task_id, len(report.repaired), len(report.missed),
            )
            return report

    def _run_workflow(
        self, descriptor: RepairTaskDescriptor, report: RepairReport
    ) -> None:
        side = descriptor.side_number
        next_side = descriptor.next_side_number

        if not self._plc.connect():
            raise TransportFailureError('PLC connection unavailable')

        # 스위치 포인트 접근
        self._enter(WorkflowState.NAVIGATING_TO_SWITCH_POINT)
        switch_point = self._source.get_switch_point_id_by_side(side)
        if switch_point is None:
            raise WorkflowAbortedError(
                f"Switch point not found for side {side}"
            )
        self._cache.replace_switch_point_id(side, switch_point)
        self._navigate(switch_point)
        self._poll_arrival(f'switch point {switch_point}')

        self._enter(WorkflowState.AWAITING_SWITCH_POINT_FEEDBACK)
        self._plc.write_coil(self._addresses.switch_point_arrived, True)
        self._poll_coil(
            self._addresses.switch_point_feedback, 'switch point feedback'
        )

        self._process_side(side, report)

        # 턴백 후 반대 면
        self._enter(WorkflowState.TURNING_BACK)
        self._plc.write_coil(self._addresses.turn_back, True)
        self._enter(WorkflowState.AWAITING_TURN_BACK_FEEDBACK)
        self._poll_coil(
            self._addresses.turn_back_feedback, 'turn back feedback'
        )

        self._process_side(next_side, report)

        self._enter(WorkflowState.WRITING_WAIT_SWITCH_VALUE)
        spindle = self._config.switch_point_spindle
        if not self.write_switch_point_value(next_side, spindle):
            logger.warning(
                'Switch point value not written: side=%d, spindle=%d',
                next_side, spindle,
            )

        # 대기 포인트 복귀
        self._enter(WorkflowState.NAVIGATING_TO_WAIT_POINT)
        wait_point = self._source.get_wait_point_id_by_machine(
            self._config.machine_id
        )
        if wait_point is None:
            raise WorkflowAbortedError(
                f"Wait point not found for machine {self._config.machine_id}"
            )
        self._cache.replace_wait_point_id(self._config.machine_id, wait_point)
        self._navigate(wait_point)

        self._enter(WorkflowState.AWAITING_WAIT_POINT_ARRIVAL)
        self._poll_arrival(f'wait point {wait_point}')

    def _process_side(self, side_number: int, report: RepairReport) -> None:
        report.side_numbers.append(side_number)
        repaired, missed = self.process_all_break_points(side_number)
        report.repaired.extend((side_number, s) for s in repaired)
        report.missed.extend((side_number, s) for s in missed)

    # -- 내부 단계 --

    def _enter(self, state: WorkflowState) -> None:
        self._state = state
        logger.debug('Workflow state -> %s', state.value)

    def _move_to_spindle(self, side_number: int, spindle: int) -> bool:
        """거리값 기록 → 이동 트리거 → 도착 coil 대기."""
        distance = self._cache.get_distance_value(side_number, spindle)
        if distance is None:
            logger.warning(
                'No cached distance for side=%d, spindle=%d; spindle skipped',
                side_number, spindle,
            )
            return False

        self._plc.write_register_float(
            self._addresses.spindle_position, distance
        )
        self._plc.write_coil(self._addresses.move_trigger, True)
        self._poll_coil(
            self._addresses.spindle_arrival,
            f'spindle arrival (side={side_number}, spindle={spindle})',
        )
        return True

    def _navigate(self, point_id: int) -> None:
        if not self._agv.navigate_to_point(point_id):
            raise TransportFailureError(
                f"AGV navigate command to point {point_id} failed"
            )

    def _poll_coil(self, address: str, description: str) -> None:
        self._poll(lambda: self._plc.read_coil(address), description)

    def _poll_arrival(self, description: str) -> None:
        self._poll(self._agv.has_reached_target, f'AGV arrival at {description}')

    def _poll(self, condition: Callable[[], bool], description: str) -> None:
        """condition이 True가 될 때까지 poll_interval_sec 간격으로 확인한다.

        Raises:
            PollTimeoutError: max_poll_attempts 회 안에 충족되지 않을 때.
        """
        max_attempts = self._config.max_poll_attempts
        attempts = 0
        while not condition():
            attempts += 1
            if max_attempts and attempts >= max_attempts:
                raise PollTimeoutError(
                    f"Timed out waiting for {description} "
                    f"after {attempts} attempts"
                )
            self._sleep(self._config.poll_interval_sec)
        logger.debug('Condition met: %s', description)
