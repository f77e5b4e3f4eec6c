"""공통 테스트 fixture."""

import struct
from unittest.mock import MagicMock

import pytest

from yarn_guardian.domain.entities.agv_status import AgvStatus
from yarn_guardian.domain.entities.repair_task import RepairTaskDescriptor
from yarn_guardian.domain.enums import SortOrder
from yarn_guardian.usecase.ports.agv_gateway import AgvGateway
from yarn_guardian.usecase.ports.break_point_source import BreakPointSource
from yarn_guardian.usecase.ports.config_port import (
    PlcAddressMap,
    RepairConfig,
    StatusReportConfig,
)
from yarn_guardian.usecase.ports.message_channel import MessageChannel
from yarn_guardian.usecase.ports.plc_gateway import PlcGateway
from yarn_guardian.usecase.ports.spindle_cache import SpindleCache


class InMemorySpindleCache(SpindleCache):
    """테스트용 dict 기반 캐시."""

    def __init__(self):
        self.distances: dict[int, list[float]] = {}
        self.break_values: dict[int, list[int]] = {}
        self.switch_points: dict[int, int] = {}
        self.wait_points: dict[int, int] = {}

    def replace_distance_values(self, side_number, values):
        self.distances[side_number] = list(values)

    def get_distance_value(self, side_number, spindle):
        values = self.distances.get(side_number, [])
        if 1 <= spindle <= len(values):
            return values[spindle - 1]
        return None

    def replace_side_break_values(self, side_number, values):
        self.break_values[side_number] = list(values)

    def get_side_break_values(self, side_number):
        return list(self.break_values.get(side_number, []))

    def replace_switch_point_id(self, side_number, point_id):
        self.switch_points[side_number] = point_id

    def get_switch_point_id(self, side_number):
        return self.switch_points.get(side_number)

    def replace_wait_point_id(self, machine_id, point_id):
        self.wait_points[machine_id] = point_id

    def get_wait_point_id(self, machine_id):
        return self.wait_points.get(machine_id)


def build_reply(command, sequence, execution=0x00, payload=b''):
    """AGV 응답 프레임을 만든다."""
    header = struct.pack(
        '<16sBBHBBBBH2x',
        bytes(16), 0x01, 0x01, sequence, 0x10,
        command, execution, 0x00, len(payload),
    )
    return header + payload


def build_status_response(
    x=1.5,
    y=-2.25,
    last_point_id=42,
    velocity=0.8,
    operational_status=0x00,
    point_count=0,
    path_count=0,
    battery=0.75,
    length=None,
    sequence=0,
):
    """0xAF 상태 응답 버퍼를 만든다.

    length를 지정하면 그 길이로 자르고 길이 필드도 맞춘다.
    """
    task_length = 12 + 8 * point_count + 8 * path_count
    size = 84 + task_length + 20
    buf = bytearray(size)
    struct.pack_into('<ff', buf, 32, x, y)
    struct.pack_into('<I', buf, 44, last_point_id)
    struct.pack_into('<f', buf, 64, velocity)
    buf[77] = operational_status
    buf[92] = point_count
    buf[93] = path_count
    struct.pack_into('<f', buf, 84 + task_length, battery)
    if length is not None:
        buf = buf[:length]
    if len(buf) < 28:
        return bytes(buf)
    payload = bytes(buf[28:])
    return build_reply(0xAF, sequence, payload=payload)


@pytest.fixture
def status_response():
    return build_status_response


@pytest.fixture
def addresses():
    return PlcAddressMap()


@pytest.fixture
def repair_config():
    return RepairConfig(
        machine_id=2,
        odd_sort_order=SortOrder.ASC,
        even_sort_order=SortOrder.DESC,
        odd_trigger_rollers=True,
        even_trigger_rollers=False,
        switch_point_spindle=1,
        poll_interval_sec=0.0,
        max_poll_attempts=5,
    )


@pytest.fixture
def report_config():
    return StatusReportConfig(robot_id='YG-01', interval_ms=10)


@pytest.fixture
def mock_agv():
    agv = MagicMock(spec=AgvGateway)
    agv.navigate_to_point.return_value = True
    agv.has_reached_target.return_value = True
    agv.query_detailed_status.return_value = AgvStatus(
        x=1.0, y=2.0, velocity=0.5, battery_percent=80.0,
        operational_status=0, last_point_id=7,
    )
    return agv


@pytest.fixture
def mock_plc():
    plc = MagicMock(spec=PlcGateway)
    plc.connect.return_value = True
    plc.read_coil.return_value = True
    plc.get_spindle_position.return_value = 123.5
    return plc


@pytest.fixture
def mock_source():
    source = MagicMock(spec=BreakPointSource)
    source.get_switch_point_id_by_side.return_value = 101
    source.get_wait_point_id_by_machine.return_value = 900
    source.get_non_zero_break_values_by_side.return_value = []
    source.get_distance_values_by_side.return_value = []
    return source


@pytest.fixture
def memory_cache():
    return InMemorySpindleCache()


@pytest.fixture
def mock_channel():
    return MagicMock(spec=MessageChannel)


@pytest.fixture
def sample_descriptor():
    return RepairTaskDescriptor(
        side_number=3,
        task_id='T1',
        client_id=7,
        module='agv',
        service='start_repair_task',
    )
