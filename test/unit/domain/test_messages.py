"""Envelope 및 수신 메시지 변형 테스트."""

import pytest

from yarn_guardian.domain.entities.agv_status import AgvStatus
from yarn_guardian.domain.entities.envelope import (
    CODE_FAILED,
    CODE_SUCCESS,
    DispatchResult,
    Envelope,
)
from yarn_guardian.domain.entities.messages import (
    AckMessage,
    GetScheduleMessage,
    StartRepairTaskMessage,
    StatusReportMessage,
    parse_inbound_message,
)
from yarn_guardian.domain.exceptions import (
    MessageValidationError,
    UnknownServiceError,
)


def _envelope(service, content=None):
    return Envelope(module="agv", service=service, content=content, client_id=3)


class TestParseInboundMessage:
    def test_get_schedule(self):
        msg = parse_inbound_message(_envelope("get_schedule"))
        assert isinstance(msg, GetScheduleMessage)

    def test_status_report(self):
        msg = parse_inbound_message(_envelope("status_report"))
        assert isinstance(msg, StatusReportMessage)

    def test_start_repair_task(self):
        msg = parse_inbound_message(
            _envelope("start_repair_task", {"SideNumber": 3, "TaskId": "T1"})
        )
        assert isinstance(msg, StartRepairTaskMessage)
        assert msg.descriptor.side_number == 3
        assert msg.descriptor.task_id == "T1"
        assert msg.descriptor.client_id == 3
        assert msg.descriptor.module == "agv"

    def test_numeric_task_id_and_alias(self):
        msg = parse_inbound_message(
            _envelope(
                "start_repair_task", {"spinningMachineId": "5", "taskId": 17}
            )
        )
        assert msg.descriptor.side_number == 5
        assert msg.descriptor.task_id == "17"

    @pytest.mark.parametrize("service", ["start_ack", "status_ack"])
    def test_backend_ack(self, service):
        msg = parse_inbound_message(_envelope(service, {"type": "StartAck"}))
        assert isinstance(msg, AckMessage)
        assert msg.envelope.service == service

    def test_unknown_service(self):
        with pytest.raises(UnknownServiceError, match=r"Unexpected Service! \[fly\]"):
            parse_inbound_message(_envelope("fly"))

    @pytest.mark.parametrize(
        "content",
        [
            None,
            "text",
            {"TaskId": "T1"},
            {"SideNumber": "abc", "TaskId": "T1"},
            {"SideNumber": 0, "TaskId": "T1"},
        ],
    )
    def test_invalid_repair_content(self, content):
        with pytest.raises(MessageValidationError):
            parse_inbound_message(_envelope("start_repair_task", content))


class TestEnvelopeReplies:
    def test_success_keeps_routing(self):
        src = _envelope("start_repair_task")
        reply = src.success(content={"a": 1})
        assert reply.code == CODE_SUCCESS
        assert reply.client_id == 3
        assert reply.service == "start_repair_task"
        assert reply.content == {"a": 1}

    def test_failed(self):
        reply = _envelope("start_repair_task").failed("boom")
        assert reply.code == CODE_FAILED
        assert reply.msg == "boom"
        assert not reply.successful

    def test_dispatch_result_error(self):
        result = DispatchResult.error("bad")
        assert result.code == 1
        assert not result.ok
        assert DispatchResult().ok


class TestAgvStatus:
    def test_empty_is_unavailable(self):
        assert not AgvStatus().is_available

    def test_single_field_available(self):
        assert AgvStatus(battery_percent=50.0).is_available
