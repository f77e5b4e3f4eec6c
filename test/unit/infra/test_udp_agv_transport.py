"""UdpAgvTransport 유닛 테스트."""

import socket
from unittest.mock import MagicMock, call, patch

import pytest

from yarn_guardian.infra.agv.agv_link_codec import (
    CMD_NAVIGATE,
    CMD_QUERY_STATUS,
    decode_frame,
    encode_header,
)
from yarn_guardian.infra.agv.udp_agv_transport import UdpAgvTransport
from yarn_guardian.usecase.ports.config_port import AgvConfig

AGV_ADDR = ('10.0.0.5', 17804)


def _queue_replies(sock, *datagrams):
    """recvfrom이 datagram을 차례로 돌려주고, 다 쓰면 timeout을 낸다."""
    pending = list(datagrams)

    def recvfrom(size):
        if not pending:
            raise socket.timeout()
        return pending.pop(0), AGV_ADDR

    sock.recvfrom.side_effect = recvfrom


def _nav_ack(sequence, execution=0x00):
    frame = bytearray(encode_header(CMD_NAVIGATE, sequence, 0))
    frame[0x16] = execution
    return bytes(frame)


@pytest.fixture
def mock_socket():
    with patch(
        'yarn_guardian.infra.agv.udp_agv_transport.socket.socket'
    ) as MockSocket:
        sock = MagicMock()
        _queue_replies(sock)
        MockSocket.return_value = sock
        yield sock


@pytest.fixture
def transport(mock_socket):
    t = UdpAgvTransport(AgvConfig(ip='10.0.0.5', port=17804))
    yield t
    t.stop()


def _sent_frames(sock):
    return [decode_frame(c.args[0]) for c in sock.sendto.call_args_list]


class TestConfigure:
    def test_auto_configures_with_defaults(self, mock_socket):
        t = UdpAgvTransport()
        t.navigate_to_point(1)
        assert t.endpoint == ('192.168.100.178', 17804)
        assert mock_socket.settimeout.call_args_list[0] == call(3.0)

    def test_configure_recreates_socket(self, transport, mock_socket):
        transport.configure('10.0.0.9', 2000)
        transport.configure('10.0.0.9', 2001)
        assert transport.endpoint == ('10.0.0.9', 2001)
        mock_socket.close.assert_called_once()


class TestNavigate:
    def test_sends_to_endpoint_and_arms(self, transport, mock_socket):
        _queue_replies(mock_socket, _nav_ack(0))

        assert transport.navigate_to_point(42) is True

        packet, endpoint = mock_socket.sendto.call_args.args
        assert endpoint == AGV_ADDR
        assert len(packet) == 40
        assert transport.is_tracking_arrival

    def test_missing_reply_still_arms(self, transport):
        assert transport.navigate_to_point(42) is True
        assert transport.is_tracking_arrival

    def test_rejected_by_agv(self, transport, mock_socket):
        _queue_replies(mock_socket, _nav_ack(0, execution=0x01))

        assert transport.navigate_to_point(42) is False
        assert not transport.is_tracking_arrival

    def test_send_failure_disarms(self, transport, mock_socket):
        transport.navigate_to_point(1)
        mock_socket.sendto.side_effect = OSError('unreachable')

        assert transport.navigate_to_point(2) is False
        assert not transport.is_tracking_arrival

    def test_sequence_increments_from_zero(self, transport, mock_socket):
        transport.navigate_to_point(1)
        transport.navigate_to_point(2)
        transport.navigate_to_point(3)

        seqs = [f.header.sequence for f in _sent_frames(mock_socket)]
        assert seqs == [0, 1, 2]

    def test_sequence_wraps_at_16_bits(self, transport, mock_socket):
        transport._sequence = 0xFFFF
        transport.navigate_to_point(1)
        transport.navigate_to_point(2)

        seqs = [f.header.sequence for f in _sent_frames(mock_socket)]
        assert seqs == [0xFFFF, 0]


class TestQueryStatus:
    def test_decodes_reply(self, transport, mock_socket, status_response):
        _queue_replies(mock_socket, status_response(sequence=0))

        status = transport.query_detailed_status()
        assert status.last_point_id == 42
        assert status.battery_percent == pytest.approx(75.0)

    def test_navigate_reply_consumed_before_status(
        self, transport, mock_socket, status_response
    ):
        _queue_replies(
            mock_socket,
            _nav_ack(0),
            status_response(sequence=1, last_point_id=42),
        )

        transport.navigate_to_point(42)
        assert transport.query_detailed_status().last_point_id == 42

    def test_late_navigate_reply_discarded(
        self, transport, mock_socket, status_response
    ):
        # navigate 응답이 시간 초과 뒤에 도착해 상태 응답 앞에 놓인 경우
        transport.navigate_to_point(42)
        _queue_replies(
            mock_socket,
            _nav_ack(0),
            status_response(sequence=1, last_point_id=42),
        )

        assert transport.query_detailed_status().last_point_id == 42

    def test_stale_status_sequence_discarded(
        self, transport, mock_socket, status_response
    ):
        transport._sequence = 5
        _queue_replies(
            mock_socket,
            status_response(sequence=4, last_point_id=1),
            status_response(sequence=5, last_point_id=2),
        )

        assert transport.query_detailed_status().last_point_id == 2

    def test_only_mismatched_replies_returns_empty(
        self, transport, mock_socket, status_response
    ):
        _queue_replies(mock_socket, status_response(sequence=9))
        assert not transport.query_detailed_status().is_available

    def test_timeout_returns_empty(self, transport):
        assert not transport.query_detailed_status().is_available

    def test_socket_error_returns_empty(self, transport, mock_socket):
        mock_socket.recvfrom.side_effect = OSError('reset')
        assert not transport.query_detailed_status().is_available

    def test_short_reply_returns_empty(self, transport, mock_socket):
        _queue_replies(mock_socket, b'\x00' * 10)
        assert not transport.query_detailed_status().is_available

    def test_send_failure_returns_empty(self, transport, mock_socket):
        mock_socket.sendto.side_effect = OSError('down')
        assert not transport.query_detailed_status().is_available
        mock_socket.recvfrom.assert_not_called()

    def test_reply_command_checked(self, transport, mock_socket):
        frame = encode_header(CMD_QUERY_STATUS, 0, 0)
        _queue_replies(mock_socket, _nav_ack(0), frame)

        # 헤더만 있는 0xAF 응답: 일치하므로 빈 상태로 디코딩된다
        assert not transport.query_detailed_status().is_available
        assert mock_socket.recvfrom.call_count == 2


class TestHasReachedTarget:
    def test_false_without_navigation(self, transport, mock_socket):
        assert transport.has_reached_target() is False
        mock_socket.sendto.assert_not_called()

    def test_one_shot(self, transport, mock_socket, status_response):
        _queue_replies(
            mock_socket,
            _nav_ack(0),
            status_response(
                sequence=1, last_point_id=42, operational_status=0x00
            ),
        )

        transport.navigate_to_point(42)
        assert transport.has_reached_target() is True
        assert transport.has_reached_target() is False

    def test_not_idle(self, transport, mock_socket, status_response):
        _queue_replies(
            mock_socket,
            _nav_ack(0),
            status_response(
                sequence=1, last_point_id=42, operational_status=0x02
            ),
        )

        transport.navigate_to_point(42)
        assert transport.has_reached_target() is False
        assert transport.is_tracking_arrival

    def test_other_point(self, transport, mock_socket, status_response):
        _queue_replies(
            mock_socket,
            _nav_ack(0),
            status_response(
                sequence=1, last_point_id=41, operational_status=0x00
            ),
        )

        transport.navigate_to_point(42)
        assert transport.has_reached_target() is False

    def test_status_unavailable(self, transport):
        transport.navigate_to_point(42)
        assert transport.has_reached_target() is False
        assert transport.is_tracking_arrival


class TestStop:
    def test_closes_socket(self, transport, mock_socket):
        transport.navigate_to_point(1)
        transport.stop()

        mock_socket.close.assert_called_once()
        assert not transport.is_tracking_arrival
