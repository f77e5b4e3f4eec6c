"""YarnGuardianApp 조립/수명 주기 테스트."""

import threading
from unittest.mock import MagicMock, call, patch

import pytest

from yarn_guardian.domain.entities.envelope import Envelope
from yarn_guardian.infra.mqtt.mqtt_client import MqttClient
from yarn_guardian.presentation.app import YarnGuardianApp
from yarn_guardian.presentation.main import _parse_args
from yarn_guardian.usecase.ports.config_port import (
    AppConfig,
    RepairConfig,
    StatusReportConfig,
)


@pytest.fixture
def config():
    return AppConfig(
        repair=RepairConfig(machine_id=2),
        status_report=StatusReportConfig(auto_start=False),
    )


@pytest.fixture
def app(config, mock_agv, mock_plc, mock_source, memory_cache, mock_channel):
    app = YarnGuardianApp(
        config,
        agv_gateway=mock_agv,
        plc_gateway=mock_plc,
        break_point_source=mock_source,
        spindle_cache=memory_cache,
        channel=mock_channel,
    )
    yield app
    app.shutdown()


class TestYarnGuardianApp:
    def test_start_registers_handler_and_announces(
        self, app, mock_channel, mock_plc
    ):
        app.start()

        mock_plc.connect.assert_called_once()
        mock_channel.set_handler.assert_called_once_with(app.on_envelope)
        announce = mock_channel.send.call_args.args[0]
        assert announce.module == 'schedule'
        assert announce.service == 'start_request'
        assert announce.content['MachineId'] == 2
        assert 'TimeStamp' in announce.content
        assert not app.reporter.is_running

    def test_start_with_auto_report(
        self, mock_agv, mock_plc, mock_source, memory_cache, mock_channel
    ):
        app = YarnGuardianApp(
            AppConfig(status_report=StatusReportConfig(interval_ms=10)),
            agv_gateway=mock_agv,
            plc_gateway=mock_plc,
            break_point_source=mock_source,
            spindle_cache=memory_cache,
            channel=mock_channel,
        )
        try:
            app.start()
            assert app.reporter.is_running
        finally:
            app.shutdown()
        assert not app.reporter.is_running

    def test_plc_unreachable_at_start_is_not_fatal(self, app, mock_plc):
        mock_plc.connect.return_value = False
        app.start()

    def test_on_envelope_dispatches_on_worker(self, app):
        future = app.on_envelope(
            Envelope(module='agv', service='status_report')
        )
        result = future.result(timeout=2.0)

        assert result.ok
        assert result.message == 'status reported'

    def test_repair_task_runs_through_worker(self, app, mock_channel):
        future = app.on_envelope(
            Envelope(
                module='agv',
                service='start_repair_task',
                content={'SideNumber': 3, 'TaskId': 'T1'},
                client_id=7,
            )
        )
        result = future.result(timeout=5.0)

        assert result.ok
        services = [c.args[0].service for c in mock_channel.send.call_args_list]
        assert services == ['task_ack', 'start_repair_task']

    def test_status_report_not_blocked_by_running_workflow(
        self, app, mock_agv, mock_channel
    ):
        polling = threading.Event()
        released = threading.Event()

        def reached():
            polling.set()
            released.wait(timeout=5.0)
            return True

        mock_agv.has_reached_target.side_effect = reached

        workflow = app.on_envelope(
            Envelope(
                module='agv',
                service='start_repair_task',
                content={'SideNumber': 3, 'TaskId': 'T1'},
            )
        )
        try:
            assert polling.wait(timeout=2.0)

            report = app.on_envelope(
                Envelope(module='agv', service='status_report')
            ).result(timeout=2.0)
            assert report.ok
            assert not workflow.done()

            stopped = app.on_envelope(
                Envelope(module='schedule', service='get_schedule')
            ).result(timeout=2.0)
            assert stopped.ok
            assert not workflow.done()
        finally:
            released.set()

        assert workflow.result(timeout=5.0).ok
        services = [c.args[0].service for c in mock_channel.send.call_args_list]
        assert services.index('status_report') < services.index(
            'start_repair_task'
        )

    def test_dispatch_exception_logged(self, app):
        with patch.object(
            app.dispatcher, 'dispatch', side_effect=RuntimeError('boom')
        ), patch('yarn_guardian.presentation.app.logger') as log:
            result = app.on_envelope(
                Envelope(module='agv', service='status_report')
            ).result(timeout=2.0)

        assert result is None
        log.exception.assert_called_once()

    def test_shutdown_closes_transports(self, app, mock_agv, mock_plc):
        app.shutdown()

        mock_plc.disconnect.assert_called()
        mock_agv.stop.assert_called()

    def test_mqtt_client_lifecycle(
        self, config, mock_agv, mock_plc, mock_source, memory_cache
    ):
        mqtt_client = MagicMock(spec=MqttClient)
        app = YarnGuardianApp(
            config,
            agv_gateway=mock_agv,
            plc_gateway=mock_plc,
            break_point_source=mock_source,
            spindle_cache=memory_cache,
            mqtt_client=mqtt_client,
        )

        app.start()
        app.shutdown()

        assert call.connect() in mqtt_client.mock_calls
        assert call.disconnect() in mqtt_client.mock_calls
        subscribed_topic = mqtt_client.subscribe.call_args.args[0]
        assert subscribed_topic == 'yarn_guardian/2/command'


class TestParseArgs:
    def test_defaults(self):
        args = _parse_args([])
        assert args.config_file is None
        assert args.log_level is None

    def test_options(self):
        args = _parse_args(['-c', 'x.yaml', '--log-level', 'DEBUG'])
        assert args.config_file == 'x.yaml'
        assert args.log_level == 'DEBUG'
