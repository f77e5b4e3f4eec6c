"""Yarn Guardian 진입점.

실행: yarn_guardian -c config/config.yaml [--log-level DEBUG]
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import signal
import sys
import threading

from yarn_guardian.infra.config.yaml_config_loader import YamlConfigLoader
from yarn_guardian.presentation.app import YarnGuardianApp


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='yarn_guardian',
        description='Yarn break repair AGV/PLC coordinator',
    )
    parser.add_argument(
        '-c', '--config_file', type=str, default=None,
        help='Path to the config.yaml file',
    )
    parser.add_argument(
        '--log-level', type=str, default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Override log level from config',
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """코디네이터를 시작하고 SIGINT/SIGTERM까지 실행한다.

    Args:
        argv: 커맨드 라인 인자 (프로그램 이름 제외).
    """
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    config_path = Path(args.config_file) if args.config_file else None
    config = YamlConfigLoader(config_path).load()

    logging.basicConfig(
        level=args.log_level or config.log_level,
        format='[%(name)s] %(levelname)s: %(message)s',
    )
    logger = logging.getLogger('yarn_guardian')

    app = YarnGuardianApp(config)
    stop_event = threading.Event()

    def _request_stop(signum: int, frame: object) -> None:
        logger.info('Signal %d received', signum)
        stop_event.set()

    signal.signal(signal.SIGINT, _request_stop)
    signal.signal(signal.SIGTERM, _request_stop)

    try:
        app.start()
        stop_event.wait()
    finally:
        app.shutdown()


if __name__ == '__main__':
    main()
