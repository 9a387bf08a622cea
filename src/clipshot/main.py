#!/usr/bin/env python3

import argparse
import logging
import signal
import sys
from typing import Optional, Sequence

from clipshot import __version__
from clipshot.clipboard import ScreenshotFolderSource, get_clipboard, resolve_screenshot_dir
from clipshot.config import ClipshotConfig
from clipshot.delivery import get_sink
from clipshot.environment import Environment, describe, detect_environment
from clipshot.log import setup_logging
from clipshot.models.delivery import DeliveryTarget
from clipshot.services.monitor import MonitorService

logger = logging.getLogger("clipshot.main")


class ClipshotApp:

    def __init__(
        self,
        target: DeliveryTarget,
        config: ClipshotConfig,
        environment: Optional[Environment] = None,
    ):
        self.target = target
        self.config = config
        self.environment = environment or detect_environment()
        self.monitor: Optional[MonitorService] = None

    def build(self) -> MonitorService:
        clipboard = get_clipboard(
            self.environment,
            read_timeout=self.config.read_timeout,
            write_timeout=self.config.write_timeout,
        )

        screenshots = None
        if self.environment == Environment.MACOS:
            screenshots = ScreenshotFolderSource(
                resolve_screenshot_dir(self.config.screenshot_dir),
                debounce=self.config.debounce,
            )

        self.monitor = MonitorService(
            target=self.target,
            sink=get_sink(self.target, self.config),
            clipboard=clipboard,
            screenshots=screenshots,
            poll_interval=self.config.poll_interval,
        )
        return self.monitor

    def log_banner(self, log_file) -> None:
        logger.info(f"Starting monitor for: {self.target}")
        logger.info(f"Environment: {describe(self.environment)}")
        logger.info(f"Log file: {log_file}")
        if self.target.is_local:
            logger.info(f"Saving to: {self.monitor.sink.describe()}")
        screenshots = self.monitor.screenshots
        if screenshots is not None:
            logger.info(f"Watching screenshots in: {screenshots.directory}")
        logger.info("")
        logger.info("Monitoring clipboard... (Ctrl+C to stop)")
        logger.info("")

    def stop(self) -> None:
        if self.monitor is not None:
            self.monitor.stop()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="clipshot-daemon",
        description="Relay clipboard screenshots to a local folder or an ssh host",
    )

    parser.add_argument(
        "target",
        type=DeliveryTarget.parse,
        help="'local' or an ssh target such as user@host or a ~/.ssh/config alias",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose debug logging"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    config = ClipshotConfig.from_env()

    try:
        file_handler = setup_logging(config, verbose=args.verbose)
    except OSError as e:
        print(f"clipshot: cannot create log directory {config.log_dir}: {e}", file=sys.stderr)
        sys.exit(1)

    app = ClipshotApp(args.target, config)
    monitor = app.build()
    app.log_banner(file_handler.file_path)

    def signal_handler(signum, frame):
        app.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    monitor.run_forever()
    logger.info("Monitor stopped")


if __name__ == "__main__":
    main()
