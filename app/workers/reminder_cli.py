from __future__ import annotations

import argparse
import json
import logging
import time

from app.config import load_config, setup_logging
from app.services.container import ServiceContainer

logger = logging.getLogger(__name__)


def _sweep(container: ServiceContainer, *, dry_run: bool) -> dict[str, int]:
    result = container.reminder_service.sweep(dry_run=dry_run)
    print(json.dumps(result))
    return result


def main(argv: list[str] | None = None) -> int:
    """Run the reminder sweep once, or in a loop, without starting the web server."""
    parser = argparse.ArgumentParser(prog="plantcare-reminders")
    subparsers = parser.add_subparsers(dest="command")

    sweep = subparsers.add_parser("sweep", help="Mark overdue reminders and send due-soon notifications once")
    sweep.add_argument("--dry-run", action="store_true", help="Report what would change without writing")

    run = subparsers.add_parser("run", help="Sweep repeatedly until interrupted")
    run.add_argument("--interval", type=int, default=300, help="Seconds between sweeps (default: 300)")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 2

    config = load_config()
    setup_logging(debug=config.DEBUG, log_file=config.log_file, level=config.log_level)

    container = ServiceContainer.build(config)
    try:
        if args.command == "sweep":
            _sweep(container, dry_run=args.dry_run)
            return 0

        if args.interval < 1:
            print("--interval must be at least 1 second")
            return 2
        logger.info("Reminder sweeper running every %ss (press Ctrl+C to stop)", args.interval)
        try:
            while True:
                _sweep(container, dry_run=False)
                time.sleep(args.interval)
        except KeyboardInterrupt:
            logger.info("Stopping reminder sweeper...")
        return 0
    finally:
        container.shutdown()


if __name__ == "__main__":
    import sys

    raise SystemExit(main(sys.argv[1:]))
