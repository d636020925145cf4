"""medibot - first-aid intent matching chatbot entry point."""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .cli import run_cli


def setup_logging(log_dir: Path | None = None, debug: bool = False) -> logging.Logger:
    """Configure logging with rotation.

    Logs are written to ~/.medibot/logs/ with owner-only permissions.
    Uses INFO level by default; set MEDIBOT_DEBUG=1 for DEBUG level.
    """
    log_dir = log_dir or Path.home() / ".medibot" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_dir.chmod(0o700)

    log_level = logging.DEBUG if debug or os.environ.get("MEDIBOT_DEBUG") else logging.INFO

    # 5 MB per file, keep 3 backups
    handler = RotatingFileHandler(
        log_dir / "medibot.log",
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)

    return logging.getLogger(__name__)


def main() -> None:
    """Entry point for the application.

    Runs a CLI subcommand, or the interactive chat if none is given.
    """
    logger = setup_logging()
    logger.info("medibot starting")
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
