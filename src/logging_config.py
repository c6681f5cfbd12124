import logging
import logging.handlers
from pathlib import Path
from typing import Optional

DEFAULT_LOG_DIR = Path(__file__).parent.parent / "logs"
DEFAULT_LOG_FILE = "settlement.log"


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    log_file: str = DEFAULT_LOG_FILE,
) -> Optional[Path]:
    """Configure root logging for settlement runs.

    Adds a rotating file handler (``log_dir / log_file``) and a console
    handler. Does nothing if the root logger already has handlers.

    Returns:
        Path of the log file, or None if logging was already configured.
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return None

    log_path = Path(log_dir or DEFAULT_LOG_DIR) / log_file
    log_path.parent.mkdir(parents=True, exist_ok=True)

    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger.setLevel(level)

    # 5MB per file, 3 backups
    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.getLogger(__name__).info(
        "Logging to %s (level=%s)", log_path, log_level.upper()
    )
    return log_path
