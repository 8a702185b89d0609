import logging
import logging.handlers
import os
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_log_dir() -> Path:
    if env_dir := os.environ.get("TIMESHEET_LOG_DIR"):
        return Path(env_dir)
    return Path(__file__).parent / "data" / "logs"


def setup_logging(app_name: str = "timesheet", level: int = logging.INFO) -> Path:
    """Configure application logging.

    Logs go to rotating files only; the terminal belongs to the TUI.
    Calling it again for a log file that is already attached changes nothing.

    Args:
        app_name: Name to use for log files
        level: Level for the main log file

    Returns:
        The directory the log files are written to.
    """
    log_dir = get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    main_log = os.path.abspath(log_dir / f"{app_name}.log")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if getattr(handler, "baseFilename", None) == main_log:
            return log_dir

    root_logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=main_log,
        maxBytes=1_000_000,  # 1MB
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    error_handler = logging.handlers.RotatingFileHandler(
        filename=log_dir / f"{app_name}-error.log",
        maxBytes=1_000_000,
        backupCount=3,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)
    root_logger.addHandler(error_handler)

    return log_dir
