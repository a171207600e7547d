from __future__ import annotations

import logging
from pathlib import Path

from tweetmedia.core.config import settings

# Log rotation settings
MAX_LOG_LINES = 10000
TRUNCATE_THRESHOLD = 15000  # Truncate when exceeding this many lines

log = logging.getLogger("tweetmedia")


def log_path() -> Path:
    return Path(settings.log_file)


def truncate_log_file() -> None:
    """Truncate log file to last MAX_LOG_LINES if it exceeds TRUNCATE_THRESHOLD."""
    path = log_path()
    if not path.exists():
        return

    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.readlines()

        if len(lines) > TRUNCATE_THRESHOLD:
            truncated_lines = lines[-MAX_LOG_LINES:]

            # Write back atomically
            temp_path = path.with_suffix(".tmp")
            with open(temp_path, "w", encoding="utf-8") as f:
                f.writelines(truncated_lines)
            temp_path.replace(path)

            print(f"LOG_ROTATION: Truncated {len(lines)} lines to {len(truncated_lines)} lines")
    except OSError as e:
        print(f"LOG_ROTATION_ERROR: Failed to truncate log file: {e}")


def configure_logging() -> Path:
    """Create the log directory, truncate on startup and log to the file.

    Called by the API lifespan and the CLI; importing the package writes nothing.

    Returns:
        Path of the log file
    """
    path = log_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    truncate_log_file()

    # Configure structured logging
    logging.basicConfig(
        filename=str(path),
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    return path


def tail_log(lines: int = 100) -> list[str]:
    """Return the last `lines` lines of the log file (empty if no log yet)."""
    path = log_path()
    if lines <= 0 or not path.exists():
        return []
    with open(path, "r", encoding="utf-8") as f:
        return [line.rstrip("\n") for line in f.readlines()[-lines:]]
