from __future__ import annotations

import os
from pathlib import Path

# Overrides the working directory as the project root (.env, data/)
HOME_ENV_VAR = "TWEETMEDIA_HOME"


def get_project_root() -> Path:
    """Project root: $TWEETMEDIA_HOME if set, else the current working directory."""
    home = os.environ.get(HOME_ENV_VAR)
    if home:
        return Path(home).expanduser()
    return Path.cwd()


def get_data_path(filename: str = "") -> Path:
    """Get path to file in the data directory.

    Args:
        filename: Optional filename to append to data directory path

    Returns:
        Path object pointing to data/ or data/filename under the project root
    """
    data_dir = get_project_root() / "data"
    if filename:
        return data_dir / filename
    return data_dir
