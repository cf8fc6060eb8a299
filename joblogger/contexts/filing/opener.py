"""Open a folder in the platform's file browser."""

import os
import subprocess
import sys
from pathlib import Path
from typing import Union

from joblogger.contexts.filing.logger import log_folder_opened
from joblogger.exceptions import OpenFolderError


def file_browser_command(platform: str = sys.platform) -> str:
    """Name of the launcher used on a platform ("explorer", "open" or "xdg-open")."""
    if platform.startswith("win"):
        return "explorer"
    if platform == "darwin":
        return "open"
    return "xdg-open"


def open_in_file_browser(path: Union[str, Path]) -> None:
    """
    Show a folder in the system file browser without waiting for it.

    Args:
        path: Existing directory

    Raises:
        OpenFolderError: The launcher could not be started
    """
    folder = Path(path)
    command = file_browser_command()

    try:
        if command == "explorer":
            os.startfile(str(folder))  # type: ignore[attr-defined]
        else:
            subprocess.Popen(
                [command, str(folder)],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
    except OSError as e:
        raise OpenFolderError(f"Failed to open folder with {command}: {e}") from e

    log_folder_opened(folder, command)
