import platform
import re
import subprocess
from pathlib import Path
from typing import List, Optional, Union

import requests

from stenv_installer._src.constants import HTTP_TIMEOUT, INSTALLER_PLATFORMS, RELEASE_PLATFORMS
from stenv_installer._src.logging import get_logger


logger = get_logger(__name__)

_DIGITS = re.compile(r"(\d+)")


def natural_sort_key(s: str) -> List[Union[str, int]]:
    """Sort key comparing runs of digits numerically, so that
    `py39` sorts before `py310` and `2023.9` before `2023.10`.

    re.split with a capturing group always alternates text and digits,
    starting with text, so keys of two strings compare position by
    position without mixing str and int.
    """
    return [int(part) if part.isdigit() else part for part in _DIGITS.split(s)]


def get_filename(url: str) -> str:
    """Strip the directory part of a url or path"""
    return url.rstrip("/").split("/")[-1]


def release_platform(system: Optional[str] = None) -> str:
    """Platform token used in release asset filenames, eg. `Linux` or `macOS`"""
    if system is None:
        system = platform.system()
    return RELEASE_PLATFORMS.get(system, system)


def installer_platform(system: Optional[str] = None) -> str:
    """Platform token used in installer script filenames, eg. `Linux` or `MacOSX`"""
    if system is None:
        system = platform.system()
    return INSTALLER_PLATFORMS.get(system, system)


def run_command(command: List[str], cwd: Optional[Path] = None, runner=subprocess.run) -> int:
    """Run a command attached to the terminal and return its exit status.

    Output is inherited so the user sees the tool's own progress and
    diagnostics.
    """
    logger.info("running command", command=command, cwd=str(cwd) if cwd else None)
    result = runner(command, cwd=cwd)
    logger.info("command finished", command=command, returncode=result.returncode)
    return result.returncode


def download_file(url: str, dest_dir: Path, session: Optional[requests.Session] = None) -> Path:
    """Download `url` into `dest_dir`, keeping its filename.

    A partially written file is removed if the download fails.
    """
    http = session or requests
    dest = Path(dest_dir) / get_filename(url)
    logger.info("downloading", url=url, dest=str(dest))
    try:
        with http.get(url, stream=True, timeout=HTTP_TIMEOUT) as response:
            response.raise_for_status()
            with open(dest, "wb") as f:
                for chunk in response.iter_content(chunk_size=8192):
                    f.write(chunk)
    except Exception:
        if dest.exists():
            dest.unlink()
        raise
    return dest
