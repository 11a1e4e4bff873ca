import platform
import subprocess
from typing import Callable, Optional

import requests
from rich.console import Console
from rich.markup import escape

from stenv_installer._src.config import Settings
from stenv_installer._src.constants import (
    ACTIVATION_TEMPLATE,
    INSTALLER_URL_TEMPLATES,
    MAMBA_HOOK_TEMPLATE,
    SHELL_HOOK_TEMPLATE,
    SupportedInstallers,
)
from stenv_installer._src.exceptions import CommandFailed, UnsupportedInstaller
from stenv_installer._src.logging import get_logger
from stenv_installer._src.models.release import parse_release_filename
from stenv_installer._src.registry import CondaRegistry
from stenv_installer._src.utils import download_file, get_filename, installer_platform, run_command


logger = get_logger(__name__)


def installer_url(
    installer: SupportedInstallers,
    system: Optional[str] = None,
    machine: Optional[str] = None,
) -> str:
    """Download url of the installer script for the host"""
    if machine is None:
        machine = platform.machine()
    return INSTALLER_URL_TEMPLATES[installer].format(
        system=installer_platform(system),
        machine=machine,
    )


def detect_installer(url: str) -> SupportedInstallers:
    filename = get_filename(url)
    for installer in SupportedInstallers:
        if filename.startswith(installer.prefix):
            return installer
    raise UnsupportedInstaller(url)


def task_conda_install(
    url: str,
    settings: Settings,
    console: Optional[Console] = None,
    runner=subprocess.run,
    session: Optional[requests.Session] = None,
) -> bool:
    """Install a conda distribution from its installer script.

    Does nothing but print activation instructions when the
    distribution root already exists.
    """
    console = console or Console()
    installer = detect_installer(url)
    root = settings.install_root(installer)

    if root.exists():
        logger.info("distribution already installed", root=str(root))
        console.print(
            ACTIVATION_TEMPLATE.format(label=installer.label, root=root, shell=settings.shell),
            highlight=False,
        )
        return True

    console.print(f"Installing {installer.label} into {root}")
    script = download_file(url, settings.download_dir, session=session)
    try:
        command = ["bash", str(script), "-b", "-p", str(root)]
        returncode = run_command(command, cwd=settings.download_dir, runner=runner)
        if returncode != 0:
            raise CommandFailed(command, returncode, cwd=settings.download_dir)
    finally:
        script.unlink(missing_ok=True)

    hooks = [SHELL_HOOK_TEMPLATE.format(root=root, shell=settings.shell)]
    if installer == SupportedInstallers.MAMBAFORGE:
        hooks.append(MAMBA_HOOK_TEMPLATE.format(root=root, shell=settings.shell))

    for hook in hooks:
        command = ["bash", "-c", hook]
        returncode = run_command(command, runner=runner)
        if returncode != 0:
            raise CommandFailed(command, returncode)

    console.print(
        f"{installer.label} installed. Open a new {settings.shell} session to start using it."
    )
    return True


def ask_replace(console: Console) -> Callable[[str], bool]:
    """Interactive confirmation, only `y` or `Y` confirms"""
    def confirm(name: str) -> bool:
        try:
            answer = console.input(f"Environment {name} already exists. Replace it? {escape('[y/N]')} ")
        except (EOFError, KeyboardInterrupt):
            console.print()
            return False
        return answer.strip() in ("y", "Y")
    return confirm


def task_create_stenv(
    url: str,
    registry: CondaRegistry,
    confirm: Callable[[str], bool],
    console: Optional[Console] = None,
) -> bool:
    """Create the environment of a release, replacing an existing one
    with the same name once the user confirms.

    Returns True when the environment was created.
    """
    console = console or Console()
    release = parse_release_filename(url)
    name = release.environment_name

    if registry.environment_exists(name):
        if not confirm(name):
            logger.info("kept existing environment", environment=name)
            console.print(f"Keeping existing environment {name}")
            return False

        console.print(f"Removing environment {name}")
        returncode = registry.remove_environment(name)
        if returncode != 0:
            logger.warning("environment removal failed", environment=name, returncode=returncode)
            return False

    console.print(f"Creating environment {name} from {release}")
    returncode = registry.create_environment(name, url)
    if returncode != 0:
        logger.warning("environment creation failed", environment=name, returncode=returncode)
        return False

    console.print(f"Environment created, activate it with: conda activate {name}", highlight=False)
    return True
