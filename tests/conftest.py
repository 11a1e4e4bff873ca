import io
import subprocess
from pathlib import Path

import pytest
from rich.console import Console

from stenv_installer._src.catalog import ReleaseCatalog
from stenv_installer._src.config import Settings
from stenv_installer._src.registry import CondaRegistry


ENV_LIST_OUTPUT = """# conda environments:
#
base                  *  /home/user/miniconda3
stenv_py311              /home/user/miniconda3/envs/stenv_py311
analysis                 /home/user/miniconda3/envs/analysis
"""

RELEASE_URLS = [
    "https://github.com/spacetelescope/stenv/releases/download/2023.02.16/stenv-Linux-py3.9-2023.02.16.yml",
    "https://github.com/spacetelescope/stenv/releases/download/2023.02.16/stenv-macOS-py3.9-2023.02.16.yml",
    "https://github.com/spacetelescope/stenv/releases/download/2024.05.01/stenv-Linux-py3.10-2024.05.01-latest.yml",
    "https://github.com/spacetelescope/stenv/releases/download/2024.05.01/stenv-Linux-py3.11-2024.05.01-latest.yml",
    "https://github.com/spacetelescope/stenv/releases/download/2024.05.01/stenv-macOS-py3.11-2024.05.01-latest.yml",
]


class FakeRunner:
    """Stands in for subprocess.run, records every command it receives"""
    def __init__(self, env_list=ENV_LIST_OUTPUT, returncodes=None):
        self.env_list = env_list
        # maps a command prefix, eg. ("conda", "env", "remove"), to an exit status
        self.returncodes = returncodes or {}
        self.commands = []

    def __call__(self, command, **kwargs):
        self.commands.append(list(command))
        returncode = 0
        for prefix, code in self.returncodes.items():
            if tuple(command[:len(prefix)]) == tuple(prefix):
                returncode = code
        stdout = self.env_list if list(command[1:3]) == ["env", "list"] else ""
        return subprocess.CompletedProcess(command, returncode, stdout=stdout, stderr="")

    def ran(self, *prefix):
        return [cmd for cmd in self.commands if tuple(cmd[:len(prefix)]) == prefix]


def fake_which(*found):
    def which(name):
        return f"/usr/bin/{name}" if name in found else None
    return which


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def registry(runner):
    return CondaRegistry(runner=runner, which=fake_which("conda"))


@pytest.fixture
def missing_registry(runner):
    return CondaRegistry(runner=runner, which=fake_which())


@pytest.fixture
def settings(tmp_path: Path):
    home = tmp_path / "home"
    home.mkdir()
    downloads = tmp_path / "downloads"
    downloads.mkdir()
    return Settings(home=home, shell="zsh", download_dir=downloads, platform_token="Linux")


@pytest.fixture
def catalog():
    return ReleaseCatalog.from_urls(RELEASE_URLS, "Linux")


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=400, force_terminal=False)


@pytest.fixture
def err_console():
    return Console(file=io.StringIO(), width=400, force_terminal=False)
