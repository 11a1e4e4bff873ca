import shutil
import subprocess
from typing import List, Optional

from stenv_installer._src.constants import MANAGED_ENVIRONMENT_MARKER, PACKAGE_MANAGER_BINARIES
from stenv_installer._src.exceptions import CommandFailed, PackageManagerUnavailable
from stenv_installer._src.logging import get_logger
from stenv_installer._src.utils import run_command


logger = get_logger(__name__)

_UNRESOLVED = object()


def parse_environment_list(output: str) -> List[str]:
    """Extract environment names from `conda env list` output.

    The output is a comment header followed by one line per environment,
    the name being the first column:

        # conda environments:
        #
        base                  *  /home/user/miniconda3
        stenv_py311              /home/user/miniconda3/envs/stenv_py311
    """
    names = []
    for line in output.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        names.append(line.split()[0])
    return names


class CondaRegistry():
    def __init__(self, runner=subprocess.run, which=shutil.which, binaries: Optional[List[str]] = None):
        """CondaRegistry wraps the environment management commands of
        the package manager found on the PATH.

        Parameters
        ----------
        runner: callable
            Used to run commands, with the signature of subprocess.run
        which: callable
            Used to locate binaries, with the signature of shutil.which
        binaries: list[str]
            Binary names in order of preference, mamba is preferred
            over conda by default
        """
        self.runner = runner
        self.which = which
        self.binaries = binaries or PACKAGE_MANAGER_BINARIES
        self._binary = _UNRESOLVED

    def resolve_binary(self) -> Optional[str]:
        """Find the package manager binary. Only the first call looks it up,
        the choice holds for the rest of the session.
        """
        if self._binary is _UNRESOLVED:
            self._binary = None
            for name in self.binaries:
                if self.which(name):
                    self._binary = name
                    break
            logger.info("resolved package manager", binary=self._binary)
        return self._binary

    @property
    def binary(self) -> str:
        binary = self.resolve_binary()
        if binary is None:
            raise PackageManagerUnavailable(self.binaries)
        return binary

    @property
    def available(self) -> bool:
        return self.resolve_binary() is not None

    def list_environments(self) -> List[str]:
        command = [self.binary, "env", "list"]
        result = self.runner(command, capture_output=True, text=True)
        if result.returncode != 0:
            raise CommandFailed(command, result.returncode)
        return parse_environment_list(result.stdout)

    def managed_environments(self) -> List[str]:
        return [name for name in self.list_environments() if MANAGED_ENVIRONMENT_MARKER in name]

    def environment_exists(self, name: str) -> bool:
        return name in self.list_environments()

    def create_environment(self, name: str, spec_url: str) -> int:
        """Create `name` from a remote environment file, returns the exit status"""
        return run_command(
            [self.binary, "env", "create", "--name", name, "--file", spec_url],
            runner=self.runner,
        )

    def remove_environment(self, name: str) -> int:
        """Remove `name`, returns the exit status"""
        return run_command(
            [self.binary, "env", "remove", "--name", name, "--yes"],
            runner=self.runner,
        )
