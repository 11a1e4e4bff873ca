import os
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field

from stenv_installer._src.constants import DEFAULT_RELEASES_URL, SupportedInstallers
from stenv_installer._src.utils import release_platform


class Settings(BaseModel):
    """Runtime configuration for a session"""
    releases_url: str = DEFAULT_RELEASES_URL
    github_token: Optional[str] = None
    home: Path = Field(default_factory=Path.home)
    shell: str = "bash"
    download_dir: Path = Field(default_factory=Path.cwd)
    log_level: str = "WARNING"
    platform_token: str = Field(default_factory=release_platform)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None, **overrides):
        """Build settings from environment variables.

        Parameters
        ----------
        environ: dict
            Mapping to read from, defaults to os.environ
        overrides:
            Values taking precedence over the environment, eg. from
            command line options. `None` values are ignored.
        """
        if environ is None:
            environ = os.environ

        values = {}
        if environ.get("STENV_RELEASES_URL"):
            values["releases_url"] = environ["STENV_RELEASES_URL"]
        if environ.get("GITHUB_TOKEN"):
            values["github_token"] = environ["GITHUB_TOKEN"]
        if environ.get("HOME"):
            values["home"] = Path(environ["HOME"])
        if environ.get("SHELL"):
            values["shell"] = os.path.basename(environ["SHELL"])
        if environ.get("STENV_LOG_LEVEL"):
            values["log_level"] = environ["STENV_LOG_LEVEL"].upper()

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def install_root(self, installer: SupportedInstallers) -> Path:
        return self.home / installer.root_name
