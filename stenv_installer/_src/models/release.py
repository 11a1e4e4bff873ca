from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from stenv_installer._src.constants import (
    DEFAULT_BUILD_TYPE,
    DEPRECATED_RELEASE_NAME,
    ENVIRONMENT_PREFIX,
    RELEASE_NAME,
)
from stenv_installer._src.utils import get_filename


class ReleaseFilename(BaseModel):
    """Fields encoded in a release asset filename

    `<name>-<platform>-py<python_version>-<version>[-<build_type>].yml`
    """
    name: str = ""
    platform: str = ""
    python_version: str = ""
    version: str = ""
    build_type: str = DEFAULT_BUILD_TYPE

    @property
    def environment_name(self) -> str:
        return environment_name(self.python_version)

    def __str__(self):
        return f"{self.name} {self.version} (python {self.python_version}, {self.build_type})"


def parse_release_filename(url: str) -> ReleaseFilename:
    """Split a release asset url or filename into its fields.

    Malformed names never raise, missing fields are left empty.
    """
    filename = get_filename(url)
    if filename.startswith(DEPRECATED_RELEASE_NAME):
        filename = RELEASE_NAME + filename[len(DEPRECATED_RELEASE_NAME):]

    fields = filename.split("-")
    last = fields[-1]
    for suffix in (".yml", ".yaml"):
        if last.endswith(suffix):
            fields[-1] = last[:-len(suffix)]
            break

    fields += [""] * (5 - len(fields))
    name, platform, python_version, version, build_type = fields[:5]

    return ReleaseFilename(
        name=name,
        platform=platform,
        python_version=python_version.removeprefix("py"),
        version=version,
        # releases before build types were introduced only had four fields
        build_type=build_type or DEFAULT_BUILD_TYPE,
    )


def environment_name(python_version: str) -> str:
    """Name of the environment created for a python version, eg. `stenv_py311`"""
    return ENVIRONMENT_PREFIX + python_version.replace(".", "")


class GithubAsset(BaseModel):
    model_config = ConfigDict(extra="ignore")

    browser_download_url: str


class GithubRelease(BaseModel):
    """The parts of a GitHub release payload we rely on"""
    model_config = ConfigDict(extra="ignore")

    tag_name: Optional[str] = None
    assets: List[GithubAsset] = []
