from enum import Enum


DEFAULT_RELEASES_URL = "https://api.github.com/repos/spacetelescope/stenv/releases"

RELEASE_NAME = "stenv"
DEPRECATED_RELEASE_NAME = "spacetelescope-env"
DEFAULT_BUILD_TYPE = "latest"
ENVIRONMENT_PREFIX = "stenv_py"
MANAGED_ENVIRONMENT_MARKER = "stenv"

# conda/mamba binaries in order of preference
PACKAGE_MANAGER_BINARIES = ["mamba", "conda"]

HTTP_TIMEOUT = 30

# platform.system() values that differ from the release naming convention
RELEASE_PLATFORMS = {
    "Darwin": "macOS",
}

INSTALLER_PLATFORMS = {
    "Darwin": "MacOSX",
}


class SupportedInstallers(str, Enum):
    MINICONDA = "miniconda"
    MAMBAFORGE = "mambaforge"

    @property
    def label(self) -> str:
        return INSTALLER_LABELS[self]

    @property
    def prefix(self) -> str:
        """Filename prefix of the installer script"""
        return INSTALLER_PREFIXES[self]

    @property
    def root_name(self) -> str:
        """Directory under $HOME the distribution is installed into"""
        return INSTALLER_ROOTS[self]


INSTALLER_LABELS = {
    SupportedInstallers.MINICONDA: "Miniconda",
    SupportedInstallers.MAMBAFORGE: "Mambaforge",
}

INSTALLER_PREFIXES = {
    SupportedInstallers.MINICONDA: "Miniconda3",
    SupportedInstallers.MAMBAFORGE: "Mambaforge",
}

INSTALLER_ROOTS = {
    SupportedInstallers.MINICONDA: "miniconda3",
    SupportedInstallers.MAMBAFORGE: "mambaforge",
}

INSTALLER_URL_TEMPLATES = {
    SupportedInstallers.MINICONDA: (
        "https://repo.anaconda.com/miniconda/Miniconda3-latest-{system}-{machine}.sh"
    ),
    SupportedInstallers.MAMBAFORGE: (
        "https://github.com/conda-forge/miniforge/releases/latest/download/"
        "Mambaforge-{system}-{machine}.sh"
    ),
}

# run inside a bash subshell once the distribution is installed
SHELL_HOOK_TEMPLATE = 'source "{root}/etc/profile.d/conda.sh" && conda init {shell}'

MAMBA_HOOK_TEMPLATE = 'source "{root}/etc/profile.d/mamba.sh" && mamba init {shell}'

ACTIVATION_TEMPLATE = """
{label} is already installed at {root}

To use it in the current shell run:

    source "{root}/bin/activate"

To enable it permanently run:

    "{root}/bin/conda" init {shell}
"""
