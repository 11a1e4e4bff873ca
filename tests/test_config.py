from pathlib import Path

from stenv_installer._src.config import Settings
from stenv_installer._src.constants import DEFAULT_RELEASES_URL, SupportedInstallers
from stenv_installer._src.utils import installer_platform, release_platform


def test_defaults_from_empty_environment():
    settings = Settings.from_env({})

    assert settings.releases_url == DEFAULT_RELEASES_URL
    assert settings.github_token is None
    assert settings.shell == "bash"
    assert settings.log_level == "WARNING"


def test_from_env():
    settings = Settings.from_env({
        "HOME": "/home/astro",
        "SHELL": "/usr/bin/zsh",
        "STENV_RELEASES_URL": "https://api.example/releases",
        "GITHUB_TOKEN": "secret",
        "STENV_LOG_LEVEL": "debug",
    })

    assert settings.home == Path("/home/astro")
    assert settings.shell == "zsh"
    assert settings.releases_url == "https://api.example/releases"
    assert settings.github_token == "secret"
    assert settings.log_level == "DEBUG"


def test_overrides_take_precedence():
    settings = Settings.from_env(
        {"STENV_RELEASES_URL": "https://api.example/releases"},
        releases_url="https://other.example/releases",
        log_level=None,
    )

    assert settings.releases_url == "https://other.example/releases"
    assert settings.log_level == "WARNING"


def test_install_root():
    settings = Settings(home=Path("/home/astro"))

    assert settings.install_root(SupportedInstallers.MINICONDA) == Path("/home/astro/miniconda3")
    assert settings.install_root(SupportedInstallers.MAMBAFORGE) == Path("/home/astro/mambaforge")


def test_platform_tokens():
    assert release_platform("Darwin") == "macOS"
    assert release_platform("Linux") == "Linux"
    assert installer_platform("Darwin") == "MacOSX"
    assert installer_platform("Linux") == "Linux"
