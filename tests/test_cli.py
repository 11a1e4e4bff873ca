import pytest
import requests
import yaml
from typer.testing import CliRunner

from stenv_installer._src.catalog import ReleaseCatalog
from stenv_installer._src.models.environment import CondaEnvironmentSpec
from stenv_installer.cli import root

from conftest import RELEASE_URLS


cli_runner = CliRunner()


@pytest.fixture
def linux_releases(monkeypatch):
    requested = []

    def from_github(url, platform, token=None):
        requested.append(url)
        return ReleaseCatalog.from_urls(RELEASE_URLS, "Linux")

    monkeypatch.setattr(root.ReleaseCatalog, "from_github", from_github)
    return requested


def test_releases(linux_releases):
    result = cli_runner.invoke(root.app, ["--releases-url", "https://api.example/releases", "releases"])

    assert result.exit_code == 0
    assert linux_releases == ["https://api.example/releases"]
    assert "stenv_py311" in result.stdout
    assert "2023.02.16" in result.stdout


def test_load_catalog_survives_network_failure(monkeypatch, settings):
    def from_github(url, platform, token=None):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(root.ReleaseCatalog, "from_github", from_github)

    catalog = root.load_catalog(settings)

    assert len(catalog) == 0
    assert catalog.platform == "Linux"


def test_show(linux_releases, monkeypatch):
    fetched = []

    def fetch_environment_spec(url):
        fetched.append(url)
        return CondaEnvironmentSpec(
            name="stenv",
            channels=["conda-forge"],
            dependencies=["python=3.11", {"pip": ["jwst"]}],
        )

    monkeypatch.setattr(root, "fetch_environment_spec", fetch_environment_spec)

    result = cli_runner.invoke(root.app, ["show", "--index", "0"])

    assert result.exit_code == 0
    assert fetched == [RELEASE_URLS[0]]
    assert "+ python=3.11" in result.stdout
    assert "+ pip: jwst" in result.stdout


@pytest.mark.parametrize("error", [
    requests.ConnectionError("offline"),
    yaml.YAMLError("bad document"),
])
def test_show_reports_unreadable_release(linux_releases, monkeypatch, error):
    def fetch_environment_spec(url):
        raise error

    monkeypatch.setattr(root, "fetch_environment_spec", fetch_environment_spec)

    result = cli_runner.invoke(root.app, ["show", "--index", "0"])

    assert result.exit_code == 1
    assert not isinstance(result.exception, type(error))
    assert "name:" not in result.stdout


def test_show_out_of_range(linux_releases):
    result = cli_runner.invoke(root.app, ["show", "--index", "10"])

    assert result.exit_code == 1


def test_menu_quits_with_status_zero(linux_releases, monkeypatch):
    class FakeRegistry:
        def resolve_binary(self):
            return None

        available = False

    monkeypatch.setattr(root, "CondaRegistry", FakeRegistry)

    result = cli_runner.invoke(root.app, [], input="q\n")

    assert result.exit_code == 0
    assert "Package manager: not found" in result.stdout
