import typer
import requests
import yaml
from pydantic import ValidationError
from typing_extensions import Annotated
from rich.console import Console
from rich.table import Table
import rich

from stenv_installer._src.catalog import ReleaseCatalog, fetch_environment_spec
from stenv_installer._src.config import Settings
from stenv_installer._src.exceptions import StenvInstallerError
from stenv_installer._src.logging import configure_logging, get_logger
from stenv_installer._src.menu import MenuController
from stenv_installer._src.registry import CondaRegistry


logger = get_logger(__name__)

err_console = Console(stderr=True)

app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def load_catalog(settings: Settings) -> ReleaseCatalog:
    """Fetch the releases for this platform. A failed request leaves
    the catalog empty, installing releases is then unavailable.
    """
    try:
        return ReleaseCatalog.from_github(
            settings.releases_url,
            settings.platform_token,
            token=settings.github_token,
        )
    except requests.RequestException as e:
        logger.warning("could not fetch releases", url=settings.releases_url, error=str(e))
        err_console.print(f"[yellow]Could not fetch stenv releases: {e}[/yellow]", highlight=False)
        return ReleaseCatalog(platform=settings.platform_token)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    releases_url: str = typer.Option(
        None,
        help="GitHub API url listing the stenv releases"
    ),
    log_level: str = typer.Option(
        None,
        help="log level, eg. INFO or DEBUG"
    ),
):
    """Install conda and create stenv environments.

    Without a command, starts the interactive menu.
    """
    settings = Settings.from_env(releases_url=releases_url, log_level=log_level)
    configure_logging(settings.log_level)
    ctx.obj = settings

    if ctx.invoked_subcommand is not None:
        return

    controller = MenuController(
        catalog=load_catalog(settings),
        registry=CondaRegistry(),
        settings=settings,
    )
    raise typer.Exit(code=controller.run())


@app.command()
def releases(ctx: typer.Context):
    """List the stenv releases available for this platform"""
    settings: Settings = ctx.obj
    catalog = load_catalog(settings)

    table = Table(title=f"stenv releases for {catalog.platform}")
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("version", justify="left", no_wrap=True)
    table.add_column("python", justify="left", no_wrap=True)
    table.add_column("build", justify="left", no_wrap=True)
    table.add_column("environment", justify="left", no_wrap=True)

    for index, release in enumerate(catalog.parsed()):
        table.add_row(
            str(index),
            release.version,
            release.python_version,
            release.build_type,
            release.environment_name,
        )

    rich.print(table)


@app.command()
def environments(ctx: typer.Context):
    """List the stenv environments known to the package manager"""
    registry = CondaRegistry()
    try:
        managed = registry.managed_environments()
    except StenvInstallerError as e:
        err_console.print(str(e), markup=False)
        raise typer.Exit(code=1)

    for name in managed:
        print(name)


@app.command()
def show(
    ctx: typer.Context,
    index: Annotated[int, typer.Option(
        "--index", "-i",
        help="index of the release, as listed by `releases`; defaults to the latest"
    )] = -1,
):
    """Show the packages of a release before installing it"""
    settings: Settings = ctx.obj
    catalog = load_catalog(settings)
    if not len(catalog):
        err_console.print(f"No stenv releases available for {catalog.platform}")
        raise typer.Exit(code=1)
    if not -len(catalog) <= index < len(catalog):
        err_console.print(f"Release index out of range, choose 0 to {len(catalog) - 1}")
        raise typer.Exit(code=1)

    url = catalog[index]
    try:
        spec = fetch_environment_spec(url)
    except (requests.RequestException, yaml.YAMLError, ValidationError) as e:
        logger.warning("could not read release", url=url, error=str(e))
        err_console.print(f"Could not read {url}: {e}", markup=False)
        raise typer.Exit(code=1)

    print(url)
    print(f"name: {spec.name}")
    print(f"channels: {', '.join(spec.channels)}")
    print("dependencies")
    for dep in spec.conda_dependencies:
        print(f"+ {dep}")
    for dep in spec.pip_dependencies:
        print(f"+ pip: {dep}")
