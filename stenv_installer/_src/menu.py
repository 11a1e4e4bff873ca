"""Interactive menus, modelled as a finite state machine.

Each state has a screen and a table of accepted choices. A handler runs
the action for a choice and returns the next state, choices missing from
the table are rejected and the same screen is shown again.
"""
import subprocess
from enum import Enum
from typing import Callable, Dict, Optional

import requests
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from stenv_installer._src.catalog import ReleaseCatalog
from stenv_installer._src.config import Settings
from stenv_installer._src.constants import SupportedInstallers
from stenv_installer._src.exceptions import StenvInstallerError
from stenv_installer._src.logging import get_logger
from stenv_installer._src.models.release import parse_release_filename
from stenv_installer._src.registry import CondaRegistry
from stenv_installer._src.tasks import ask_replace, installer_url, task_conda_install, task_create_stenv


logger = get_logger(__name__)


class MenuState(str, Enum):
    MAIN = "main"
    CONDUIT_INSTALL = "conduit_install"
    RELEASE_SELECT = "release_select"
    EXIT = "exit"


Handler = Callable[[], MenuState]


class MenuController():
    def __init__(
        self,
        catalog: ReleaseCatalog,
        registry: CondaRegistry,
        settings: Settings,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
        ask: Optional[Callable[[str], str]] = None,
        confirm: Optional[Callable[[str], bool]] = None,
    ):
        """Drives the menus until the user quits.

        Parameters
        ----------
        catalog: ReleaseCatalog
            Releases offered for installation
        registry: CondaRegistry
            Package manager adapter
        settings: Settings
            Session configuration
        console, err_console: Console
            Where menus and errors are printed
        ask: callable
            Reads one line of user input for a prompt
        confirm: callable
            Asks whether an existing environment may be replaced
        """
        self.catalog = catalog
        self.registry = registry
        self.settings = settings
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)
        self.ask = ask or self.console.input
        self.confirm = confirm or ask_replace(self.console)
        self.state = MenuState.MAIN

        self.transitions: Dict[MenuState, Dict[str, Handler]] = {
            MenuState.MAIN: {
                "1": self._open_conduit_install,
                "2": self._open_release_select,
                "q": self._quit,
            },
            MenuState.CONDUIT_INSTALL: {
                "1": lambda: self._install_conduit(SupportedInstallers.MINICONDA),
                "2": lambda: self._install_conduit(SupportedInstallers.MAMBAFORGE),
                "b": self._back,
                "q": self._quit,
            },
            MenuState.RELEASE_SELECT: {
                "b": self._back,
                "q": self._quit,
            },
        }
        self.screens: Dict[MenuState, Callable[[], str]] = {
            MenuState.MAIN: self._show_main,
            MenuState.CONDUIT_INSTALL: self._show_conduit_install,
            MenuState.RELEASE_SELECT: self._show_release_select,
        }

    def run(self) -> int:
        """Loop over the menus, returns the exit status once the user quits"""
        while self.state != MenuState.EXIT:
            prompt = self.screens[self.state]()
            try:
                choice = self.ask(prompt).strip()
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                choice = "q"
            try:
                self.state = self.handle(choice)
            except (EOFError, KeyboardInterrupt):
                # input closed inside an action, eg. at a confirmation prompt
                self.console.print()
                self.state = MenuState.EXIT
        return 0

    def handle(self, choice: str) -> MenuState:
        """Apply a choice to the current state and return the next state"""
        handler = self.transitions[self.state].get(choice.lower())
        if handler is None and self.state == MenuState.RELEASE_SELECT:
            return self._select_release(choice)
        if handler is None:
            self.error("Invalid selection")
            return self.state
        return handler()

    def error(self, message: str) -> None:
        self.err_console.print(f"[bold red]{escape(message)}[/bold red]", highlight=False)

    # screens

    def _show_main(self) -> str:
        # mamba, if present, is preferred for the whole session
        binary = self.registry.resolve_binary()
        self.console.rule("stenv installer")
        if binary is None:
            self.console.print("Package manager: [red]not found[/red]")
            self.console.print("stenv:           [red]not installed[/red]")
        else:
            self.console.print(f"Package manager: [green]{binary}[/green]")
            self.console.print(f"stenv:           {self._stenv_status()}")
        self.console.print()
        self.console.print("  1) Install a package manager (Miniconda or Mambaforge)")
        self.console.print("  2) Install a stenv release")
        self.console.print("  q) Quit")
        return "Selection: "

    def _stenv_status(self) -> str:
        try:
            managed = self.registry.managed_environments()
        except StenvInstallerError as e:
            logger.warning("could not list environments", error=str(e))
            return "[yellow]unknown[/yellow]"
        if not managed:
            return "[red]not installed[/red]"
        return f"[green]{', '.join(managed)}[/green]"

    def _show_conduit_install(self) -> str:
        self.console.rule("Install a package manager")
        self.console.print(f"  1) {SupportedInstallers.MINICONDA.label}")
        self.console.print(f"  2) {SupportedInstallers.MAMBAFORGE.label}")
        self.console.print("  b) Back")
        self.console.print("  q) Quit")
        return "Selection: "

    def _show_release_select(self) -> str:
        table = Table(title=f"stenv releases for {self.catalog.platform}")
        table.add_column("#", justify="right", no_wrap=True)
        table.add_column("version", justify="left", no_wrap=True)
        table.add_column("python", justify="left", no_wrap=True)
        table.add_column("build", justify="left", no_wrap=True)

        for index, release in enumerate(self.catalog.parsed()):
            table.add_row(str(index), release.version, release.python_version, release.build_type)

        self.console.print(table)
        self.console.print("  b) Back")
        self.console.print("  q) Quit")
        return f"Release [{len(self.catalog) - 1}]: "

    # transitions

    def _back(self) -> MenuState:
        return MenuState.MAIN

    def _quit(self) -> MenuState:
        return MenuState.EXIT

    def _open_conduit_install(self) -> MenuState:
        if self.registry.available:
            self.console.print(
                f"A package manager ({self.registry.binary}) is already installed, nothing to do."
            )
            return MenuState.MAIN
        return MenuState.CONDUIT_INSTALL

    def _open_release_select(self) -> MenuState:
        if not self.registry.available:
            self.console.print(
                "No package manager found. Install Miniconda or Mambaforge first (option 1), "
                "then open a new shell and run this program again."
            )
            return MenuState.MAIN
        if not len(self.catalog):
            self.error(f"No stenv releases available for {self.catalog.platform}")
            return MenuState.MAIN
        return MenuState.RELEASE_SELECT

    def _install_conduit(self, installer: SupportedInstallers) -> MenuState:
        self._run_task(
            task_conda_install,
            installer_url(installer),
            self.settings,
            console=self.console,
        )
        return MenuState.MAIN

    def _select_release(self, choice: str) -> MenuState:
        if not choice:
            index = len(self.catalog) - 1
        elif choice.isdecimal():
            index = int(choice)
        else:
            self.error("Invalid selection")
            return MenuState.RELEASE_SELECT

        if not 0 <= index < len(self.catalog):
            self.error(f"Selection out of range, choose 0 to {len(self.catalog) - 1}")
            return MenuState.RELEASE_SELECT

        url = self.catalog[index]
        logger.info("selected release", url=url, release=str(parse_release_filename(url)))
        self._run_task(task_create_stenv, url, self.registry, self.confirm, console=self.console)
        return MenuState.MAIN

    def _run_task(self, task, *args, **kwargs) -> bool:
        """Run an installer task, reporting failures instead of leaving the menu"""
        try:
            return task(*args, **kwargs)
        except (StenvInstallerError, requests.RequestException, subprocess.SubprocessError) as e:
            logger.error("task failed", task=task.__name__, error=str(e))
            self.error(str(e))
            return False
