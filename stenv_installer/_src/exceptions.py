class StenvInstallerError(Exception):
    """Base class for errors reported back to the menu"""


class PackageManagerUnavailable(StenvInstallerError):
    def __init__(self, binaries):
        self.msg = (
            "No package manager found!"
            f"\nLooked for: {', '.join(binaries)}"
            "\nInstall Miniconda or Mambaforge first."
        )
        super().__init__(self.msg)


class UnsupportedInstaller(StenvInstallerError):
    def __init__(self, url):
        self.url = url
        self.msg = (
            "Unsupported installer!"
            f"\nInstaller: `{url.split('/')[-1]}`"
            "\nExpected a Miniconda3 or Mambaforge installer script."
        )
        super().__init__(self.msg)


class CommandFailed(StenvInstallerError):
    def __init__(self, command, returncode, cwd=None):
        self.command = command
        self.returncode = returncode
        self.msg = (
            f"Command exited with status {returncode}!"
            f"\nRan command: `{' '.join(str(part) for part in command)}`"
        )
        if cwd is not None:
            self.msg += f"\ncwd: `{cwd}`"
        super().__init__(self.msg)
