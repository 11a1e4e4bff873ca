from stenv_installer.cli.root import app


app(prog_name="stenv-installer")
