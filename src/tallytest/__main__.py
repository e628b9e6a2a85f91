# src/tallytest/__main__.py

from tallytest.cli.main import cli

if __name__ == "__main__":
    cli()
