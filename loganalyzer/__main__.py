"""
Entry point for python -m loganalyzer
"""

import click
from loganalyzer import __version__
from loganalyzer.cli import analyze, tokens

@click.group()
@click.version_option(version=__version__)
def cli():
    """loganalyzer - Template-driven Log Analysis"""
    pass

cli.add_command(analyze)
cli.add_command(tokens)

if __name__ == '__main__':
    cli()
