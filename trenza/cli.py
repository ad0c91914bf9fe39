#!/usr/bin/env python3

import click

from trenza.commands.config import config_cmd
from trenza.commands.join import join_handler


@click.group()
@click.version_option(package_name='trenza')
def cli():
    """trenza - Join git repositories into one monorepo.

    Merges every repository below a directory into a new repository,
    keeping each one's full history under its own subdirectory.
    """
    pass


cli.add_command(join_handler, name='join')
cli.add_command(config_cmd, name='config')


def main():
    cli()

if __name__ == "__main__":
    main()
