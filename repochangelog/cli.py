#!/usr/bin/env python3

import click

from repochangelog.commands.generate import generate_handler
from repochangelog.commands.config import config_cmd


@click.group()
@click.version_option(package_name='repochangelog')
def cli():
    """repochangelog - Release changelogs for multi-package repositories.

    Groups the commits of a tag range by release, by GitHub label and by
    the packages they touched, and lists the people who contributed.
    """
    pass


cli.add_command(generate_handler, name='generate')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
