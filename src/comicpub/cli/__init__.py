# ABOUTME: CLI package for comicpub, built on Click.
# ABOUTME: Defines the root command group and registers subcommands.

import logging

import click

from comicpub.cli.commands import build_cmd, inspect_cmd


@click.group()
@click.version_option(package_name="comicpub")
@click.option(
    "-v", "--verbose",
    count=True,
    help="Log progress to stderr (-v for info, -vv for debug).",
)
def cli(verbose: int) -> None:
    """comicpub - package page images into fixed-layout EPUB comics."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )


cli.add_command(build_cmd.build)
cli.add_command(inspect_cmd.inspect)
