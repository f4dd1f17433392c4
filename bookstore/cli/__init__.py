import click

from bookstore.cli.create_tables import create_tables


@click.group()
def cli():
    """Bookstore management commands."""


cli.add_command(create_tables)
