# external imports
import click

from .. import __version__
from .cli_rows import exec_, get, get_one, insert, remove, update
from .cli_schema import add_column, create, drop, exists
from .common import config_option, directory_option, verbose_option

# local imports
from .core import OrderedGroup


@click.group(
    cls=OrderedGroup,
    help="Query and modify the SQLite database DATABASE.",
)
@click.version_option(version=__version__, message="%(version)s")
@click.argument("database")
@config_option
@directory_option
@verbose_option
@click.pass_context
def main(
    ctx: click.Context,
    database: str,
    config_name: str,
    directory: str,
    verbose: bool,
) -> None:
    ctx.ensure_object(dict)
    ctx.obj.update(
        database=database,
        config_name=config_name,
        directory=directory,
        verbose=verbose,
    )


main.add_command(exists, section="Schema")
main.add_command(create, section="Schema")
main.add_command(drop, section="Schema")
main.add_command(add_column, section="Schema")

main.add_command(insert, section="Rows")
main.add_command(update, section="Rows")
main.add_command(remove, section="Rows")
main.add_command(get, section="Rows")
main.add_command(get_one, section="Rows")
main.add_command(exec_, section="Rows")
