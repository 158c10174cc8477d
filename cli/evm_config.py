"""
CLI tool to inspect the EVM configuration resolved from the project's `evm.yaml`,
`EVM_*` environment variables and command-line flags.

Example:
    evm-config show --chain goerli -vvv
    evm-config --log-level DEBUG show --root ./project --format json
    evm-config fork-url --rpc-url https://eth.example
"""

import json
from pathlib import Path
from typing import Any, Dict

import click
import yaml
from rich.console import Console
from rich.table import Table

from ethereum_evm_args import EvmArgs, evm_options
from ethereum_evm_config import Config, ConfigError, EvmOpts
from ethereum_evm_config.logging import LogLevel, configure_logging, get_logger

logger = get_logger(__name__)


def log_level_callback(ctx: click.Context, param: click.Parameter, value: str) -> int:
    """Parse the `--log-level` option."""
    try:
        return LogLevel.from_cli(value)
    except ValueError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param) from e


def resolve(evm_args: EvmArgs, root: Path | None) -> EvmOpts:
    """Merge the command-line overlay into the layered configuration and extract options."""
    figment = Config.figment(root).merge(evm_args)
    logger.verbose(
        f"Resolving profile `{figment.profile}` from {len(figment.providers)} providers"
    )
    try:
        return EvmOpts.from_figment(figment)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


def opts_to_dict(opts: EvmOpts) -> Dict[str, Any]:
    """Flatten the execution options into a JSON-compatible mapping."""
    values = opts.serialize(mode="json", by_alias=False, exclude_none=False)
    env = values.pop("env")
    return values | env


def render_table(values: Dict[str, Any], profile: str) -> Table:
    """Render the resolved values as a two-column table."""
    table = Table(title=f"EVM options (profile: {profile})")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", overflow="fold")
    for key, value in values.items():
        table.add_row(key, "-" if value is None else str(value))
    return table


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    callback=log_level_callback,
    help="Logging level: DEBUG, VERBOSE, INFO, WARNING, ERROR or a number.",
)
def evm_config(log_level: int):
    """Inspect the EVM configuration resolved from files, environment and flags."""
    configure_logging(log_level=log_level, log_to_stdout=True)


@evm_config.command(short_help="Print the resolved EVM options.")
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root holding `evm.yaml` (default: the current directory).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["yaml", "json", "table"]),
    default="yaml",
    show_default=True,
    help="Output format.",
)
@evm_options
def show(evm_args: EvmArgs, root: Path | None, output_format: str):
    """Print the EVM options after merging the command-line flags into the configuration."""
    opts = resolve(evm_args, root)
    values = opts_to_dict(opts) | {"chain_id": str(opts.resolved_chain_id())}
    if output_format == "json":
        click.echo(json.dumps(values, indent=2))
    elif output_format == "yaml":
        click.echo(yaml.safe_dump(values, sort_keys=False), nl=False)
    else:
        Console(highlight=False).print(render_table(values, Config.selected_profile()))


@evm_config.command(name="fork-url", short_help="Print the fork url.")
@evm_options
def fork_url(evm_args: EvmArgs):
    """Print the url state is forked from, failing when no fork url is given."""
    try:
        click.echo(evm_args.ensure_fork_url())
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    evm_config()
