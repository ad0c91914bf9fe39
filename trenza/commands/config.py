import json
import sys

import click

from ..config import get_config_path, get_default_config, load_config, save_config
from ..exit_codes import CommandError


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing configuration file")
def init_config(force):
    """Write the default configuration to the config file.

    The file is ~/.trenza/config.json unless TRENZA_CONFIG points elsewhere.
    A YAML path (.yaml/.yml) is written as YAML.
    """
    config_path = get_config_path()
    if config_path.exists() and config_path.stat().st_size > 0 and not force:
        click.echo(f"Configuration already exists at {config_path} (use --force to overwrite)", err=True)
        sys.exit(1)
    written = save_config(get_default_config())
    click.echo(f"Default configuration written to {written}")


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
@click.option("--path", is_flag=True, help="Show the config file path being used")
def show_config(pretty, path):
    """Show the current configuration with all merges applied.

    By default, outputs single-line JSON (JSONL format).
    Use --pretty for human-readable formatted output.
    Use --path to see which config file is being used.
    """
    if path:
        print(json.dumps({"config_path": str(get_config_path())}))
        return

    try:
        config = load_config()
    except CommandError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(e.exit_code)

    if pretty:
        print(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        print(json.dumps(config, ensure_ascii=False))
