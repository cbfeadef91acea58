import click
from repochangelog.config import load_config, get_config_path
from repochangelog.cli_utils import standard_command
import json


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSON")
@click.option("--path", is_flag=True, help="Show the config file path being used")
@standard_command
def show_config(pretty, path, **kwargs):
    """Show the current configuration with all merges applied.

    By default, outputs single-line JSON.
    Use --pretty for human-readable formatted output.
    Use --path to see which config file is being used.
    """
    if path:
        config_path = get_config_path()
        return json.dumps({"config_path": str(config_path) if config_path else None})

    config = load_config()

    # Never echo the token
    if config.get("github", {}).get("token"):
        config["github"]["token"] = "***"

    if pretty:
        return json.dumps(config, indent=2, ensure_ascii=False)
    return json.dumps(config, ensure_ascii=False)
