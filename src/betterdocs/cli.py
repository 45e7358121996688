# cli.py
from __future__ import annotations

import sys
from pathlib import Path

import click

from betterdocs.config import DEFAULT_CONFIG_FILE, find_config, load_config
from betterdocs.dsl import docs_pipeline
from betterdocs.runner import EXIT_INTERRUPTED, run_pipeline
from betterdocs.ui.console import Console, get_console, set_console


def discover_config(config_arg: str | None) -> Path:
    """
    Discover the config file from argument or default.

    Raises:
        SystemExit: If no config file can be found
    """
    console = get_console()

    if config_arg:
        config_path = Path(config_arg)
        if not config_path.exists() and config_path.suffix != ".py":
            config_path = Path(str(config_path) + ".py")
        if not config_path.exists():
            console.print_error(
                "Config file not found",
                f"Could not find config file: {config_arg}",
                suggestion="Create one or specify a different path:\n  betterdocs --config my_docs.py",
            )
            sys.exit(1)
        return config_path

    config_path = find_config(".")
    if config_path is None:
        console.print_error(
            "No config file found",
            "Could not find a betterdocs config in the current directory.",
            details=["Looked for:", f"  {DEFAULT_CONFIG_FILE}"],
            suggestion=(
                f"Create {DEFAULT_CONFIG_FILE}:\n"
                "  from betterdocs import DocsConfig\n"
                "  CONFIG = DocsConfig(package=\"mypkg\")"
            ),
        )
        sys.exit(1)
    return config_path


@click.command()
@click.option(
    "--config",
    "config_arg",
    default=None,
    envvar="BETTERDOCS_CONFIG",
    help=f"Config file path (defaults to {DEFAULT_CONFIG_FILE} if present)",
)
@click.option(
    "--open/--no-open",
    "open_artifact",
    default=None,
    envvar="BETTERDOCS_OPEN",
    help="Open the built docs when done (overrides the config)",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show full tool output and stack traces)",
)
def cli(config_arg, open_artifact, debug):
    """betterdocs: build package API docs and open them."""
    console = Console(debug=debug)
    set_console(console)

    config_path = discover_config(config_arg)

    try:
        config = load_config(config_path)
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as e:
        console.print_error(
            "Failed to load config",
            f"Could not load config from {config_path}",
            details=[str(e)],
        )
        if debug:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    try:
        pipeline = docs_pipeline(config, open_artifact=open_artifact)

        console.print_run_started(
            project=pipeline.name,
            config=config_path.name,
            step_count=len(pipeline.steps),
        )

        result = run_pipeline(pipeline)

        console.print_results(result.results)
        if result.ok:
            console.print_info(f"\nDocumentation: {config.index_path}")

        sys.exit(result.exit_code)

    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


if __name__ == "__main__":
    cli()
