"""
Main CLI application
"""
import typer
from pathlib import Path
from typing import Optional

from ...core.logging import setup_logging
from .watch import register_watch_command


# Create main app
app = typer.Typer(
    name="deploywatch",
    add_completion=False,
    help="Watch a serverless service and redeploy what changed",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register watch command directly (not as subcommand)
register_watch_command(app)


@app.callback()
def main(
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Log file path",
    ),
):
    """
    deploywatch - watch a serverless service and redeploy what changed

    Use subcommands to perform different operations:
    - watch: Watch and deploy your functions
    """
    setup_logging(level=log_level, log_file=log_file)


def run():
    """CLI entry point"""
    app()


if __name__ == "__main__":
    run()
