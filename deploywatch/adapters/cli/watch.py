"""
Watch CLI command
"""
import typer
from pathlib import Path
from typing import Optional

from ...core.logging import get_logger, get_stdout_console, get_stderr_console
from ...core.exceptions import ConfigError, WatchError
from ...domain.watch import (
    build_catalog,
    DeployDispatcher,
    DispatchOptions,
    WatchService,
)
from ..config.loader import ConfigLoader, find_settings_file
from ..config.service_parser import load_service_metadata
from ..deploy.serverless import ServerlessFunctionDeployer, ServerlessServiceDeployer
from ..watch.observer import ChangeObserver
from .feedback import RichWatchFeedback

logger = get_logger(__name__)
stdout_console = get_stdout_console()
stderr_console = get_stderr_console()


def register_watch_command(app: typer.Typer) -> None:
    """Register watch command directly on the main app"""
    app.command(name="watch")(watch_run)


def watch_run(
    function: Optional[str] = typer.Option(
        None, "--function", "-f", help="The function you want to watch"
    ),
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to serverless config file"
    ),
    stage: Optional[str] = typer.Option(
        None, "--stage", "-s", help="Specify the stage to use"
    ),
    region: Optional[str] = typer.Option(
        None, "--region", "-r", help="Specify the region to use"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Pass --verbose to serverless"
    ),
    service_dir: Path = typer.Option(
        Path("."), "--service-dir", "-d", help="Service root directory"
    ),
    settings_path: Optional[Path] = typer.Option(
        None, "--settings", help="Settings file (TOML), defaults to deploywatch.toml"
    ),
    serverless_bin: Optional[str] = typer.Option(
        None, "--serverless-bin", help="serverless executable"
    ),
    polling: Optional[bool] = typer.Option(
        None, "--polling/--no-polling", help="Use the polling observer"
    ),
    max_parallel: Optional[int] = typer.Option(
        None, "--max-parallel", min=1, help="Cap on concurrent function deploys"
    ),
):
    """
    Watch and deploy your functions

    Examples:
        deploywatch watch
        deploywatch watch -f hello -s dev
        deploywatch watch -c serverless.dev.yml --polling
    """
    observer: Optional[ChangeObserver] = None
    service: Optional[WatchService] = None
    try:
        root = service_dir.expanduser().resolve()

        settings = ConfigLoader().load(
            toml_path=find_settings_file(root, settings_path),
            cli_overrides={
                "function": function,
                "config": config,
                "stage": stage,
                "region": region,
                "verbose": verbose or None,
                "serverless_bin": serverless_bin,
                "use_polling": polling,
                "max_parallel": max_parallel,
            },
        )

        metadata = load_service_metadata(
            root,
            config_override=settings.config,
            serverless_bin=settings.serverless_bin,
            stage=settings.stage,
        )
        catalog = build_catalog(
            metadata,
            scope_filter=settings.function,
            config_override=settings.config,
        )

        dispatcher = DeployDispatcher(
            catalog,
            function_deployer=ServerlessFunctionDeployer(settings.serverless_bin, cwd=root),
            service_deployer=ServerlessServiceDeployer(settings.serverless_bin, cwd=root),
            max_parallel=settings.max_parallel,
        )
        service = WatchService(
            catalog,
            dispatcher,
            options=DispatchOptions.from_cli(**settings.deploy_options()),
            feedback=RichWatchFeedback(stdout_console),
        )

        observer = ChangeObserver(
            catalog.watch_set,
            sink=service.submit,
            base_dir=root,
            use_polling=settings.use_polling,
        )
        observer.start()
        service.run()

    except KeyboardInterrupt:
        stdout_console.print("\nStopping watcher...")
    except ConfigError as e:
        stderr_console.print(f"[red]Config Error:[/red] {e}")
        raise typer.Exit(1)
    except WatchError as e:
        stderr_console.print(f"[red]Watch Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Watch session failed")
        stderr_console.print(f"[red]Error:[/red] Watch session failed: {e}")
        raise typer.Exit(1)
    finally:
        if observer is not None:
            observer.stop()
        if service is not None:
            service.feedback.stop()
