"""CLI entry point for dnd-monitor."""

import asyncio
import logging
import signal
import sys
from pathlib import Path

import click

from dnd_monitor import __version__

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )

    # APScheduler logs every job run at INFO
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


async def run_monitor(config_path: Path | None = None) -> None:
    """Run the monitor until SIGINT/SIGTERM, logging each transition."""
    from dnd_monitor.config import MonitorSettings
    from dnd_monitor.monitor import DndEvent, DndMonitor

    settings = MonitorSettings.load(config_path)
    monitor = DndMonitor(settings)

    # The first poll is scheduled, not run inline, so listeners added here
    # still see it
    monitor.add_listener(DndEvent.STARTED, lambda: logger.info("Do Not Disturb started"))
    monitor.add_listener(DndEvent.FINISHED, lambda: logger.info("Do Not Disturb finished"))

    shutdown_event = asyncio.Event()

    def handle_signal(sig, frame):
        logger.info(f"Received signal {sig}, shutting down...")
        shutdown_event.set()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    # Always monitor when run from the CLI, even if monitorDnd is off
    if not monitor.enabled:
        monitor.start()
    try:
        await shutdown_event.wait()
    finally:
        await monitor.close()


@click.group()
@click.version_option(version=__version__)
def cli():
    """dnd-monitor - Do Not Disturb / Focus mode detector."""
    pass


@cli.command()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to settings YAML (default: ~/.config/dnd-monitor/settings.yaml)",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose logging",
)
def run(config: Path | None, verbose: bool):
    """Watch Do Not Disturb state and log every change."""
    setup_logging(verbose=verbose)

    click.echo("Watching Do Not Disturb state...")
    click.echo("Press Ctrl+C to stop")
    click.echo()

    try:
        asyncio.run(run_monitor(config_path=config))
    except KeyboardInterrupt:
        click.echo("\nShutdown complete")


@cli.command()
def check():
    """Query Do Not Disturb state once."""
    from dnd_monitor.probes import create_probe

    probe = create_probe()

    async def query():
        try:
            return await probe.is_dnd_active()
        finally:
            await probe.close()

    active = asyncio.run(query())

    click.echo("\n🔍 Do Not Disturb Check")
    click.echo("=" * 50)
    click.echo(f"Platform: {sys.platform}")
    desktop = getattr(probe, "desktop", None)
    if desktop is not None:
        click.echo(f"Desktop environment: {desktop}")
    click.echo(f"Probe: {type(probe).__name__}")
    click.echo(f"Do Not Disturb: {'🔕 active' if active else '🔔 inactive'}")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
