#!/usr/bin/env python3
"""
composedash - Interactive terminal dashboard for compose-defined containers.
"""
import sys
import signal
import asyncio
import logging
from typing import Iterable, Optional

import click
from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.text import Text

from composedash.core.compose import ComposeConfig
from composedash.core.config import Settings, load_settings
from composedash.core.exceptions import ComposeDashError
from composedash.core.logstream import LogStreamManager
from composedash.core.registry import Container, ContainerRegistry
from composedash.core.router import InputRouter
from composedash.core.runner import ProcessRunner, Verb
from composedash.core.utils import setup_logging
from composedash.ui import menus
from composedash.ui.console import DashboardConsole
from composedash.ui.keyboard import KeyboardInput

VERSION = "1.0.0"
console = Console()
ui = DashboardConsole(console)
logger = logging.getLogger('composedash')


class ComposeDash:
    """Main composedash application: wires registry, runner, streams and router."""

    def __init__(self, settings: Settings, dashboard: Optional[DashboardConsole] = None,
                 runner: Optional[ProcessRunner] = None, spawn=None):
        """Load the compose file and build all components. Raises ComposeDashError."""
        self.settings = settings
        self.compose = ComposeConfig(settings.compose_file)
        self.project_name = settings.project_name or self.compose.project_name
        self.registry = ContainerRegistry(self.compose.services)
        self.console = dashboard or ui
        self.runner = runner or ProcessRunner.from_settings(settings, self.project_name)
        self.streams = LogStreamManager(self.console, self.runner, spawn=spawn)
        self.router = InputRouter(
            self.registry, self.runner, self.streams, self.console, on_quit=self.quit
        )
        self.keyboard = KeyboardInput(self.router.handle_key, on_interrupt=self.router.interrupt)
        self._done: Optional[asyncio.Future] = None

    def launch(self, containers: Iterable[Container]):
        """Start each container and follow its logs."""
        for container in containers:
            self.console.log(Text.assemble("Spinning up ", (container.name, "green"), "..."))
            result = self.runner.run(container, Verb.START)
            if result.exit_code != 0:
                logger.warning(f"Start of {container.name} exited with code {result.exit_code}")
                self.console.log(Text(
                    f"{result.output.rstrip()}\nstart {container.name} exited with code {result.exit_code}",
                    style="red",
                ))
            self.streams.attach(container)

    def quit(self):
        """Tear down every log session and end the event loop."""
        self.streams.detach_all()
        if self._done is not None and not self._done.done():
            self._done.set_result(None)

    async def run(self, start: Iterable[Container] = ()):
        loop = asyncio.get_running_loop()
        self._done = loop.create_future()

        self.console.start()
        self.router.enter_main_menu()
        self.launch(start)

        self.keyboard.start(loop)
        loop.add_signal_handler(signal.SIGWINCH, self.console.on_resize)
        loop.add_signal_handler(signal.SIGINT, self.router.interrupt)
        try:
            await self._done
        finally:
            loop.remove_signal_handler(signal.SIGWINCH)
            loop.remove_signal_handler(signal.SIGINT)
            self.keyboard.stop()
            self.streams.detach_all()
            self.console.stop()


def get_composedash(settings: Settings) -> ComposeDash:
    """Get ComposeDash instance with error handling."""
    try:
        return ComposeDash(settings)
    except ComposeDashError as e:
        ui.print_error(e)
        sys.exit(1)
    except Exception as e:
        ui.print_error(e, show_traceback=True)
        sys.exit(1)


def choose_containers(dash: ComposeDash, start_mode: Optional[str] = None):
    """Decide which containers to start before the dashboard opens."""
    if start_mode == 'all':
        return dash.registry.list()
    if start_mode == 'none':
        return []

    if start_mode is None:
        names = Text("\n".join(c.name for c in dash.registry), style="green")
        console.print(Text.assemble(
            f"Found {dash.settings.compose_file.name} with these containers:\n\n", names, "\n"
        ))
        start_mode = Prompt.ask(
            "What should we do? Turn them [green]all[/green] on, or [cyan]choose[/cyan] which ones to start",
            choices=["all", "choose"],
            default="all",
            console=console,
        )
    if start_mode == "all":
        return dash.registry.list()
    return [c for c in dash.registry if Confirm.ask(f"Start {c.name}?", console=console)]


# CLI Commands
@click.group(invoke_without_command=True)
@click.version_option(version=VERSION)
@click.option('--file', '-f', 'compose_file', type=click.Path(dir_okay=False),
              help='Compose file to read (default: discovered in the current directory)')
@click.option('--project-name', '-p', help='Compose project name')
@click.option('--runtime', help='Container runtime executable used for logs and ps')
@click.option('--compose-command', help='Compose executable, e.g. "docker compose"')
@click.option('--start', 'start_mode', type=click.Choice(['all', 'choose', 'none']),
              help='Which containers to start (default: ask)')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, compose_file, project_name, runtime, compose_command, start_mode, debug):
    """composedash - Interactive dashboard for compose-defined containers"""
    try:
        settings = load_settings(compose_file, project_name, runtime, compose_command)
    except ComposeDashError as e:
        ui.print_error(e)
        sys.exit(1)

    setup_logging(debug, settings.log_dir, console)
    logger.info(f"Using compose file: {settings.compose_file}")

    ctx.ensure_object(dict)
    ctx.obj['SETTINGS'] = settings

    if ctx.invoked_subcommand is None:
        dash = get_composedash(settings)
        try:
            start = choose_containers(dash, start_mode)
        except KeyboardInterrupt:
            logger.info("Startup prompt interrupted")
            return
        asyncio.run(dash.run(start))
        logger.info("Dashboard closed")


@cli.command(name='list')
@click.pass_context
def list_containers(ctx):
    """Show the containers and their log colors"""
    dash = get_composedash(ctx.obj['SETTINGS'])
    table = Table(title=f"Containers ({dash.project_name})")
    table.add_column("#", style="magenta")
    table.add_column("Service")
    table.add_column("Color")
    table.add_column("Container name", style="cyan")

    for container in dash.registry:
        table.add_row(
            str(container.index),
            Text(container.name, style=container.color),
            container.color,
            dash.runner.qualified_name(container),
        )

    console.print(table)


@cli.command()
@click.pass_context
def ps(ctx):
    """Show the trimmed process list"""
    dash = get_composedash(ctx.obj['SETTINGS'])
    result = dash.runner.process_list()
    if result.exit_code != 0:
        ui.print_error(result.output.strip() or f"process list exited with code {result.exit_code}")
        sys.exit(1)
    console.print(menus.process_list_menu(result.output))


if __name__ == '__main__':
    cli()
