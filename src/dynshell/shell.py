"""Interactive shell over the table registry."""

from __future__ import annotations

import builtins
import code
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from pprint import pformat
from typing import Any

import click

from .bridge import BlockingBridge
from .broadcast import ContinuationSlot
from .broadcast import slot as default_slot
from .cache import ProcessCache
from .cache import cache as default_cache
from .client import RemoteClient
from .commands import Command, CommandNamespace, build_commands
from .config import ShellConfig
from .exceptions import DynShellError
from .pagination import ResumablePage

try:
    import readline
except ImportError:  # pragma: no cover - Windows without pyreadline
    readline = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

PROMPT = "> "
NEXT_PAGE_HINT = ">> type `it` for next page"

# Lines never written to history
_UNRECORDED = {"it", ".history"}


class History:
    """
    Line history kept by readline and persisted to ``path``.

    Every method is a no-op when readline is unavailable.
    """

    length = 1000

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> None:
        """Take over line recording from readline and read the stored history."""
        if readline is None:
            return
        readline.set_auto_history(False)
        readline.set_history_length(self.length)
        if self.path.exists():
            try:
                readline.read_history_file(str(self.path))
            except OSError as e:
                logger.warning("Could not read history file %s: %s", self.path, e)

    def record(self, line: str) -> bool:
        """Record ``line`` unless blank, unrecorded, or equal to the last entry."""
        if readline is None:
            return False
        entry = line.strip()
        if not entry or entry in _UNRECORDED:
            return False
        if entry == readline.get_history_item(readline.get_current_history_length()):
            return False
        readline.add_history(entry)
        return True

    def save(self) -> None:
        """Write the history back to ``path``."""
        if readline is None:
            return
        try:
            readline.write_history_file(str(self.path))
        except OSError as e:
            logger.warning("Could not write history file %s: %s", self.path, e)


def render(value: Any) -> str:
    """Format a value for the console."""
    if isinstance(value, ResumablePage):
        return "\n".join(pformat(item) for item in value)
    if hasattr(value, "as_dict"):
        return pformat(value.as_dict())
    return pformat(value)


class DynShell(code.InteractiveConsole):
    """
    Python console with the dynshell commands in its namespace.

    Every displayed value is published to the continuation slot, so ``it``
    always resumes the last displayed scan or query.

    Args:
        commands: Commands to expose
        slot: Continuation slot shared with the ``it`` command
        history: Optional persistent history
    """

    def __init__(
        self,
        commands: list[Command],
        slot: ContinuationSlot,
        history: History | None = None,
    ) -> None:
        super().__init__(locals=CommandNamespace(commands), filename="<dynshell>")
        self.commands = {name: command for command in commands for name in command.names}
        self.slot = slot
        self.history = history

    def display(self, value: Any) -> None:
        """Show a value and publish it to the continuation slot."""
        if value is not None:
            click.echo(render(value))
            builtins._ = value  # type: ignore[attr-defined]
        self.slot.publish(value)
        if self.slot.has_next:
            click.echo(NEXT_PAGE_HINT)

    @contextmanager
    def display_hook(self) -> Iterator[None]:
        """Route expression results through :meth:`display`."""
        previous = sys.displayhook
        sys.displayhook = self.display
        try:
            yield
        finally:
            sys.displayhook = previous

    def runcode(self, code: Any) -> None:
        try:
            exec(code, self.locals)
        except SystemExit:
            raise
        except DynShellError as e:
            click.echo(f"✗ {e}", err=True)
        except BaseException:
            self.showtraceback()

    def run_command(self, name: str) -> bool:
        """Run a dot command such as ``.help``; False if unknown."""
        command = self.commands.get(name)
        if command is None:
            return False
        try:
            self.display(command())
        except DynShellError as e:
            click.echo(f"✗ {e}", err=True)
        return True

    def push(self, line: str, *args: Any, **kwargs: Any) -> bool:
        if self.history is not None:
            self.history.record(line)
        stripped = line.strip()
        if not self.buffer and stripped.startswith(".") and stripped[1:].isidentifier():
            if self.run_command(stripped[1:]):
                return False
            click.echo(f"Invalid command: {stripped}", err=True)
            return False
        return super().push(line, *args, **kwargs)

    def interact(self, banner: str | None = None, exitmsg: str | None = None) -> None:
        if self.history is not None:
            self.history.load()
        sys.ps1, sys.ps2 = PROMPT, "... "
        try:
            with self.display_hook():
                super().interact(banner=banner, exitmsg=exitmsg)
        finally:
            if self.history is not None:
                self.history.save()


def run_shell(
    config: ShellConfig,
    client: RemoteClient | None = None,
    bridge: BlockingBridge | None = None,
    cache: ProcessCache | None = None,
    slot: ContinuationSlot | None = None,
) -> None:
    """Start an interactive session until EOF."""
    from . import __version__
    from .bridge import get_bridge

    client = client or RemoteClient(region=config.region, endpoint_url=config.endpoint_url)
    bridge = bridge or get_bridge()
    slot = slot or default_slot
    commands = build_commands(client, bridge, cache or default_cache, slot)
    history = History(config.history_file) if config.history_file else None

    shell = DynShell(commands, slot, history)
    banner = f"dynshell {__version__} (region: {config.region or 'default'}). Type `help`."
    try:
        shell.interact(banner=banner, exitmsg="")
    finally:
        bridge.run(client.close())
        bridge.close()
