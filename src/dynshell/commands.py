"""
Commands exposed to the shell.

Each command is a zero-argument callback with a name and help text. The
shell namespace runs a command whenever its name is looked up, so the name
evaluates to the command's result:

    > t                      # table registry
    > t.orders.scan()        # first page
    > it                     # next page
    > page = it              # binds the page that was fetched
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import click

from .bridge import BlockingBridge
from .broadcast import ContinuationSlot
from .cache import ProcessCache
from .client import RemoteClient
from .registry import fetch_tables, rebuild_tables


@dataclass(frozen=True)
class Command:
    """A named shell command."""

    name: str
    help: str
    fn: Callable[[], Any]
    aliases: tuple[str, ...] = field(default=())

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)

    def __call__(self) -> Any:
        return self.fn()


class CommandNamespace(dict[str, Any]):
    """
    Shell namespace whose command entries run on lookup.

    Looking up a command name returns the command's result, evaluated once
    per lookup. Every other entry behaves like a plain dict entry, and
    assigning to a command name replaces the command.
    """

    def __init__(self, commands: list[Command]) -> None:
        super().__init__()
        for command in commands:
            for name in command.names:
                super().__setitem__(name, command)

    def __getitem__(self, name: str) -> Any:
        value = super().__getitem__(name)
        if isinstance(value, Command):
            return value()
        return value


class AccountOperations:
    """Account-level DynamoDB operations (``db`` in the shell)."""

    def __init__(self, client: RemoteClient, bridge: BlockingBridge) -> None:
        self._client = client
        self._bridge = bridge

    def describe_limits(self) -> dict[str, Any]:
        """Provisioned capacity limits of the account in this region."""
        return self._bridge.run(self._client.describe_limits())

    def __repr__(self) -> str:
        return "<db operations=[describe_limits]>"


def build_commands(
    client: RemoteClient,
    bridge: BlockingBridge,
    cache: ProcessCache,
    slot: ContinuationSlot,
) -> list[Command]:
    """Create the shell's command set."""
    from . import __version__

    commands: list[Command] = []

    def show_version() -> None:
        click.echo(__version__)

    def show_help() -> None:
        width = max(len(", ".join(c.names)) for c in commands)
        for command in commands:
            click.echo(f"  {', '.join(command.names):<{width}}  {command.help}")

    def tables() -> Any:
        return fetch_tables(client, bridge, cache)

    def refresh() -> Any:
        return rebuild_tables(client, bridge, cache)

    account = AccountOperations(client, bridge)

    commands.extend(
        [
            Command("help", "display help", show_help),
            Command("version", "display version", show_version),
            Command("it", "fetch the next page of the last scan or query", slot.resume),
            Command("t", "table registry (t.<name> or t['raw-name'])", tables, ("table", "tables")),
            Command("refresh", "rediscover tables", refresh),
            Command("db", "account-level operations", lambda: account, ("dynamodb", "dyndb")),
            Command("cache", "process cache statistics", cache.get_stats),
        ]
    )
    return commands
