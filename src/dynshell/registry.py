"""
Table discovery and the table registry.

The registry maps identifier-safe names (``orders_2024``) to table handles
and keeps the raw names (``orders-2024``) as hidden aliases that resolve to
the same handle. It is built once per process and cached.
"""

import logging
import re
from collections.abc import Iterable, Iterator, Mapping

from .bridge import BlockingBridge
from .cache import ProcessCache
from .client import RemoteClient
from .table import Table

logger = logging.getLogger(__name__)

CACHE_KEY = "tables"

_NON_IDENTIFIER = re.compile(r"\W", re.ASCII)


def normalize_table_name(name: str) -> str:
    """
    Turn a table name into a valid Python identifier.

    Every character that is not a letter, digit or underscore becomes an
    underscore; a leading digit gets an underscore prefix.

    Examples:
        >>> normalize_table_name("orders-2024")
        'orders_2024'
        >>> normalize_table_name("2024.events")
        '_2024_events'
    """
    normalized = _NON_IDENTIFIER.sub("_", name)
    if normalized[:1].isdigit():
        normalized = f"_{normalized}"
    return normalized


class TableRegistry(Mapping[str, Table]):
    """
    Read-only mapping of table names to Table handles.

    Iteration, ``len`` and ``repr`` only show identifier-safe names. Lookups
    by raw table name also work, by item or attribute access:

        t["orders-2024"] is t["orders_2024"] is t.orders_2024
    """

    def __init__(self, tables: Iterable[Table]) -> None:
        self._tables: dict[str, Table] = {}
        self._aliases: dict[str, Table] = {}
        for table in tables:
            self._aliases[table.table_name] = table
            key = normalize_table_name(table.table_name)
            # A table whose raw name is already the identifier wins the key
            if key not in self._tables or key == table.table_name:
                self._tables[key] = table

    def __getitem__(self, name: str) -> Table:
        if name in self._tables:
            return self._tables[name]
        return self._aliases[name]

    def __contains__(self, name: object) -> bool:
        return name in self._tables or name in self._aliases

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def __getattr__(self, name: str) -> Table:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self[name]
        except KeyError:
            raise AttributeError(f"No table named {name!r}") from None

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._tables))

    def table_names(self) -> list[str]:
        """Raw names of all registered tables."""
        return sorted(self._aliases)

    def __repr__(self) -> str:
        return f"TableRegistry({sorted(self._tables)!r})"


async def list_all_tables(client: RemoteClient) -> list[str]:
    """
    List every table name, draining ListTables pagination.

    Any failure aborts the whole listing.
    """
    names: list[str] = []
    start: str | None = None
    while True:
        page = await client.list_tables(exclusive_start_table_name=start)
        names.extend(page.get("TableNames", []))
        start = page.get("LastEvaluatedTableName")
        if not start:
            break
    return names


def fetch_tables(
    client: RemoteClient, bridge: BlockingBridge, cache: ProcessCache
) -> TableRegistry:
    """
    Return the table registry, discovering tables on first use.

    Cached for the process lifetime; :func:`rebuild_tables` rediscovers in
    place.
    """
    cached = cache.get(CACHE_KEY)
    if cached is not None:
        return cached
    return rebuild_tables(client, bridge, cache)


def rebuild_tables(
    client: RemoteClient, bridge: BlockingBridge, cache: ProcessCache
) -> TableRegistry:
    """
    Rediscover tables and replace the cached registry.

    The cached registry is only replaced once discovery has succeeded; on
    failure the previous registry stays cached.
    """
    names = bridge.run(list_all_tables(client))
    logger.info("Discovered %d tables", len(names))
    registry = TableRegistry(Table(name, client, bridge) for name in names)
    return cache.set(CACHE_KEY, registry)


def invalidate_tables(cache: ProcessCache) -> None:
    """Drop the cached registry so the next lookup rediscovers tables."""
    cache.delete(CACHE_KEY)
