"""Table handles: blocking operations on a single DynamoDB table."""

import logging
from collections.abc import Mapping
from typing import Any

from .bridge import BlockingBridge
from .client import RemoteClient
from .models import MetricsSnapshot
from .pagination import ResumablePage, resumable
from .stats import fetch_stats

logger = logging.getLogger(__name__)


def _merge(params: Mapping[str, Any] | None, kwargs: Mapping[str, Any]) -> dict[str, Any]:
    return {**(params or {}), **kwargs}


class Table:
    """
    Handle bound to one DynamoDB table.

    Every operation blocks until the remote call completes. Scans and
    queries return a :class:`ResumablePage`; typing ``it`` in the shell
    fetches the next page.

    Params use the DynamoDB API names and may be passed as a dict, as
    keyword arguments, or both (keywords win):

        t.orders.scan(Limit=10)
        t.orders.query({"KeyConditionExpression": "pk = :pk",
                        "ExpressionAttributeValues": {":pk": "customer#1"}})

    Args:
        table_name: Actual name of the table
        client: Remote client used for all calls
        bridge: Bridge that turns async calls into blocking ones
    """

    def __init__(self, table_name: str, client: RemoteClient, bridge: BlockingBridge) -> None:
        self._table_name = table_name
        self._client = client
        self._bridge = bridge

    @property
    def table_name(self) -> str:
        return self._table_name

    def describe(self) -> dict[str, Any]:
        """Return the table description."""
        return self._bridge.run(self._client.describe_table(self._table_name))

    def scan(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> ResumablePage:
        """Scan one page of the table."""
        request = _merge(params, kwargs)
        logger.debug("Scanning %s", self._table_name)
        response = self._bridge.run(self._client.scan(self._table_name, request))
        return resumable(self.scan, request, response)

    def query(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> ResumablePage:
        """Query one page of the table."""
        request = _merge(params, kwargs)
        logger.debug("Querying %s", self._table_name)
        response = self._bridge.run(self._client.query(self._table_name, request))
        return resumable(self.query, request, response)

    def get(self, key: Mapping[str, Any]) -> dict[str, Any] | None:
        """Fetch one item by its key, or None if it does not exist."""
        return self._bridge.run(self._client.get_item(self._table_name, key))

    def put(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> dict[str, Any]:
        """
        Write an item.

        Accepts PutItem params (``{"Item": {...}, "ConditionExpression": ...}``)
        or a bare item.
        """
        request = _merge(params, kwargs)
        if "Item" not in request:
            request = {"Item": request}
        return self._bridge.run(self._client.put_item(self._table_name, request))

    def update(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> dict[str, Any]:
        return self._bridge.run(self._client.update_item(self._table_name, _merge(params, kwargs)))

    def delete(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> dict[str, Any]:
        return self._bridge.run(self._client.delete_item(self._table_name, _merge(params, kwargs)))

    def update_table(
        self, params: Mapping[str, Any] | None = None, **kwargs: Any
    ) -> dict[str, Any]:
        return self._bridge.run(
            self._client.update_table(self._table_name, _merge(params, kwargs))
        )

    def describe_time_to_live(self) -> dict[str, Any]:
        return self._bridge.run(self._client.describe_time_to_live(self._table_name))

    def stats(self) -> MetricsSnapshot:
        """Consumed vs provisioned capacity over the last hour."""
        description = self.describe()
        return self._bridge.run(fetch_stats(self._client, description))

    def operations(self) -> list[str]:
        """Names of the public operations on this handle."""
        return sorted(
            name
            for name in dir(type(self))
            if not name.startswith("_") and callable(getattr(type(self), name))
        )

    def __repr__(self) -> str:
        return f"<Table {self._table_name!r} operations=[{', '.join(self.operations())}]>"
