"""Capacity metrics for a table and its global secondary indexes."""

import asyncio
import logging
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from .client import RemoteClient
from .models import CapacityFigures, MetricsSnapshot

logger = logging.getLogger(__name__)

# Sampling period and lookback window, in minutes
PERIOD_MINUTES = 5
DURATION_MINUTES = 60

CONSUMED_READ = "ConsumedReadCapacityUnits"
CONSUMED_WRITE = "ConsumedWriteCapacityUnits"


def _provisioned(resource: Mapping[str, Any]) -> tuple[int, int]:
    throughput = resource.get("ProvisionedThroughput") or {}
    return (
        int(throughput.get("ReadCapacityUnits") or 0),
        int(throughput.get("WriteCapacityUnits") or 0),
    )


async def fetch_consumed(
    client: RemoteClient,
    table_name: str,
    index_name: str | None,
    end_time: datetime,
) -> tuple[float, float]:
    """
    Fetch average consumed read/write units per second over the window.

    Args:
        client: Remote client
        table_name: Table to query metrics for
        index_name: Global secondary index, or None for the base table
        end_time: Window end

    Returns:
        Tuple of (read_rate, write_rate)
    """
    dimensions = [{"Name": "TableName", "Value": table_name}]
    if index_name:
        dimensions.append({"Name": "GlobalSecondaryIndexName", "Value": index_name})

    window_seconds = DURATION_MINUTES * 60
    start_time = end_time - timedelta(seconds=window_seconds)

    read_sum, write_sum = await asyncio.gather(
        *(
            client.get_metric_sum(
                metric,
                dimensions,
                period=PERIOD_MINUTES * 60,
                start_time=start_time,
                end_time=end_time,
            )
            for metric in (CONSUMED_READ, CONSUMED_WRITE)
        )
    )
    return (read_sum or 0) / window_seconds, (write_sum or 0) / window_seconds


async def fetch_stats(
    client: RemoteClient,
    description: Mapping[str, Any],
    now: datetime | None = None,
) -> MetricsSnapshot:
    """
    Build a MetricsSnapshot from a table description and CloudWatch sums.

    The base table and every global secondary index are fetched
    concurrently.

    Args:
        client: Remote client
        description: Result of DescribeTable for the table
        now: Window end (default: current UTC time)

    Returns:
        MetricsSnapshot for the table
    """
    table_name = description["TableName"]
    end_time = now or datetime.now(UTC)
    indexes = description.get("GlobalSecondaryIndexes") or []

    logger.debug("Fetching capacity metrics for %s (%d indexes)", table_name, len(indexes))
    results = await asyncio.gather(
        fetch_consumed(client, table_name, None, end_time),
        *(fetch_consumed(client, table_name, index["IndexName"], end_time) for index in indexes),
    )

    def merge(consumed: tuple[float, float], resource: Mapping[str, Any]) -> CapacityFigures:
        read, write = _provisioned(resource)
        return CapacityFigures(
            consumed_read=consumed[0],
            consumed_write=consumed[1],
            provisioned_read=read,
            provisioned_write=write,
        )

    return MetricsSnapshot(
        table_name=table_name,
        period_ms=PERIOD_MINUTES * 60 * 1000,
        duration_ms=DURATION_MINUTES * 60 * 1000,
        table=merge(results[0], description),
        indexes={
            index["IndexName"]: merge(consumed, index)
            for index, consumed in zip(indexes, results[1:], strict=True)
        },
    )
