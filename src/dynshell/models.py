"""Core models for dynshell."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CapacityFigures:
    """
    Consumed and provisioned capacity for a table or index.

    Consumed figures are average units per second over the lookback window.
    Provisioned figures are 0 for on-demand tables.

    Attributes:
        consumed_read: Average consumed read capacity units per second
        consumed_write: Average consumed write capacity units per second
        provisioned_read: Provisioned read capacity units
        provisioned_write: Provisioned write capacity units
    """

    consumed_read: float = 0.0
    consumed_write: float = 0.0
    provisioned_read: int = 0
    provisioned_write: int = 0

    def as_dict(self) -> dict[str, Any]:
        """Return figures keyed by CloudWatch/DynamoDB metric name."""
        return {
            "ConsumedReadCapacityUnits": self.consumed_read,
            "ConsumedWriteCapacityUnits": self.consumed_write,
            "ProvisionedReadCapacityUnits": self.provisioned_read,
            "ProvisionedWriteCapacityUnits": self.provisioned_write,
        }


@dataclass(frozen=True)
class MetricsSnapshot:
    """
    Capacity figures of a table and its global secondary indexes.

    Attributes:
        table_name: Table the figures belong to
        period_ms: CloudWatch sampling period in milliseconds
        duration_ms: Lookback window in milliseconds
        table: Figures for the base table
        indexes: Figures per global secondary index name
    """

    table_name: str
    period_ms: int
    duration_ms: int
    table: CapacityFigures
    indexes: dict[str, CapacityFigures] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "table_name": self.table_name,
            "period_ms": self.period_ms,
            "duration_ms": self.duration_ms,
            "table": self.table.as_dict(),
            "indexes": {name: figures.as_dict() for name, figures in self.indexes.items()},
        }
