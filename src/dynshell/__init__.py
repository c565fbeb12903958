"""
dynshell: interactive shell for exploring DynamoDB tables.

Scans and queries return one page at a time; typing ``it`` fetches the next
page of whatever was displayed last.

Example session:
    $ dynshell --region us-east-1
    > t
    TableRegistry(['orders_2024', 'users'])
    > t.orders_2024.scan(Limit=2)
    {'id': 1}
    {'id': 2}
    >> type `it` for next page
    > it
    {'id': 3}

The same engine can be used from Python:
    from dynshell import BlockingBridge, RemoteClient, ProcessCache, fetch_tables

    tables = fetch_tables(RemoteClient(region="us-east-1"), BlockingBridge(), ProcessCache())
    page = tables["orders-2024"].scan(Limit=25)
    while page.has_next:
        page = page.resume()
"""

from importlib.metadata import PackageNotFoundError, version

from .bridge import BlockingBridge, get_bridge
from .broadcast import ContinuationSlot
from .cache import ProcessCache
from .client import RemoteClient
from .exceptions import DynShellError, LocalLogicError, RemoteServiceError
from .models import CapacityFigures, MetricsSnapshot
from .pagination import ResumablePage, resumable
from .registry import (
    TableRegistry,
    fetch_tables,
    invalidate_tables,
    normalize_table_name,
    rebuild_tables,
)
from .table import Table

try:
    __version__ = version("dynshell")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

__all__ = [
    # Version
    "__version__",
    # Main classes
    "BlockingBridge",
    "ContinuationSlot",
    "ProcessCache",
    "RemoteClient",
    "ResumablePage",
    "Table",
    "TableRegistry",
    # Functions
    "fetch_tables",
    "get_bridge",
    "invalidate_tables",
    "rebuild_tables",
    "normalize_table_name",
    "resumable",
    # Models
    "CapacityFigures",
    "MetricsSnapshot",
    # Exceptions
    "DynShellError",
    "RemoteServiceError",
    "LocalLogicError",
]
