"""
Activity store integrations.

Provides the query interface the services consume and its adapters:
- SampleStore: async, batch-delivering query interface
- CallbackSampleStore / BatchChannel: bridge for callback-style stores
- InMemorySampleStore: in-memory store, also built from JSON exports
"""

from .base import (
    NO_LIMIT,
    drain,
    QueryPredicate,
    SampleKind,
    SampleQuery,
    SampleStore,
    SortDescriptor,
    SortField,
)
from .channel import BatchChannel, ChannelState
from .callback import CallbackSampleStore
from .memory import InMemorySampleStore
from .export import ExportDocument, load_export, parse_export

__all__ = [
    # Query interface
    "NO_LIMIT",
    "drain",
    "QueryPredicate",
    "SampleKind",
    "SampleQuery",
    "SampleStore",
    "SortDescriptor",
    "SortField",
    # Callback bridge
    "BatchChannel",
    "ChannelState",
    "CallbackSampleStore",
    # Stores
    "InMemorySampleStore",
    "ExportDocument",
    "load_export",
    "parse_export",
]
