"""Polling layer.

Independently scheduled, deduplicated refresh of remote resources. A
:class:`PollingSource` owns one fetch schedule; sources that share an
:class:`InFlightRegistry` coalesce concurrent requests with the same
dedup key into a single call.
"""

from trailerfleet.polling.registry import InFlightRegistry, InFlightRequest
from trailerfleet.polling.source import PollingSource, start, write_then_refetch
from trailerfleet.polling.state import FetchFn, FetchState, SourceDescriptor

__all__ = [
    "FetchFn",
    "FetchState",
    "InFlightRegistry",
    "InFlightRequest",
    "PollingSource",
    "SourceDescriptor",
    "start",
    "write_then_refetch",
]
