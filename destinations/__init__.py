"""
Destinations domain package.

Public API:
- Domain models: Destination, RouteResult, RouteOutcome, BatchResult
- Route table helpers: load_destinations, destinations_from_frame, apply_batch_result
"""
from .models import BatchResult, Destination, RouteOutcome, RouteResult
from .table import apply_batch_result, destinations_from_frame, load_destinations

__all__ = ["Destination",
           "RouteResult",
             "RouteOutcome",
               "BatchResult",
               "load_destinations",
               "destinations_from_frame",
               "apply_batch_result",
               ]
