"""
Batching subpackage for the Destinations domain.

Public API:
- RouteBatcher
- PacingPolicy
- calculate_route_for_lorry / calculate_routes_for_destinations
"""

from .engine import RouteBatcher
from .policy import PacingPolicy, default_policy
from .service import (
    calculate_route_for_lorry,
    calculate_routes_for_destinations,
    calculate_toll_price,
    calculate_toll_prices_for_destinations,
)

__all__ = [
    "RouteBatcher",
    "PacingPolicy",
    "default_policy",
    "calculate_route_for_lorry",
    "calculate_routes_for_destinations",
    "calculate_toll_price",
    "calculate_toll_prices_for_destinations",
]
