#Marks routing as a package.
#Re-exports the clean public APIs (ORSClient, RouteQuery, ProviderSettings)
#so other modules import from routing without knowing internal file names.
#No business logic.

from .ors_client import ORSClient, ORSError, to_ors_position
from .route_query import RouteQuery
from .settings import ProviderSettings, default_settings

__all__ = [
           "ORSClient",
             "ORSError",
             "to_ors_position",
             "RouteQuery",
             "ProviderSettings",
             "default_settings",
             ]
