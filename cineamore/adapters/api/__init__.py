"""
Clients des API externes.

TMDBClient implémente IMetadataClient, avec cache disque (APICache) et
relance sur erreurs transitoires (request_with_retry).
"""

from cineamore.adapters.api.cache import APICache
from cineamore.adapters.api.retry import RateLimitError, ServerError, request_with_retry
from cineamore.adapters.api.tmdb_client import TMDBClient

__all__ = ["APICache", "RateLimitError", "ServerError", "TMDBClient", "request_with_retry"]
