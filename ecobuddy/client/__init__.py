"""
Client Package

Headless versions of the browser-side pieces: the API client, the live
search dropdown and the map/table synchronisation.
"""

from ecobuddy.client.http import FacilityApiClient, ClientError, ApiError
from ecobuddy.client.live_search import LiveSearch, SearchState
from ecobuddy.client.map_sync import EventBus, MapView, TableView, MapTableSync

__all__ = [
    'FacilityApiClient',
    'ClientError',
    'ApiError',
    'LiveSearch',
    'SearchState',
    'EventBus',
    'MapView',
    'TableView',
    'MapTableSync'
]
