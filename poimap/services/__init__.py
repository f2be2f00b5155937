# Business logic services

from .declutter import declutter
from .poi_fetcher import FetchResult, PoiFetcher, build_query, parse_records
from .map_surface import HeadlessMapSurface, MapSurface
from .marker_reconciler import MarkerHandle, MarkerReconciler, ReconcileStats
from .viewport_watcher import ViewportWatcher, moved_significantly
from .nearest import NearestResult, find_nearest, format_distance, haversine_m
from .routing_client import MapboxDirectionsClient, RoutingProvider, apple_maps_url
from .geolocation import FixedGeolocation, GeolocationProvider, locate
from .directions import DirectionsController

__all__ = [
    'declutter',
    'FetchResult',
    'PoiFetcher',
    'build_query',
    'parse_records',
    'HeadlessMapSurface',
    'MapSurface',
    'MarkerHandle',
    'MarkerReconciler',
    'ReconcileStats',
    'ViewportWatcher',
    'moved_significantly',
    'NearestResult',
    'find_nearest',
    'format_distance',
    'haversine_m',
    'MapboxDirectionsClient',
    'RoutingProvider',
    'apple_maps_url',
    'FixedGeolocation',
    'GeolocationProvider',
    'locate',
    'DirectionsController',
]
