"""Services package: expose all concrete services from one import."""
from . import filter_service, render_service, view_service
from .catalog_service import CatalogService
from .favorites_service import FavoritesService

__all__ = [
    'CatalogService',
    'FavoritesService',
    'filter_service',
    'render_service',
    'view_service',
]
