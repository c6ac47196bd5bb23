"""Repository package: expose all concrete repositories from one import."""
from .catalog_repository import CatalogRepository
from .favorites_repository import FavoritesRepository

__all__ = [
    'CatalogRepository',
    'FavoritesRepository',
]
