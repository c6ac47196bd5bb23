"""Business logic for the favourites set."""
import logging
from typing import Set

from ..repositories.favorites_repository import FavoritesRepository


class FavoritesService:
    """Manages the user's favourites, delegating persistence to
    :class:`~library.repositories.favorites_repository.FavoritesRepository`.

    Every mutation is written through to disk before returning.  Write
    failures are logged and the in-memory set stays authoritative for the
    rest of the session.
    """

    def __init__(self, repository: FavoritesRepository) -> None:
        self._repo = repository
        self._log = logging.getLogger('pixelplay.favorites')

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _persist(self) -> bool:
        try:
            self._repo.save()
            return True
        except OSError as exc:
            self._log.warning("Could not save favourites to %s: %s", self._repo.path, exc)
            return False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load(self) -> Set[int]:
        """Re-read durable storage.  Absent or malformed data gives an empty set."""
        return set(self._repo.reload())

    def toggle(self, game_id: int) -> Set[int]:
        """Add *game_id* if absent, remove it if present, then persist.

        Returns:
            The new favourites set (a copy).
        """
        added = self._repo.toggle(game_id)
        self._log.debug("%s favourite %s", "Added" if added else "Removed", game_id)
        self._persist()
        return self.get_all()

    def contains(self, game_id: int) -> bool:
        """Return ``True`` if *game_id* is a favourite."""
        return self._repo.contains(game_id)

    def get_all(self) -> Set[int]:
        """Return the favourites set (a copy)."""
        return set(self._repo.data)
