"""Business logic for the in-memory game catalog."""
import logging
import random
from typing import Dict, List, Optional, Sequence

from ..models import GameRecord
from ..repositories.catalog_repository import CatalogRepository


class CatalogService:
    """Holds the catalog for the session, delegating loading to
    :class:`~library.repositories.catalog_repository.CatalogRepository`.

    The record list is loaded once and never mutated afterwards; callers get
    copies so they cannot reorder the session catalog by accident.
    """

    def __init__(self, repository: CatalogRepository) -> None:
        self._repo = repository
        self._records: List[GameRecord] = []
        self._by_id: Dict[int, GameRecord] = {}
        self._log = logging.getLogger('pixelplay.catalog')

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> List[GameRecord]:
        """Load the catalog through the repository.

        Raises:
            CatalogLoadError: Propagated unchanged from the repository.
        """
        records = self._repo.load()
        self._records = records
        self._by_id = {r.id: r for r in records}
        return list(records)

    @property
    def source(self) -> str:
        return self._repo.source

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_all(self) -> List[GameRecord]:
        """Return the catalog in source order."""
        return list(self._records)

    def get(self, game_id: int) -> Optional[GameRecord]:
        """Return the record with *game_id*, or ``None``."""
        return self._by_id.get(game_id)

    def contains(self, game_id: int) -> bool:
        return game_id in self._by_id

    def pick_random(self, records: Optional[Sequence[GameRecord]] = None,
                    rng: Optional[random.Random] = None) -> Optional[GameRecord]:
        """Pick one record at random.

        Args:
            records: Candidates; defaults to the whole catalog.
            rng:     Random source, mainly for tests.

        Returns:
            A record, or ``None`` when there is nothing to pick from.
        """
        pool = self._records if records is None else records
        if not pool:
            return None
        choice = (rng or random).choice(list(pool))
        self._log.debug("Picked %s (%s)", choice.title, choice.id)
        return choice
