"""Repository for the favourites list ([game_id, ...])."""
import json
import logging
import os
import tempfile
from typing import List

DEFAULT_FAVORITES_FILE = '.pixelplay_favorites.json'


class FavoritesRepository:
    """Persists the favourite record ids to a JSON file.

    Schema::

        [<id>, ...]

    Anything else on disk (non-JSON text, an object, a string) loads as an
    empty list.  Non-integer entries inside an otherwise valid array are
    dropped.  The file is replaced whole on every save, so readers never see
    a half-written list.
    """

    def __init__(self, file_path: str = DEFAULT_FAVORITES_FILE) -> None:
        self.path = file_path
        self._log = logging.getLogger('pixelplay.repository.favorites')
        self.data: List[int] = self._read()

    def _read(self) -> List[int]:
        try:
            with open(self.path, encoding='utf-8') as fh:
                raw = json.load(fh)
        except FileNotFoundError:
            return []
        except (ValueError, OSError) as exc:
            self._log.warning("Ignoring unreadable favourites file %s: %s", self.path, exc)
            return []
        return self._clean(raw)

    def _clean(self, raw) -> List[int]:
        if not isinstance(raw, list):
            self._log.warning("Ignoring favourites in %s: expected a JSON array, got %s",
                              self.path, type(raw).__name__)
            return []
        ids: List[int] = []
        for item in raw:
            # bool is an int subclass but never a record id
            if isinstance(item, bool) or not isinstance(item, int):
                self._log.warning("Dropping non-integer favourite entry %r", item)
                continue
            if item not in ids:
                ids.append(item)
        return ids

    def reload(self) -> List[int]:
        """Re-read the file, replacing the in-memory list."""
        self.data = self._read()
        return self.data

    def contains(self, game_id: int) -> bool:
        return game_id in self.data

    def toggle(self, game_id: int) -> bool:
        """Flip *game_id* in memory.  Returns ``True`` if it is now a favourite.

        Does not persist; callers follow up with :meth:`save`.
        """
        if game_id in self.data:
            self.data.remove(game_id)
            return False
        self.data.append(game_id)
        return True

    def save(self) -> None:
        """Write the list next to the target and rename it into place.

        Raises:
            OSError: The file could not be written.  The previous file, if
                any, is left untouched.
        """
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(prefix='.favorites-', suffix='.tmp', dir=directory)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                json.dump(self.data, fh)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
