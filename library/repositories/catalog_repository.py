"""Repository for the static game catalog (a JSON array of records).

Two dataset shapes are understood and normalised into :class:`GameRecord`:

* English: ``id``, ``title``, ``desc``/``description``, ``genre``, ``year``,
  ``rating``, ``image``.
* Portuguese: ``nome``, ``descricao``, ``categoria``, ``ano``, ``nota``,
  ``imagem``, usually without ``id``.

Records without an ``id`` are numbered by their 1-based position in the
source array, so every record in a session has an integer identity.
"""
import json
import logging
import math
import os
from typing import Dict, List, Optional, Tuple

import requests

from ..exceptions import CatalogLoadError
from ..models import GameRecord

DEFAULT_CATALOG_SOURCE = 'games.json'
DEFAULT_PLACEHOLDER_IMAGE = 'img/placeholder.png'
DEFAULT_TIMEOUT = 10

# canonical field -> accepted source keys, in lookup order
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    'id': ('id',),
    'title': ('title', 'nome', 'name'),
    'description': ('desc', 'description', 'descricao'),
    'genre': ('genre', 'categoria'),
    'year': ('year', 'ano'),
    'rating': ('rating', 'nota'),
    'image': ('image', 'imagem'),
}

_TEXT_FIELDS = ('title', 'description', 'genre')


def is_remote_source(source: str) -> bool:
    return source.lower().startswith(('http://', 'https://'))


def _pick(raw: Dict, canonical: str):
    for key in FIELD_ALIASES[canonical]:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


class CatalogRepository:
    """Loads and normalises the catalog from a local file or an HTTP(S) URL.

    Unlike the favourites repository this one never writes: the catalog is
    read-only for the whole session.
    """

    def __init__(self, source: str = DEFAULT_CATALOG_SOURCE,
                 placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE,
                 timeout: int = DEFAULT_TIMEOUT) -> None:
        self.source = source
        self.placeholder_image = placeholder_image
        self.timeout = timeout
        self._log = logging.getLogger('pixelplay.repository.CatalogRepository')

    # ------------------------------------------------------------------
    # Raw I/O
    # ------------------------------------------------------------------

    def fetch_raw(self):
        """Return the decoded JSON document behind :attr:`source`.

        Raises:
            CatalogLoadError: On any network, file or JSON error.
        """
        if is_remote_source(self.source):
            try:
                response = requests.get(self.source, timeout=self.timeout)
                response.raise_for_status()
                return response.json()
            except requests.HTTPError as exc:
                raise CatalogLoadError(
                    f"Catalog server returned HTTP {exc.response.status_code}."
                ) from exc
            except requests.JSONDecodeError as exc:
                raise CatalogLoadError(f"Catalog at {self.source} is not valid JSON: {exc}") from exc
            except requests.RequestException as exc:
                raise CatalogLoadError(f"Network error while fetching catalog: {exc}") from exc
            except ValueError as exc:
                raise CatalogLoadError(f"Catalog at {self.source} is not valid JSON: {exc}") from exc

        if not os.path.exists(self.source):
            raise CatalogLoadError(f"Catalog file '{self.source}' not found.")
        try:
            with open(self.source, 'r', encoding='utf-8') as fh:
                return json.load(fh)
        except ValueError as exc:
            raise CatalogLoadError(f"Catalog file '{self.source}' is not valid JSON: {exc}") from exc
        except OSError as exc:
            raise CatalogLoadError(f"Could not read catalog file '{self.source}': {exc}") from exc

    # ------------------------------------------------------------------
    # Normalisation
    # ------------------------------------------------------------------

    def load(self) -> List[GameRecord]:
        """Fetch and normalise the catalog.

        Returns:
            Records in source order (may be empty).

        Raises:
            CatalogLoadError: On I/O failure, a non-array document, a
                non-object element, a non-numeric id/year/rating or a
                duplicate id.
        """
        raw = self.fetch_raw()
        if not isinstance(raw, list):
            raise CatalogLoadError(
                f"Catalog must be a JSON array of games, got {type(raw).__name__}."
            )

        records: List[GameRecord] = []
        seen: Dict[int, int] = {}
        for position, item in enumerate(raw, start=1):
            record = self.normalise(item, position)
            if record.id in seen:
                raise CatalogLoadError(
                    f"Duplicate game id {record.id} at positions {seen[record.id]} and {position}."
                )
            seen[record.id] = position
            records.append(record)

        self._log.info("Loaded %d games from %s", len(records), self.source)
        return records

    def normalise(self, raw, position: int) -> GameRecord:
        """Map one source object onto the canonical :class:`GameRecord`."""
        if not isinstance(raw, dict):
            raise CatalogLoadError(
                f"Catalog entry {position} is a {type(raw).__name__}, expected an object."
            )

        raw_id = _pick(raw, 'id')
        game_id = position if raw_id is None else self._as_int(raw_id, 'id', position)

        text: Dict[str, str] = {}
        for name in _TEXT_FIELDS:
            value = _pick(raw, name)
            if value is None:
                self._log.warning("Game %s is missing '%s'; using an empty value", game_id, name)
                value = ''
            text[name] = str(value)

        raw_year = _pick(raw, 'year')
        year = 0 if raw_year is None else self._as_int(raw_year, 'year', position)

        raw_rating = _pick(raw, 'rating')
        rating = None if raw_rating is None else self._as_float(raw_rating, 'rating', position)

        image = _pick(raw, 'image') or self.placeholder_image

        return GameRecord(
            id=game_id,
            title=text['title'],
            description=text['description'],
            genre=text['genre'],
            year=year,
            rating=rating,
            image=str(image),
        )

    @staticmethod
    def _as_int(value, name: str, position: int) -> int:
        if isinstance(value, bool):
            raise CatalogLoadError(f"Catalog entry {position}: '{name}' must be a number.")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise CatalogLoadError(
                f"Catalog entry {position}: '{name}' must be a number, got {value!r}."
            ) from None
        if not math.isfinite(number):
            raise CatalogLoadError(
                f"Catalog entry {position}: '{name}' must be a finite number, got {value!r}."
            )
        if not number.is_integer():
            raise CatalogLoadError(
                f"Catalog entry {position}: '{name}' must be a whole number, got {value!r}."
            )
        return int(number)

    @staticmethod
    def _as_float(value, name: str, position: int) -> Optional[float]:
        if isinstance(value, bool):
            raise CatalogLoadError(f"Catalog entry {position}: '{name}' must be a number.")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise CatalogLoadError(
                f"Catalog entry {position}: '{name}' must be a number, got {value!r}."
            ) from None
        # json.load accepts NaN and Infinity, which break the rating order
        if not math.isfinite(number):
            raise CatalogLoadError(
                f"Catalog entry {position}: '{name}' must be a finite number, got {value!r}."
            )
        return number
