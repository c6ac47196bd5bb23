"""Data model for catalog records, filter state and rendered views."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

ALL_GENRES = 'all'


class SortMode(Enum):
    """Active ordering of the card grid.  Exactly one is active at a time."""

    RATING = 'rating'
    YEAR = 'year'
    TITLE = 'title'

    @classmethod
    def parse(cls, value) -> 'SortMode':
        """Return the mode for *value*, accepting the legacy ``az`` alias.

        Raises:
            ValueError: If *value* names no sort mode.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if text == 'az':
            return cls.TITLE
        return cls(text)


class ViewMode(Enum):
    """Which page is active: the full library or the favourites page."""

    LIBRARY = 'library'
    FAVORITES = 'favorites'

    @classmethod
    def from_path(cls, path: str) -> 'ViewMode':
        """Map a page path such as ``/favoritos.html`` to a view mode."""
        lowered = (path or '').lower()
        if 'favoritos' in lowered or 'favorites' in lowered:
            return cls.FAVORITES
        return cls.LIBRARY


class ViewStatus(Enum):
    """Outcome of a render pass.  Each empty state gets its own value."""

    READY = 'ready'
    NO_FAVORITES = 'no_favorites'
    NO_MATCHES = 'no_matches'
    LOAD_FAILED = 'load_failed'


@dataclass(frozen=True)
class GameRecord:
    """
    One game in the catalog.  Immutable once loaded.

    Attributes
    ----------
    id          : Unique integer identity within the catalog.
    title       : Display title.
    description : Short blurb shown on the card.
    genre       : Free-form genre label (matched case-sensitively).
    year        : Release year, ``0`` when unknown.
    rating      : Score, or ``None`` when the dataset carries no rating.
    image       : Image URI, or the configured placeholder.
    """

    id: int
    title: str
    description: str = ''
    genre: str = ''
    year: int = 0
    rating: Optional[float] = None
    image: str = ''

    def __str__(self) -> str:
        parts = [self.title]
        if self.year:
            parts.append(f"({self.year})")
        if self.rating is not None:
            parts.append(f"★ {self.rating:g}")
        return "  ".join(parts)


@dataclass(frozen=True)
class FilterState:
    """Current search term, genre constraint and sort mode.

    ``genre == "all"`` means no genre constraint.  Never persisted.
    """

    search: str = ''
    genre: str = ALL_GENRES
    sort: SortMode = SortMode.RATING


@dataclass(frozen=True)
class ViewSelection:
    """Source list chosen for a view, before filtering and sorting."""

    mode: ViewMode
    records: Tuple[GameRecord, ...]
    status: ViewStatus = ViewStatus.READY

    @property
    def empty_favorites(self) -> bool:
        return self.status is ViewStatus.NO_FAVORITES


@dataclass(frozen=True)
class Card:
    """A record paired with its favourite flag, ready for display."""

    record: GameRecord
    is_favorite: bool


@dataclass
class RenderResult:
    """Everything a display surface needs to draw one view."""

    mode: ViewMode
    status: ViewStatus
    filters: FilterState
    cards: List[Card] = field(default_factory=list)
    message: str = ''

    @property
    def records(self) -> List[GameRecord]:
        return [card.record for card in self.cards]
