"""Filter-then-sort pipeline over catalog records.

Everything here is pure: inputs are never mutated and the same inputs always
give the same output.
"""
import unicodedata
from typing import Iterable, List, Sequence, Tuple

from ..models import ALL_GENRES, FilterState, GameRecord, SortMode

# Character groups for title collation, in sort order.
_SPACE, _PUNCT, _DIGIT, _LETTER, _OTHER = range(5)


def _char_group(char: str) -> int:
    category = unicodedata.category(char)
    if char.isspace():
        return _SPACE
    if category[0] in ('P', 'S'):
        return _PUNCT
    if category == 'Nd':
        return _DIGIT
    if category[0] == 'L':
        return _LETTER
    return _OTHER


def collation_key(text: str) -> Tuple:
    """Sort key approximating locale-aware (``localeCompare``-style) ordering.

    Compared level by level: base letters ignoring accents and case, then
    accents, then case with lowercase first.  Whitespace and punctuation sort
    before digits, digits before letters.
    """
    decomposed = unicodedata.normalize('NFD', text)
    # Mn = Mark, Nonspacing (diacritics)
    base = ''.join(c for c in decomposed if unicodedata.category(c) != 'Mn')
    # one element per folded character, so 'ß' compares as 's', 's'
    primary = tuple((_char_group(c), folded) for c in base for folded in c.casefold())
    secondary = decomposed.casefold()
    tertiary = tuple(1 if c.isupper() else 0 for c in base)
    return primary, secondary, tertiary


def _rating_key(record: GameRecord) -> float:
    return float('-inf') if record.rating is None else record.rating


def matches_search(record: GameRecord, search: str) -> bool:
    """Case-insensitive substring match on title or description."""
    term = search.lower()
    return term in record.title.lower() or term in record.description.lower()


def sort_records(records: Iterable[GameRecord], mode: SortMode) -> List[GameRecord]:
    """Stable sort of *records* by *mode*.  Equal keys keep their input order."""
    if mode is SortMode.RATING:
        # reverse=True keeps sort stability
        return sorted(records, key=_rating_key, reverse=True)
    if mode is SortMode.YEAR:
        return sorted(records, key=lambda r: r.year, reverse=True)
    if mode is SortMode.TITLE:
        return sorted(records, key=lambda r: collation_key(r.title))
    raise ValueError(f"Unknown sort mode: {mode!r}")


def apply(records: Sequence[GameRecord], filters: FilterState) -> List[GameRecord]:
    """Run the text filter, the genre filter and the sort, in that order.

    Args:
        records: Source list; left untouched.
        filters: Current filter state.

    Returns:
        A new ordered list, possibly empty.
    """
    result = list(records)

    if filters.search:
        result = [r for r in result if matches_search(r, filters.search)]

    if filters.genre != ALL_GENRES:
        result = [r for r in result if r.genre == filters.genre]

    return sort_records(result, filters.sort)


def available_genres(records: Iterable[GameRecord]) -> List[str]:
    """Distinct non-empty genres in *records*, collated like titles."""
    return sorted({r.genre for r in records if r.genre}, key=collation_key)
