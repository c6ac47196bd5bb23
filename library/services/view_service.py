"""Chooses which derived list feeds the pipeline for the active page."""
from typing import AbstractSet, Sequence

from ..models import GameRecord, ViewMode, ViewSelection, ViewStatus


def select(mode: ViewMode, catalog: Sequence[GameRecord],
           favorite_ids: AbstractSet[int]) -> ViewSelection:
    """Return the source list for *mode*.

    ``library`` yields the catalog unchanged.  ``favorites`` yields the
    catalog records whose id is a favourite, in catalog order; when none
    remain the selection carries ``ViewStatus.NO_FAVORITES`` so callers can
    tell "nothing saved yet" apart from "filters excluded everything".
    """
    mode = ViewMode(mode)
    if mode is ViewMode.LIBRARY:
        return ViewSelection(mode=mode, records=tuple(catalog))

    subset = tuple(r for r in catalog if r.id in favorite_ids)
    status = ViewStatus.READY if subset else ViewStatus.NO_FAVORITES
    return ViewSelection(mode=mode, records=subset, status=status)
