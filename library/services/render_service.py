"""Projection of an ordered record list onto display-ready cards."""
from typing import AbstractSet, Dict, List, Sequence

from colorama import Fore, Style

from ..models import Card, FilterState, GameRecord, RenderResult, ViewMode, ViewStatus

FAVORITE_LABEL = '★ Saved to favorites'
ADD_FAVORITE_LABEL = '☆ Add to favorites'

STATUS_MESSAGES: Dict[ViewStatus, str] = {
    ViewStatus.READY: '',
    ViewStatus.NO_FAVORITES: 'No favorites saved yet.',
    ViewStatus.NO_MATCHES: 'No games match these filters.',
    ViewStatus.LOAD_FAILED: 'Could not load the game catalog. Check the JSON source.',
}


def project(records: Sequence[GameRecord], favorite_ids: AbstractSet[int]) -> List[Card]:
    """Pair every record with its favourite flag, keeping the order."""
    return [Card(record=r, is_favorite=r.id in favorite_ids) for r in records]


def build_result(mode: ViewMode, status: ViewStatus, ordered: Sequence[GameRecord],
                 favorite_ids: AbstractSet[int], filters: FilterState) -> RenderResult:
    """Assemble the :class:`RenderResult` for one render pass.

    A ``READY`` selection whose pipeline output is empty becomes
    ``NO_MATCHES``; ``NO_FAVORITES`` and ``LOAD_FAILED`` pass through with no
    cards.
    """
    if status is ViewStatus.READY and not ordered:
        status = ViewStatus.NO_MATCHES
    cards = project(ordered, favorite_ids) if status is ViewStatus.READY else []
    return RenderResult(mode=mode, status=status, filters=filters, cards=cards,
                        message=STATUS_MESSAGES[status])


def format_rating(rating) -> str:
    return 'N/A' if rating is None else f"{rating:g}"


def favorite_label(is_favorite: bool) -> str:
    return FAVORITE_LABEL if is_favorite else ADD_FAVORITE_LABEL


def card_to_dict(card: Card) -> Dict:
    """JSON-friendly view of a card for the web API."""
    r = card.record
    return {
        'id': r.id,
        'title': r.title,
        'description': r.description,
        'genre': r.genre,
        'year': r.year,
        'rating': r.rating,
        'image': r.image,
        'is_favorite': card.is_favorite,
        'favorite_label': favorite_label(card.is_favorite),
    }


def result_to_dict(result: RenderResult) -> Dict:
    return {
        'view': result.mode.value,
        'status': result.status.value,
        'message': result.message,
        'filters': {
            'search': result.filters.search,
            'genre': result.filters.genre,
            'sort': result.filters.sort.value,
        },
        'count': len(result.cards),
        'games': [card_to_dict(c) for c in result.cards],
    }


def render_card_text(card: Card, width: int = 60) -> str:
    r = card.record
    lines = [f"{Fore.CYAN}{Style.BRIGHT}🎮 {r.title or 'Untitled'} {Fore.YELLOW}[{format_rating(r.rating)}]"]
    tags = [t for t in (r.genre, str(r.year) if r.year else '') if t]
    if tags:
        lines.append(f"{Fore.MAGENTA}{'  '.join(tags)}")
    if r.description:
        lines.append(f"{Fore.WHITE}{r.description}")
    colour = Fore.YELLOW if card.is_favorite else Fore.WHITE
    lines.append(f"{colour}{favorite_label(card.is_favorite)} {Fore.GREEN}(id {r.id})")
    lines.append(f"{Fore.GREEN}{'-' * width}")
    return "\n".join(lines)


def render_text(result: RenderResult, width: int = 60) -> str:
    """Render a whole view for the terminal."""
    title = 'Favorites' if result.mode is ViewMode.FAVORITES else 'Library'
    out = [
        f"{Fore.GREEN}{'=' * width}",
        f"{Fore.CYAN}{Style.BRIGHT}{title} {Fore.WHITE}"
        f"(search: '{result.filters.search}', genre: {result.filters.genre}, "
        f"sort: {result.filters.sort.value})",
        f"{Fore.GREEN}{'=' * width}",
    ]
    if result.status is not ViewStatus.READY:
        colour = Fore.RED if result.status is ViewStatus.LOAD_FAILED else Fore.YELLOW
        out.append(f"{colour}{result.message}")
    else:
        out.extend(render_card_text(card, width) for card in result.cards)
        out.append(f"{Fore.GREEN}{len(result.cards)} game(s)")
    return "\n".join(out)
