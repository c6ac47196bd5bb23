#!/usr/bin/env python3
"""
PixelPlay - Game Catalog Browser
Browse a static game catalog: search, filter by genre, sort, and keep a list
of favourites that survives between sessions.
"""

import argparse
import dataclasses
import json
import logging
import os
import random
import sys
from typing import Dict, List, Optional, Set

from colorama import init, Fore, Style

from library.exceptions import CatalogLoadError, CatalogNotLoadedError, UnknownGameError
from library.models import ALL_GENRES, FilterState, GameRecord, RenderResult, SortMode, ViewMode, ViewStatus
from library.repositories import CatalogRepository, FavoritesRepository
from library.repositories.catalog_repository import DEFAULT_CATALOG_SOURCE, DEFAULT_PLACEHOLDER_IMAGE
from library.repositories.favorites_repository import DEFAULT_FAVORITES_FILE
from library.services import CatalogService, FavoritesService, filter_service, render_service, view_service

# Initialize colorama for cross-platform colored terminal output
init(autoreset=True)

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def setup_logging(level: str = 'WARNING') -> logging.Logger:
    """Configure the root PixelPlay logger.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to WARNING so normal use is quiet.

    Returns:
        Configured logger instance.
    """
    numeric = getattr(logging, str(level).upper(), logging.WARNING)
    logger = logging.getLogger('pixelplay')
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
        logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger


# Module-level logger used throughout pixelplay.py
logger = setup_logging()


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

DEFAULT_CONFIG: Dict = {
    'catalog_source': DEFAULT_CATALOG_SOURCE,
    'favorites_file': DEFAULT_FAVORITES_FILE,
    'placeholder_image': DEFAULT_PLACEHOLDER_IMAGE,
    'default_sort': SortMode.RATING.value,
    'log_level': 'WARNING',
}

# environment variable -> config key
ENV_OVERRIDES = {
    'PIXELPLAY_CATALOG': 'catalog_source',
    'PIXELPLAY_FAVORITES_FILE': 'favorites_file',
    'PIXELPLAY_LOG_LEVEL': 'log_level',
}


def load_config(config_path: str = 'config.json') -> Dict:
    """Load configuration from an optional JSON file with environment overrides.

    A missing file means defaults.  Environment variables take precedence
    over file values:
    - PIXELPLAY_CATALOG overrides catalog_source
    - PIXELPLAY_FAVORITES_FILE overrides favorites_file
    - PIXELPLAY_LOG_LEVEL overrides log_level
    """
    config = dict(DEFAULT_CONFIG)

    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except json.JSONDecodeError as e:
            print(f"{Fore.RED}Error parsing config file: {e}")
            sys.exit(1)
        if not isinstance(loaded, dict):
            print(f"{Fore.RED}Error: Config file '{config_path}' must contain a JSON object.")
            sys.exit(1)
        config.update(loaded)

    for env_name, key in ENV_OVERRIDES.items():
        if os.getenv(env_name):
            config[key] = os.getenv(env_name)

    try:
        SortMode.parse(config['default_sort'])
    except ValueError:
        print(f"{Fore.RED}Error: Invalid default_sort '{config['default_sort']}' in config.")
        print(f"{Fore.YELLOW}Use one of: {', '.join(m.value for m in SortMode)}")
        sys.exit(1)

    return config


# ---------------------------------------------------------------------------
# Application controller
# ---------------------------------------------------------------------------

class CatalogBrowser:
    """Main catalog browser application.

    Owns the filter state, the active view and the catalog load state.  Every
    mutation re-derives the visible grid from scratch through
    view selector -> pipeline -> render projection.
    """

    PENDING = 'pending'
    READY = 'ready'
    FAILED = 'failed'

    def __init__(self, config_path: str = 'config.json', config: Optional[Dict] = None):
        self._log = logging.getLogger('pixelplay.browser')
        self.config = dict(config) if config is not None else load_config(config_path)

        # Re-apply log level from config (allows "log_level": "DEBUG" in config.json)
        setup_logging(self.config.get('log_level', 'WARNING'))

        self.catalog_service = CatalogService(CatalogRepository(
            self.config.get('catalog_source', DEFAULT_CATALOG_SOURCE),
            placeholder_image=self.config.get('placeholder_image', DEFAULT_PLACEHOLDER_IMAGE),
        ))
        self.favorites_service = FavoritesService(
            FavoritesRepository(self.config.get('favorites_file', DEFAULT_FAVORITES_FILE))
        )

        self.filters = FilterState(sort=SortMode.parse(self.config.get('default_sort', 'rating')))
        self.mode = ViewMode.LIBRARY
        self.state = self.PENDING
        self.load_error: Optional[str] = None
        self.last_result: Optional[RenderResult] = None

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def load_catalog(self) -> bool:
        """Load the catalog once.  A failure is terminal for the session."""
        if self.state != self.PENDING:
            return self.state == self.READY
        try:
            self.catalog_service.load()
        except CatalogLoadError as e:
            self._log.error("Could not load catalog from %s: %s", self.catalog_service.source, e)
            self.state = self.FAILED
            self.load_error = str(e)
            return False
        self.state = self.READY
        return True

    @property
    def games(self) -> List[GameRecord]:
        return self.catalog_service.get_all()

    @property
    def favorites(self) -> Set[int]:
        return self.favorites_service.get_all()

    def genres(self) -> List[str]:
        return filter_service.available_genres(self.games)

    def _require_ready(self) -> None:
        if self.state == self.PENDING:
            raise CatalogNotLoadedError("Catalog has not been loaded yet; call load_catalog() first.")

    # ------------------------------------------------------------------
    # Render pass
    # ------------------------------------------------------------------

    def refresh(self) -> RenderResult:
        """Re-derive the visible grid for the current view and filters."""
        self._require_ready()
        favorites = self.favorites

        if self.state == self.FAILED:
            result = render_service.build_result(self.mode, ViewStatus.LOAD_FAILED, [],
                                                 favorites, self.filters)
        else:
            selection = view_service.select(self.mode, self.games, favorites)
            if selection.empty_favorites:
                ordered: List[GameRecord] = []
            else:
                ordered = filter_service.apply(selection.records, self.filters)
            result = render_service.build_result(self.mode, selection.status, ordered,
                                                 favorites, self.filters)

        self.last_result = result
        self._log.debug("Rendered %s view: %s, %d card(s)",
                        result.mode.value, result.status.value, len(result.cards))
        return result

    # ------------------------------------------------------------------
    # Mutations (each one triggers a full refresh)
    # ------------------------------------------------------------------

    def set_search(self, search: str) -> RenderResult:
        self.filters = dataclasses.replace(self.filters, search=search or '')
        return self.refresh()

    def set_genre(self, genre: str) -> RenderResult:
        self.filters = dataclasses.replace(self.filters, genre=genre or ALL_GENRES)
        return self.refresh()

    def set_sort(self, sort) -> RenderResult:
        """Switch the sort mode.  Raises ``ValueError`` on an unknown mode."""
        self.filters = dataclasses.replace(self.filters, sort=SortMode.parse(sort))
        return self.refresh()

    def reset_filters(self) -> RenderResult:
        self.filters = FilterState(sort=SortMode.parse(self.config.get('default_sort', 'rating')))
        return self.refresh()

    def navigate(self, mode) -> RenderResult:
        """Switch between the library and favourites views."""
        self.mode = ViewMode(mode)
        return self.refresh()

    def toggle_favorite(self, game_id: int) -> RenderResult:
        """Flip *game_id* in the favourites set and re-render.

        Raises:
            CatalogNotLoadedError: Unless the catalog loaded successfully.
            UnknownGameError: If the catalog has no record with *game_id*.
        """
        if self.state != self.READY:
            raise CatalogNotLoadedError("Favorites are unavailable until the catalog has loaded.")
        if not self.catalog_service.contains(game_id):
            raise UnknownGameError(game_id)
        self.favorites_service.toggle(game_id)
        return self.refresh()

    def discover_random(self, rng: Optional[random.Random] = None) -> Optional[GameRecord]:
        """Pick a random game from the currently visible grid."""
        result = self.refresh()
        return self.catalog_service.pick_random(result.records, rng=rng)

    # ------------------------------------------------------------------
    # Terminal surface
    # ------------------------------------------------------------------

    def display(self, result: Optional[RenderResult] = None) -> None:
        print(render_service.render_text(result or self.refresh()))

    def display_game_info(self, game: GameRecord) -> None:
        """Display information about a single game"""
        is_favorite = self.favorites_service.contains(game.id)
        print(f"\n{Fore.GREEN}{'='*60}")
        print(f"{Fore.CYAN}{Style.BRIGHT}🎮 {game.title}")
        if is_favorite:
            print(f"{Fore.YELLOW}⭐ FAVORITE")
        print(f"{Fore.GREEN}{'='*60}")
        print(f"{Fore.YELLOW}Game ID: {Fore.WHITE}{game.id}")
        print(f"{Fore.YELLOW}Genre: {Fore.WHITE}{game.genre or 'Unknown'}")
        print(f"{Fore.YELLOW}Year: {Fore.WHITE}{game.year or 'Unknown'}")
        print(f"{Fore.YELLOW}Rating: {Fore.WHITE}{render_service.format_rating(game.rating)}")
        if game.description:
            print(f"\n{Fore.YELLOW}Description:")
            print(f"{Fore.WHITE}{game.description}")
        print(f"{Fore.GREEN}{'='*60}\n")

    def list_genres(self) -> None:
        genres = self.genres()
        if not genres:
            print(f"{Fore.YELLOW}No genres in the catalog.")
            return
        print(f"\n{Fore.CYAN}{Style.BRIGHT}Genres ({len(genres)})")
        for genre in genres:
            print(f"{Fore.WHITE}  {genre}")

    def interactive_mode(self):
        """Run in interactive mode"""
        if not self.load_catalog():
            self.display()
            return

        self.display()
        while True:
            view = 'favorites' if self.mode is ViewMode.FAVORITES else 'library'
            print(f"\n{Fore.CYAN}{Style.BRIGHT}PixelPlay - Game Catalog ({view})")
            print(f"{Fore.WHITE}{'='*40}")
            print(f"{Fore.YELLOW}1. {Fore.WHITE}Search")
            print(f"{Fore.YELLOW}2. {Fore.WHITE}Filter by genre")
            print(f"{Fore.YELLOW}3. {Fore.WHITE}Change sort (rating / year / title)")
            print(f"{Fore.YELLOW}4. {Fore.WHITE}Toggle a favorite")
            print(f"{Fore.YELLOW}5. {Fore.WHITE}Switch library / favorites")
            print(f"{Fore.YELLOW}6. {Fore.WHITE}Discover a random game")
            print(f"{Fore.YELLOW}7. {Fore.WHITE}List genres")
            print(f"{Fore.YELLOW}8. {Fore.WHITE}Reset filters")
            print(f"{Fore.YELLOW}q. {Fore.WHITE}Quit")
            print(f"{Fore.WHITE}{'='*40}")

            choice = input(f"\n{Fore.GREEN}Enter your choice: {Fore.WHITE}").strip().lower()

            if choice == 'q':
                print(f"\n{Fore.CYAN}Thanks for using PixelPlay! Happy gaming! 🎮")
                break
            elif choice == '1':
                term = input(f"{Fore.GREEN}Search term (empty to clear): {Fore.WHITE}")
                self.display(self.set_search(term))
            elif choice == '2':
                genre = input(f"{Fore.GREEN}Genre (empty for all): {Fore.WHITE}").strip()
                self.display(self.set_genre(genre or ALL_GENRES))
            elif choice == '3':
                sort = input(f"{Fore.GREEN}Sort by (rating/year/title): {Fore.WHITE}")
                try:
                    self.display(self.set_sort(sort))
                except ValueError:
                    print(f"{Fore.RED}Unknown sort mode '{sort.strip()}'.")
            elif choice == '4':
                raw = input(f"{Fore.GREEN}Game ID: {Fore.WHITE}").strip()
                try:
                    self.display(self.toggle_favorite(int(raw)))
                except ValueError:
                    print(f"{Fore.RED}'{raw}' is not a game ID.")
                except UnknownGameError as e:
                    print(f"{Fore.RED}{e}")
            elif choice == '5':
                target = ViewMode.LIBRARY if self.mode is ViewMode.FAVORITES else ViewMode.FAVORITES
                self.display(self.navigate(target))
            elif choice == '6':
                game = self.discover_random()
                if game:
                    self.display_game_info(game)
                else:
                    print(f"{Fore.YELLOW}Nothing to pick from in this view!")
            elif choice == '7':
                self.list_genres()
            elif choice == '8':
                self.display(self.reset_filters())
            else:
                print(f"{Fore.RED}Invalid choice. Please try again.")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='PixelPlay - Game Catalog Browser',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 pixelplay.py                       # Show the library sorted by rating
  python3 pixelplay.py --search zelda        # Search titles and descriptions
  python3 pixelplay.py --genre RPG --sort year
  python3 pixelplay.py --toggle 3            # Mark / unmark game 3 as favorite
  python3 pixelplay.py --favorites           # Show the favorites page
  python3 pixelplay.py --interactive         # Menu-driven mode
        """
    )

    parser.add_argument('--config', '-c', default='config.json',
                        help='Path to config file (default: config.json)')
    parser.add_argument('--catalog', metavar='SOURCE',
                        help='Catalog JSON file or http(s) URL (overrides config)')
    parser.add_argument('--search', '-s', default='',
                        help='Only show games whose title or description contains this text')
    parser.add_argument('--genre', '-g', default=ALL_GENRES,
                        help='Only show games of this exact genre (default: all)')
    parser.add_argument('--sort', choices=['rating', 'year', 'title', 'az'],
                        help='Sort order (default: from config, usually rating)')
    parser.add_argument('--favorites', '-f', action='store_true',
                        help='Show the favorites view instead of the full library')
    parser.add_argument('--toggle', type=int, action='append', metavar='ID', default=[],
                        help='Toggle a game in favorites (repeatable)')
    parser.add_argument('--random', '-r', action='store_true',
                        help='Pick a random game from the current view and exit')
    parser.add_argument('--list-genres', action='store_true',
                        help='List the genres in the catalog and exit')
    parser.add_argument('--interactive', '-i', action='store_true',
                        help='Run the interactive menu')
    parser.add_argument('--log-level', metavar='LEVEL',
                        help='Log level (DEBUG, INFO, WARNING, ERROR)')

    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.catalog:
        config['catalog_source'] = args.catalog
    if args.log_level:
        config['log_level'] = args.log_level

    browser = CatalogBrowser(config=config)

    if args.interactive:
        browser.interactive_mode()
        return 0 if browser.state == browser.READY else 1

    if not browser.load_catalog():
        browser.display()
        return 1

    if args.list_genres:
        browser.list_genres()
        return 0

    for game_id in args.toggle:
        try:
            browser.toggle_favorite(game_id)
        except UnknownGameError as e:
            print(f"{Fore.RED}Error: {e}")
            return 1
        state = 'Added to' if game_id in browser.favorites else 'Removed from'
        print(f"{Fore.GREEN}{state} favorites: {game_id}  {browser.catalog_service.get(game_id)}")

    browser.filters = FilterState(
        search=args.search,
        genre=args.genre or ALL_GENRES,
        sort=SortMode.parse(args.sort) if args.sort else browser.filters.sort,
    )
    browser.mode = ViewMode.FAVORITES if args.favorites else ViewMode.LIBRARY

    if args.random:
        game = browser.discover_random()
        if not game:
            print(f"{Fore.YELLOW}No games to pick from!")
            return 1
        browser.display_game_info(game)
        return 0

    browser.display()
    return 0


if __name__ == '__main__':
    sys.exit(main())
