#!/usr/bin/env python3
"""
PixelPlay GUI - Web-based card grid for the game catalog browser.
Serves the library page and the favorites page, plus a small JSON API the
pages use to toggle favorites and discover a random game.
"""

import argparse
import logging
import os
import threading
from typing import Optional, Tuple

from flask import Flask, abort, jsonify, render_template, request

import pixelplay
from library.exceptions import CatalogNotLoadedError, UnknownGameError
from library.models import ALL_GENRES, FilterState, SortMode, ViewMode, ViewStatus
from library.services import render_service

log_level = os.getenv('PIXELPLAY_LOG_LEVEL', 'INFO')
pixelplay_logger = pixelplay.setup_logging(log_level)
gui_logger = logging.getLogger('pixelplay.gui')

app = Flask(__name__)

# Single shared controller; the lock keeps request threads from interleaving
# a filter change with another request's render pass.
browser: Optional[pixelplay.CatalogBrowser] = None
browser_lock = threading.Lock()


def setup_file_logging(path: str = 'logs/pixelplay_gui.log') -> None:
    """Mirror GUI log records into *path*."""
    try:
        os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
        fh = logging.FileHandler(path)
        fh.setFormatter(logging.Formatter('[%(asctime)s] %(levelname)s %(name)s: %(message)s'))
        fh.setLevel(getattr(logging, log_level.upper(), logging.INFO))
        pixelplay_logger.addHandler(fh)
    except OSError as e:
        gui_logger.warning('Could not create log file handler: %s', e)


def initialize_browser(config_path: str = 'config.json', config: Optional[dict] = None) -> Tuple[bool, str]:
    """Create the shared browser and load its catalog."""
    global browser
    with browser_lock:
        browser = pixelplay.CatalogBrowser(config_path=config_path, config=config)
        if browser.load_catalog():
            message = f"Loaded {len(browser.games)} games"
            gui_logger.info(message)
            return True, message
        gui_logger.error('Catalog load failed: %s', browser.load_error)
        return False, browser.load_error or 'Failed to load catalog'


def _filters_from_request(current: pixelplay.CatalogBrowser) -> FilterState:
    """Build the filter state from query parameters.  Absent values mean defaults.

    Raises:
        ValueError: On an unknown ``sort`` value.
    """
    default_sort = current.config.get('default_sort', SortMode.RATING.value)
    return FilterState(
        search=request.args.get('search', ''),
        genre=request.args.get('genre', '') or ALL_GENRES,
        sort=SortMode.parse(request.args.get('sort') or default_sort),
    )


def _view_from_request(default: ViewMode) -> ViewMode:
    view = request.args.get('view')
    if not view:
        return default
    return ViewMode(view)


def _render_pass(mode: ViewMode):
    """Apply the request's filters/view to the shared browser and re-render.

    Must be called with ``browser_lock`` held.
    """
    if browser is None:
        abort(503, description='Catalog browser not initialized')
    try:
        browser.filters = _filters_from_request(browser)
    except ValueError:
        abort(400, description=f"Unknown sort mode '{request.args.get('sort')}'")
    browser.mode = mode
    try:
        return browser.refresh()
    except CatalogNotLoadedError:
        abort(503, description='Catalog is still loading')


@app.errorhandler(400)
@app.errorhandler(404)
@app.errorhandler(503)
def json_error(err):
    if request.path.startswith('/api/'):
        return jsonify({'error': err.description}), err.code
    return err


@app.route('/')
@app.route('/index.html')
@app.route('/favoritos')
@app.route('/favoritos.html')
def index():
    """Library page, or the favorites page when the path names it"""
    mode = ViewMode.from_path(request.path)
    with browser_lock:
        result = _render_pass(mode)
        genres = browser.genres() if browser.state == browser.READY else []
    status = 500 if result.status is ViewStatus.LOAD_FAILED else 200
    return render_template(
        'index.html',
        result=result,
        genres=genres,
        sort_modes=[m.value for m in SortMode],
        favorite_label=render_service.favorite_label,
        format_rating=render_service.format_rating,
    ), status


@app.route('/api/status')
def api_status():
    """Get application status"""
    with browser_lock:
        if browser is None:
            return jsonify({'ready': False, 'state': 'uninitialized', 'message': 'Starting up...'})
        return jsonify({
            'ready': browser.state == browser.READY,
            'state': browser.state,
            'source': browser.catalog_service.source,
            'games': len(browser.games),
            'favorites': len(browser.favorites),
            'genres': browser.genres(),
            'error': browser.load_error,
        })


@app.route('/api/games')
def api_games():
    """Rendered view as JSON (view, search, genre and sort come from the query)"""
    try:
        mode = _view_from_request(ViewMode.LIBRARY)
    except ValueError:
        abort(400, description=f"Unknown view '{request.args.get('view')}'")
    with browser_lock:
        result = _render_pass(mode)
    payload = render_service.result_to_dict(result)
    if result.status is ViewStatus.LOAD_FAILED:
        return jsonify(payload), 503
    return jsonify(payload)


@app.route('/api/favorites')
def api_favorites():
    """Get all favorite game ids"""
    with browser_lock:
        if browser is None:
            abort(503, description='Catalog browser not initialized')
        return jsonify({'favorites': sorted(browser.favorites)})


@app.route('/api/favorites/<int:game_id>', methods=['POST'])
def api_toggle_favorite(game_id: int):
    """Toggle a game in favorites"""
    with browser_lock:
        if browser is None:
            abort(503, description='Catalog browser not initialized')
        try:
            browser.toggle_favorite(game_id)
        except UnknownGameError as e:
            abort(404, description=str(e))
        except CatalogNotLoadedError as e:
            abort(503, description=str(e))
        favorites = browser.favorites
    gui_logger.info('Toggled favorite %s (now %s)', game_id,
                    'saved' if game_id in favorites else 'removed')
    return jsonify({
        'game_id': game_id,
        'is_favorite': game_id in favorites,
        'favorites': sorted(favorites),
    })


@app.route('/api/random')
def api_random():
    """Discover a random game from the requested view"""
    try:
        mode = _view_from_request(ViewMode.LIBRARY)
    except ValueError:
        abort(400, description=f"Unknown view '{request.args.get('view')}'")
    with browser_lock:
        result = _render_pass(mode)
        game = browser.catalog_service.pick_random(result.records)
        favorites = browser.favorites
    if game is None:
        abort(404, description=result.message or 'No games to pick from')
    return jsonify(render_service.card_to_dict(
        render_service.project([game], favorites)[0]
    ))


def main():
    """Main entry point for GUI"""
    parser = argparse.ArgumentParser(description='PixelPlay Web GUI')
    parser.add_argument('--config', default='config.json', help='Path to config file')
    parser.add_argument('--catalog', metavar='SOURCE', help='Catalog JSON file or http(s) URL')
    parser.add_argument('--host', default='127.0.0.1', help='Interface to bind (default: 127.0.0.1)')
    parser.add_argument('--port', type=int, default=5000, help='Port to listen on (default: 5000)')
    args = parser.parse_args()

    setup_file_logging()

    config = pixelplay.load_config(args.config)
    if args.catalog:
        config['catalog_source'] = args.catalog
    ok, message = initialize_browser(config=config)
    if not ok:
        # Terminal for this session; pages render the error state.
        print(f"Warning: {message}")

    print("\n" + "="*60)
    print("🎮 PixelPlay Web GUI is starting...")
    print("="*60)
    print("\nOpen your browser and go to:")
    print(f"  http://{args.host}:{args.port}")
    print("\nPress Ctrl+C to stop the server")
    print("="*60 + "\n")

    try:
        app.run(host=args.host, port=args.port, debug=False)
    except KeyboardInterrupt:
        print("\n\n" + "="*60)
        print("🛑 PixelPlay Web GUI stopped")
        print("="*60 + "\n")


if __name__ == '__main__':
    main()
