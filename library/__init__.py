"""
PixelPlay library package.

Layered the same way on both surfaces:

  library/repositories/  pure I/O: loading the catalog and persisting favourites.
  library/services/      domain logic: filtering, sorting, view selection, rendering.

``CatalogBrowser`` (in ``pixelplay.py``) is the integration point: it creates
repository and service instances in ``__init__`` and re-derives the visible
card grid after every mutation.  ``pixelplay_gui.py`` drives the same
controller from Flask route handlers.
"""
