"""Exception hierarchy shared by the repositories, services and surfaces."""


class PixelPlayError(Exception):
    """Base class for all PixelPlay exceptions."""


class CatalogLoadError(PixelPlayError):
    """Raised when the game catalog cannot be fetched, parsed or validated.

    Terminal for the session: the browser renders an error state instead of
    retrying.
    """


class CatalogNotLoadedError(PixelPlayError):
    """Raised when the pipeline is requested before the catalog has loaded."""


class UnknownGameError(PixelPlayError):
    """Raised when a favourite toggle names an id that is not in the catalog."""

    def __init__(self, game_id) -> None:
        self.game_id = game_id
        super().__init__(f"No game with id {game_id!r} in the catalog.")
