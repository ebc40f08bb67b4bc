"""Custom exception hierarchy for the crossword game engine."""


class CrosswordError(Exception):
    """Base exception for engine failures."""


class CatalogLoadError(CrosswordError):
    """Raised when the word catalog cannot be read or decoded."""


class SelectionError(CrosswordError):
    """Raised when no word set of the required size can be selected."""


class LayoutError(CrosswordError):
    """Raised when a layout cannot be built from the given words."""


class StateStoreError(CrosswordError):
    """Raised when the game state backend fails or holds corrupt data."""


class GameStateError(CrosswordError):
    """Raised when a session operation is not valid for the current game."""
