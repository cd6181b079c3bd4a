"""Custom exceptions for hex terrain generation."""


class HexTerrainError(Exception):
    """Base exception for hex terrain errors."""

    pass


class IndexOutOfRangeError(HexTerrainError, IndexError):
    """Raised when a coordinate or tile index falls outside the map."""

    pass


class InvalidParameterError(HexTerrainError, ValueError):
    """Raised when a map or generator parameter is out of its valid range."""

    pass


class GenerationError(HexTerrainError):
    """Raised when a generator cannot complete a run."""

    pass
