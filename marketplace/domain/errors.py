# marketplace/domain/errors.py


class MarketplaceError(Exception):
    """Bazowy blad domenowy, zawsze do obsluzenia przez wywolujacego."""


class NotFoundError(MarketplaceError, LookupError):
    pass


class ForbiddenError(MarketplaceError, PermissionError):
    pass


class InvalidStateError(MarketplaceError, ValueError):
    pass


class CapacityExceededError(MarketplaceError, ValueError):
    pass


class ConcurrencyConflict(MarketplaceError, RuntimeError):
    """Warunkowy update (version) nie trafil w zaden wiersz."""
