"""Exceptions raised by the scheduling core and its services."""


class CardwiseError(Exception):
    """Base class for all cardwise errors."""


class InvalidRatingError(CardwiseError, ValueError):
    """A rating outside Again/Hard/Good/Easy was supplied."""

    def __init__(self, rating: object):
        self.rating = rating
        super().__init__(f"Invalid rating: {rating!r}")


class SessionStateError(CardwiseError, RuntimeError):
    """A session action was invoked in a state that does not allow it."""


class DeckNotFoundError(CardwiseError, KeyError):
    """No deck with the requested id exists."""

    def __init__(self, deck_id: str):
        self.deck_id = deck_id
        super().__init__(deck_id)

    def __str__(self) -> str:
        return f"Deck not found: {self.deck_id}"


class StoreCorruptedError(CardwiseError):
    """Stored data could not be read, so it must not be overwritten."""

    def __init__(self, key: str, path: object):
        self.key = key
        self.path = path
        super().__init__(f"Refusing to overwrite unreadable '{key}' at {path}")
