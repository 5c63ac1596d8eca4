"""cardwise: spaced-repetition flashcard review."""

from cardwise.consts import VERSION

__version__ = VERSION
