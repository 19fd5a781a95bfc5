"""Exception hierarchy for cardstack."""


class CardstackError(Exception):
    """Base class for every error raised by cardstack."""


class PreconditionError(CardstackError, ValueError):
    """The caller broke an invariant the engine depends on."""


class InvalidSessionStateError(CardstackError, RuntimeError):
    """A grading branch was reached that should be impossible."""


class IntervalSystemNotFoundError(CardstackError, KeyError):
    """A subject references an interval system that was never configured."""

    def __init__(self, srs_id: object):
        super().__init__(srs_id)
        self.srs_id = srs_id

    def __str__(self) -> str:
        return f"No interval system defined for {self.srs_id!r}"


class DeckFormatError(CardstackError, ValueError):
    """A deck file could not be parsed into subjects."""
