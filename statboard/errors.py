class StatboardError(Exception):
    """Base class for statboard errors."""


class InvalidDescriptorError(StatboardError, ValueError):
    """A payload entry could not be turned into a descriptor record."""


class MalformedResponseError(StatboardError):
    """A parsed server response is not a sequence of entries."""
