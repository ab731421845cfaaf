"""
Exception and warning types raised by PyOneD domains.
"""


class ConfigurationError(ValueError):
    """Invalid combination of models or options for a flow domain."""


class InvalidGridError(ValueError):
    """Grid points are not strictly increasing or do not match the solution."""


class UnsupportedOperationError(NotImplementedError):
    """Operation belongs to an equation family the domain does not implement."""


class MissingDataWarning(UserWarning):
    """A saved snapshot lacks data for a component; loading continues."""
