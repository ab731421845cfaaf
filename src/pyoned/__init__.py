"""
PyOneD: one-dimensional reacting flow domains for steady flame solvers
"""
from importlib.metadata import version

__version__ = version("pyoned")

from .core.exceptions import (
    ConfigurationError,
    InvalidGridError,
    UnsupportedOperationError,
    MissingDataWarning
)
from .core.grid import OneDimGrid, RefineCriteria
from .solvers.flow import StFlow, FlowType
from .solvers.snapshot import FlowSnapshot
