"""
Base classes and interfaces for PyOneD components.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class FlowComponent(ABC):
    """
    Base class for the per-domain helpers (property cache, flux engine,
    submodels) providing common configuration handling and enforcing
    the resize interface.
    """
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self._config = config or {}
        # Arrays are allocated by the first resize()
        self._initialized = False
        self.n_points = 0

    @abstractmethod
    def resize(self, n_points: int) -> None:
        """Allocate per-point storage for a grid with n_points points."""
        self.n_points = n_points
        self._initialized = True

    def is_initialized(self) -> bool:
        """Check if component storage has been allocated."""
        return self._initialized


class PropertyComponent(FlowComponent):
    """Base class for components caching values derived from the solution."""
    @abstractmethod
    def update(self, state, j0: int, j1: int) -> None:
        """Recompute cached values for the point window [j0, j1]."""
        pass


class SubmodelComponent(FlowComponent):
    """Base class for optional physical submodels (radiation, ...)."""
    @abstractmethod
    def compute(self, state, jmin: int, jmax: int) -> None:
        """Evaluate the submodel over the point window [jmin, jmax]."""
        pass
