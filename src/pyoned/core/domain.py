"""
Generic bookkeeping shared by one-dimensional domains.
"""
from typing import Any, Dict, FrozenSet, Optional

import numpy as np

from .exceptions import UnsupportedOperationError
from .grid import OneDimGrid, Refiner
from .state import FlowState


class Domain1D:
    """
    A block of unknowns in the global solution vector of a boundary value
    problem, defined on its own grid.

    The solver owns the global arrays; a domain only knows where its block
    starts (``loc``) and which global grid point its first point is.
    """
    #: Optional equation families implemented by a concrete domain type
    capabilities: FrozenSet[str] = frozenset()

    def __init__(self, n_components: int, n_points: int, id: str = ""):
        self.id = id
        self.n_vars = n_components
        self.loc = 0
        self.first_point = 0

        self.grid = OneDimGrid()
        self.refiner = Refiner(n_components)

        # Solution bounds
        self._lower = np.full(n_components, -1e20)
        self._upper = np.full(n_components, 1e20)

        # Pseudo-transient support
        self.rdt = 0.0
        self._slast = np.zeros(n_components * n_points)

        self.needs_jacobian_update = False
        # Refresh transport properties during Jacobian evaluations too
        self.force_full_update = False

    @property
    def domain_type(self) -> str:
        return "domain"

    @property
    def n_points(self) -> int:
        return self.grid.nPoints

    @property
    def n_components(self) -> int:
        return self.n_vars

    @property
    def size(self) -> int:
        return self.n_vars * self.n_points

    @property
    def last_point(self) -> int:
        return self.first_point + self.n_points - 1

    def set_location(self, loc: int = 0, first_point: int = 0):
        """Place this domain's block inside the global arrays"""
        self.loc = loc
        self.first_point = first_point

    def resize(self, n_components: int, n_points: int):
        """
        Change the block size. The stored previous solution is discarded, so
        the domain returns to steady mode until init_time_integration is
        called again.
        """
        if n_components != self.n_vars:
            self._lower = np.resize(self._lower, n_components)
            self._upper = np.resize(self._upper, n_components)
            self.refiner = Refiner(n_components)
        self.n_vars = n_components
        self._slast = np.zeros(n_components * n_points)
        self.set_steady_mode()

    # Bounds used by the solver to clamp Newton steps
    def set_bounds(self, n: int, lower: float, upper: float):
        self._lower[n] = lower
        self._upper[n] = upper

    def lower_bound(self, n: int) -> float:
        return float(self._lower[n])

    def upper_bound(self, n: int) -> float:
        return float(self._upper[n])

    def state(self, x: np.ndarray) -> FlowState:
        """Named views onto this domain's block of a global array"""
        return FlowState(x, self.loc, self.n_points, self.n_vars)

    def init_time_integration(self, dt: float, x: np.ndarray):
        """Store the solution at the start of a pseudo-time step"""
        self.rdt = 1.0 / dt
        self._slast = self.state(x).data.ravel().copy()

    def set_steady_mode(self):
        self.rdt = 0.0

    def prev_state(self) -> FlowState:
        return FlowState(self._slast, 0, self.n_points, self.n_vars)

    def need_jac_update(self):
        self.needs_jacobian_update = True

    def jacobian_updated(self):
        self.needs_jacobian_update = False

    def supports(self, capability: str) -> bool:
        """Whether this domain implements an optional equation family"""
        return capability in self.capabilities

    def _require(self, capability: str, operation: str):
        if not self.supports(capability):
            raise UnsupportedOperationError(
                f"{operation}: not used by '{self.domain_type}' objects "
                f"(domain '{self.id}').")

    # Electric-field stage controls; domains reporting the "electric-field"
    # capability override these.
    @property
    def solving_stage(self) -> int:
        self._require("electric-field", "solving_stage")
        return 1

    def set_solving_stage(self, stage: int):
        self._require("electric-field", "set_solving_stage")

    def solve_electric_field(self, j: Optional[int] = None):
        self._require("electric-field", "solve_electric_field")

    def fix_electric_field(self, j: Optional[int] = None):
        self._require("electric-field", "fix_electric_field")

    def do_electric_field(self, j: int) -> bool:
        self._require("electric-field", "do_electric_field")
        return False

    def get_meta(self) -> Dict[str, Any]:
        return {'type': self.domain_type, 'points': self.n_points}
