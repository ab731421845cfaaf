"""
Layout of the flow unknowns inside the solver's flat solution vector.

Each grid point of a flow domain owns ``n_vars = C_OFFSET_Y + K`` consecutive
entries (point-major ordering)::

    [u, V, T, lambda, E, Y_0, ..., Y_{K-1}]   at z[0]
    [u, V, T, lambda, E, Y_0, ..., Y_{K-1}]   at z[1]
    ...

and the whole block starts at the domain's offset ``loc`` in the global
vector, which may also hold other domains (inlets, outlets, ...).
"""
import numpy as np

from .exceptions import InvalidGridError

C_OFFSET_U = 0  # axial velocity
C_OFFSET_V = 1  # strain rate
C_OFFSET_T = 2  # temperature
C_OFFSET_L = 3  # (1/r)dP/dr
C_OFFSET_E = 4  # electric field
C_OFFSET_Y = 5  # mass fractions

COMPONENT_NAMES = ('velocity', 'spread_rate', 'T', 'lambda', 'eField')


def index(n: int, j: int, n_vars: int) -> int:
    """Local offset of component n at point j"""
    return n_vars * j + n


class FlowState:
    """
    Named, writable views onto one domain's block of a flat array.

    The same accessor serves solution, residual and diagonal-flag arrays;
    assignments through the views land in the underlying array.
    """
    def __init__(self, x: np.ndarray, loc: int, n_points: int, n_vars: int):
        size = n_points * n_vars
        if x.ndim != 1 or x.size < loc + size:
            raise InvalidGridError(
                f"Array of size {x.size} cannot hold {n_points} points x "
                f"{n_vars} components starting at offset {loc}")
        self.n_points = n_points
        self.n_vars = n_vars
        self.data = x[loc:loc + size].reshape(n_points, n_vars)

    @property
    def u(self) -> np.ndarray:
        return self.data[:, C_OFFSET_U]

    @property
    def V(self) -> np.ndarray:
        return self.data[:, C_OFFSET_V]

    @property
    def T(self) -> np.ndarray:
        return self.data[:, C_OFFSET_T]

    @property
    def L(self) -> np.ndarray:
        return self.data[:, C_OFFSET_L]

    @property
    def E(self) -> np.ndarray:
        return self.data[:, C_OFFSET_E]

    @property
    def Y(self) -> np.ndarray:
        """Mass fractions, shape (K, n_points)"""
        return self.data[:, C_OFFSET_Y:].T

    def component(self, n: int) -> np.ndarray:
        return self.data[:, n]
