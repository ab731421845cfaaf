"""
Diffusive species mass fluxes at cell midpoints.
"""
from typing import Optional

import numpy as np

from ..core.base import PropertyComponent
from ..core.exceptions import ConfigurationError
from ..core.grid import OneDimGrid
from ..core.state import FlowState
from .properties import PropertyCache


class FluxEngine(PropertyComponent):
    """
    Species diffusive mass fluxes ``flux[k, j]`` between points j and j+1,
    computed from the transport data in a PropertyCache.

    Mixture-averaged fluxes carry a correction proportional to the local
    mass fraction so that they sum to zero at every midpoint.
    """
    def __init__(self, grid: OneDimGrid, props: PropertyCache, config: Optional[dict] = None):
        super().__init__(config)
        self.grid = grid
        self.props = props

    def resize(self, n_points: int) -> None:
        super().resize(n_points)
        self.flux = np.zeros((self.props.n_species, n_points))

    def update(self, state: FlowState, j0: int, j1: int) -> None:
        """Update fluxes at midpoints j0 <= j < j1"""
        if j1 <= j0:
            return
        props = self.props
        if props.do_soret and not props.do_multicomponent:
            raise ConfigurationError(
                "Thermal diffusion (the Soret effect) is enabled, and requires "
                "using a multicomponent transport model.")

        js = slice(j0, j1)
        dz = self.grid.hh[js]
        X = props.mole_fractions(state, j0, j1)
        Xj, Xjp = X[:, :-1], X[:, 1:]

        if props.do_multicomponent:
            # sum over m of W_m * D_km * (X_m(j+1) - X_m(j))
            dX = props.wt[:, np.newaxis] * (Xjp - Xj)
            summed = np.einsum('jkm,mj->kj', props.multidiff[js], dX)
            self.flux[:, js] = summed * props.diff[:, js] / dz
        else:
            flux = props.diff[:, js] * (Xj - Xjp) / dz
            correction = -flux.sum(axis=0)
            # correction flux to ensure sum_k Y_k V_k = 0
            flux += correction * state.Y[:, js]
            self.flux[:, js] = flux

        if props.do_soret:
            T = state.T
            grad_log_T = (2.0 * (T[j0+1:j1+1] - T[j0:j1]) /
                          ((T[j0+1:j1+1] + T[j0:j1]) * dz))
            self.flux[:, js] -= props.dthermal[:, js] * grad_log_T
