"""
Thermodynamic and transport properties cached at grid points and midpoints.
"""
from typing import Optional

import numpy as np

from ..core.base import PropertyComponent
from ..core.state import FlowState
from .interfaces import Kinetics, ThermoPhase, Transport


class PropertyCache(PropertyComponent):
    """
    Per-point and per-midpoint material properties of a flow domain.

    Values are recomputed from the external models for the point window
    requested by each residual evaluation and are never reused across
    unrelated solves. Arrays indexed by species have shape (K, n_points);
    transport arrays are indexed by the midpoint j (between j and j+1).
    """
    def __init__(self, thermo: ThermoPhase, kinetics: Optional[Kinetics],
                 transport: Optional[Transport], config: Optional[dict] = None):
        super().__init__(config)
        self.thermo = thermo
        self.kinetics = kinetics
        self.transport = transport

        self.n_species = thermo.n_species
        self.wt = np.array(thermo.molecular_weights, dtype=float)
        self.pressure = thermo.P

        # Options set by the owning flow domain
        self.do_multicomponent = False
        self.do_soret = False
        self.do_viscosity = True

        self._ybar = np.zeros(self.n_species)

    def resize(self, n_points: int) -> None:
        """Allocate property arrays"""
        super().resize(n_points)
        K = self.n_species
        self.rho = np.zeros(n_points)  # Density
        self.wtm = np.zeros(n_points)  # Mean molecular weight
        self.cp = np.zeros(n_points)  # Specific heat (mass basis)
        self.visc = np.zeros(n_points)  # Viscosity at midpoints
        self.tcon = np.zeros(n_points)  # Thermal conductivity at midpoints

        self.diff = np.zeros((K, n_points))
        self.dthermal = np.zeros((K, n_points))
        self.multidiff = np.zeros((n_points if self.do_multicomponent else 0, K, K))

        self.hk = np.zeros((K, n_points))  # Partial molar enthalpies
        self.wdot = np.zeros((K, n_points))  # Net production rates
        self.dhk_dz = np.zeros((K, max(n_points - 1, 0)))

    def set_gas(self, state: FlowState, j: int):
        """Set the phase to the conditions at point j"""
        self.thermo.set_unnormalized_mass_fractions(state.Y[:, j])
        self.thermo.TP = state.T[j], self.pressure

    def set_gas_at_midpoint(self, state: FlowState, j: int):
        """Set the phase to the average of points j and j+1"""
        self._ybar[:] = 0.5 * (state.Y[:, j] + state.Y[:, j+1])
        self.thermo.set_unnormalized_mass_fractions(self._ybar)
        self.thermo.TP = 0.5 * (state.T[j] + state.T[j+1]), self.pressure

    def update(self, state: FlowState, j0: int, j1: int) -> None:
        self.update_thermo(state, j0, j1)
        self.update_transport(state, j0, j1)

    def update_thermo(self, state: FlowState, j0: int, j1: int):
        """Update point properties for j0 <= j <= j1"""
        for j in range(j0, j1 + 1):
            self.set_gas(state, j)
            self.rho[j] = self.thermo.density
            self.wtm[j] = self.thermo.mean_molecular_weight
            self.cp[j] = self.thermo.cp_mass
            self.hk[:, j] = self.thermo.partial_molar_enthalpies
            self.wdot[:, j] = self.kinetics.net_production_rates

    def update_transport(self, state: FlowState, j0: int, j1: int):
        """Update midpoint transport properties for j0 <= j < j1"""
        if self.do_multicomponent:
            for j in range(j0, j1):
                self.set_gas_at_midpoint(state, j)
                wtm = self.thermo.mean_molecular_weight
                rho = self.thermo.density
                self.visc[j] = self.transport.viscosity if self.do_viscosity else 0.0
                self.multidiff[j] = self.transport.multi_diff_coeffs

                # Factor outside the summation over species
                self.diff[:, j] = self.wt * rho / (wtm * wtm)

                self.tcon[j] = self.transport.thermal_conductivity
                if self.do_soret:
                    self.dthermal[:, j] = self.transport.thermal_diff_coeffs
        else:
            for j in range(j0, j1):
                self.set_gas_at_midpoint(state, j)
                self.visc[j] = self.transport.viscosity if self.do_viscosity else 0.0
                rho = self.thermo.density
                wtm = self.thermo.mean_molecular_weight
                self.diff[:, j] = self.transport.mix_diff_coeffs * self.wt * rho / wtm
                self.tcon[j] = self.transport.thermal_conductivity

    def mole_fractions(self, state: FlowState, j0: int, j1: int) -> np.ndarray:
        """Mole fractions at points j0 <= j <= j1, shape (K, j1 - j0 + 1)"""
        js = slice(j0, j1 + 1)
        return state.Y[:, js] * self.wtm[js] / self.wt[:, np.newaxis]
