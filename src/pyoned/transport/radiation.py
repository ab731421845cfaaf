"""
Optically thin radiative heat loss from H2O and CO2.
"""
from typing import Optional

import cantera as ct
import numpy as np

from ..core.base import SubmodelComponent
from ..core.exceptions import ConfigurationError
from ..core.state import FlowState
from .properties import PropertyCache

# Planck mean absorption coefficient fits, polynomials in 1000/T
# [1/(m atm)], ascending powers.
C_H2O = np.array([-0.23093, -1.12390, 9.41530, -2.99880, 0.51382, -1.86840e-5])
C_CO2 = np.array([18.741, -121.310, 273.500, -194.050, 56.310, -5.8169])


def _species_index(thermo, name: str) -> Optional[int]:
    names = list(thermo.species_names)
    return names.index(name) if name in names else None


class RadiationModel(SubmodelComponent):
    """
    Optically thin radiation. The loss at point j is::

        q = 2 k_P (2 sigma T^4 - eps_L sigma T_L^4 - eps_R sigma T_R^4)

    where k_P is the Planck mean absorption coefficient of the local
    H2O/CO2 mixture and T_L, T_R are the temperatures at the two ends of the
    domain. Radiating species missing from the phase contribute nothing.
    """
    def __init__(self, props: PropertyCache, config: Optional[dict] = None):
        super().__init__(config)
        self.props = props
        self.k_H2O = _species_index(props.thermo, "H2O")
        self.k_CO2 = _species_index(props.thermo, "CO2")
        self.epsilon_left = 0.0
        self.epsilon_right = 0.0

    def resize(self, n_points: int) -> None:
        super().resize(n_points)
        self.qdot = np.zeros(n_points)

    def set_boundary_emissivities(self, e_left: float, e_right: float):
        if e_left < 0 or e_left > 1:
            raise ConfigurationError(
                f"The left boundary emissivity must be between 0.0 and 1.0 (got {e_left})")
        if e_right < 0 or e_right > 1:
            raise ConfigurationError(
                f"The right boundary emissivity must be between 0.0 and 1.0 (got {e_right})")
        self.epsilon_left = e_left
        self.epsilon_right = e_right

    def absorption_coefficient(self, state: FlowState, jmin: int, jmax: int) -> np.ndarray:
        """Planck mean absorption coefficient [1/m] at points jmin..jmax"""
        props = self.props
        T = state.T[jmin:jmax+1]
        X = props.mole_fractions(state, jmin, jmax)
        k_P = np.zeros(T.size)
        for k, coeffs in ((self.k_H2O, C_H2O), (self.k_CO2, C_CO2)):
            if k is None:
                continue
            # np.polyval expects descending powers
            k_P_species = np.polyval(coeffs[::-1], 1000.0 / T) / ct.one_atm
            k_P += props.pressure * X[k] * k_P_species
        return k_P

    def compute(self, state: FlowState, jmin: int, jmax: int) -> None:
        """Update the radiative heat loss [W/m^3] at points jmin..jmax"""
        sigma = ct.stefan_boltzmann
        T = state.T
        boundary_left = self.epsilon_left * sigma * T[0]**4
        boundary_right = self.epsilon_right * sigma * T[-1]**4

        k_P = self.absorption_coefficient(state, jmin, jmax)
        Tw = T[jmin:jmax+1]
        self.qdot[jmin:jmax+1] = 2 * k_P * (2 * sigma * Tw**4 - boundary_left - boundary_right)
