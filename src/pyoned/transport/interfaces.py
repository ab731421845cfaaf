"""
Roles played by the external material models.

A flow domain never evaluates thermodynamic, kinetic or transport
properties itself; it borrows objects playing these roles. The attribute
names follow ``cantera.Solution``, which satisfies all three at once and is
the intended owner of the shared material state.
"""
from typing import List, Protocol, Tuple

import numpy as np


class ThermoPhase(Protocol):
    """Thermodynamic state: set T, P, composition; query derived properties."""
    T: float
    P: float
    TP: Tuple[float, float]
    Y: np.ndarray

    @property
    def n_species(self) -> int: ...

    @property
    def species_names(self) -> List[str]: ...

    def species_name(self, k: int) -> str: ...

    @property
    def molecular_weights(self) -> np.ndarray: ...

    @property
    def density(self) -> float: ...

    @property
    def mean_molecular_weight(self) -> float: ...

    @property
    def cp_mass(self) -> float: ...

    @property
    def partial_molar_enthalpies(self) -> np.ndarray: ...

    @property
    def max_temp(self) -> float: ...

    @property
    def name(self) -> str: ...

    def set_unnormalized_mass_fractions(self, Y) -> None: ...


class Kinetics(Protocol):
    """Net species production rates at the current thermodynamic state."""
    @property
    def net_production_rates(self) -> np.ndarray: ...


class Transport(Protocol):
    """Transport properties at the current thermodynamic state."""
    transport_model: str

    @property
    def viscosity(self) -> float: ...

    @property
    def thermal_conductivity(self) -> float: ...

    @property
    def mix_diff_coeffs(self) -> np.ndarray: ...

    @property
    def multi_diff_coeffs(self) -> np.ndarray: ...

    @property
    def thermal_diff_coeffs(self) -> np.ndarray: ...


class Solution(ThermoPhase, Kinetics, Transport, Protocol):
    """Single owner of the three roles, e.g. ``cantera.Solution``."""


MULTICOMPONENT_MODELS = ("multicomponent", "multicomponent-CK")


def is_multicomponent(transport: Transport) -> bool:
    return transport.transport_model in MULTICOMPONENT_MODELS
