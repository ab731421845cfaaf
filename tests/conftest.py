"""
PyTest configuration and fixtures
"""
import pytest
import numpy as np

from pyoned import StFlow, FlowType

GAS_CONSTANT = 8314.46261815324


class StubGas:
    """
    Ideal gas with closed-form properties, playing the thermo, kinetics and
    transport roles of a cantera.Solution.
    """
    def __init__(self, species=('H2', 'O2', 'H2O'), weights=(2.016, 31.998, 18.015),
                 transport_model='mixture-averaged'):
        self.species_names = list(species)
        self.n_species = len(species)
        self.molecular_weights = np.array(weights, dtype=float)
        self.max_temp = 3500.0
        self.name = 'stub'
        self.source = 'conftest.py'
        self.transport_model = transport_model

        self._T = 300.0
        self._P = 101325.0
        self._Y = np.full(self.n_species, 1.0 / self.n_species)
        self._d0 = np.linspace(8e-5, 2e-5, self.n_species)
        self._h0 = -np.linspace(0.0, 2.4e8, self.n_species)

    def species_name(self, k):
        return self.species_names[k]

    @property
    def T(self):
        return self._T

    @property
    def P(self):
        return self._P

    @property
    def TP(self):
        return self._T, self._P

    @TP.setter
    def TP(self, value):
        self._T, self._P = float(value[0]), float(value[1])

    @property
    def Y(self):
        return self._Y.copy()

    @Y.setter
    def Y(self, value):
        y = np.maximum(np.asarray(value, dtype=float), 0.0)
        self._Y = y / y.sum()

    def set_unnormalized_mass_fractions(self, Y):
        self._Y = np.array(Y, dtype=float)

    @property
    def mean_molecular_weight(self):
        return 1.0 / np.sum(self._Y / self.molecular_weights)

    @property
    def density(self):
        return self._P * self.mean_molecular_weight / (GAS_CONSTANT * self._T)

    @property
    def cp_mass(self):
        return 1000.0 + 0.2 * self._T

    @property
    def partial_molar_enthalpies(self):
        return self._h0 + 30000.0 * (self._T - 298.15)

    @property
    def net_production_rates(self):
        rate = 1e-2 * self._Y[0] * self._Y[1] * np.exp(-2000.0 / self._T)
        wdot = np.zeros(self.n_species)
        wdot[0] = -rate
        wdot[-1] = rate
        return wdot

    @property
    def viscosity(self):
        return 1.8e-5 * (self._T / 300.0)**0.7

    @property
    def thermal_conductivity(self):
        return 0.026 * (self._T / 300.0)**0.8

    @property
    def mix_diff_coeffs(self):
        return self._d0 * (self._T / 300.0)**1.75 * (101325.0 / self._P)

    @property
    def multi_diff_coeffs(self):
        d = self.mix_diff_coeffs
        return 0.5 * (d[:, np.newaxis] + d[np.newaxis, :]) + np.diag(d)

    @property
    def thermal_diff_coeffs(self):
        return np.linspace(-1e-7, 1e-7, self.n_species) * (self._T / 300.0)


def flame_profile(flow, T_burned=1500.0):
    """A smooth flame-like solution for every component of flow"""
    x = np.zeros(flow.size)
    s = flow.state(x)
    zn = flow.grid.normalized()
    front = 0.5 * (1.0 + np.tanh((zn - 0.5) * 8.0))
    s.T[:] = 300.0 + (T_burned - 300.0) * front
    s.u[:] = 0.5 + 1.5 * front
    if flow.uses_lambda:
        s.V[:] = 10.0 * zn * (1.0 - zn)
        s.L[:] = -50.0
    K = flow.n_species
    Y = np.zeros((K, flow.n_points))
    Y[0] = 0.05 * (1.0 - front)
    Y[-1] = 0.2 * front
    Y[1:-1] = (1.0 - Y[0] - Y[-1]) / (K - 2)
    s.Y[:] = Y
    return x


@pytest.fixture
def stub_gas():
    """Return an ideal-gas stub with H2, O2 and H2O."""
    return StubGas()


@pytest.fixture
def flow(stub_gas):
    """Return a free flow domain on a 12-point nonuniform grid."""
    f = StFlow(stub_gas, id='flame', points=12, flow_type=FlowType.FREE)
    f.setupGrid(0.02 * np.linspace(0, 1, 12)**1.3)
    return f


@pytest.fixture
def strained_flow(stub_gas):
    """Return an axisymmetric flow domain on a 12-point grid."""
    f = StFlow(stub_gas, id='counterflow', points=12,
               flow_type=FlowType.AXISYMMETRIC)
    f.setupGrid(np.linspace(0, 0.01, 12))
    return f


@pytest.fixture
def h2o2_solution():
    """Return a hydrogen/oxygen Cantera Solution for testing."""
    import cantera as ct
    gas = ct.Solution('h2o2.yaml')
    gas.TPX = 300.0, ct.one_atm, 'H2:2.0, O2:1.0, AR:4.0'
    return gas


@pytest.fixture
def simple_solution():
    """Return a simple Cantera Solution for testing."""
    import cantera as ct
    return ct.Solution('gri30.yaml')
