"""
Integration tests with Cantera solutions
"""
import pytest
import numpy as np
import cantera as ct
from pyoned import StFlow, FlowType


def premixed_profile(flow, gas, mechanism):
    """Linear blend between the reactants and their equilibrium products"""
    unburned = gas.Y
    burned = ct.Solution(mechanism)
    burned.TPY = gas.T, gas.P, unburned
    burned.equilibrate('HP')

    x = np.zeros(flow.size)
    flow.get_initial_solution(x)
    s = flow.state(x)
    zn = flow.grid.normalized()
    front = 0.5 * (1.0 + np.tanh((zn - 0.4) * 10.0))
    s.T[:] = gas.T + (burned.T - gas.T) * front
    s.u[:] = 1.0 + (burned.T / gas.T - 1.0) * front
    s.Y[:] = (np.outer(unburned, 1.0 - front) + np.outer(burned.Y, front))
    flow.reset_bad_values(x)
    return x


@pytest.fixture
def h2_flame(h2o2_solution):
    flow = StFlow(h2o2_solution, id='flame', points=15, flow_type=FlowType.FREE)
    flow.setupGrid(np.linspace(0.0, 0.01, 15))
    x = premixed_profile(flow, h2o2_solution, "h2o2.yaml")
    return flow, x


def test_full_residual_is_finite(h2_flame):
    """Test a full evaluation with mixture-averaged transport"""
    flow, x = h2_flame
    flow.solve_energy_eqn()
    flow.enable_radiation(True)
    rsd = np.zeros_like(x)
    flow.eval(x, rsd, np.zeros(x.size, dtype=int))
    assert np.all(np.isfinite(rsd))

    flux = flow.fluxes.flux[:, :flow.n_points - 1]
    scale = np.max(np.abs(flux))
    np.testing.assert_allclose(flux.sum(axis=0), 0.0, atol=1e-12 * scale)


def test_radiation_without_co2(h2_flame):
    """Test that a mechanism without CO2 radiates from H2O only"""
    flow, x = h2_flame
    assert flow.radiation.k_CO2 is None
    assert flow.radiation.k_H2O is not None
    flow.enable_radiation(True)
    flow.eval(x, np.zeros_like(x), np.zeros(x.size, dtype=int))
    assert flow.radiative_heat_loss(0) < flow.radiative_heat_loss(flow.n_points - 1)
    assert flow.radiative_heat_loss(flow.n_points - 1) > 0.0


def test_radiating_species_in_gri30(simple_solution):
    """Test that both radiating species are found in GRI-Mech 3.0"""
    flow = StFlow(simple_solution, points=5, flow_type=FlowType.FREE)
    assert flow.radiation.k_H2O == simple_solution.species_index('H2O')
    assert flow.radiation.k_CO2 == simple_solution.species_index('CO2')


def test_multicomponent_with_soret(h2_flame):
    """Test switching the Cantera transport model and enabling Soret"""
    flow, x = h2_flame
    flow.set_transport_model('multicomponent')
    flow.enable_soret(True)
    assert flow.solution.transport_model == 'multicomponent'

    rsd = np.zeros_like(x)
    flow.eval(x, rsd, np.zeros(x.size, dtype=int))
    assert np.all(np.isfinite(rsd))
    assert np.any(flow.props.dthermal != 0.0)


def test_metadata_names_the_phase(h2_flame, h2o2_solution):
    """Test phase identification in the metadata"""
    flow, x = h2_flame
    meta = flow.get_meta()
    assert meta['phase']['name'] == h2o2_solution.name
    assert meta['phase']['source'] == h2o2_solution.source
    assert meta['transport-model'] == 'mixture-averaged'
