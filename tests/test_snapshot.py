"""
Tests for metadata and snapshot persistence
"""
import pytest
import numpy as np
from conftest import StubGas, flame_profile
from pyoned import StFlow, FlowType, FlowSnapshot
from pyoned.core.exceptions import InvalidGridError, MissingDataWarning


def make_flow(**kwargs):
    gas = StubGas(**kwargs)
    flow = StFlow(gas, id='flame', points=10, flow_type=FlowType.FREE)
    flow.setupGrid(0.02 * np.linspace(0, 1, 10)**1.2)
    return flow


def configured_flow():
    """Flow with every option away from its default"""
    flow = make_flow()
    flow.set_transport_model('multicomponent')
    flow.enable_soret(True)
    flow.solve_energy_eqn()
    flow.fix_temperature(0)
    flow.fix_species(2)
    flow.enable_radiation(True)
    flow.set_boundary_emissivities(0.25, 0.75)
    flow.set_pressure(2.0e5)
    flow.refiner.set_criteria(ratio=4.0, slope=0.3, curve=0.4, prune=0.05)
    flow.refiner.set_max_points(300)
    flow.set_fixed_point(flow.grid.x[4], 700.0)
    return flow


def test_default_metadata():
    """Test the metadata of a freshly constructed domain"""
    meta = make_flow().get_meta()
    assert meta['type'] == 'free-flow'
    assert meta['points'] == 10
    assert meta['transport-model'] == 'mixture-averaged'
    assert meta['phase'] == {'name': 'stub', 'source': 'conftest.py'}
    assert meta['radiation-enabled'] is False
    assert 'emissivity-left' not in meta
    assert meta['energy-enabled'] is False
    assert meta['Soret-enabled'] is False
    assert meta['species-enabled'] is True
    assert meta['refine-criteria']['max-points'] == 1000
    assert 'fixed-point' not in meta


def test_metadata_of_configured_domain():
    """Test per-point and per-species flags in the metadata"""
    meta = configured_flow().get_meta()
    assert meta['transport-model'] == 'multicomponent'
    assert meta['Soret-enabled'] is True
    assert meta['energy-enabled'] == [False] + [True] * 9
    assert meta['species-enabled'] == {'H2': True, 'O2': True, 'H2O': False}
    assert meta['emissivity-left'] == 0.25
    assert meta['emissivity-right'] == 0.75
    assert meta['pressure'] == 2.0e5
    assert meta['refine-criteria']['ratio'] == 4.0
    assert meta['fixed-point']['temperature'] == 700.0


def test_snapshot_data(flow):
    """Test the arrays stored in a snapshot"""
    x = flame_profile(flow)
    flow.enable_radiation(True)
    flow.eval(x, np.zeros_like(x), np.zeros(x.size, dtype=int))
    snapshot = flow.to_snapshot(x)

    assert set(snapshot.data) == {'grid', 'velocity', 'T', 'H2', 'O2', 'H2O',
                                  'D', 'radiative-heat-loss'}
    np.testing.assert_array_equal(snapshot.data['T'], flow.state(x).T)
    np.testing.assert_array_equal(snapshot.data['D'], flow.props.rho)
    np.testing.assert_array_equal(snapshot.data['radiative-heat-loss'], flow.qdot_radiation)


def test_round_trip_through_json(tmp_path):
    """Test that save/load and import reproduce the domain exactly"""
    flow = configured_flow()
    x = flame_profile(flow)
    flow.eval(x, np.zeros_like(x), np.zeros(x.size, dtype=int))
    path = tmp_path / 'flame.json'
    flow.to_snapshot(x).save(path)

    loaded = FlowSnapshot.load(path)
    fresh = StFlow(StubGas(), id='flame', points=4, flow_type=FlowType.FREE)
    x2 = fresh.from_snapshot(loaded)

    np.testing.assert_array_equal(fresh.grid.x, flow.grid.x)
    np.testing.assert_array_equal(x2, x)
    assert fresh.get_meta() == flow.get_meta()
    np.testing.assert_array_equal(fresh.do_energy, flow.do_energy)
    np.testing.assert_array_equal(fresh.do_species, flow.do_species)
    np.testing.assert_allclose(fresh.props.rho, flow.props.rho)


def test_dict_round_trip():
    """Test the plain-dict form used for JSON"""
    snapshot = FlowSnapshot(meta={'type': 'free-flow', 'points': 2},
                            data={'grid': np.array([0.0, 0.1]), 'T': np.array([300.0, 0.1 + 0.2])})
    d = snapshot.to_dict()
    assert d['data']['T'] == [300.0, 0.1 + 0.2]
    restored = FlowSnapshot.from_dict(d)
    assert restored.meta == snapshot.meta
    np.testing.assert_array_equal(restored.data['T'], snapshot.data['T'])


def test_missing_component_warns(flow):
    """Test that an absent component is reported and left unchanged"""
    x = flame_profile(flow)
    snapshot = flow.to_snapshot(x)
    del snapshot.data['T']

    soln = np.zeros(flow.size)
    flow.state(soln).T[:] = 777.0
    with pytest.warns(MissingDataWarning, match="'T'"):
        flow.from_snapshot(snapshot, soln)
    np.testing.assert_array_equal(flow.state(soln).T, 777.0)
    np.testing.assert_array_equal(flow.state(soln).Y, flow.state(x).Y)


def test_solution_size_mismatch(flow):
    """Test that a solution array of the wrong length is rejected"""
    x = flame_profile(flow)
    snapshot = flow.to_snapshot(x)
    with pytest.raises(InvalidGridError):
        flow.from_snapshot(snapshot, np.zeros(flow.size + 1))


def test_absent_settings_take_defaults():
    """Test importing metadata written without optional keys"""
    flow = make_flow(transport_model='multicomponent')
    flow.enable_radiation(True)
    flow.set_boundary_emissivities(0.3, 0.6)

    flow.set_meta({'type': 'free-flow', 'points': 10, 'radiation-enabled': True})
    assert flow.transport_model == 'mixture-averaged'
    assert flow.left_emissivity == 0.3
    assert flow.right_emissivity == 0.6
    assert flow.fixed_point_location is None


def test_energy_flags_must_match_grid():
    """Test that per-point energy flags of the wrong length are rejected"""
    flow = make_flow()
    with pytest.raises(InvalidGridError):
        flow.set_meta({'energy-enabled': [True, False]})


def test_species_flags_from_map():
    """Test applying per-species flags"""
    flow = make_flow()
    flow.set_meta({'species-enabled': {'O2': False}})
    np.testing.assert_array_equal(flow.do_species, [True, False, True])
    flow.set_meta({'species-enabled': True})
    assert flow.do_species.all()
