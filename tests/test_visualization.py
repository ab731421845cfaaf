"""
Tests for the profile plots
"""
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
from conftest import flame_profile
from pyoned.utils.visualization import FlowVisualizer


def test_plot_profiles(flow):
    """Test that the profile figure has one panel per quantity"""
    x = flame_profile(flow)
    flow.eval(x, np.zeros_like(x), np.zeros(x.size, dtype=int))
    viz = FlowVisualizer(flow)

    fig = viz.plot_profiles(x)
    assert len(fig.axes) == 3
    labels = [line.get_label() for line in fig.axes[1].get_lines()]
    assert labels == ['H2', 'O2', 'H2O']

    flow.enable_radiation(True)
    fig = viz.plot_profiles(x, species_names=['H2O'])
    assert len(fig.axes) == 4
    assert [line.get_label() for line in fig.axes[1].get_lines()] == ['H2O']
    plt.close('all')


def test_plot_history(flow):
    """Test overlaying saved states"""
    x = flame_profile(flow)
    viz = FlowVisualizer(flow)
    viz.save_state(x)
    flow.state(x).T[:] += 100.0
    viz.save_state(x)

    assert len(viz.history['T']) == 2
    assert viz.history['T'][1][0] == viz.history['T'][0][0] + 100.0

    fig = viz.plot_history()
    assert len(fig.axes[0].get_lines()) == 2
    fig = viz.plot_history('O2')
    assert fig.axes[0].get_ylabel() == 'Mass Fraction O2'
    plt.close('all')
