import logging

import cantera as ct
import numpy as np

from pyoned import StFlow, FlowType
from pyoned.utils.visualization import FlowVisualizer

logging.basicConfig(level=logging.INFO)

# Premixed methane/air
gas = ct.Solution('gri30.yaml')
gas.TPX = 300.0, ct.one_atm, 'CH4:1.0, O2:2.0, N2:7.52'

flow = StFlow(gas, id='flame', points=41, flow_type=FlowType.FREE)
flow.setupGrid(np.linspace(0.0, 0.03, 41))

# Initial guess: uniform reactants, then a temperature ramp and burned products
x = np.zeros(flow.size)
flow.get_initial_solution(x)
u_in = 0.4  # m/s
flow.set_profile(x, 'velocity', [0.0, 0.3, 0.5, 1.0], [u_in, u_in, 7 * u_in, 7 * u_in])
flow.set_profile(x, 'T', [0.0, 0.3, 0.5, 1.0], [300.0, 300.0, 2200.0, 2200.0])

burned = ct.Solution('gri30.yaml')
burned.TPX = 300.0, ct.one_atm, 'CH4:1.0, O2:2.0, N2:7.52'
burned.equilibrate('HP')
for name in ('CH4', 'O2', 'CO2', 'H2O'):
    k = burned.species_index(name)
    flow.set_profile(x, name, [0.0, 0.3, 0.5, 1.0],
                     [gas.Y[k], gas.Y[k], burned.Y[k], burned.Y[k]])
flow.reset_bad_values(x)

# Anchor the flame where the temperature reaches 400 K
flow.set_fixed_point(0.01, 400.0)
flow.solve_energy_eqn()
flow.enable_radiation(True)
flow.finalize(x)
print(f"fixed point: z = {flow.fixed_point_location:.4e} m, T = {flow.fixed_temperature:.1f} K")

# One steady residual evaluation
rsd = np.zeros_like(x)
diag = np.zeros(flow.size, dtype=int)
flow.eval(x, rsd, diag)
r = flow.state(rsd)
print(f"max |energy residual|  = {np.max(np.abs(r.T[1:-1])):.4e} K/s")
print(f"max |species residual| = {np.max(np.abs(r.Y[:, 1:-1])):.4e} 1/s")

flow.show(x)

# Save and restore
snapshot = flow.to_snapshot(x)
snapshot.save('flame_snapshot.json')

# Plot results
import matplotlib.pyplot as plt

viz = FlowVisualizer(flow)
viz.plot_profiles(x, species_names=['CH4', 'O2', 'CO2', 'H2O'])
plt.show()
