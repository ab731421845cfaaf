"""
Visualization tools for flow domain solutions
"""
import numpy as np
import matplotlib.pyplot as plt
from typing import Optional, List

from ..core.state import C_OFFSET_Y


class FlowVisualizer:
    """
    Profile plots of a flow domain solution
    """
    def __init__(self, flow):
        self.flow = flow
        self.fig = None
        self.history = {
            'z': [],
            'T': [],
            'Y': [],
            'U': []
        }

    def save_state(self, x: np.ndarray):
        """Save the profiles of a solution (e.g. after each solver stage)"""
        xs = self.flow.state(x)
        self.history['z'].append(self.flow.grid.x.copy())
        self.history['T'].append(xs.T.copy())
        self.history['Y'].append(xs.Y.copy())
        self.history['U'].append(xs.u.copy())

    def plot_profiles(self, x: np.ndarray, species_names: Optional[List[str]] = None):
        """
        Plot temperature, species, mass flux and radiative loss profiles

        Args:
            x: Solution array holding this domain's block
            species_names: List of species to plot (if None, plots major species)

        Returns:
            The matplotlib figure
        """
        flow = self.flow
        xs = flow.state(x)
        z = flow.grid.x * 1000  # Convert to mm
        n_axes = 4 if flow.do_radiation else 3

        if self.fig is None or len(self.fig.axes) != n_axes:
            self.fig, axes = plt.subplots(n_axes, 1, figsize=(10, 3 * n_axes + 3))
            self.fig.suptitle(f"Flow Structure ({flow.domain_type})")
        else:
            axes = self.fig.axes
            for ax in axes:
                ax.clear()
        ax1, ax2, ax3 = axes[:3]

        # Temperature profile
        ax1.plot(z, xs.T, 'r-', label='Temperature')
        ax1.set_ylabel('Temperature [K]')
        ax1.legend()
        ax1.grid(True)

        # Species profiles
        if species_names is None:
            # Plot major species (Y > 0.01 anywhere)
            mask = np.max(xs.Y, axis=1) > 0.01
            species_indices = np.where(mask)[0]
            species_names = [flow.thermo.species_name(k) for k in species_indices]
        else:
            species_indices = [flow.component_index(name) - C_OFFSET_Y
                               for name in species_names]

        for k, name in zip(species_indices, species_names):
            ax2.plot(z, xs.Y[k], label=name)
        ax2.set_ylabel('Mass Fraction')
        ax2.legend()
        ax2.grid(True)

        # Mass flux profile
        rho_u = flow.props.rho * xs.u
        ax3.plot(z, rho_u, 'b-', label='Mass Flux')
        ax3.set_ylabel('Mass Flux [kg/m²/s]')
        ax3.legend()
        ax3.grid(True)

        if flow.do_radiation:
            ax4 = axes[3]
            ax4.plot(z, flow.qdot_radiation, 'k-', label='Radiative Loss')
            ax4.set_ylabel('Heat Loss [W/m³]')
            ax4.legend()
            ax4.grid(True)

        axes[-1].set_xlabel('Position [mm]')
        plt.tight_layout()
        return self.fig

    def plot_history(self, species_name: Optional[str] = None):
        """
        Overlay the saved temperature (or one species) profiles

        Args:
            species_name: Species to plot instead of temperature
        """
        fig, ax = plt.subplots(figsize=(10, 5))
        if species_name is None:
            k = None
            ax.set_ylabel('Temperature [K]')
        else:
            k = self.flow.component_index(species_name) - C_OFFSET_Y
            ax.set_ylabel(f'Mass Fraction {species_name}')

        for i, z in enumerate(self.history['z']):
            y = self.history['T'][i] if k is None else self.history['Y'][i][k]
            ax.plot(z * 1000, y, label=f'state {i}')
        ax.set_xlabel('Position [mm]')
        ax.legend()
        ax.grid(True)
        plt.tight_layout()
        return fig
