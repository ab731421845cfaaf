"""
Steady quasi-one-dimensional reacting flow domain.

The domain discretizes the continuity, radial momentum, energy, species and
eigenvalue equations of a premixed or strained flame and hands the residual
to an external Newton / pseudo-transient solver.
"""
import logging
import warnings
from enum import Enum
from typing import Any, Dict, Optional, Sequence

import numpy as np

from ..core.domain import Domain1D
from ..core.exceptions import ConfigurationError, InvalidGridError, MissingDataWarning
from ..core.grid import interpolate_profile
from ..core.state import (
    C_OFFSET_E, C_OFFSET_L, C_OFFSET_T, C_OFFSET_U, C_OFFSET_V, C_OFFSET_Y,
    COMPONENT_NAMES, FlowState, index,
)
from ..transport.fluxes import FluxEngine
from ..transport.interfaces import (
    MULTICOMPONENT_MODELS, Kinetics, Solution, Transport, is_multicomponent,
)
from ..transport.properties import PropertyCache
from ..transport.radiation import RadiationModel
from .residual import ResidualAssembler
from .snapshot import FlowSnapshot

logger = logging.getLogger(__name__)


class FlowType(Enum):
    """Formulation of the flow equations, fixed when the domain is built"""
    AXISYMMETRIC = "axisymmetric-flow"  # strained flow, uses V and lambda
    FREE = "free-flow"  # freely propagating flame anchored at a fixed point
    UNSTRAINED = "unstrained-flow"  # fixed mass flow rate (burner flame)


def _resized(flags: np.ndarray, n: int, fill) -> np.ndarray:
    """Copy of flags with length n, keeping existing entries"""
    out = np.full(n, fill, dtype=flags.dtype)
    m = min(n, flags.size)
    out[:m] = flags[:m]
    return out


class StFlow(Domain1D):
    """
    One-dimensional reacting flow domain.

    Args:
        gas: Object playing the thermo, kinetics and transport roles
            (normally a ``cantera.Solution``). The domain borrows it; the
            phase state is overwritten during every evaluation.
        id: Name of the domain, used in messages
        points: Initial number of grid points
        flow_type: One of the FlowType formulations
        soret: Enable thermal diffusion (requires multicomponent transport)
        radiation: Enable the optically thin radiation model
    """
    capabilities = frozenset({"continuity", "momentum", "energy", "lambda", "species"})

    #: With the energy equation off, the free-flow continuity equation pins
    #: rho*u at the fixed point to this multiple of the density at the left
    #: boundary. Empirical value.
    mass_flux_factor = 0.3

    def __init__(self, gas: Solution, id: str = "flow", points: int = 10,
                 flow_type: FlowType = FlowType.AXISYMMETRIC,
                 soret: bool = False, radiation: bool = False):
        self.n_species = gas.n_species
        super().__init__(C_OFFSET_Y + self.n_species, points, id)

        self.solution = gas
        self.thermo = gas
        self.kinetics = gas
        self.transport = None
        self.flow_type = FlowType(flow_type)

        self.props = PropertyCache(gas, gas, None)
        self.props.do_viscosity = self.uses_lambda
        self.fluxes = FluxEngine(self.grid, self.props)
        self.radiation = RadiationModel(self.props)
        self.residual = ResidualAssembler(self)

        self.do_radiation = False
        self.do_species = np.ones(self.n_species, dtype=bool)
        self.do_energy = np.zeros(0, dtype=bool)
        self.fixedtemp = np.zeros(0)

        # Temperature profile for points with the energy equation off
        self._zfix = np.zeros(0)
        self._tfix = np.zeros(0)

        # Fixed point anchoring a free flame
        self._z_fixed = None
        self._t_fixed = None

        self._k_excess_left = 0
        self._k_excess_right = 0

        self.set_transport(gas)

        # Default solution bounds
        self.set_bounds(C_OFFSET_T, 200.0, 2 * gas.max_temp)
        for k in range(self.n_species):
            self.set_bounds(C_OFFSET_Y + k, -1.0e-7, 1.0e5)

        # Only species feed the refiner until the energy equation is on
        for n in (C_OFFSET_U, C_OFFSET_V, C_OFFSET_T, C_OFFSET_L, C_OFFSET_E):
            self.refiner.set_active(n, False)

        self.setupGrid(np.arange(points) / points)

        if soret:
            self.enable_soret(True)
        if radiation:
            self.enable_radiation(True)

    # Flow type

    @property
    def domain_type(self) -> str:
        return self.flow_type.value

    @property
    def uses_lambda(self) -> bool:
        return self.flow_type is FlowType.AXISYMMETRIC

    @property
    def is_free(self) -> bool:
        return self.flow_type is FlowType.FREE

    # Grid

    def setupGrid(self, z: Sequence[float]):
        """
        Install new grid points. Derived arrays are resized and all cached
        properties discarded; an invalid grid leaves the domain unchanged.
        """
        self.grid.setupGrid(z)
        self.resize(self.n_vars, self.grid.nPoints)

    def resize(self, n_components: int, n_points: int):
        super().resize(n_components, n_points)
        self.props.resize(n_points)
        self.fluxes.resize(n_points)
        self.radiation.resize(n_points)
        self.do_energy = _resized(self.do_energy, n_points, False)
        self.fixedtemp = _resized(self.fixedtemp, n_points, 0.0)

    def regrid(self, z_new: Sequence[float], x: np.ndarray) -> np.ndarray:
        """
        Move the domain to a new grid, interpolating its part of x.

        The per-point energy flags follow the nearest old point and the
        fixed temperatures are interpolated, so points added inside a region
        keep that region's settings.

        Returns:
            The interpolated local solution (n_vars * len(z_new) values)
        """
        z_new = np.asarray(z_new, dtype=float)
        z_old = self.grid.x
        local = self.state(x).data
        remapped = self.grid.interpolate(z_new, local.T).T
        energy = np.interp(z_new, z_old, self.do_energy.astype(float)) >= 0.5
        fixedtemp = interpolate_profile(z_old, self.fixedtemp, z_new)

        self.setupGrid(z_new)
        self.do_energy = energy
        self.fixedtemp = fixedtemp
        return np.ascontiguousarray(remapped).ravel()

    # Material models

    def set_kinetics(self, kinetics: Kinetics):
        self.kinetics = kinetics
        self.props.kinetics = kinetics

    def set_transport(self, transport: Optional[Transport]):
        """Use a new transport manager; 'none' transport is rejected"""
        if transport is None:
            raise ConfigurationError(f"Unable to set empty transport in domain '{self.id}'.")
        model = transport.transport_model
        if model == "none":
            raise ConfigurationError(
                f"Invalid Transport model 'none' for domain '{self.id}'. An appropriate "
                "transport model should be set when instantiating the Solution object.")
        multi = is_multicomponent(transport)
        if self.do_soret and not multi:
            raise ConfigurationError(
                f"Transport model '{model}' cannot be used in domain '{self.id}' while "
                "thermal diffusion (the Soret effect) is enabled.")

        self.transport = transport
        self.props.transport = transport
        if multi != self.props.do_multicomponent:
            self.props.do_multicomponent = multi
            if self.props.is_initialized():
                self.props.resize(self.n_points)
        logger.debug("Domain '%s' uses transport model '%s'", self.id, model)

    def set_transport_model(self, model: str):
        """Switch the transport model of the owning solution and rebind it"""
        if model == "none":
            raise ConfigurationError(f"Invalid Transport model 'none' for domain '{self.id}'.")
        if self.do_soret and model not in MULTICOMPONENT_MODELS:
            raise ConfigurationError(
                f"Transport model '{model}' cannot be used in domain '{self.id}' while "
                "thermal diffusion (the Soret effect) is enabled.")
        if self.solution.transport_model != model:
            self.solution.transport_model = model
        self.set_transport(self.solution)

    @property
    def transport_model(self) -> str:
        return self.transport.transport_model

    @property
    def do_multicomponent(self) -> bool:
        return self.props.do_multicomponent

    def set_viscosity_flag(self, dovisc: bool):
        self.props.do_viscosity = dovisc

    @property
    def pressure(self) -> float:
        return self.props.pressure

    def set_pressure(self, p: float):
        self.props.pressure = p

    # Submodels

    @property
    def do_soret(self) -> bool:
        return self.props.do_soret

    def enable_soret(self, withSoret: bool = True):
        if withSoret and not self.do_multicomponent:
            raise ConfigurationError(
                f"Thermal diffusion (the Soret effect) requires using a multicomponent "
                f"transport model (domain '{self.id}' uses '{self.transport_model}').")
        self.props.do_soret = withSoret

    def enable_radiation(self, doRadiation: bool = True):
        self.do_radiation = doRadiation
        if not doRadiation:
            self.radiation.qdot[:] = 0.0

    @property
    def radiation_enabled(self) -> bool:
        return self.do_radiation

    def set_boundary_emissivities(self, e_left: float, e_right: float):
        self.radiation.set_boundary_emissivities(e_left, e_right)

    @property
    def left_emissivity(self) -> float:
        return self.radiation.epsilon_left

    @property
    def right_emissivity(self) -> float:
        return self.radiation.epsilon_right

    @property
    def qdot_radiation(self) -> np.ndarray:
        return self.radiation.qdot

    def radiative_heat_loss(self, j: int) -> float:
        return float(self.radiation.qdot[j])

    # Energy and species equation toggles

    def _set_energy(self, flag: bool, j: Optional[int]) -> bool:
        if j is None:
            changed = bool(np.any(self.do_energy != flag))
            self.do_energy[:] = flag
        else:
            changed = bool(self.do_energy[j] != flag)
            self.do_energy[j] = flag
        for n in (C_OFFSET_U, C_OFFSET_V, C_OFFSET_T):
            self.refiner.set_active(n, flag)
        if changed:
            self.need_jac_update()
        return changed

    def solve_energy_eqn(self, j: Optional[int] = None) -> bool:
        """
        Solve the energy equation at point j, or at all points.

        Returns:
            True if the set of active equations changed
        """
        changed = self._set_energy(True, j)
        if changed:
            logger.debug("Energy equation enabled in domain '%s' (point %s)",
                         self.id, "all" if j is None else j)
        return changed

    def fix_temperature(self, j: Optional[int] = None) -> bool:
        """Hold the temperature fixed at point j, or at all points"""
        changed = self._set_energy(False, j)
        if changed:
            logger.debug("Energy equation disabled in domain '%s' (point %s)",
                         self.id, "all" if j is None else j)
        return changed

    def _set_species(self, flag: bool, k: Optional[int]) -> bool:
        if k is None:
            changed = bool(np.any(self.do_species != flag))
            self.do_species[:] = flag
        else:
            changed = bool(self.do_species[k] != flag)
            self.do_species[k] = flag
        if changed:
            self.need_jac_update()
        return changed

    def solve_species(self, k: Optional[int] = None) -> bool:
        return self._set_species(True, k)

    def fix_species(self, k: Optional[int] = None) -> bool:
        return self._set_species(False, k)

    # Fixed temperatures and the free-flame fixed point

    def set_fixed_temp_profile(self, zfixed: Sequence[float], tfixed: Sequence[float]):
        """
        Temperature profile used where the energy equation is off, given on
        the normalized coordinate (z - z[0]) / (z[-1] - z[0]).
        """
        zfixed = np.asarray(zfixed, dtype=float)
        tfixed = np.asarray(tfixed, dtype=float)
        if zfixed.shape != tfixed.shape:
            raise ValueError(
                f"Fixed temperature profile has {zfixed.size} positions "
                f"but {tfixed.size} temperatures")
        self._zfix = zfixed
        self._tfix = tfixed

    def set_temperature(self, j: int, t: float):
        """Pin the temperature at point j and disable its energy equation"""
        self.fixedtemp[j] = t
        self.do_energy[j] = False

    def t_fixed(self, j: int) -> float:
        return float(self.fixedtemp[j])

    def set_fixed_point(self, z: float, t: float):
        self._z_fixed = float(z)
        self._t_fixed = float(t)

    @property
    def fixed_point_location(self) -> Optional[float]:
        return self._z_fixed

    @property
    def fixed_temperature(self) -> Optional[float]:
        return self._t_fixed

    # Solver interface

    @property
    def left_excess_species(self) -> int:
        return self._k_excess_left

    @property
    def right_excess_species(self) -> int:
        return self._k_excess_right

    def component_name(self, n: int) -> str:
        if n < C_OFFSET_Y:
            return COMPONENT_NAMES[n]
        if n < C_OFFSET_Y + self.n_species:
            return self.thermo.species_name(n - C_OFFSET_Y)
        return "<unknown>"

    def component_index(self, name: str) -> int:
        if name in COMPONENT_NAMES:
            return COMPONENT_NAMES.index(name)
        names = list(self.thermo.species_names)
        if name in names:
            return C_OFFSET_Y + names.index(name)
        raise KeyError(f"no component named '{name}' in domain '{self.id}'")

    def component_active(self, n: int) -> bool:
        if n in (C_OFFSET_V, C_OFFSET_L):
            return self.uses_lambda
        if n == C_OFFSET_E:
            return False
        return True

    def value(self, x: np.ndarray, n: int, j: int) -> float:
        """Component n at local point j, read from the global array x"""
        return float(x[self.loc + index(n, j, self.n_vars)])

    def get_initial_solution(self, x: np.ndarray):
        """Uniform initial guess at the current state of the phase"""
        xs = self.state(x)
        T = self.thermo.T
        Y = np.array(self.thermo.Y)
        rho = self.thermo.density
        xs.data[:] = 0.0
        xs.T[:] = T
        xs.Y[:] = Y[:, np.newaxis]
        self.props.rho[:] = rho

    def set_profile(self, x: np.ndarray, component: str,
                    positions: Sequence[float], values: Sequence[float]):
        """
        Set a component from a profile given at normalized positions
        (0 = left end of the domain, 1 = right end).
        """
        n = self.component_index(component)
        self.state(x).component(n)[:] = interpolate_profile(
            positions, values, self.grid.normalized())

    def reset_bad_values(self, x: np.ndarray):
        """Clip negative mass fractions and renormalize through the phase"""
        xs = self.state(x)
        for j in range(self.n_points):
            self.thermo.Y = xs.Y[:, j]
            xs.Y[:, j] = self.thermo.Y

    def update_properties(self, jg: Optional[int], xs: FlowState, jmin: int, jmax: int):
        """
        Refresh the property cache and diffusive fluxes needed by the
        residual at points jmin..jmax.
        """
        # properties are computed for grid points from j0 to j1
        j0 = max(jmin, 1) - 1
        j1 = min(jmax + 1, self.n_points - 1)

        self.props.update_thermo(xs, j0, j1)
        if jg is None or self.force_full_update:
            # update transport properties only if a Jacobian is not being
            # evaluated, or if specifically requested
            self.props.update_transport(xs, j0, j1)
        if jg is None:
            self._k_excess_left = int(np.argmax(xs.Y[:, jmin]))
            self._k_excess_right = int(np.argmax(xs.Y[:, jmax]))

        self.fluxes.update(xs, j0, j1)

    def eval(self, x: np.ndarray, rsd: np.ndarray, diag: np.ndarray,
             rdt: Optional[float] = None, jg: Optional[int] = None):
        """
        Evaluate the residual.

        Args:
            x: Global solution vector
            rsd: Global residual vector, filled in place
            diag: Global integer array of flags, 1 for equations with a time
                derivative and 0 for algebraic ones
            rdt: Reciprocal of the pseudo time step (0 for steady problems);
                defaults to the value set by init_time_integration
            jg: Global index of the perturbed point when evaluating a
                Jacobian column; None evaluates every point
        """
        # Skip points outside this domain's range of influence
        if jg is not None and (jg + 1 < self.first_point or jg > self.last_point + 1):
            return
        if rdt is None:
            rdt = self.rdt

        xs = self.state(x)
        rs = self.state(rsd)
        ds = self.state(diag)

        N = self.n_points
        if jg is None:
            jmin, jmax = 0, N - 1
        else:
            jpt = jg - self.first_point
            jmin = max(jpt, 1) - 1
            jmax = min(jpt + 1, N - 1)

        self.update_properties(jg, xs, jmin, jmax)
        if self.do_radiation:
            self.radiation.compute(xs, jmin, jmax)

        self.residual.eval(xs, rs, ds, self.prev_state(), rdt, jmin, jmax)

    def finalize(self, x: np.ndarray):
        """
        Prepare for (or conclude) a solve: check the model combination,
        rebuild the fixed temperature profile and relocate the fixed point
        of a free flame onto the current grid.
        """
        if self.do_soret and not self.do_multicomponent:
            raise ConfigurationError(
                "Thermal diffusion (the Soret effect) is enabled, and requires "
                "using a multicomponent transport model.")

        xs = self.state(x)
        energy = bool(self.do_energy[0])
        if energy or self._zfix.size == 0:
            self.fixedtemp[:] = xs.T
        else:
            self.fixedtemp[:] = np.interp(self.grid.normalized(), self._zfix, self._tfix)
        if energy:
            self.solve_energy_eqn()

        if self.is_free and self._t_fixed is not None:
            z = self.grid.x
            # fixed point already on the grid
            if np.any(z == self._z_fixed):
                return
            T = xs.T
            for j in range(self.n_points - 1):
                if (T[j] - self._t_fixed) * (T[j+1] - self._t_fixed) <= 0.0:
                    self._t_fixed = float(T[j+1])
                    self._z_fixed = float(z[j+1])
                    logger.debug("Fixed point of domain '%s' moved to z = %g (T = %g)",
                                 self.id, self._z_fixed, self._t_fixed)
                    return

    # Metadata and snapshots

    def get_meta(self) -> Dict[str, Any]:
        state = super().get_meta()
        state['transport-model'] = self.transport_model
        source = getattr(self.thermo, 'source', None)
        state['phase'] = {
            'name': self.thermo.name,
            'source': source if source else '<unknown>',
        }
        state['pressure'] = self.pressure

        state['radiation-enabled'] = self.do_radiation
        if self.do_radiation:
            state['emissivity-left'] = self.left_emissivity
            state['emissivity-right'] = self.right_emissivity

        if np.all(self.do_energy == self.do_energy[0]):
            state['energy-enabled'] = bool(self.do_energy[0])
        else:
            state['energy-enabled'] = [bool(e) for e in self.do_energy]

        state['Soret-enabled'] = self.do_soret

        if np.all(self.do_species == self.do_species[0]):
            state['species-enabled'] = bool(self.do_species[0])
        else:
            state['species-enabled'] = {
                self.thermo.species_name(k): bool(self.do_species[k])
                for k in range(self.n_species)}

        state['refine-criteria'] = self.refiner.as_dict()

        if self._z_fixed is not None:
            state['fixed-point'] = {
                'location': self._z_fixed,
                'temperature': self._t_fixed,
            }
        return state

    def set_meta(self, state: Dict[str, Any]):
        """Apply settings saved by get_meta; absent keys keep current values"""
        if 'pressure' in state:
            self.set_pressure(float(state['pressure']))

        if 'energy-enabled' in state:
            ee = state['energy-enabled']
            if np.ndim(ee) == 0:
                self.do_energy[:] = bool(ee)
            else:
                ee = np.asarray(ee, dtype=bool)
                if ee.size != self.n_points:
                    raise InvalidGridError(
                        f"'energy-enabled' has {ee.size} entries but domain "
                        f"'{self.id}' has {self.n_points} points")
                self.do_energy[:] = ee

        soret = bool(state.get('Soret-enabled', self.do_soret))
        if not soret:
            self.enable_soret(False)
        self.set_transport_model(state.get('transport-model', 'mixture-averaged'))
        self.enable_soret(soret)

        if 'species-enabled' in state:
            se = state['species-enabled']
            if isinstance(se, dict):
                for name, flag in se.items():
                    self.do_species[self.component_index(name) - C_OFFSET_Y] = bool(flag)
            elif np.ndim(se) == 0:
                self.do_species[:] = bool(se)
            else:
                self.do_species[:] = np.asarray(se, dtype=bool)

        if 'radiation-enabled' in state:
            self.enable_radiation(bool(state['radiation-enabled']))
            if self.do_radiation:
                self.set_boundary_emissivities(
                    float(state.get('emissivity-left', self.left_emissivity)),
                    float(state.get('emissivity-right', self.right_emissivity)))

        if 'refine-criteria' in state:
            criteria = state['refine-criteria']
            current = self.refiner.criteria
            self.refiner.set_criteria(
                ratio=criteria.get('ratio', current.ratio),
                slope=criteria.get('slope', current.slope),
                curve=criteria.get('curve', current.curve),
                prune=criteria.get('prune', current.prune))
            if 'grid-min' in criteria:
                self.refiner.set_grid_min(criteria['grid-min'])
            if 'max-points' in criteria:
                self.refiner.set_max_points(criteria['max-points'])

        if 'fixed-point' in state:
            fixed = state['fixed-point']
            self.set_fixed_point(fixed['location'], fixed['temperature'])

    def to_snapshot(self, x: np.ndarray) -> FlowSnapshot:
        """Grid, active components and settings of this domain"""
        xs = self.state(x)
        data = {'grid': self.grid.x.copy()}
        for n in range(self.n_vars):
            if self.component_active(n):
                data[self.component_name(n)] = xs.component(n).copy()
        # density rather than pressure
        data['D'] = self.props.rho.copy()
        if self.do_radiation:
            data['radiative-heat-loss'] = self.qdot_radiation.copy()
        return FlowSnapshot(meta=self.get_meta(), data=data)

    def from_snapshot(self, snapshot: FlowSnapshot,
                      soln: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Restore a snapshot written by to_snapshot.

        Args:
            snapshot: Saved state
            soln: Local solution array to fill (n_vars values per point of the
                saved grid); components missing from the snapshot keep their
                values. A zero array is created if omitted.

        Returns:
            The filled local solution array
        """
        self.setupGrid(snapshot.data['grid'])
        if soln is None:
            soln = np.zeros(self.size)
        elif soln.size != self.size:
            raise InvalidGridError(
                f"Solution array of size {soln.size} does not match domain "
                f"'{self.id}' ({self.n_points} points x {self.n_vars} components)")

        xs = FlowState(soln, 0, self.n_points, self.n_vars)
        for n in range(self.n_vars):
            if not self.component_active(n):
                continue
            name = self.component_name(n)
            if name in snapshot.data:
                xs.component(n)[:] = snapshot.data[name]
            else:
                warnings.warn(
                    f"Saved state does not contain values for component '{name}' "
                    f"in domain '{self.id}'.", MissingDataWarning, stacklevel=2)

        self.set_meta(snapshot.meta)
        self.update_properties(None, xs, 0, self.n_points - 1)
        return soln

    def show(self, x: np.ndarray):
        """Log a table of the solution in this domain"""
        xs = self.state(x)
        lines = [f"Domain '{self.id}' ({self.domain_type}), pressure: {self.pressure:10.4g} Pa",
                 f"{'z':>12} {'velocity':>12} {'spread_rate':>12} {'T':>12} {'lambda':>12}"]
        for j in range(self.n_points):
            lines.append(f"{self.grid.x[j]:12.4g} {xs.u[j]:12.4g} {xs.V[j]:12.4g} "
                         f"{xs.T[j]:12.4g} {xs.L[j]:12.4g}")
        if self.do_radiation:
            lines.append(f"{'z':>12} {'radiative heat loss':>20}")
            for j in range(self.n_points):
                lines.append(f"{self.grid.x[j]:12.4g} {self.qdot_radiation[j]:20.4g}")
        logger.info("\n".join(lines))
