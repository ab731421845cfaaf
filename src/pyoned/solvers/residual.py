"""
Residual assembly for the governing equations of a flow domain.

Each ``eval_*`` routine fills the residual and the algebraic/differential
flag (0 = algebraic, 1 = differential) of one equation family for points
jmin <= j <= jmax, reading cached properties and fluxes from the owning
flow. Entries outside the window are never written.
"""
import numpy as np

from ..core.state import FlowState


class ResidualAssembler:
    """
    Discretized continuity, momentum, energy, lambda, electric-field and
    species equations of an StFlow domain.
    """
    def __init__(self, flow):
        self.flow = flow

    @property
    def props(self):
        return self.flow.props

    @property
    def z(self) -> np.ndarray:
        return self.flow.grid.x

    @property
    def dz(self) -> np.ndarray:
        return self.flow.grid.hh

    @property
    def dlj(self) -> np.ndarray:
        return self.flow.grid.dlj

    def eval(self, x: FlowState, rsd: FlowState, diag: FlowState,
             prev: FlowState, rdt: float, jmin: int, jmax: int):
        """Evaluate all equation families over [jmin, jmax]"""
        self.eval_continuity(x, rsd, diag, jmin, jmax)
        self.eval_momentum(x, rsd, diag, prev, rdt, jmin, jmax)
        self.eval_energy(x, rsd, diag, prev, rdt, jmin, jmax)
        self.eval_lambda(x, rsd, diag, jmin, jmax)
        self.eval_electric_field(x, rsd, diag, jmin, jmax)
        self.eval_species(x, rsd, diag, prev, rdt, jmin, jmax)

    def _interior(self, jmin: int, jmax: int) -> np.ndarray:
        """Interior points of the window"""
        j0 = max(jmin, 1)
        j1 = min(jmax, self.flow.n_points - 2)
        return np.arange(j0, j1 + 1)

    def rho_u(self, x: FlowState, j):
        return self.props.rho[j] * x.u[j]

    def _upwind(self, x: FlowState, j: np.ndarray) -> np.ndarray:
        """Point whose backward difference gives the upwinded derivative at j"""
        return np.where(x.u[j] > 0.0, j, j + 1)

    def ddz(self, x: FlowState, f: np.ndarray, j: np.ndarray) -> np.ndarray:
        """Upwinded first derivative of f (last axis indexed by point)"""
        jloc = self._upwind(x, j)
        return (f[..., jloc] - f[..., jloc - 1]) / self.dz[jloc - 1]

    def shear(self, x: FlowState, j: np.ndarray) -> np.ndarray:
        visc = self.props.visc
        V = x.V
        c1 = visc[j-1] * (V[j] - V[j-1])
        c2 = visc[j] * (V[j+1] - V[j])
        return (c2 / self.dz[j] - c1 / self.dz[j-1]) / self.dlj[j]

    def div_heat_flux(self, x: FlowState, j: np.ndarray) -> np.ndarray:
        tcon = self.props.tcon
        T = x.T
        c1 = tcon[j-1] * (T[j] - T[j-1])
        c2 = tcon[j] * (T[j+1] - T[j])
        return -(c2 / self.dz[j] - c1 / self.dz[j-1]) / self.dlj[j]

    def eval_continuity(self, x: FlowState, rsd: FlowState, diag: FlowState,
                        jmin: int, jmax: int):
        flow = self.flow
        rho = self.props.rho
        N = flow.n_points

        # The left boundary has the same form for all flow types
        if jmin == 0:
            rsd.u[0] = (-(self.rho_u(x, 1) - self.rho_u(x, 0)) / self.dz[0]
                        - (rho[1] * x.V[1] + rho[0] * x.V[0]))
            diag.u[0] = 0

        if jmax == N - 1:
            if flow.uses_lambda:
                rsd.u[N-1] = self.rho_u(x, N-1)
            else:
                rsd.u[N-1] = self.rho_u(x, N-1) - self.rho_u(x, N-2)
            diag.u[N-1] = 0

        jj = self._interior(jmin, jmax)
        if flow.uses_lambda:
            # Mass flow information propagates to the left from the value
            # specified at the right boundary; lambda propagates the other way
            rsd.u[jj] = (-(self.rho_u(x, jj+1) - self.rho_u(x, jj)) / self.dz[jj]
                         - (rho[jj+1] * x.V[jj+1] + rho[jj] * x.V[jj]))
        elif flow.is_free:
            # V = 0 by definition
            z_fixed = flow.fixed_point_location
            for j in jj:
                if z_fixed is None or self.z[j] > z_fixed:
                    rsd.u[j] = -(self.rho_u(x, j) - self.rho_u(x, j-1)) / self.dz[j-1]
                elif self.z[j] == z_fixed:
                    if flow.do_energy[j]:
                        rsd.u[j] = x.T[j] - flow.fixed_temperature
                    else:
                        rsd.u[j] = self.rho_u(x, j) - rho[0] * flow.mass_flux_factor
                else:
                    rsd.u[j] = -(self.rho_u(x, j+1) - self.rho_u(x, j)) / self.dz[j]
        else:
            # Fixed mass flow rate
            rsd.u[jj] = self.rho_u(x, jj) - self.rho_u(x, jj-1)
        diag.u[jj] = 0

    def eval_momentum(self, x: FlowState, rsd: FlowState, diag: FlowState,
                      prev: FlowState, rdt: float, jmin: int, jmax: int):
        flow = self.flow
        N = flow.n_points
        window = slice(jmin, jmax + 1)
        if not flow.uses_lambda:
            rsd.V[window] = x.V[window]
            diag.V[window] = 0
            return

        if jmin == 0:
            rsd.V[0] = x.V[0]
            diag.V[0] = 0

        if jmax == N - 1:
            rsd.V[N-1] = x.V[N-1]
            diag.V[N-1] = 0

        jj = self._interior(jmin, jmax)
        rho = self.props.rho[jj]
        V = x.V
        rsd.V[jj] = ((self.shear(x, jj) - x.L[jj]
                      - self.rho_u(x, jj) * self.ddz(x, V, jj)
                      - rho * V[jj] * V[jj]) / rho
                     - rdt * (V[jj] - prev.V[jj]))
        diag.V[jj] = 1

    def eval_lambda(self, x: FlowState, rsd: FlowState, diag: FlowState,
                    jmin: int, jmax: int):
        flow = self.flow
        N = flow.n_points
        window = slice(jmin, jmax + 1)
        if not flow.uses_lambda:
            rsd.L[window] = x.L[window]
            diag.L[window] = 0
            return

        if jmin == 0:
            rsd.L[0] = -self.rho_u(x, 0)

        if jmax == N - 1:
            rsd.L[N-1] = x.L[N-1] - x.L[N-2]

        jj = self._interior(jmin, jmax)
        rsd.L[jj] = x.L[jj] - x.L[jj-1]
        diag.L[window] = 0

    def eval_energy(self, x: FlowState, rsd: FlowState, diag: FlowState,
                    prev: FlowState, rdt: float, jmin: int, jmax: int):
        flow = self.flow
        props = self.props
        N = flow.n_points

        # The adjoining boundary domains subtract the imposed temperatures
        if jmin == 0:
            rsd.T[0] = x.T[0]
            diag.T[0] = 0

        if jmax == N - 1:
            rsd.T[N-1] = x.T[N-1]
            diag.T[N-1] = 0

        jj = self._interior(jmin, jmax)
        active = flow.do_energy[jj]

        # Residual equations if the energy equation is disabled
        fixed = jj[~active]
        rsd.T[fixed] = x.T[fixed] - flow.fixedtemp[fixed]
        diag.T[fixed] = 0

        jj = jj[active]
        if jj.size == 0:
            return
        props.dhk_dz[:, jj] = self.ddz(x, props.hk, jj)
        flux = flow.fluxes.flux
        flxk = 0.5 * (flux[:, jj-1] + flux[:, jj])
        heat = np.sum(props.wdot[:, jj] * props.hk[:, jj]
                      + flxk * props.dhk_dz[:, jj] / props.wt[:, np.newaxis], axis=0)

        rho_cp = props.rho[jj] * props.cp[jj]
        T = x.T
        rsd.T[jj] = ((-props.cp[jj] * self.rho_u(x, jj) * self.ddz(x, T, jj)
                      - self.div_heat_flux(x, jj) - heat) / rho_cp
                     - rdt * (T[jj] - prev.T[jj]))
        if flow.do_radiation:
            rsd.T[jj] -= flow.qdot_radiation[jj] / rho_cp
        diag.T[jj] = 1

    def eval_electric_field(self, x: FlowState, rsd: FlowState, diag: FlowState,
                            jmin: int, jmax: int):
        # Same value for left, right and interior points
        window = slice(jmin, jmax + 1)
        rsd.E[window] = x.E[window]
        diag.E[window] = 0

    def eval_species(self, x: FlowState, rsd: FlowState, diag: FlowState,
                     prev: FlowState, rdt: float, jmin: int, jmax: int):
        flow = self.flow
        props = self.props
        flux = flow.fluxes.flux
        N = flow.n_points
        Y = x.Y

        if jmin == 0:
            rsd.Y[:, 0] = -(flux[:, 0] + self.rho_u(x, 0) * Y[:, 0])
            rsd.Y[flow.left_excess_species, 0] = 1.0 - Y[:, 0].sum()
            diag.Y[:, 0] = 0

        if jmax == N - 1:
            rsd.Y[:, N-1] = flux[:, N-2] + self.rho_u(x, N-1) * Y[:, N-1]
            rsd.Y[flow.right_excess_species, N-1] = 1.0 - Y[:, N-1].sum()
            diag.Y[:, N-1] = 0

        jj = self._interior(jmin, jmax)
        if jj.size == 0:
            return
        convec = self.rho_u(x, jj) * self.ddz(x, Y, jj)
        diffus = (flux[:, jj] - flux[:, jj-1]) / self.dlj[jj]
        rsd.Y[:, jj] = ((props.wt[:, np.newaxis] * props.wdot[:, jj] - convec - diffus)
                        / props.rho[jj] - rdt * (Y[:, jj] - prev.Y[:, jj]))
        diag.Y[:, jj] = 1
