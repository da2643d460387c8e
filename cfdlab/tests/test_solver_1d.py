"""
Pytest tests for the 1D convection and convection-diffusion solver.

Tests verify:
1. Conservation of mass with periodic boundaries for every scheme
2. Order of accuracy (upwind first order, central second order)
3. Boundedness and total-variation decay of TVD schemes
4. Courant-limit behaviour and divergence detection
5. Numerical diffusion of upwind and oscillations of central differencing
6. Run state machine, snapshots and independence of runs
7. Substitutable step kernels
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from cfdlab.src import (
    Scheme, IC1DParams, RunStatus, SimulationConfig, Solver1D, StepKernels,
    BoundarySpec1D, FixedValueBC, ZeroGradientBC, DEFAULT_BC_1D,
    create_grid_1d, init_field_1d, exact_convection_1d, convection_stencil,
    step_1d_convection, step_1d_convection_diffusion, run_simulation_1d,
    compare_schemes, max_stable_dt, total_mass, total_variation, l2_norm,
    field_is_valid, field_max, face_value,
)

TVD_SCHEMES = [Scheme.TVD_MINMOD, Scheme.TVD_VAN_LEER, Scheme.TVD_SUPERBEE]
STEP = IC1DParams('step', step_pos=0.2)


@pytest.fixture
def grid():
    """100 cells on [0, 1]"""
    return create_grid_1d(100, 1.0)


@pytest.fixture
def step_ic(grid):
    """Unit step on [0, 0.2)"""
    return init_field_1d(grid.x_cells, grid.length, STEP)


def _front_cells(phi):
    """Cells inside the smeared part of a unit step."""
    return int(np.sum((phi > 0.1) & (phi < 0.9)))


def _sine_error(n_cells, scheme, dt, t_end):
    grid = create_grid_1d(n_cells, 1.0)
    ic = IC1DParams('sine')
    phi0 = init_field_1d(grid.x_cells, grid.length, ic)
    n_steps = int(round(t_end / dt))
    config = SimulationConfig(grid=grid, u=1.0, dt=dt, scheme=scheme,
                              n_steps=n_steps, snapshot_interval=n_steps)
    history = run_simulation_1d(phi0, config)
    exact = exact_convection_1d(grid.x_cells, grid.length, ic, 1.0, history.final.time)
    return l2_norm(history.final.phi, exact)


class TestConservation:

    @pytest.mark.parametrize("scheme", list(Scheme))
    def test_periodic_mass_conserved(self, grid, step_ic, scheme):
        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.4, scheme=scheme,
                                               n_steps=100, snapshot_interval=10)
        history = run_simulation_1d(step_ic, config)

        mass0 = total_mass(step_ic, grid.dx)
        for snap in history.snapshots:
            mass = total_mass(snap.phi, grid.dx)
            assert abs(mass - mass0) < 1e-9, \
                f"{scheme.value}: mass {mass:.12f} != {mass0:.12f} at step {snap.step}"

    @pytest.mark.parametrize("scheme", [Scheme.UPWIND, Scheme.CENTRAL, Scheme.TVD_VAN_LEER])
    def test_convection_diffusion_mass_conserved(self, grid, scheme):
        phi0 = init_field_1d(grid.x_cells, grid.length, IC1DParams('gaussian'))
        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.4, gamma=0.002,
                                               scheme=scheme, n_steps=200)
        history = run_simulation_1d(phi0, config)
        assert history.status is RunStatus.COMPLETED
        assert total_mass(history.final.phi, grid.dx) == pytest.approx(
            total_mass(phi0, grid.dx), abs=1e-9)

    def test_negative_velocity_mass_conserved(self, grid, step_ic):
        config = SimulationConfig.from_courant(grid, u=-1.0, courant=0.5,
                                               scheme=Scheme.TVD_SUPERBEE, n_steps=150)
        history = run_simulation_1d(step_ic, config)
        assert total_mass(history.final.phi, grid.dx) == pytest.approx(0.2, abs=1e-9)


class TestOrderOfAccuracy:

    def test_upwind_first_order(self):
        """Halving dx at fixed Courant number halves the upwind error."""
        e_coarse = _sine_error(40, Scheme.UPWIND, 0.5 / 40, 0.25)
        e_fine = _sine_error(80, Scheme.UPWIND, 0.5 / 80, 0.25)
        ratio = e_coarse / e_fine
        assert 1.7 < ratio < 2.3, f"Upwind error ratio {ratio:.3f}, expected ~2"

    def test_central_second_order(self):
        """With dt ~ dx^2 the time error is negligible and central is second order."""
        dx_c, dx_f = 1.0 / 40, 1.0 / 80
        e_coarse = _sine_error(40, Scheme.CENTRAL, 0.1 * dx_c**2, 0.1)
        e_fine = _sine_error(80, Scheme.CENTRAL, 0.1 * dx_f**2, 0.1)
        ratio = e_coarse / e_fine
        assert 3.5 < ratio < 4.5, f"Central error ratio {ratio:.3f}, expected ~4"

    def test_tvd_more_accurate_than_upwind(self):
        dt = 0.4 / 80
        e_upwind = _sine_error(80, Scheme.UPWIND, dt, 0.25)
        e_tvd = _sine_error(80, Scheme.TVD_VAN_LEER, dt, 0.25)
        assert e_tvd < e_upwind


class TestBoundedness:

    @pytest.mark.parametrize("scheme", TVD_SCHEMES)
    def test_tvd_step_stays_bounded(self, grid, step_ic, scheme):
        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.4, scheme=scheme,
                                               n_steps=150, snapshot_interval=1)
        history = run_simulation_1d(step_ic, config)

        assert history.status is RunStatus.COMPLETED
        for snap in history.snapshots:
            assert np.min(snap.phi) >= -1e-12, \
                f"{scheme.value} undershoot {np.min(snap.phi):.3e} at step {snap.step}"
            assert np.max(snap.phi) <= 1.0 + 1e-12, \
                f"{scheme.value} overshoot {np.max(snap.phi):.3e} at step {snap.step}"

    @pytest.mark.parametrize("scheme", TVD_SCHEMES + [Scheme.UPWIND])
    def test_total_variation_does_not_grow(self, grid, step_ic, scheme):
        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.4, scheme=scheme,
                                               n_steps=100, snapshot_interval=1)
        history = run_simulation_1d(step_ic, config)

        tv = [total_variation(s.phi, periodic=True) for s in history.snapshots]
        assert np.all(np.diff(tv) <= 1e-10), f"{scheme.value} total variation increased"

    def test_central_overshoots_step(self, grid, step_ic):
        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.5,
                                               scheme=Scheme.CENTRAL,
                                               n_steps=20, snapshot_interval=1)
        history = run_simulation_1d(step_ic, config)

        first = history.snapshots[1].phi
        assert np.max(first) == pytest.approx(1.25), "Expected 1.25 overshoot after one step"
        assert all(np.max(s.phi) > 1.0 or np.min(s.phi) < 0.0
                   for s in history.snapshots[1:])

    def test_upwind_step_scenario(self, grid, step_ic):
        """Upwind at Courant 0.5: bounded, conservative and increasingly smeared."""
        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.5,
                                               scheme=Scheme.UPWIND,
                                               n_steps=100, snapshot_interval=25)
        history = run_simulation_1d(step_ic, config)
        final = history.final.phi

        assert history.status is RunStatus.COMPLETED
        assert np.min(final) >= -1e-12 and np.max(final) <= 1.0 + 1e-12
        assert total_mass(final, grid.dx) == pytest.approx(0.2, abs=1e-9)

        by_step = {s.step: s.phi for s in history.snapshots}
        early, late = _front_cells(by_step[25]), _front_cells(by_step[100])
        assert early > 2, "Upwind front should already be smeared"
        assert 1.4 < late / early < 2.8, \
            f"Front width grew from {early} to {late} cells"


class TestStability:

    def test_courant_one_upwind_is_exact_shift(self, grid, step_ic):
        dt = max_stable_dt(grid.dx, 1.0, 1.0)
        config = SimulationConfig(grid=grid, u=1.0, dt=dt, n_steps=100, snapshot_interval=10)
        history = run_simulation_1d(step_ic, config)

        for snap in history.snapshots:
            assert np.min(snap.phi) >= -1e-12 and np.max(snap.phi) <= 1.0 + 1e-12
        # one full period brings the step back
        assert np.allclose(history.final.phi, step_ic)

    def test_courant_above_one_amplifies(self):
        grid = create_grid_1d(80, 1.0)
        phi0 = init_field_1d(grid.x_cells, grid.length, IC1DParams('sine'))
        config = SimulationConfig.from_courant(grid, u=1.0, courant=1.2,
                                               n_steps=100, snapshot_interval=5)
        history = run_simulation_1d(phi0, config)

        assert field_max(history.final.phi) > 1.05 * field_max(phi0), \
            "Upwind at Courant 1.2 should amplify the sine wave"
        assert total_variation(history.final.phi, periodic=True) > \
            total_variation(phi0, periodic=True)

    def test_unstable_run_reports_diverged(self, grid, step_ic):
        config = SimulationConfig.from_courant(grid, u=1.0, courant=2.0,
                                               n_steps=1000, snapshot_interval=50)
        history = run_simulation_1d(step_ic, config)

        assert history.diverged
        assert history.status is RunStatus.DIVERGED
        assert history.final_step < 1000
        assert history.final.step == history.final_step
        assert not field_is_valid(history.final.phi)
        assert all(field_is_valid(s.phi) for s in history.snapshots[:-1])


class TestSteps:

    def test_input_not_modified(self, grid, step_ic):
        original = step_ic.copy()
        phi_new = step_1d_convection(step_ic, grid, 1.0, 0.005, Scheme.TVD_MINMOD)
        assert np.array_equal(step_ic, original)
        assert phi_new is not step_ic

    def test_zero_velocity_is_identity(self, grid, step_ic):
        for scheme in Scheme:
            phi_new = step_1d_convection(step_ic, grid, 0.0, 0.01, scheme)
            assert np.array_equal(phi_new, step_ic)

    def test_upwind_matches_stencil(self, grid):
        rng = np.random.default_rng(3)
        phi = rng.random(grid.n_cells)
        dt = 0.3 * grid.dx
        s = convection_stencil(Scheme.UPWIND, 1.0, grid.dx, dt)
        expected = s.a_w * np.roll(phi, 1) + s.a_p * phi + s.a_e * np.roll(phi, -1)
        assert np.allclose(step_1d_convection(phi, grid, 1.0, dt), expected)

    def test_negative_velocity_shift(self, grid, step_ic):
        dt = max_stable_dt(grid.dx, -1.0, 1.0)
        phi_new = step_1d_convection(step_ic, grid, -1.0, dt, Scheme.UPWIND)
        assert np.allclose(phi_new, np.roll(step_ic, -1))

    def test_convection_diffusion_matches_ftcs(self, grid):
        rng = np.random.default_rng(11)
        phi = rng.random(grid.n_cells)
        u, gamma, dt = 0.8, 0.003, 0.002
        phi_new = step_1d_convection_diffusion(phi, grid, u, dt, gamma, Scheme.CENTRAL)

        east, west = np.roll(phi, -1), np.roll(phi, 1)
        expected = (phi - dt / grid.dx * u * 0.5 * (east - west)
                    + dt * gamma / grid.dx**2 * (east - 2 * phi + west))
        assert np.allclose(phi_new, expected)

    def test_pure_diffusion_spreads(self, grid):
        phi0 = init_field_1d(grid.x_cells, grid.length, IC1DParams('gaussian'))
        config = SimulationConfig.from_courant(grid, u=0.0, courant=0.5, gamma=0.01,
                                               n_steps=200)
        history = run_simulation_1d(phi0, config)

        assert np.max(history.final.phi) < np.max(phi0)
        assert total_mass(history.final.phi, grid.dx) == pytest.approx(
            total_mass(phi0, grid.dx), abs=1e-9)

    def test_fixed_boundaries_hold(self):
        grid = create_grid_1d(50, 1.0)
        phi0 = init_field_1d(grid.x_cells, grid.length, IC1DParams('step', step_pos=0.3))
        bc = BoundarySpec1D(FixedValueBC(1.0), FixedValueBC(0.0))
        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.4, gamma=0.001,
                                               bc=bc, n_steps=200, snapshot_interval=20)
        history = run_simulation_1d(phi0, config)

        for snap in history.snapshots[1:]:
            assert snap.phi[0] == 1.0 and snap.phi[-1] == 0.0
            assert np.min(snap.phi) >= -1e-12 and np.max(snap.phi) <= 1.0 + 1e-12

    def test_zero_gradient_outflow(self):
        grid = create_grid_1d(50, 1.0)
        phi0 = init_field_1d(grid.x_cells, grid.length, IC1DParams('gaussian'))
        bc = BoundarySpec1D(ZeroGradientBC(), ZeroGradientBC())
        phi_new = step_1d_convection(phi0, grid, 1.0, 0.01, Scheme.UPWIND, bc)
        assert phi_new[-1] == phi_new[-2]
        assert phi_new[0] == phi_new[1]

    def test_shape_mismatch_rejected(self, grid):
        with pytest.raises(ValueError):
            step_1d_convection(np.zeros(grid.n_cells + 1), grid, 1.0, 0.005)


class TestSolverRun:

    def test_state_machine(self, grid, step_ic):
        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.5, n_steps=10)
        solver = Solver1D(config)
        assert solver.status is RunStatus.READY

        with pytest.raises(ValueError):
            solver.solve()

        solver.set_initial_condition(step_ic)
        history = solver.solve()
        assert solver.status is RunStatus.COMPLETED
        assert history.status is RunStatus.COMPLETED

        with pytest.raises(ValueError):
            solver.solve()

        solver.set_initial_condition(step_ic)
        assert solver.status is RunStatus.READY
        assert solver.solve().final_step == 10

    def test_step_after_finished_run_rejected(self, grid, step_ic):
        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.5, n_steps=5)
        solver = Solver1D(config)
        solver.set_initial_condition(step_ic)
        solver.solve()
        phi, time = solver.phi.copy(), solver.time

        with pytest.raises(ValueError):
            solver.step()
        assert np.array_equal(solver.phi, phi)
        assert solver.time == time
        assert solver.iteration == 5

    def test_step_after_diverged_run_rejected(self, grid, step_ic):
        config = SimulationConfig.from_courant(grid, u=1.0, courant=2.0,
                                               n_steps=1000, snapshot_interval=50)
        solver = Solver1D(config)
        solver.set_initial_condition(step_ic)
        assert solver.solve().status is RunStatus.DIVERGED

        with pytest.raises(ValueError):
            solver.step()

        solver.set_initial_condition(step_ic)
        assert np.array_equal(solver.step(), step_1d_convection(step_ic, grid, 1.0, config.dt))

    def test_snapshot_schedule(self, grid, step_ic):
        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.5,
                                               n_steps=25, snapshot_interval=10)
        history = run_simulation_1d(step_ic, config)

        assert [s.step for s in history.snapshots] == [0, 10, 20, 25]
        assert np.allclose(history.times, np.array([0, 10, 20, 25]) * config.dt)
        assert np.array_equal(history.snapshots[0].phi, step_ic)
        assert history.final_step == 25

    def test_snapshots_are_independent_copies(self, grid, step_ic):
        phi0 = step_ic.copy()
        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.5,
                                               n_steps=20, snapshot_interval=5)
        history = run_simulation_1d(phi0, config)

        phi0[:] = -1.0
        assert np.array_equal(history.snapshots[0].phi, step_ic)
        history.snapshots[1].phi[:] = 99.0
        assert not np.any(history.snapshots[2].phi == 99.0)

    def test_runs_do_not_share_state(self, grid, step_ic):
        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.5, n_steps=30)
        first = run_simulation_1d(step_ic, config)
        second = run_simulation_1d(step_ic, config)
        assert np.array_equal(first.final.phi, second.final.phi)
        assert first.final.phi is not second.final.phi

    def test_compare_schemes(self, grid, step_ic):
        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.4, n_steps=50)
        results = compare_schemes(step_ic, config, ['UDS', 'CDS', 'minmod'])

        assert list(results) == [Scheme.UPWIND, Scheme.CENTRAL, Scheme.TVD_MINMOD]
        assert np.max(results[Scheme.CENTRAL].final.phi) > 1.0
        assert np.max(results[Scheme.TVD_MINMOD].final.phi) <= 1.0 + 1e-12
        assert np.array_equal(step_ic, init_field_1d(grid.x_cells, grid.length, STEP))

    @pytest.mark.parametrize("kwargs", [
        dict(dt=0.0),
        dict(dt=-0.01),
        dict(dt=float('nan')),
        dict(gamma=-1.0),
        dict(n_steps=0),
        dict(n_steps=2.5),
        dict(snapshot_interval=0),
        dict(gamma=float('inf')),
        dict(n_steps=float('inf')),
        dict(snapshot_interval=float('inf')),
        dict(u=float('nan')),
        dict(u=float('inf')),
        dict(scheme='QUICK'),
    ])
    def test_invalid_config_rejected(self, grid, kwargs):
        params = dict(grid=grid, u=1.0, dt=0.005)
        params.update(kwargs)
        with pytest.raises(ValueError):
            SimulationConfig(**params)

    def test_config_parses_scheme(self, grid):
        config = SimulationConfig(grid=grid, u=1.0, dt=0.005, scheme='superbee')
        assert config.scheme is Scheme.TVD_SUPERBEE
        assert config.bc is DEFAULT_BC_1D


class TestKernels:

    def test_substitute_face_value(self, grid, step_ic):
        """A hand-written upwind interpolation reproduces the built-in one."""
        def my_upwind(phi, i, u_f, scheme, n):
            return phi[np.clip(i, 0, n - 1)]

        kernels = StepKernels(face_value=my_upwind).validate()
        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.5, n_steps=40)
        custom = run_simulation_1d(step_ic, config, kernels)
        builtin = run_simulation_1d(step_ic, config)
        assert np.allclose(custom.final.phi, builtin.final.phi)

    def test_substitute_update(self, grid, step_ic):
        def frozen(phi_old, flux_right, flux_left, dt, dx):
            return np.array(phi_old, copy=True)

        kernels = StepKernels(update=frozen)
        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.5, n_steps=5)
        history = run_simulation_1d(step_ic, config, kernels)
        assert np.array_equal(history.final.phi, step_ic)

    @pytest.mark.parametrize("bc, extra", [
        (DEFAULT_BC_1D, 4),
        (BoundarySpec1D(FixedValueBC(1.0), ZeroGradientBC()), 0),
    ])
    def test_face_value_lookup_size(self, grid, step_ic, bc, extra):
        """Periodic runs hand the kernels a field padded with wrapped ghost cells."""
        seen = []

        def recording(phi, i, u_f, scheme, n):
            seen.append((len(phi), n, int(np.min(i)), int(np.max(i))))
            return face_value(phi, i, u_f, scheme, n)

        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.5, n_steps=3,
                                               scheme=Scheme.TVD_VAN_LEER, bc=bc)
        custom = run_simulation_1d(step_ic, config, StepKernels(face_value=recording))
        builtin = run_simulation_1d(step_ic, config)

        assert len(seen) == 3
        for length, n, i_min, i_max in seen:
            assert n == grid.n_cells + extra, f"Lookup size {n} for {grid.n_cells} cells"
            assert length == n
            assert i_max < n
        assert np.allclose(custom.final.phi, builtin.final.phi)

    def test_non_finite_kernel_diverges(self, grid, step_ic):
        def broken(phi, i, u_f, scheme, n):
            return np.full(np.shape(i), np.nan)

        config = SimulationConfig.from_courant(grid, u=1.0, courant=0.5, n_steps=10)
        history = run_simulation_1d(step_ic, config, StepKernels(face_value=broken))

        assert history.status is RunStatus.DIVERGED
        assert history.final_step == 1
        assert len(history.snapshots) == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
