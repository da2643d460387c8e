"""
Scalar Transport Solver Core
============================

Structured-grid finite-volume engine for the 1D and 2D scalar
convection-diffusion equation, built for teaching.

Features:
- Uniform cell-centred 1D/2D grids
- Analytic initial conditions (step, gaussian, sine, triangle; 2D blob/step/diagonal)
- Face interpolation: upwind, central, TVD (minmod, van Leer, superbee)
- Periodic, fixed-value and zero-gradient boundaries (plus 2D wall/lid)
- Courant/diffusion time-step limits, Courant and Peclet numbers
- Explicit Euler runs with snapshots and divergence detection
- Error norms and conservation diagnostics

Example:
    grid = create_grid_1d(100, 1.0)
    phi0 = init_field_1d(grid.x_cells, grid.length, IC1DParams('step', step_pos=0.2))
    config = SimulationConfig.from_courant(grid, u=1.0, courant=0.5,
                                           scheme='UDS', n_steps=100)
    history = run_simulation_1d(phi0, config)
    print(history.status, total_mass(history.final.phi, grid.dx))
"""

from .grid import Grid1D, Grid2D, create_grid_1d, create_grid_2d
from .fields import (
    InitialCondition1D, InitialCondition2D, VelocityField2D, IC1DParams,
    create_field_1d, create_field_2d, idx_2d,
    init_field_1d, init_field_2d, exact_convection_1d, make_velocity_field_2d,
)
from .schemes import (
    Scheme, StencilCoefficients, face_value, convection_stencil,
    minmod_limiter, van_leer_limiter, superbee_limiter,
)
from .flux import (
    StepKernels, convective_flux, diffusive_flux, explicit_update,
)
from .boundary import (
    BoundaryCondition, PeriodicBC, FixedValueBC, ZeroGradientBC, NoSlipBC, LidBC,
    BoundarySpec1D, BoundarySpec2D, DEFAULT_BC_1D, lid_driven_cavity_bc,
    apply_boundary_1d, apply_velocity_boundary_2d, apply_scalar_boundary_2d,
)
from .timestepping import (
    max_stable_dt, max_stable_dt_2d, courant_number, diffusion_number, peclet_number,
)
from .solver import (
    RunStatus, Snapshot, SimulationHistory, SimulationConfig, SimulationConfig2D,
    step_1d_convection, step_1d_convection_diffusion, step_2d_transport,
    Solver1D, Solver2D, run_simulation_1d, run_simulation_2d, compare_schemes,
)
from .diagnostics import (
    l2_norm, linf_norm, total_mass, field_is_valid, field_max, total_variation,
)
from .fdm import (
    FDStencil, FD_STENCILS, HeatConfig, apply_stencil, solve_heat_1d,
    init_heat_gaussian, init_heat_step, heat_max_dt,
)
from .presets import Preset1D, PRESETS_1D, PRESETS_BY_NAME

__all__ = [
    # Grid
    'Grid1D', 'Grid2D', 'create_grid_1d', 'create_grid_2d',

    # Fields and initial conditions
    'InitialCondition1D', 'InitialCondition2D', 'VelocityField2D', 'IC1DParams',
    'create_field_1d', 'create_field_2d', 'idx_2d',
    'init_field_1d', 'init_field_2d', 'exact_convection_1d', 'make_velocity_field_2d',

    # Interpolation schemes
    'Scheme', 'StencilCoefficients', 'face_value', 'convection_stencil',
    'minmod_limiter', 'van_leer_limiter', 'superbee_limiter',

    # Fluxes and step kernels
    'StepKernels', 'convective_flux', 'diffusive_flux', 'explicit_update',

    # Boundary conditions
    'BoundaryCondition', 'PeriodicBC', 'FixedValueBC', 'ZeroGradientBC',
    'NoSlipBC', 'LidBC', 'BoundarySpec1D', 'BoundarySpec2D', 'DEFAULT_BC_1D',
    'lid_driven_cavity_bc', 'apply_boundary_1d', 'apply_velocity_boundary_2d',
    'apply_scalar_boundary_2d',

    # Time step limits
    'max_stable_dt', 'max_stable_dt_2d', 'courant_number', 'diffusion_number',
    'peclet_number',

    # Solver
    'RunStatus', 'Snapshot', 'SimulationHistory', 'SimulationConfig',
    'SimulationConfig2D', 'step_1d_convection', 'step_1d_convection_diffusion',
    'step_2d_transport', 'Solver1D', 'Solver2D', 'run_simulation_1d',
    'run_simulation_2d', 'compare_schemes',

    # Diagnostics
    'l2_norm', 'linf_norm', 'total_mass', 'field_is_valid', 'field_max',
    'total_variation',

    # Finite differences
    'FDStencil', 'FD_STENCILS', 'HeatConfig', 'apply_stencil', 'solve_heat_1d',
    'init_heat_gaussian', 'init_heat_step', 'heat_max_dt',

    # Presets
    'Preset1D', 'PRESETS_1D', 'PRESETS_BY_NAME',
]

__version__ = '1.0.0'
