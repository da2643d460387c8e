"""
cfdlab - Scalar Transport Teaching Solver
=========================================

Re-exports the main public components from cfdlab.src
"""

from cfdlab.src import (
    # Grid
    Grid1D,
    Grid2D,
    create_grid_1d,
    create_grid_2d,
    # Fields
    IC1DParams,
    init_field_1d,
    init_field_2d,
    # Schemes
    Scheme,
    face_value,
    convection_stencil,
    # Boundary conditions
    BoundarySpec1D,
    BoundarySpec2D,
    PeriodicBC,
    FixedValueBC,
    ZeroGradientBC,
    # Time step limits
    max_stable_dt,
    courant_number,
    peclet_number,
    # Solver
    RunStatus,
    SimulationConfig,
    SimulationConfig2D,
    SimulationHistory,
    Solver1D,
    Solver2D,
    run_simulation_1d,
    run_simulation_2d,
    # Diagnostics
    l2_norm,
    linf_norm,
    total_mass,
    field_is_valid,
    field_max,
)

__all__ = [
    'Grid1D',
    'Grid2D',
    'create_grid_1d',
    'create_grid_2d',
    'IC1DParams',
    'init_field_1d',
    'init_field_2d',
    'Scheme',
    'face_value',
    'convection_stencil',
    'BoundarySpec1D',
    'BoundarySpec2D',
    'PeriodicBC',
    'FixedValueBC',
    'ZeroGradientBC',
    'max_stable_dt',
    'courant_number',
    'peclet_number',
    'RunStatus',
    'SimulationConfig',
    'SimulationConfig2D',
    'SimulationHistory',
    'Solver1D',
    'Solver2D',
    'run_simulation_1d',
    'run_simulation_2d',
    'l2_norm',
    'linf_norm',
    'total_mass',
    'field_is_valid',
    'field_max',
]
