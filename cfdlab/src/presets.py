"""
Ready-made 1D teaching scenarios.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Tuple, Union

from .grid import create_grid_1d
from .fields import IC1DParams, InitialCondition1D, init_field_1d
from .schemes import Scheme
from .boundary import BoundarySpec1D, PeriodicBC, FixedValueBC
from .timestepping import max_stable_dt
from .solver import SimulationConfig


@dataclass(frozen=True)
class Preset1D:
    name: str
    description: str
    n_cells: int
    length: float
    u: float
    gamma: float
    cfl: float
    scheme: Union[Scheme, str]
    ic: IC1DParams
    bc: BoundarySpec1D
    n_steps: int
    snapshot_interval: int

    def build(self) -> Tuple[np.ndarray, SimulationConfig]:
        """
        Grid, initial field and run configuration of this scenario. The time
        step is the stable step for the preset's Courant number.
        """
        grid = create_grid_1d(self.n_cells, self.length)
        phi0 = init_field_1d(grid.x_cells, grid.length, self.ic)
        config = SimulationConfig(
            grid=grid,
            u=self.u,
            dt=max_stable_dt(grid.dx, self.u, self.cfl, self.gamma),
            gamma=self.gamma,
            scheme=self.scheme,
            bc=self.bc,
            n_steps=self.n_steps,
            snapshot_interval=self.snapshot_interval,
        )
        return phi0, config


PERIODIC_BC = BoundarySpec1D(PeriodicBC(), PeriodicBC())
INFLOW_OUTFLOW_BC = BoundarySpec1D(FixedValueBC(1.0), FixedValueBC(0.0))

_STEP_02 = IC1DParams(InitialCondition1D.STEP, step_pos=0.2)
_STEP_03 = IC1DParams(InitialCondition1D.STEP, step_pos=0.3)

PRESETS_1D: List[Preset1D] = [
    Preset1D('Step - UDS - stable',
             'Step with upwind at CFL 0.5. Shows numerical diffusion.',
             100, 1.0, 1.0, 0.0, 0.5, Scheme.UPWIND, _STEP_02, PERIODIC_BC, 100, 10),
    Preset1D('Step - CDS - oscillations',
             'Step with central differencing. Shows 2dx wiggles behind the front.',
             100, 1.0, 1.0, 0.0, 0.5, Scheme.CENTRAL, _STEP_02, PERIODIC_BC, 80, 10),
    Preset1D('Gaussian - UDS vs CDS',
             'Gaussian pulse: upwind smears it, central keeps it sharper but is less stable.',
             200, 1.0, 1.0, 0.0, 0.8, Scheme.UPWIND,
             IC1DParams(InitialCondition1D.GAUSSIAN, gauss_center=0.3, gauss_sigma=0.05),
             PERIODIC_BC, 150, 15),
    Preset1D('Sine - CFL > 1 (unstable)',
             'Sine wave at CFL 1.2: the solution grows without bound.',
             80, 1.0, 1.0, 0.0, 1.2, Scheme.UPWIND,
             IC1DParams(InitialCondition1D.SINE), PERIODIC_BC, 100, 5),
    Preset1D('Convection-diffusion - high Pe',
             'Convection dominates (Pe >> 1). Upwind stays bounded, central oscillates.',
             50, 1.0, 1.0, 0.001, 0.4, Scheme.UPWIND, _STEP_03, INFLOW_OUTFLOW_BC, 200, 20),
    Preset1D('Convection-diffusion - low Pe',
             'Diffusion dominates (Pe ~ 1). The solution becomes smooth.',
             50, 1.0, 0.1, 0.01, 0.4, Scheme.CENTRAL, _STEP_03, INFLOW_OUTFLOW_BC, 500, 50),
    Preset1D('TVD minmod - step',
             'The limiter suppresses oscillations and keeps the front sharp.',
             100, 1.0, 1.0, 0.0, 0.5, Scheme.TVD_MINMOD, _STEP_02, PERIODIC_BC, 100, 10),
    Preset1D('Triangle - scheme comparison',
             'Triangle pulse: compare UDS, CDS and TVD side by side.',
             150, 1.0, 1.0, 0.0, 0.5, Scheme.UPWIND,
             IC1DParams(InitialCondition1D.TRIANGLE), PERIODIC_BC, 120, 12),
]

PRESETS_BY_NAME: Dict[str, Preset1D] = {p.name: p for p in PRESETS_1D}
