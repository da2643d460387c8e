"""
Run the 1D teaching presets and plot their snapshots.

This script demonstrates:
1. Numerical diffusion of upwind vs. oscillations of central differencing
2. TVD limiters keeping a step bounded
3. The Courant limit (CFL 1.2 grows without bound)
4. A first/second-order grid refinement study on a sine wave

Run from the project root:
    python cfdlab/scripts/run_presets.py [preset name ...]
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import numpy as np
import matplotlib.pyplot as plt

from cfdlab.src import (
    PRESETS_1D, PRESETS_BY_NAME, Scheme, IC1DParams, InitialCondition1D,
    SimulationConfig, create_grid_1d, init_field_1d, exact_convection_1d,
    run_simulation_1d, compare_schemes, total_mass, l2_norm,
    courant_number, peclet_number,
)


def plot_history(history, grid, title, filename=None):
    """Plot every recorded snapshot of a run, darker for later times."""
    fig, ax = plt.subplots(figsize=(10, 5))
    n = len(history.snapshots)
    for k, snap in enumerate(history.snapshots):
        shade = 0.2 + 0.8 * k / max(n - 1, 1)
        ax.plot(grid.x_cells, snap.phi, color=plt.cm.viridis(shade), linewidth=1.5,
                label=f't = {snap.time:.3f}' if k in (0, n - 1) else None)
    ax.set_xlabel('x')
    ax.set_ylabel('phi')
    ax.set_title(f'{title} [{history.status.value}, step {history.final_step}]')
    ax.grid(True, alpha=0.3)
    ax.legend()
    plt.tight_layout()

    if filename:
        plt.savefig(filename, dpi=150, bbox_inches='tight')
        print(f"Saved plot to {filename}")
    return fig


def plot_scheme_comparison(phi0, config, filename=None):
    """Final profiles of every scheme for the same configuration."""
    results = compare_schemes(phi0, config, list(Scheme))
    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(config.grid.x_cells, phi0, 'k:', linewidth=1, label='initial')
    for scheme, history in results.items():
        ax.plot(config.grid.x_cells, history.final.phi, linewidth=1.5, label=scheme.value)
    ax.set_xlabel('x')
    ax.set_ylabel('phi')
    ax.set_title('Scheme comparison')
    ax.grid(True, alpha=0.3)
    ax.legend()
    plt.tight_layout()

    if filename:
        plt.savefig(filename, dpi=150, bbox_inches='tight')
    return fig


def grid_refinement_study(resolutions=(25, 50, 100, 200)):
    """L2 error of a convected sine wave for UDS and CDS."""
    ic = IC1DParams(InitialCondition1D.SINE)
    print("\nGrid refinement (sine, u = 1, t = 0.1)")
    print(f"{'N':>6} {'UDS':>12} {'CDS':>12}")

    for n in resolutions:
        grid = create_grid_1d(n, 1.0)
        phi0 = init_field_1d(grid.x_cells, grid.length, ic)
        errors = []
        for scheme in (Scheme.UPWIND, Scheme.CENTRAL):
            # dt ~ dx^2 keeps the time error below the spatial error
            dt = 0.1 * grid.dx**2
            n_steps = int(round(0.1 / dt))
            config = SimulationConfig(grid=grid, u=1.0, dt=dt, scheme=scheme,
                                      n_steps=n_steps, snapshot_interval=n_steps)
            history = run_simulation_1d(phi0, config)
            exact = exact_convection_1d(grid.x_cells, grid.length, ic, 1.0, history.final.time)
            errors.append(l2_norm(history.final.phi, exact))
        print(f"{n:6d} {errors[0]:12.4e} {errors[1]:12.4e}")


def main(names):
    presets = [PRESETS_BY_NAME[name] for name in names] if names else PRESETS_1D

    for preset in presets:
        phi0, config = preset.build()
        grid = config.grid
        print("=" * 60)
        print(preset.name)
        print(f"  {preset.description}")
        print(f"  Courant = {courant_number(config.u, config.dt, grid.dx):.3f}, "
              f"Pe = {peclet_number(config.u, grid.dx, config.gamma):.3g}")

        history = run_simulation_1d(phi0, config)
        final = history.final.phi
        print(f"  status = {history.status.value}, steps = {history.final_step}")
        print(f"  mass: {total_mass(phi0, grid.dx):.6f} -> {total_mass(final, grid.dx):.6f}")
        print(f"  range: [{np.min(final):.4f}, {np.max(final):.4f}]")

        plot_history(history, grid, preset.name)

    phi0, config = PRESETS_BY_NAME['Triangle - scheme comparison'].build()
    plot_scheme_comparison(phi0, config)
    grid_refinement_study()
    plt.show()


if __name__ == "__main__":
    main(sys.argv[1:])
