from __future__ import annotations

from typing import Sequence

import matplotlib.pyplot as plt

from cp_flowpipe.flowpipe import AbstractFlowpipe, projection_of
from cp_flowpipe.geometry import vertices_2d


def plot_flowpipe(fp: AbstractFlowpipe, ax=None, vars: Sequence[int] = (1, 2),
                  n_directions: int = 32, color="c", alpha=0.3, label="Flow Pipe"):
    """
    Plot the projection of a flowpipe onto two variables.

    Parameters:
        fp           : flowpipe-like value
        ax           : matplotlib Axes object to draw on (current axes if None)
        vars         : two variables, 1-based; 0 puts time on that axis
        n_directions : number of support directions used to outline each set
        color, alpha : polygon style
        label        : legend label (used once)

    Returns:
        ax : the Axes drawn on
    """
    if len(vars) != 2:
        raise ValueError(f"Expected two variables to plot, got {len(vars)}")
    if ax is None:
        ax = plt.gca()

    # time is not a state variable, so only the eager projection can include it
    if 0 in vars:
        sets = fp.project(vars)
    else:
        sets = (X.set for X in projection_of(fp, vars))

    for i, X in enumerate(sets):
        V = vertices_2d(X, n_directions)
        if V.shape[0] < 3:
            ax.plot(V[:, 0], V[:, 1], color=color, label=label if i == 0 else None)
        else:
            ax.fill(V[:, 0], V[:, 1], color=color, alpha=alpha,
                    label=label if i == 0 else None)

    names = ["t" if v == 0 else f"x{v}" for v in vars]
    ax.set_xlabel(names[0])
    ax.set_ylabel(names[1])
    ax.set_title('Flowpipe')
    ax.grid(True)

    # Avoid duplicate legends
    handles, labels = ax.get_legend_handles_labels()
    if labels:
        ax.legend(handles, labels, loc='upper left')
    return ax
