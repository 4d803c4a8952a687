"""
VISUALIZATION: PLOTTING 2D MESHES AND CELL RESULTS
==================================================

PURPOSE:
--------
Quick visual checks of 2D results: the mesh, its deformed shape (with an
exaggeration factor) and a cell-wise constant field such as sigma_xx drawn
as coloured polygons.

Plots are saved to file and the figure is closed afterwards, so this works
headless with the Agg backend.
"""

import os
from typing import Optional

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import PolyCollection

from .model import PolygonMesh

COLORS = {
    'undeformed': '#BDC3C7',     # Silver gray
    'deformed': '#2C3E50',       # Dark blue-gray
    'background': '#FAFAFA',     # Off-white
}


def deformed_points(mesh: PolygonMesh, displacement: Optional[np.ndarray], scale: float) -> np.ndarray:
    """Point coordinates moved by scale * displacement (unchanged if None)."""
    if displacement is None:
        return mesh.points.copy()
    u = np.asarray(displacement, dtype=float).reshape(-1, 2)
    pts = mesh.points.copy()
    n = min(len(pts), len(u))
    pts[:n] += scale * u[:n]
    return pts


def plot_mesh_2d(
    mesh: PolygonMesh,
    outpath: str,
    cell_values: Optional[np.ndarray] = None,
    displacement: Optional[np.ndarray] = None,
    scale: float = 1.0,
    title: str = "Mesh",
    value_label: str = "",
) -> None:
    """
    Plot a polygonal mesh, optionally deformed and coloured by a cell field.

    Parameters:
    -----------
    mesh : PolygonMesh
        The mesh to draw
    outpath : str
        File path of the image; parent directories are created
    cell_values : np.ndarray, optional
        One value per cell, used as face colour
    displacement : np.ndarray, optional
        Full displacement vector (2 per point); draws the deformed mesh on
        top of the undeformed outline
    scale : float
        Exaggeration factor for the displacement
    title : str
        Plot title
    value_label : str
        Colour bar label
    """
    fig, ax = plt.subplots(figsize=(8, 6))
    fig.patch.set_facecolor(COLORS['background'])

    polys = [mesh.points[c] for c in mesh.cells()]
    if displacement is not None:
        ax.add_collection(PolyCollection(
            polys, facecolors='none', edgecolors=COLORS['undeformed'],
            linewidths=0.8, linestyles='dashed',
        ))

    pts = deformed_points(mesh, displacement, scale)
    deformed = PolyCollection([pts[c] for c in mesh.cells()],
                              edgecolors=COLORS['deformed'], linewidths=0.8)
    if cell_values is not None:
        deformed.set_array(np.asarray(cell_values, dtype=float))
        deformed.set_cmap('viridis')
        fig.colorbar(deformed, ax=ax, label=value_label)
    else:
        deformed.set_facecolor('none')
    ax.add_collection(deformed)

    all_pts = np.vstack([mesh.points, pts])
    pad = 0.05 * max(np.ptp(all_pts[:, 0]), np.ptp(all_pts[:, 1]), 1e-12)
    ax.set_xlim(all_pts[:, 0].min() - pad, all_pts[:, 0].max() + pad)
    ax.set_ylim(all_pts[:, 1].min() - pad, all_pts[:, 1].max() + pad)
    ax.set_aspect('equal')
    ax.set_title(title if displacement is None else f"{title} (deformation x{scale:g})")

    outdir = os.path.dirname(outpath)
    if outdir:
        os.makedirs(outdir, exist_ok=True)
    plt.savefig(outpath, dpi=150, bbox_inches='tight', facecolor=COLORS['background'])
    plt.close(fig)
