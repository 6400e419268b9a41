"""
Scene Snapshot (PyVista)
========================
Builds the scene as the player sees it: every triangle takes the color of the
world it lies in from the player's point of view, and triangles that are fully
transparent in that world are left out.

Colors are flat-shaded once here (ambient plus diffuse towards a fixed light),
so the mesh is drawn with VTK lighting switched off.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence, TYPE_CHECKING

import numpy as np
import pyvista as pv

from trefoilworlds.config import LIGHT_DIRECTION
from trefoilworlds.model.modeling import Triangle, pack_triangles
from trefoilworlds.portal.shading import seen_worlds, select_channel

if TYPE_CHECKING:
    import numpy.typing as npt
    from trefoilworlds.simulation import Simulation

logger = logging.getLogger(__name__)


def shade(
    triangles: Sequence[Triangle],
    rgba: npt.NDArray[np.float64],
    light: Sequence[float] = LIGHT_DIRECTION,
) -> npt.NDArray[np.float64]:
    """
    Apply flat lighting to one RGBA color per triangle. Alpha is left as is.

    Args:
        triangles: Scene triangles, in the same order as `rgba`.
        rgba: (N, 4) colors to shade.
        light: Direction towards the light.
    """
    light = np.asarray(light, dtype=np.float64)
    light = light / np.linalg.norm(light)

    out = np.array(rgba, dtype=np.float64)
    for i, tri in enumerate(triangles):
        intensity = tri.ambient_factor + tri.diffuse_factor * max(0.0, float(tri.normal @ light))
        out[i, :3] = np.clip(out[i, :3] * intensity, 0.0, 1.0)
    return out


def scene_polydata(
    triangles: Sequence[Triangle],
    eye: Sequence[float],
    eye_world: int,
) -> pv.PolyData:
    """
    Convert triangles into a PolyData colored for the given viewpoint.

    Args:
        triangles: Scene triangles.
        eye: Eye position in ambient space.
        eye_world: World the eye is in.

    Returns:
        PolyData with one cell per visible triangle, an 'rgba' (uint8) and a
        'world' cell array.
    """
    vertices, colors, centers = pack_triangles(triangles)
    if len(vertices) == 0:
        return pv.PolyData()

    worlds = seen_worlds(eye, eye_world, centers)
    rgba = select_channel(colors, worlds)

    visible = rgba[:, 3] > 0.0
    n = int(visible.sum())
    logger.debug(f"{n} of {len(visible)} triangles visible from world {eye_world}.")
    if n == 0:
        return pv.PolyData()

    kept = [tri for tri, v in zip(triangles, visible) if v]
    rgba = shade(kept, rgba[visible])

    points = vertices[visible].reshape(-1, 3)
    faces = np.column_stack([np.full(n, 3), np.arange(3 * n).reshape(n, 3)]).ravel()

    mesh = pv.PolyData(points, faces=faces)
    mesh.cell_data["rgba"] = np.round(rgba * 255.0).astype(np.uint8)
    mesh.cell_data["world"] = worlds[visible]
    return mesh


def simulation_polydata(simulation: Simulation) -> pv.PolyData:
    """The whole scene of a simulation, seen by its player."""
    player = simulation.player
    triangles = [*simulation.static_geometry(), *simulation.frame_geometry()]
    return scene_polydata(triangles, player.eye(), player.world)


def show_scene(simulation: Simulation, screenshot: Optional[str] = None) -> None:
    """Open a PyVista window looking from the player's eye (or save a screenshot)."""
    mesh = simulation_polydata(simulation)
    player = simulation.player

    plotter = pv.Plotter(off_screen=screenshot is not None)
    if mesh.n_cells > 0:
        plotter.add_mesh(mesh, scalars="rgba", rgba=True, lighting=False, show_scalar_bar=False)
    else:
        logger.warning("Nothing is visible from the player's position.")

    eye = player.eye()
    plotter.camera_position = [
        tuple(eye),
        tuple(eye + player.look_direction()),
        (0.0, 0.0, 1.0),
    ]
    plotter.camera.view_angle = 90.0

    if screenshot is not None:
        logger.info(f"Saving scene screenshot to: {screenshot}")
        plotter.show(screenshot=screenshot)
    else:
        plotter.show()
