from __future__ import annotations

import math
from pathlib import Path
from typing import Iterable

import plotly.graph_objects as go

from vessel_tools.objects.body import CelestialBody
from vessel_tools.simulation.engine import SimulationLog


def _body_mesh(body: CelestialBody, n_lat: int = 30, n_lon: int = 60):
    # Sphere mesh in world axes (y-up)
    cx, cy, cz = body.position_world
    r = body.radius_m
    lats = [(-math.pi / 2) + i * (math.pi / (n_lat - 1)) for i in range(n_lat)]
    lons = [(-math.pi) + j * (2 * math.pi / (n_lon - 1)) for j in range(n_lon)]

    x = []
    y = []
    z = []
    for lat in lats:
        x.append([cx + r * math.cos(lat) * math.cos(lon) for lon in lons])
        y.append([cy + r * math.sin(lat) for _lon in lons])
        z.append([cz + r * math.cos(lat) * math.sin(lon) for lon in lons])
    return x, y, z


def build_track_figure(log: SimulationLog, bodies: Iterable[CelestialBody] = ()) -> go.Figure:
    """
    3D scene for inspecting a relocation:
      - a sphere per body
      - the recorded track of each vessel
      - a marker at each vessel's last position
    """
    fig = go.Figure()

    for body in bodies:
        bx, by, bz = _body_mesh(body)
        fig.add_trace(go.Surface(x=bx, y=by, z=bz, showscale=False, opacity=0.35, name=body.name))

    for vessel_id, samples in log.vessel_positions_m.items():
        if not samples:
            continue
        xs = [r[0] for (_t, r) in samples]
        ys = [r[1] for (_t, r) in samples]
        zs = [r[2] for (_t, r) in samples]

        fig.add_trace(go.Scatter3d(x=xs, y=ys, z=zs, mode="lines", name=f"{vessel_id} track"))
        fig.add_trace(go.Scatter3d(
            x=[xs[-1]], y=[ys[-1]], z=[zs[-1]],
            mode="markers",
            name=f"{vessel_id} now",
            marker=dict(size=5),
        ))

    fig.update_layout(
        title="Vessel tracks",
        scene=dict(
            xaxis_title="X (m)",
            yaxis_title="Y (m)",
            zaxis_title="Z (m)",
            aspectmode="data",
        ),
        margin=dict(l=0, r=0, t=40, b=0),
        legend=dict(orientation="h"),
    )
    return fig


def render_tracks(
    log: SimulationLog,
    bodies: Iterable[CelestialBody] = (),
    out_html: str = "out/vessel_tracks.html",
) -> str:
    fig = build_track_figure(log, bodies)
    Path(out_html).parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(out_html, auto_open=False)
    return out_html
