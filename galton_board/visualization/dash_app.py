"""Interactive Dash UI for the Galton board.

Run with:
    python galton_board/visualization/dash_app.py

Opens at http://127.0.0.1:7860
"""

from __future__ import annotations

import time

import numpy as np
import plotly.graph_objects as go

import dash
from dash import dcc, html, ctx, dash_table, Input, Output, State
from dash.dash_table import FormatTemplate
from dash.dash_table.Format import Format, Scheme

# ── Imports from the package ────────────────────────────────────────────
import sys, os

sys.path.insert(
    0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
)

from galton_board.core.config import BoardConfig, configure_logging
from galton_board.simulation.board import GaltonBoard, Reset, SetRate
from galton_board.simulation.geometry import BoardLayout
from galton_board.simulation.stats import StatsView

# ═══════════════════════════════════════════════════════════════════════
#  Dark plotly theme
# ═══════════════════════════════════════════════════════════════════════

_LAYOUT_DEFAULTS = dict(
    template="plotly_dark",
    paper_bgcolor="#0a0a0f",
    plot_bgcolor="#0a0a0f",
    font=dict(family="Inter, -apple-system, sans-serif", color="#e8eaed"),
    margin=dict(l=20, r=20, t=50, b=20),
    uirevision="stable",
)

_PATH_COLOR = "rgb(255, 51, 51)"
_ALPHA_LEVELS = 10  # segment opacities are bucketed, one trace per bucket


# ═══════════════════════════════════════════════════════════════════════
#  Figures
# ═══════════════════════════════════════════════════════════════════════


def _segment_traces(stats: StatsView, layout: BoardLayout) -> list[go.Scatter]:
    buckets: dict[int, tuple[list, list]] = {}
    for row, a, b, alpha in stats.segments():
        level = int(round(min(alpha, 1.0) * _ALPHA_LEVELS))
        if level == 0:
            continue
        (x0, y0), (x1, y1) = layout.segment(row, a, b)
        xs, ys = buckets.setdefault(level, ([], []))
        xs += [x0, x1, None]
        ys += [y0, y1, None]
    return [
        go.Scatter(
            x=xs, y=ys, mode="lines",
            line=dict(width=3, color=f"rgba(255,255,255,{level / _ALPHA_LEVELS:.2f})"),
            hoverinfo="none", showlegend=False,
        )
        for level, (xs, ys) in sorted(buckets.items())
    ]


def _board_figure(stats: StatsView, layout: BoardLayout) -> go.Figure:
    fig = go.Figure()
    for trace in _segment_traces(stats, layout):
        fig.add_trace(trace)

    pts = [
        pos
        for row in range(stats.row_count + 1)
        for pos in layout.row_positions(row)
    ]
    fig.add_trace(go.Scatter(
        x=[p[0] for p in pts], y=[p[1] for p in pts], mode="markers",
        marker=dict(size=layout.pin_radius * 1.5, color="white"),
        hoverinfo="none", showlegend=False,
    ))

    if stats.total_paths:
        pins = stats.last_path + [stats.last_bin]
        path = [layout.pin_position(row, pin) for row, pin in enumerate(pins)]
        fig.add_trace(go.Scatter(
            x=[p[0] for p in path], y=[p[1] for p in path], mode="lines",
            line=dict(width=4, color=_PATH_COLOR),
            hoverinfo="none", showlegend=False,
        ))

    fig.update_layout(
        title=dict(text="Path density", font=dict(size=16)),
        xaxis=dict(scaleanchor="y", constrain="domain", showgrid=False,
                   showticklabels=False, zeroline=False),
        yaxis=dict(autorange="reversed", showgrid=False,
                   showticklabels=False, zeroline=False),
        height=600,
        **_LAYOUT_DEFAULTS,
    )
    return fig


def _histogram_figure(stats: StatsView) -> go.Figure:
    hist = stats.histogram()
    bins = list(range(len(hist.bins)))
    colors = ["#7c5cfc"] * len(bins)
    if stats.last_bin is not None:
        colors[stats.last_bin] = _PATH_COLOR

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=bins, y=hist.bins.astype(np.int64), marker_color=colors,
        name="Observed",
    ))
    fig.add_trace(go.Scatter(
        x=bins, y=stats.expected_histogram(), mode="lines+markers",
        line=dict(color="#34d399", dash="dash"), name="Binomial",
    ))
    fig.update_layout(
        title=dict(text=f"Bins (max {hist.maximum})", font=dict(size=16)),
        xaxis=dict(title="Bin", dtick=1),
        yaxis=dict(title="Paths", range=[0, max(hist.maximum, 1) * 1.05]),
        height=300,
        **_LAYOUT_DEFAULTS,
    )
    return fig


def _metrics(board: GaltonBoard, stats: StatsView) -> str:
    return (
        f"Paths: {stats.total_paths}  ·  Rate: {board.rate:g} batches/s  ·  "
        f"Batch: {board.batch_size}"
    )


# ═══════════════════════════════════════════════════════════════════════
#  Server-side state (single user)
# ═══════════════════════════════════════════════════════════════════════

_config = BoardConfig.from_env()
_board = GaltonBoard.from_config(_config)
_layout = BoardLayout(row_count=_config.row_count)


# ═══════════════════════════════════════════════════════════════════════
#  Dash app
# ═══════════════════════════════════════════════════════════════════════

app = dash.Dash(
    __name__,
    title="Galton Board",
    suppress_callback_exceptions=True,
)

app.index_string = """<!DOCTYPE html>
<html>
<head>
    {%metas%}
    <title>{%title%}</title>
    {%favicon%}
    {%css%}
    <style>
        :root {
            --bg-base: #0a0a0f;
            --bg-surface: rgba(15, 15, 25, 0.8);
            --bg-elevated: rgba(25, 25, 45, 0.6);
            --glass-border: rgba(255, 255, 255, 0.08);
            --text-primary: #e8eaed;
            --text-secondary: #9aa0a6;
            --text-muted: #5f6368;
            --accent-blue: #60a5fa;
            --accent-red: #f87171;
            --radius-md: 12px;
        }
        body {
            background: var(--bg-base); color: var(--text-primary); margin: 0;
            font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif;
        }
        .sidebar {
            position: fixed; top: 0; left: 0; bottom: 0; width: 280px;
            background: var(--bg-surface);
            border-right: 1px solid var(--glass-border);
            padding: 24px 20px; overflow-y: auto; box-sizing: border-box;
        }
        .sidebar label {
            display: block; margin: 10px 0 4px 0;
            color: var(--text-secondary); font-size: 0.8em; font-weight: 500;
        }
        .sidebar-section {
            margin-top: 20px; padding-top: 16px;
            border-top: 1px solid var(--glass-border);
        }
        .sidebar-section-header {
            font-size: 0.65em; color: var(--text-muted); text-transform: uppercase;
            letter-spacing: 0.12em; font-weight: 600; margin-bottom: 8px;
        }
        .rate-feedback { color: var(--accent-red); font-size: 0.8em; min-height: 1em; }
        .main-area { margin-left: 280px; padding: 24px 32px; }
        .control-bar { display: flex; gap: 10px; margin: 16px 0; }
        .control-bar button {
            padding: 10px 20px; min-width: 88px; cursor: pointer;
            border: 1px solid var(--glass-border); border-radius: var(--radius-md);
            background: var(--bg-elevated); color: var(--text-secondary);
        }
        .control-bar button.danger {
            background: linear-gradient(135deg, #dc2626, #f87171);
            color: #fff; font-weight: 600;
        }
        .round-badge {
            display: inline-flex; padding: 6px 16px; margin: 10px 0;
            background: var(--bg-elevated);
            border: 1px solid var(--glass-border); border-radius: 999px;
            color: var(--accent-blue); font-weight: 600; font-size: 0.85em;
        }
        details summary { cursor: pointer; color: var(--accent-blue); margin: 12px 0; }
    </style>
</head>
<body>
    {%app_entry%}
    <footer>
        {%config%}
        {%scripts%}
        {%renderer%}
    </footer>
</body>
</html>
"""


def _sidebar():
    return html.Div([
        html.H2("Galton Board"),

        html.Div(className="sidebar-section", children=[
            html.Div("Simulation", className="sidebar-section-header"),
            html.Label("Animation speed (batches/s)"),
            dcc.Input(id="rate-input", type="number", value=_config.rate,
                      min=0, step="any", debounce=True),
            html.Div(id="rate-feedback", className="rate-feedback"),
            html.Label("Frame interval (ms)"),
            dcc.Slider(id="frame-slider", min=16, max=500, step=None, value=100,
                       marks={16: "16", 50: "50", 100: "100", 250: "250", 500: "500"}),
        ]),

        html.Div(className="sidebar-section", children=[
            html.Div("Board", className="sidebar-section-header"),
            html.P(f"{_config.row_count} rows · {_config.row_count + 1} bins · "
                   f"policy {_config.policy.value}"),
        ]),
    ], className="sidebar")


app.layout = html.Div([
    _sidebar(),
    html.Div([
        html.Div([
            html.Button("Pause", id="btn-play", n_clicks=0),
            html.Button("Reset", id="btn-reset", className="danger", n_clicks=0),
        ], className="control-bar"),
        html.Div(id="metrics", className="round-badge"),
        dcc.Graph(id="board-graph", config={"displayModeBar": False}),
        dcc.Graph(id="histogram-graph", config={"displayModeBar": False}),
        html.Details([
            html.Summary("Bin table"),
            dash_table.DataTable(
                id="bin-table",
                columns=[
                    {"name": "Bin", "id": "bin"},
                    {"name": "Count", "id": "count"},
                    {"name": "Expected", "id": "expected", "type": "numeric",
                     "format": Format(precision=1, scheme=Scheme.fixed)},
                    {"name": "Share", "id": "share", "type": "numeric",
                     "format": FormatTemplate.percentage(2)},
                ],
                data=[],
                style_cell={"textAlign": "center", "padding": "4px 8px",
                            "backgroundColor": "#0a0a0f", "color": "#e8eaed"},
            ),
        ]),
        # Frame source
        dcc.Interval(id="frame-interval", interval=100, disabled=False),
        dcc.Store(id="playing", data=True),
    ], className="main-area"),
])


# ═══════════════════════════════════════════════════════════════════════
#  Callbacks
# ═══════════════════════════════════════════════════════════════════════

# ── Frame tick / reset -> redraw ─────────────────────────────────────

@app.callback(
    Output("board-graph", "figure"),
    Output("histogram-graph", "figure"),
    Output("metrics", "children"),
    Output("bin-table", "data"),
    Input("frame-interval", "n_intervals"),
    Input("btn-reset", "n_clicks"),
)
def on_frame(n_intervals, reset_clicks):
    if ctx.triggered_id == "btn-reset":
        _board.handle(Reset())
    else:
        _board.tick(time.monotonic())
    stats = _board.stats()
    table = stats.histogram_frame().to_dict("records")
    return (
        _board_figure(stats, _layout),
        _histogram_figure(stats),
        _metrics(_board, stats),
        table,
    )


# ── Rate change ──────────────────────────────────────────────────────

@app.callback(
    Output("rate-feedback", "children"),
    Input("rate-input", "value"),
    prevent_initial_call=True,
)
def on_rate(value):
    if _board.handle(SetRate(value)):
        return ""
    return f"Rejected {value!r}; keeping {_board.rate:g}"


# ── Play / pause ─────────────────────────────────────────────────────

@app.callback(
    Output("frame-interval", "disabled"),
    Output("btn-play", "children"),
    Output("playing", "data"),
    Input("btn-play", "n_clicks"),
    State("playing", "data"),
    prevent_initial_call=True,
)
def toggle_play(n_clicks, playing):
    new_playing = not playing
    if new_playing:
        # Time spent paused is not simulated.
        _board.resume(time.monotonic())
    return (not new_playing), ("Pause" if new_playing else "Play"), new_playing


@app.callback(
    Output("frame-interval", "interval"),
    Input("frame-slider", "value"),
)
def update_frame_interval(interval_ms):
    return interval_ms or 100


# ═══════════════════════════════════════════════════════════════════════
#  Entry point
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    configure_logging()
    port = int(os.environ.get("PORT", 7860))
    app.run(host="0.0.0.0", debug=False, port=port)
