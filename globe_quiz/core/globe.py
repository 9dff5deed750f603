from __future__ import annotations

from typing import Dict, List, Optional

import plotly.graph_objects as go

from . import engine
from .indexer import CountryIndex
from .models import QuizState, QuizStatus, VisualState

STATE_COLORS: Dict[VisualState, str] = {
    VisualState.CORRECT: "green",
    VisualState.WRONG: "red",
    VisualState.HOVERED: "steelblue",
    VisualState.DEFAULT: "lightgray",
}

_STATE_CODES: Dict[VisualState, int] = {
    VisualState.DEFAULT: 0,
    VisualState.HOVERED: 1,
    VisualState.WRONG: 2,
    VisualState.CORRECT: 3,
}


def _discrete_colorscale() -> List[List]:
    steps = len(_STATE_CODES)
    scale: List[List] = []
    for visual, code in sorted(_STATE_CODES.items(), key=lambda item: item[1]):
        scale.append([code / steps, STATE_COLORS[visual]])
        scale.append([(code + 1) / steps, STATE_COLORS[visual]])
    return scale


def feature_states(state: QuizState) -> Dict[str, VisualState]:
    """Visual classification of every feature in the current pool."""
    return {feature.id: engine.visual_state(state, feature.id) for feature in state.filtered}


def view_center(state: QuizState) -> Dict[str, float]:
    target = engine.current_target(state)
    if target is not None and target.lat is not None and target.lng is not None:
        return {"lat": target.lat, "lon": target.lng}
    return {"lat": 0.0, "lon": 0.0}


def build_globe(index: CountryIndex, state: QuizState, height: int = 620) -> go.Figure:
    states = feature_states(state)
    ids = list(states)
    names = {feature.id: feature.name for feature in state.filtered}
    center = view_center(state)
    show_names = state.status != QuizStatus.RUNNING

    choropleth = go.Choropleth(
        geojson=index.geojson(),
        featureidkey="id",
        locations=ids,
        z=[_STATE_CODES[states[i]] + 0.5 for i in ids],
        zmin=0,
        zmax=len(_STATE_CODES),
        colorscale=_discrete_colorscale(),
        showscale=False,
        text=[names[i] if show_names else "" for i in ids],
        marker_line_width=0.5,
        marker_line_color="rgba(0,100,0,0.35)",
        hovertemplate="%{text}<extra></extra>",
    )

    fig = go.Figure(data=[choropleth])
    fig.update_layout(
        geo=dict(
            showframe=False,
            showcoastlines=True,
            coastlinecolor="#CBD5E1",
            showland=True,
            landcolor="#1e293b",
            showocean=True,
            oceancolor="#0f172a",
            projection_type="orthographic",
            projection_rotation=dict(lat=center["lat"], lon=center["lon"]),
        ),
        paper_bgcolor="#020617",
        margin=dict(l=0, r=0, t=0, b=0),
        height=height,
        clickmode="event+select",
    )
    return fig


def clicked_feature(event) -> Optional[str]:
    """Feature id from a Streamlit plotly selection event, if any."""
    if not event:
        return None
    selection = event.get("selection") if isinstance(event, dict) else getattr(event, "selection", None)
    if not selection:
        return None
    points = selection.get("points") if isinstance(selection, dict) else getattr(selection, "points", None)
    for point in points or []:
        location = point.get("location") if isinstance(point, dict) else None
        if location:
            return str(location)
    return None
