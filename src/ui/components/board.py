"""Board component: the rotating log drawn as inline SVG."""

from __future__ import annotations

import math
from collections.abc import Mapping

import streamlit as st

from src.engine.base import RoundState, StageProfile

_SIZE = 320
_CENTER = _SIZE / 2
_RADIUS = 90
_KNIFE_LENGTH = 60
_APPLE_RADIUS = 11
_BURST_SECONDS = 0.4
_BURST_PIECES = 6


def _point(angle: float, distance: float) -> tuple[float, float]:
    """Screen coordinates of a point ``distance`` from the centre.

    Angles are degrees clockwise from straight up.
    """
    rad = math.radians(angle)
    return _CENTER + distance * math.sin(rad), _CENTER - distance * math.cos(rad)


def burst_progress(
    started: dict[int, float],
    state: RoundState,
    now: float,
    duration: float = _BURST_SECONDS,
) -> dict[int, float]:
    """Track when each apple was hit and report running explosions.

    ``started`` maps target id to the time the apple was first seen hidden
    and is updated in place; apples visible again (a new round) are dropped.

    Returns:
        Target id to explosion progress in [0, 1) for explosions still running
    """
    hidden = {t.id for t in state.targets if not t.visible}
    for target_id in list(started):
        if target_id not in hidden:
            del started[target_id]
    for target_id in hidden:
        started.setdefault(target_id, now)
    return {
        target_id: (now - at) / duration
        for target_id, at in started.items()
        if now - at < duration
    }


def _burst_svg(x: float, y: float, progress: float) -> str:
    opacity = 1.0 - progress
    parts = [
        f'<g class="apple-burst" opacity="{opacity:.2f}">',
        f'<circle cx="{x:.1f}" cy="{y:.1f}" r="{_APPLE_RADIUS * (1 + progress):.1f}" '
        'fill="none" stroke="#ffab91" stroke-width="2"/>',
    ]
    distance = 4 + 18 * progress
    for k in range(_BURST_PIECES):
        rad = math.radians(k * 360 / _BURST_PIECES)
        px = x + distance * math.sin(rad)
        py = y - distance * math.cos(rad)
        parts.append(f'<circle cx="{px:.1f}" cy="{py:.1f}" r="3" fill="#e53935"/>')
    parts.append("</g>")
    return "".join(parts)


def board_svg(
    state: RoundState,
    profile: StageProfile,
    bursts: Mapping[int, float] | None = None,
) -> str:
    """Build the SVG markup for a round snapshot.

    Args:
        bursts: Target id to explosion progress for recently hit apples
    """
    bursts = bursts or {}
    parts = [
        f'<svg width="{_SIZE}" height="{_SIZE + 80}" viewBox="0 0 {_SIZE} {_SIZE + 80}" '
        'xmlns="http://www.w3.org/2000/svg">',
        f'<circle cx="{_CENTER}" cy="{_CENTER}" r="{_RADIUS}" fill="{profile.color}" '
        f'stroke="{profile.bg_color}" stroke-width="8"/>',
    ]

    for target in state.targets:
        x, y = _point(target.angle + state.rotation_angle, _RADIUS + _APPLE_RADIUS)
        if target.visible:
            parts.append(
                f'<circle cx="{x:.1f}" cy="{y:.1f}" r="{_APPLE_RADIUS}" fill="#e53935"/>'
            )
        elif target.id in bursts:
            parts.append(_burst_svg(x, y, bursts[target.id]))

    for angle in state.stuck_knives:
        screen = angle + state.rotation_angle
        x1, y1 = _point(screen, _RADIUS - 6)
        x2, y2 = _point(screen, _RADIUS + _KNIFE_LENGTH)
        parts.append(
            f'<line x1="{x1:.1f}" y1="{y1:.1f}" x2="{x2:.1f}" y2="{y2:.1f}" '
            'stroke="#6D4C41" stroke-width="6" stroke-linecap="round"/>'
        )

    # waiting knife at the throw point
    if state.knives_remaining > 0:
        top = _CENTER + _RADIUS + _KNIFE_LENGTH + 10
        parts.append(
            f'<line x1="{_CENTER}" y1="{top}" x2="{_CENTER}" y2="{top + 60}" '
            'stroke="#6D4C41" stroke-width="6" stroke-linecap="round"/>'
        )

    parts.append("</svg>")
    return "".join(parts)


def render_board(
    state: RoundState,
    profile: StageProfile,
    bursts: Mapping[int, float] | None = None,
) -> None:
    """Render the log with its knives, apples and apple explosions."""
    st.markdown(
        f'<div class="board">{board_svg(state, profile, bursts)}</div>',
        unsafe_allow_html=True,
    )
