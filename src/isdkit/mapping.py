"""Interactive map of search results.

Requires plotly (``pip install isdkit[plotly]``).
"""

from __future__ import annotations

from typing import Any

from .table import ResultTable, StationTable


def _get_go() -> Any:
    """Get plotly.graph_objects module."""
    try:
        import plotly.graph_objects as go  # type: ignore[import-not-found]
    except ImportError:
        msg = "plotly is required for station maps. Install it with: pip install isdkit[plotly]"
        raise ImportError(msg) from None
    return go


def _located(table: StationTable) -> StationTable:
    """Drop rows without usable coordinates, keeping any distances aligned."""
    if isinstance(table, ResultTable) and table.distances is not None:
        kept = [(r, d) for r, d in zip(table, table.distances) if r.has_coordinates]
        return ResultTable((r for r, _ in kept), (d for _, d in kept))
    if isinstance(table, ResultTable):
        return ResultTable(r for r in table if r.has_coordinates)
    return table.filter(lambda r: r.has_coordinates)


def _hover_text(table: StationTable) -> list[str]:
    distances = table.distances if isinstance(table, ResultTable) else None
    texts = []
    for i, r in enumerate(table):
        lines = [
            r.name,
            f"Code: {r.station_code}",
            f"Start: {r.period_start or 'NA'}",
            f"End: {r.period_end or 'NA'}",
        ]
        if distances is not None:
            lines.append(f"Distance (km): {distances[i]:.1f}")
        texts.append("<br>".join(lines))
    return texts


def render(
    table: StationTable,
    reference_point: tuple[float, float] | None = None,
    *,
    title: str | None = None,
) -> Any:
    """Plot stations on a world map.

    Stations without coordinates are skipped. Hovering a marker shows the
    station name, code, data period and, for ranked results, the distance
    to the search location.

    Args:
        table: Stations to plot, typically a search result.
        reference_point: ``(latitude, longitude)`` of the search location,
            drawn as a red marker.
        title: Optional figure title.

    Returns:
        A plotly Figure.

    Raises:
        ImportError: If plotly is not installed.
    """
    go = _get_go()
    located = _located(table)

    fig = go.Figure()
    fig.add_trace(
        go.Scattergeo(
            lat=[r.latitude for r in located],
            lon=[r.longitude for r in located],
            text=_hover_text(located),
            hoverinfo="text",
            mode="markers",
            marker={"size": 7, "color": "#1f77b4"},
            name="Stations",
        )
    )

    if reference_point is not None:
        lat, lon = reference_point
        fig.add_trace(
            go.Scattergeo(
                lat=[lat],
                lon=[lon],
                text=[f"Search location<br>Lat = {lat}<br>Lon = {lon}"],
                hoverinfo="text",
                mode="markers",
                marker={"size": 14, "color": "red", "symbol": "circle-open", "line": {"width": 3}},
                name="Search location",
            )
        )

    fig.update_geos(showcountries=True, fitbounds="locations" if len(located) or reference_point else False)
    fig.update_layout(title=title, margin={"l": 0, "r": 0, "t": 40 if title else 0, "b": 0})
    return fig
