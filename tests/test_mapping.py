"""Tests for isdkit.mapping (requires plotly)."""

from __future__ import annotations

import sys
from unittest.mock import patch

import pytest

from conftest import make_station
from isdkit.engine import search
from isdkit.table import ResultTable, StationTable


class TestRender:
    def test_markers_for_unranked_table(self, table: StationTable) -> None:
        pytest.importorskip("plotly")
        from isdkit.mapping import render

        fig = render(table)
        assert len(fig.data) == 1
        # The station without coordinates is skipped.
        assert len(fig.data[0].lat) == len(table) - 1
        assert "Code: 037720-99999" in fig.data[0].text[0]
        assert "Distance" not in fig.data[0].text[0]

    def test_ranked_result_with_reference_point(self, table: StationTable) -> None:
        pytest.importorskip("plotly")
        from isdkit.mapping import render

        result = search(table, latitude=51.5, longitude=-0.1, n=2)
        fig = render(result, (51.5, -0.1), title="Near London")
        assert len(fig.data) == 2
        assert list(fig.data[0].lat) == [r.latitude for r in result]
        assert "Distance (km): 24." in fig.data[0].text[0]
        assert fig.data[1].name == "Search location"
        assert list(fig.data[1].lat) == [51.5]
        assert fig.layout.title.text == "Near London"

    def test_empty_result(self, table: StationTable) -> None:
        pytest.importorskip("plotly")
        from isdkit.mapping import render

        fig = render(search(table, name="zzzznonexistent"))
        assert len(fig.data[0].lat) == 0

    def test_missing_plotly(self, table: StationTable) -> None:
        from isdkit.mapping import render

        with patch.dict(sys.modules, {"plotly": None, "plotly.graph_objects": None}):
            with pytest.raises(ImportError, match=r"isdkit\[plotly\]"):
                render(table)

    def test_hand_built_result_skips_unlocated_rows(self) -> None:
        pytest.importorskip("plotly")
        from isdkit.mapping import render

        result = ResultTable(
            [make_station(name="NOWHERE", latitude=None), make_station(name="LONDON HEATHROW")],
            [0.0, 24.3],
        )
        fig = render(result)
        assert list(fig.data[0].lat) == [51.48]
        assert fig.data[0].text[0].startswith("LONDON HEATHROW")
        assert "Distance (km): 24.3" in fig.data[0].text[0]

    def test_hand_built_unranked_result(self) -> None:
        pytest.importorskip("plotly")
        from isdkit.mapping import render

        fig = render(ResultTable([make_station(longitude=float("nan")), make_station(name="KEPT")]))
        assert len(fig.data[0].lat) == 1
        assert "Distance" not in fig.data[0].text[0]
