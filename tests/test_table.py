"""Tests for isdkit.table."""

from __future__ import annotations

import pytest

from isdkit.station import RankedRecord, StationRecord
from isdkit.table import COLUMNS, DISTANCE_COLUMN, ResultTable, StationTable


class TestStationTable:
    def test_len_and_iter(self, table: StationTable, stations: list[StationRecord]) -> None:
        assert len(table) == len(stations)
        assert list(table) == stations

    def test_empty_table_is_falsy(self) -> None:
        assert not StationTable()
        assert len(StationTable()) == 0

    def test_filter_returns_new_table_in_order(self, table: StationTable) -> None:
        uk = table.filter(lambda r: r.country_code == "UK")
        assert isinstance(uk, StationTable)
        assert uk is not table
        assert [r.name for r in uk] == ["LONDON HEATHROW", "EDINBURGH", "London City", "Heathrow North"]

    def test_slice_returns_table(self, table: StationTable) -> None:
        head = table[:2]
        assert isinstance(head, StationTable)
        assert len(head) == 2
        assert table[0].name == "LONDON HEATHROW"

    def test_columns_use_semantic_names(self, table: StationTable) -> None:
        assert "latitude" in table.columns
        assert "longitude" in table.columns
        assert "LAT" not in table.columns
        assert DISTANCE_COLUMN not in table.columns

    def test_to_rows(self, table: StationTable) -> None:
        rows = table.to_rows()
        assert len(rows) == len(table)
        assert tuple(rows[0]) == COLUMNS
        assert rows[0]["station_code"] == "037720-99999"
        assert rows[0]["latitude"] == 51.48

    def test_station_codes(self, table: StationTable) -> None:
        assert table.station_codes[0] == "037720-99999"

    def test_equality(self, stations: list[StationRecord]) -> None:
        assert StationTable(stations) == StationTable(list(stations))
        assert StationTable(stations) != StationTable(stations[:1])

    def test_to_dataframe(self, table: StationTable) -> None:
        pytest.importorskip("pandas")
        df = table.to_dataframe()
        assert list(df.columns) == list(COLUMNS)
        assert len(df) == len(table)
        assert df.iloc[0]["station_code"] == "037720-99999"


class TestResultTable:
    def test_unranked(self, stations: list[StationRecord]) -> None:
        result = ResultTable(stations)
        assert not result.is_ranked
        assert result.distances is None
        assert result.columns == COLUMNS
        with pytest.raises(ValueError, match="not ranked"):
            _ = result.ranked

    def test_from_ranked(self, stations: list[StationRecord]) -> None:
        result = ResultTable.from_ranked([
            RankedRecord(station=stations[0], distance_km=1.5),
            RankedRecord(station=stations[1], distance_km=500.0),
        ])
        assert result.is_ranked
        assert result.distances == (1.5, 500.0)
        assert result.columns[-1] == DISTANCE_COLUMN
        assert result.ranked[1].station == stations[1]
        assert result.to_rows()[0][DISTANCE_COLUMN] == 1.5

    def test_distance_length_mismatch(self, stations: list[StationRecord]) -> None:
        with pytest.raises(ValueError, match="distances"):
            ResultTable(stations[:2], [1.0])

    def test_slice_keeps_distances(self, stations: list[StationRecord]) -> None:
        result = ResultTable(stations[:3], [1.0, 2.0, 3.0])
        head = result[:2]
        assert isinstance(head, ResultTable)
        assert head.distances == (1.0, 2.0)

    def test_not_equal_to_plain_table(self, stations: list[StationRecord]) -> None:
        assert ResultTable(stations) != StationTable(stations)

    def test_to_dataframe_includes_distance(self, stations: list[StationRecord]) -> None:
        pytest.importorskip("pandas")
        df = ResultTable(stations[:2], [3.0, 4.0]).to_dataframe()
        assert list(df[DISTANCE_COLUMN]) == [3.0, 4.0]
