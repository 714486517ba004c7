"""Station metadata record and ranked result types."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Any


@dataclass(frozen=True)
class StationRecord:
    """Metadata for a single station from the NOAA ISD station history.

    Attributes:
        usaf_id: Air Force station identifier, zero-padded to six digits
            (e.g. ``"037720"``).
        wban_id: Weather Bureau Army Navy identifier (e.g. ``"99999"``).
        name: Station name as it appears in the registry
            (e.g. ``"HEATHROW"``).
        country_code: FIPS country code (e.g. ``"UK"``), or ``None``.
        state_code: US state abbreviation (e.g. ``"CA"``), or ``None``.
        call_sign: ICAO call sign (e.g. ``"EGLL"``), or ``None``.
        latitude: Decimal degrees, north positive, or ``None`` if unknown.
        longitude: Decimal degrees, east positive, or ``None`` if unknown.
        elevation_m: Meters above sea level, or ``None``.
        period_start: First date with data, or ``None``.
        period_end: Last date with data, or ``None``.
    """

    usaf_id: str
    wban_id: str
    name: str
    country_code: str | None = None
    state_code: str | None = None
    call_sign: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    elevation_m: float | None = None
    period_start: date | None = None
    period_end: date | None = None

    @property
    def station_code(self) -> str:
        """Code used to request data for this station, ``USAF-WBAN``."""
        return f"{self.usaf_id}-{self.wban_id}"

    @property
    def has_coordinates(self) -> bool:
        """True if both latitude and longitude are present and finite."""
        return (
            self.latitude is not None
            and self.longitude is not None
            and math.isfinite(self.latitude)
            and math.isfinite(self.longitude)
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict (dates as ISO strings)."""
        return {
            "usaf_id": self.usaf_id,
            "wban_id": self.wban_id,
            "name": self.name,
            "country_code": self.country_code,
            "state_code": self.state_code,
            "call_sign": self.call_sign,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "elevation_m": self.elevation_m,
            "period_start": self.period_start.isoformat() if self.period_start else None,
            "period_end": self.period_end.isoformat() if self.period_end else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StationRecord:
        """Inverse of :meth:`to_dict`."""
        start = data.get("period_start")
        end = data.get("period_end")
        return cls(
            usaf_id=data["usaf_id"],
            wban_id=data["wban_id"],
            name=data.get("name") or "",
            country_code=data.get("country_code"),
            state_code=data.get("state_code"),
            call_sign=data.get("call_sign"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            elevation_m=data.get("elevation_m"),
            period_start=date.fromisoformat(start) if start else None,
            period_end=date.fromisoformat(end) if end else None,
        )


@dataclass(frozen=True)
class RankedRecord:
    """A station with its great-circle distance to a search location."""

    station: StationRecord
    distance_km: float
    """Great-circle distance in kilometres."""
