"""
Location providers.

A provider answers "where is the display?" for the elevation-based
transition scheme. Two variants exist:
- manual: fixed coordinates from the configuration
- city: a city name resolved through astral's geocoder database
"""

from functools import lru_cache
from typing import Literal, Union

from astral import LocationInfo
from astral.geocoder import database, lookup
from pydantic import BaseModel, ConfigDict, Field

from duskshift.types import Location


class ProviderError(RuntimeError):
    """Raised when a provider cannot determine the location."""


@lru_cache(maxsize=1)
def _city_database() -> dict:
    return database()


class ManualProvider(BaseModel):
    """Provider returning fixed, already validated coordinates."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["manual"] = "manual"
    location: Location = Field(default_factory=Location)

    def get(self) -> Location:
        return self.location


class CityProvider(BaseModel):
    """Provider looking up a city in astral's built-in geocoder database."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["city"] = "city"
    name: str = Field(..., min_length=1)

    def get(self) -> Location:
        """
        Resolve the city name to coordinates.

        Raises:
            ProviderError: If the name is unknown or names a region, not a city
        """
        try:
            info = lookup(self.name, _city_database())
        except KeyError as e:
            raise ProviderError(f"Unable to find location for city '{self.name}'") from e

        if not isinstance(info, LocationInfo):
            raise ProviderError(f"'{self.name}' is a region, not a city")

        return Location(latitude=info.latitude, longitude=info.longitude)


LocationProvider = Union[ManualProvider, CityProvider]


def parse_provider(text: str) -> LocationProvider:
    """Build a provider from "LAT:LON" or a city name."""
    text = text.strip()
    parts = text.split(":")
    if len(parts) == 2:
        try:
            lat, lon = float(parts[0]), float(parts[1])
        except ValueError:
            pass
        else:
            return ManualProvider(location=Location(latitude=lat, longitude=lon))
    return CityProvider(name=text)
