"""Geocoders that turn free-text place descriptors into coordinates."""
from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from typing import Mapping, Optional, Union

from geopy.exc import GeocoderServiceError
from geopy.geocoders import Nominatim

from src.core.entities import Coordinate
from src.utils.logger import logger


BRUSSELS_CENTRE = Coordinate(latitude=50.8503, longitude=4.3517)

# Insertion order matters: the first key found in the text wins.
BRUSSELS_GAZETTEER: Mapping[str, Coordinate] = {
    "bruxelles": BRUSSELS_CENTRE,
    "centre": BRUSSELS_CENTRE,
    "grand place": Coordinate(latitude=50.8467, longitude=4.3525),
    "ixelles": Coordinate(latitude=50.8224, longitude=4.3661),
    "etterbeek": Coordinate(latitude=50.8372, longitude=4.3883),
    "schaerbeek": Coordinate(latitude=50.8676, longitude=4.3731),
    "anderlecht": Coordinate(latitude=50.8364, longitude=4.3148),
    "molenbeek": Coordinate(latitude=50.8581, longitude=4.3272),
    "saint-gilles": Coordinate(latitude=50.8276, longitude=4.3425),
    "forest": Coordinate(latitude=50.8106, longitude=4.3198),
    "uccle": Coordinate(latitude=50.7989, longitude=4.3347),
    "woluwe": Coordinate(latitude=50.8448, longitude=4.4267),
    "watermael": Coordinate(latitude=50.8058, longitude=4.4089),
    "auderghem": Coordinate(latitude=50.8171, longitude=4.4292),
    "evere": Coordinate(latitude=50.8708, longitude=4.4009),
    "koekelberg": Coordinate(latitude=50.8606, longitude=4.3272),
    "jette": Coordinate(latitude=50.8786, longitude=4.3264),
    "ganshoren": Coordinate(latitude=50.8708, longitude=4.3097),
    "berchem": Coordinate(latitude=50.8656, longitude=4.2978),
}


@dataclass
class GazetteerGeocoder:
    """Resolve places against a static lookup table."""

    gazetteer: Mapping[str, Coordinate] = field(default_factory=lambda: dict(BRUSSELS_GAZETTEER))
    default: Optional[Coordinate] = None

    def resolve(self, location_text: str) -> Optional[Coordinate]:
        if not location_text or not location_text.strip():
            return None

        normalized = _strip_accents(location_text.lower())
        for needle, coordinate in self.gazetteer.items():
            if _strip_accents(needle.lower()) in normalized:
                logger.debug("Gazetteer matched {} for {}", needle, location_text)
                return coordinate

        if self.default is not None:
            logger.debug("No gazetteer entry for {}; using default location", location_text)
        return self.default


@dataclass
class NominatimGeocoder:
    """Resolve places through the OpenStreetMap Nominatim service."""

    user_agent: str = "activity-recommender"
    timeout: int = 5
    country_codes: Optional[str] = "be"
    language: str = "fr"

    def __post_init__(self) -> None:
        self._geolocator = Nominatim(user_agent=self.user_agent, timeout=self.timeout)

    def resolve(self, location_text: str) -> Optional[Coordinate]:
        query = (location_text or "").strip()
        if not query:
            return None

        try:
            location = self._geolocator.geocode(
                query,
                language=self.language,
                country_codes=self.country_codes,
            )
        except (GeocoderServiceError, ValueError) as error:
            logger.warning("Geocoding failed for {}: {}", query, error)
            return None

        if location is None:
            logger.info("No coordinates found for {}", query)
            return None

        coordinate = Coordinate.from_values(location.latitude, location.longitude)
        logger.debug("Resolved {} to {}", query, coordinate)
        return coordinate


def build_geocoder(
    config: Mapping[str, object] | None,
) -> Optional[Union[GazetteerGeocoder, NominatimGeocoder]]:
    """Create the geocoder described by the ``geocoding`` config section."""

    section = dict(config or {})
    provider = str(section.get("provider") or "none").strip().lower()

    if provider == "none":
        return None
    if provider == "gazetteer":
        default = BRUSSELS_CENTRE if section.get("use_default") else None
        return GazetteerGeocoder(default=default)
    if provider == "nominatim":
        country_codes = section.get("country_codes")
        return NominatimGeocoder(
            user_agent=str(section.get("user_agent") or "activity-recommender"),
            timeout=int(section.get("timeout") or 5),
            country_codes=str(country_codes) if country_codes else None,
        )

    raise ValueError(f"Unknown geocoding provider '{provider}'.")


def _strip_accents(value: str) -> str:
    """Remove diacritics to ease string comparisons."""
    normalized = unicodedata.normalize("NFKD", value)
    return "".join(char for char in normalized if not unicodedata.combining(char))


__all__ = [
    "BRUSSELS_CENTRE",
    "BRUSSELS_GAZETTEER",
    "GazetteerGeocoder",
    "NominatimGeocoder",
    "build_geocoder",
]
