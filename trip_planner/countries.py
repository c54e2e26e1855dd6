from __future__ import annotations

import logging
import re
from typing import Any, Callable

import httpx

from trip_planner.schemas import Country


logger = logging.getLogger("trip-planner")

DEFAULT_FLAG = "🌐"

FALLBACK_COUNTRIES: tuple[Country, ...] = (
    Country(
        display_name="🇺🇸 United States",
        coordinates=(37.0902, -95.7129),
        canonical_name="United States",
        map_link="https://www.openstreetmap.org/relation/148838",
    ),
    Country(
        display_name="🇬🇧 United Kingdom",
        coordinates=(55.3781, -3.4360),
        canonical_name="United Kingdom",
        map_link="https://www.openstreetmap.org/relation/62149",
    ),
    Country(
        display_name="🇨🇦 Canada",
        coordinates=(56.1304, -106.3468),
        canonical_name="Canada",
        map_link="https://www.openstreetmap.org/relation/1428125",
    ),
)

_FLAG_PREFIX = re.compile(r"^[^\w\s]+\s")


def strip_flag(label: str) -> str:
    """Drop a leading flag glyph ("🇫🇷 France" -> "France")."""
    return _FLAG_PREFIX.sub("", label.strip(), count=1)


def _coordinates(lat: Any, lon: Any) -> tuple[float, float]:
    try:
        return (float(lat), float(lon))
    except (TypeError, ValueError):
        return (0.0, 0.0)


def _build_country(flag: Any, name: str, lat: Any, lon: Any, map_link: Any) -> Country:
    if not isinstance(name, str) or not name:
        raise ValueError(f"country record without a name: {name!r}")
    return Country(
        display_name=f"{flag or DEFAULT_FLAG} {name}",
        coordinates=_coordinates(lat, lon),
        canonical_name=name,
        map_link=map_link or "",
    )


def normalize_restcountries(record: dict[str, Any]) -> Country:
    latlng = record.get("latlng") or []
    lat, lon = (latlng[0], latlng[1]) if len(latlng) >= 2 else (None, None)
    return _build_country(
        record.get("flag"),
        record["name"]["common"],
        lat,
        lon,
        (record.get("maps") or {}).get("openStreetMap"),
    )


def normalize_sampleapis(record: dict[str, Any]) -> Country:
    return _build_country(
        (record.get("media") or {}).get("flag"),
        record["name"],
        record.get("latitude"),
        record.get("longitude"),
        record.get("maps"),
    )


NORMALIZERS: dict[str, Callable[[dict[str, Any]], Country]] = {
    "restcountries": normalize_restcountries,
    "sampleapis": normalize_sampleapis,
}


class CountryResolver:
    """Loads the selectable country list from the first provider that answers.

    Providers are ``(tag, url)`` pairs tried in order, one request each. The tag
    picks the normalizer for that provider's record shape. When every provider
    fails the embedded fallback list is returned, so ``resolve`` never raises.
    """

    def __init__(
        self,
        providers: list[tuple[str, str]],
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        unknown = [tag for tag, _ in providers if tag not in NORMALIZERS]
        if unknown:
            raise ValueError(f"no normalizer for providers: {unknown}")
        self.providers = list(providers)
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _fetch(self, tag: str, url: str) -> list[Country]:
        resp = await self._client.get(url)
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, list):
            raise ValueError(f"expected a list of countries, got {type(data).__name__}")
        normalize = NORMALIZERS[tag]
        return [normalize(record) for record in data]

    async def resolve(self) -> list[Country]:
        for tag, url in self.providers:
            logger.info("countries fetch provider=%s", tag)
            try:
                countries = await self._fetch(tag, url)
            except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as exc:
                logger.warning("countries provider=%s failed: %s", tag, exc)
                continue
            if not countries:
                logger.warning("countries provider=%s returned no records", tag)
                continue
            logger.info("countries loaded count=%s provider=%s", len(countries), tag)
            return countries

        logger.error("countries all providers failed, using fallback data")
        return list(FALLBACK_COUNTRIES)
