"""
Geocoding helper utilities for resolving place names and addresses to
coordinates with Nominatim (OpenStreetMap).
"""
import httpx
from typing import Dict, Iterable, Optional, Tuple

from config import APP_NAME, APP_VERSION
from utils.logger import get_logger

logger = get_logger(__name__)

NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"
USER_AGENT = f"{APP_NAME.replace(' ', '')}/{APP_VERSION}"


async def geocode_place_to_coords(
    place_query: str,
    timeout: float = 10.0,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[Tuple[float, float, str]]:
    """
    Convert a place name/address to coordinates.

    Returns:
        (lat, lon, display_name) or None if geocoding fails
    """
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as own_client:
                resp = await _search(own_client, place_query)
        else:
            resp = await _search(client, place_query)
        resp.raise_for_status()
        data = resp.json()

        if data:
            result = data[0]
            return (float(result["lat"]), float(result["lon"]), result["display_name"])
    except (httpx.HTTPError, ValueError, KeyError) as e:
        logger.warning("Geocoding failed for %r: %s", place_query, e)

    return None


async def _search(client: httpx.AsyncClient, place_query: str) -> httpx.Response:
    return await client.get(
        NOMINATIM_SEARCH_URL,
        params={
            "q": place_query,
            "format": "json",
            "limit": 1,
            "addressdetails": 1
        },
        headers={"User-Agent": USER_AGENT}
    )


async def geocode_many(queries: Iterable[str], timeout: float = 10.0) -> Dict[str, Tuple[float, float]]:
    """Geocode each distinct query once; unresolved queries are left out."""
    resolved: Dict[str, Tuple[float, float]] = {}
    async with httpx.AsyncClient(timeout=timeout) as client:
        for query in dict.fromkeys(q for q in queries if q):
            result = await geocode_place_to_coords(query, client=client)
            if result:
                resolved[query] = (result[0], result[1])
    return resolved


def build_place_query(city: Optional[str] = None, country: Optional[str] = None, address: Optional[str] = None) -> Optional[str]:
    """Build a place query string from city, country, address fields."""
    parts = []
    if address:
        parts.append(address)
    if city:
        parts.append(city)
    if country:
        parts.append(country)

    return ", ".join(parts) if parts else None
