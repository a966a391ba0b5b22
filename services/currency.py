"""
Exchange rates from the Frankfurter API, USD based, cached in-process.
"""
import asyncio
import time
from typing import Optional

import httpx

from config import CURRENCY_API_BASE, CURRENCY_CACHE_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)

_cache: dict = {}
_lock = asyncio.Lock()


class CurrencyServiceError(Exception):
    pass


def clear_cache() -> None:
    _cache.clear()


def _cached() -> Optional[dict]:
    if not _cache:
        return None
    age = time.time() - _cache["lastUpdated"] / 1000
    if age < CURRENCY_CACHE_SECONDS:
        return _cache
    return None


async def fetch_currency_data() -> dict:
    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            currencies_res, rates_res = await asyncio.gather(
                client.get(f"{CURRENCY_API_BASE}/currencies"),
                client.get(f"{CURRENCY_API_BASE}/latest", params={"base": "USD"}),
            )
            currencies_res.raise_for_status()
            rates_res.raise_for_status()
    except httpx.HTTPError as e:
        logger.error("Failed to fetch currency data: %s", e)
        raise CurrencyServiceError("Failed to fetch currency data") from e

    rates = {"USD": 1.0}
    rates.update(rates_res.json().get("rates", {}))
    return {"currencies": currencies_res.json(), "rates": rates}


async def get_currency_data(force_refresh: bool = False) -> dict:
    """Currencies, USD rates and the fetch time in epoch milliseconds."""
    async with _lock:
        if not force_refresh:
            cached = _cached()
            if cached:
                return dict(cached)

        data = await fetch_currency_data()
        data["lastUpdated"] = int(time.time() * 1000)
        _cache.clear()
        _cache.update(data)
        logger.info("Refreshed currency rates (%d currencies)", len(data["rates"]))
        return dict(data)


def convert(amount: float, from_currency: str, to_currency: str, rates: dict) -> float:
    """Convert through the USD base. Raises KeyError for an unknown currency."""
    from_rate = rates[from_currency]
    to_rate = rates[to_currency]
    return amount / from_rate * to_rate
