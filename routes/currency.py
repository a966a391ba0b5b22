from fastapi import APIRouter, HTTPException, Query

from services.currency import CurrencyServiceError, convert, get_currency_data

router = APIRouter(prefix="/currency", tags=["Currency"])


@router.get("/rates")
async def get_rates(force_refresh: bool = False):
    """Currency names and USD-based rates, refreshed at most once an hour."""
    try:
        return await get_currency_data(force_refresh=force_refresh)
    except CurrencyServiceError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/convert")
async def convert_amount(
    amount: float,
    from_currency: str = Query(alias="from"),
    to_currency: str = Query(alias="to"),
):
    try:
        data = await get_currency_data()
    except CurrencyServiceError as e:
        raise HTTPException(status_code=503, detail=str(e))

    from_currency = from_currency.upper()
    to_currency = to_currency.upper()
    try:
        result = convert(amount, from_currency, to_currency, data["rates"])
    except KeyError as e:
        raise HTTPException(status_code=400, detail=f"Unknown currency: {e.args[0]}")

    return {
        "amount": amount,
        "from": from_currency,
        "to": to_currency,
        "result": round(result, 2),
        "rate": round(data["rates"][to_currency] / data["rates"][from_currency], 6),
        "lastUpdated": data["lastUpdated"],
    }
