"""Bitcoin network fee recommendations from mempool.space."""

import logging
import math
from typing import Any, Optional

import requests
from pydantic import BaseModel

logger = logging.getLogger(__name__)

MEMPOOL_FEES_URL = "https://mempool.space/api/v1/fees/recommended"


class MempoolFees(BaseModel):
    """Recommended fee rates in sat/vB."""

    fastest: Optional[float] = None
    half_hour: Optional[float] = None
    hour: Optional[float] = None

    model_config = {"frozen": True}


def fetch_mempool_fees(session: requests.Session, timeout: float = 15.0) -> MempoolFees:
    """Get recommended fees; any failure yields an empty MempoolFees."""
    try:
        response = session.get(MEMPOOL_FEES_URL, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Mempool fees unavailable: %s", e)
        return MempoolFees()

    if not isinstance(data, dict):
        logger.warning("Unexpected mempool payload: %s", str(data)[:200])
        return MempoolFees()

    return MempoolFees(
        fastest=_fee_rate(data.get("fastestFee")),
        half_hour=_fee_rate(data.get("halfHourFee")),
        hour=_fee_rate(data.get("hourFee")),
    )


def _fee_rate(value: Any) -> Optional[float]:
    try:
        rate = float(value)
    except (TypeError, ValueError):
        return None
    return rate if math.isfinite(rate) else None
