"""Fabrication Quote Estimator

Deterministic price comparison across PCB fabs, from board area, layer
count and quantity. Prices are estimates, not live fab API quotes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pcb_designer.schemas.quote import FabQuote, FabSpecs, QuoteRequest

logger = logging.getLogger(__name__)

PRICE_PER_DM2_PER_LAYER = 5.0
SMALL_ORDER_QUANTITY = 20


@dataclass(frozen=True)
class FabProfile:
    manufacturer: str
    price_factor: float
    lead_time: str
    shipping_small: float
    shipping_large: float
    url: str
    color: str
    finish: str
    max_quantity: int | None = None


FAB_PROFILES: tuple[FabProfile, ...] = (
    FabProfile("JLCPCB", 0.8, "3-5 days", 15.0, 25.0, "https://jlcpcb.com", "Green", "HASL"),
    FabProfile("PCBWay", 1.0, "4-6 days", 12.0, 20.0, "https://pcbway.com", "Green", "ENIG"),
    # OSH Park panels ship in sets of three, shipping included
    FabProfile(
        "OSHPark", 1.2, "10-12 days", 0.0, 0.0, "https://oshpark.com", "Purple", "ENIG",
        max_quantity=3,
    ),
    FabProfile(
        "Seeed Studio", 0.9, "5-7 days", 10.0, 18.0, "https://seeedstudio.com", "Green", "HASL"
    ),
)


def _base_price(request: QuoteRequest) -> float:
    area_dm2 = (request.width * request.height) / 10000
    return area_dm2 * PRICE_PER_DM2_PER_LAYER * request.layers


def generate_quotes(request: QuoteRequest) -> list[FabQuote]:
    """Return one quote per fab profile, in profile order."""
    base = _base_price(request)
    quotes: list[FabQuote] = []

    for fab in FAB_PROFILES:
        quantity = (
            min(fab.max_quantity, request.quantity)
            if fab.max_quantity is not None
            else request.quantity
        )
        price = base * fab.price_factor * (quantity / 10)
        shipping = (
            fab.shipping_small
            if request.quantity < SMALL_ORDER_QUANTITY
            else fab.shipping_large
        )
        quotes.append(
            FabQuote(
                manufacturer=fab.manufacturer,
                price=round(price, 2),
                quantity=quantity,
                lead_time=fab.lead_time,
                shipping=shipping,
                total=round(price + shipping, 2),
                url=fab.url,
                specs=FabSpecs(
                    layers=request.layers, color=fab.color, finish=fab.finish
                ),
            )
        )

    logger.info(
        "Generated %d quotes for %.0fx%.0fmm, %d layers, qty %d",
        len(quotes),
        request.width,
        request.height,
        request.layers,
        request.quantity,
    )
    return quotes
