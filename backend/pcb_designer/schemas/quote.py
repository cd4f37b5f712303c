from __future__ import annotations

from pydantic import BaseModel, Field


class QuoteRequest(BaseModel):
    width: float = Field(..., gt=0, description="Board width (mm)")
    height: float = Field(..., gt=0, description="Board height (mm)")
    layers: int = Field(2, ge=1, le=16)
    quantity: int = Field(10, ge=1)


class FabSpecs(BaseModel):
    layers: int
    thickness: str = "1.6mm"
    color: str
    finish: str


class FabQuote(BaseModel):
    manufacturer: str
    price: float
    quantity: int
    lead_time: str
    shipping: float
    total: float
    url: str
    specs: FabSpecs


class QuoteResponse(BaseModel):
    quotes: list[FabQuote] = Field(default_factory=list)
