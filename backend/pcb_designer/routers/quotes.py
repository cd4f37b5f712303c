from fastapi import APIRouter

from pcb_designer.pcb.quotes import generate_quotes
from pcb_designer.schemas.quote import QuoteRequest, QuoteResponse

router = APIRouter()


@router.post("/", response_model=QuoteResponse)
async def get_quotes(request: QuoteRequest):
    """Compare estimated fabrication quotes across PCB fabs."""
    return QuoteResponse(quotes=generate_quotes(request))
