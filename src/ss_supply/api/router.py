"""ss_supply REST endpoints.

GET /api/v1/circulating-supply  — {"circulating_supply": <int>}
GET /v1/circulating-supply      — bare integer, text/plain (earlier API revision)

Both answer 503 (error envelope) until every balance has been fetched once.
Amounts are in the smallest denomination.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from src.ss_common.errors import InternalError
from src.ss_supply.application.schemas import CirculatingSupplyResponse
from src.ss_supply.application.service import SupplyApplicationService

router = APIRouter(tags=["supply"])


def get_supply_service(request: Request) -> SupplyApplicationService:
    """FastAPI dependency: the service wired up in the app lifespan."""
    service = getattr(request.app.state, "supply_service", None)
    if service is None:
        raise InternalError("Supply service is not running")
    return service


@router.get("/api/v1/circulating-supply")
async def get_circulating_supply(
    service: Annotated[SupplyApplicationService, Depends(get_supply_service)],
) -> CirculatingSupplyResponse:
    return CirculatingSupplyResponse(circulating_supply=service.get_circulating_supply())


@router.get("/v1/circulating-supply", response_class=PlainTextResponse)
async def get_circulating_supply_text(
    service: Annotated[SupplyApplicationService, Depends(get_supply_service)],
) -> PlainTextResponse:
    return PlainTextResponse(str(service.get_circulating_supply()))
