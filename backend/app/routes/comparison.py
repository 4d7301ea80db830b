from fastapi import APIRouter, Depends

from app.dependencies.services import get_comparison_service
from app.schemas.comparison_schemas import CompareRequest, CompareResponse
from app.services.comparison_service import ComparisonService


router = APIRouter(prefix="/api/v1", tags=["comparison"])


@router.post("/compare", response_model=CompareResponse)
def compare(payload: CompareRequest, service: ComparisonService = Depends(get_comparison_service)):
    """Recommend portal, direct, award or a tie for one booking.

    Award input problems do not fail the request; they come back as
    `award_error` alongside the portal-vs-direct result.
    """
    return service.compare(payload)
