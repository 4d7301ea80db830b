from fastapi import APIRouter, Depends

from app.dependencies.services import get_comparison_service
from app.schemas.comparison_schemas import PartnerOut, PartnersGroupedOut
from app.services.comparison_service import ComparisonService


router = APIRouter(
    prefix="/api/v1/partners",
    tags=["partners"]
)


@router.get("", response_model=PartnersGroupedOut)
def list_partners(service: ComparisonService = Depends(get_comparison_service)):
    return service.list_partners()


@router.get("/{partner_id}", response_model=PartnerOut)
def get_partner(partner_id: str, service: ComparisonService = Depends(get_comparison_service)):
    return service.get_partner(partner_id)
