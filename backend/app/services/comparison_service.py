"""
Comparison Service - bridges the HTTP layer and the booking decision engine.

Responsibilities:
1. Fill request defaults from environment-driven settings
2. Translate request DTOs into engine inputs and run compare_booking()
3. Serialize the engine's result into response DTOs
"""

import logging
import os
from typing import Optional

from booking_engine.config import DEFAULT_CONFIG
from booking_engine.currency import RATES_TO_HOME
from booking_engine.models import (
    AwardLegInput,
    AwardValuation,
    AwardVerdict,
    ComparisonRequest,
    ComparisonResult,
    Money,
    PriceQuote,
    TieVerdict,
)
from booking_engine.partners import get_partner_by_id, get_partners_grouped
from booking_engine.recommender import compare_booking

from app.schemas.comparison_schemas import (
    AuditOut,
    AwardErrorOut,
    AwardLegOut,
    AwardOut,
    BuyMilesOut,
    CloseCallOut,
    CompareRequest,
    CompareResponse,
    DoubleDipOut,
    PartnerOut,
    PartnersGroupedOut,
    PathOut,
    PortalCheaperOut,
    VerdictOut,
)
from app.services.errors import ServiceError

logger = logging.getLogger(__name__)


# =============================================================================
# Settings
# =============================================================================

def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid %s value %r; falling back to default %s", name, raw, default)
        return default
    if value < 0:
        logger.warning("Negative %s value %r; falling back to default %s", name, raw, default)
        return default
    return value


class ComparisonSettings:
    """Server-side defaults with environment variable overrides."""

    def __init__(self):
        self.default_cpp = _env_float("BOOKING_DEFAULT_CPP", DEFAULT_CONFIG["default_valuation_cpp"])
        self.default_credit = _env_float("BOOKING_DEFAULT_CREDIT", DEFAULT_CONFIG["max_travel_credit"])
        self.close_call_abs = _env_float("BOOKING_CLOSE_CALL_ABS", DEFAULT_CONFIG["close_call_abs_usd"])

        if self.default_cpp == 0:
            logger.warning(
                "BOOKING_DEFAULT_CPP must be greater than 0; falling back to default %s",
                DEFAULT_CONFIG["default_valuation_cpp"],
            )
            self.default_cpp = DEFAULT_CONFIG["default_valuation_cpp"]

    def config_overrides(self) -> dict:
        return {"close_call_abs_usd": self.close_call_abs}


# =============================================================================
# Service
# =============================================================================

class ComparisonService:
    def __init__(self, settings: Optional[ComparisonSettings] = None):
        self.settings = settings or ComparisonSettings()

    def compare(self, payload: CompareRequest) -> CompareResponse:
        for field_name, price in (("portal.currency", payload.portal), ("direct.currency", payload.direct)):
            if price.currency not in RATES_TO_HOME:
                raise ServiceError.validation(field_name, f"Unsupported currency '{price.currency}'.")

        request = ComparisonRequest(
            portal_quote=PriceQuote(Money(payload.portal.amount, payload.portal.currency)),
            direct_quote=PriceQuote(Money(payload.direct.amount, payload.direct.currency)),
            booking_type=payload.booking_type,
            objective=payload.objective,
            credit_remaining=(
                payload.credit_remaining if payload.credit_remaining is not None else self.settings.default_credit
            ),
            valuation_cpp=payload.valuation_cpp if payload.valuation_cpp is not None else self.settings.default_cpp,
            points_balance=payload.points_balance,
            award_legs=tuple(
                AwardLegInput(
                    direction=leg.direction,
                    partner_id=leg.partner_id,
                    points=leg.points,
                    taxes=leg.taxes,
                    entry_mode=leg.entry_mode,
                )
                for leg in payload.award_legs
            ),
            award_baseline=payload.award_baseline,
            config=self.settings.config_overrides(),
        )

        result = compare_booking(request)
        logger.info(
            "Compared %s booking: recommendation=%s confidence=%s",
            request.booking_type.value, result.recommendation.value, result.confidence.value,
        )
        return serialize_result(result)

    def list_partners(self) -> PartnersGroupedOut:
        grouped = get_partners_grouped()
        return PartnersGroupedOut(
            **{
                group: [PartnerOut.model_validate(partner) for partner in partners]
                for group, partners in grouped.items()
            }
        )

    def get_partner(self, partner_id: str) -> PartnerOut:
        partner = get_partner_by_id(partner_id)
        if partner is None:
            raise ServiceError.not_found(f"partner '{partner_id}' not found.", partner_id=partner_id)
        return PartnerOut.model_validate(partner)


# =============================================================================
# Serialization
# =============================================================================

def _verdict_out(result: ComparisonResult) -> VerdictOut:
    verdict = result.verdict
    if isinstance(verdict, TieVerdict):
        return VerdictOut(kind=verdict.kind, contenders=list(verdict.contenders), reason=verdict.reason)
    if isinstance(verdict, AwardVerdict):
        return VerdictOut(
            kind=verdict.kind,
            own_points=verdict.own_points,
            taxes=verdict.taxes,
            partner_ids=list(verdict.partner_ids),
        )
    return VerdictOut(kind=verdict.kind, out_of_pocket=verdict.out_of_pocket, points_earned=verdict.points_earned)


def _award_out(award: AwardValuation) -> AwardOut:
    return AwardOut(
        legs=[
            AwardLegOut(
                direction=leg.direction,
                partner_id=leg.partner.id,
                partner_name=leg.partner.name,
                partner_points=leg.partner_points,
                own_points=leg.own_points,
                taxes=leg.taxes,
                taxes_estimated=leg.taxes_estimated,
                entry_mode=leg.entry_mode,
                value_usd=leg.value_usd,
                cpp=leg.cpp,
            )
            for leg in award.legs
        ],
        baseline=award.baseline,
        baseline_amount=award.baseline_amount,
        own_points_total=award.own_points_total,
        taxes_total=award.taxes_total,
        taxes_estimated=award.taxes_estimated,
        cpp=award.cpp,
    )


def serialize_result(result: ComparisonResult) -> CompareResponse:
    return CompareResponse(
        recommendation=result.recommendation,
        verdict=_verdict_out(result),
        per_path_out_of_pocket=result.per_path_out_of_pocket,
        per_path_points_earned=result.per_path_points_earned,
        confidence=result.confidence,
        confidence_reasons=result.confidence_reasons,
        flip_conditions=result.flip_conditions,
        portal=PathOut.model_validate(result.cost.portal),
        direct=PathOut.model_validate(result.cost.direct),
        break_even_cpp=result.cost.break_even_cpp,
        close_call=CloseCallOut.model_validate(result.close_call),
        award=_award_out(result.award) if result.award else None,
        award_error=AwardErrorOut.model_validate(result.award_error) if result.award_error else None,
        double_dip=DoubleDipOut.model_validate(result.double_dip) if result.double_dip else None,
        buy_miles=[BuyMilesOut.model_validate(item) for item in result.buy_miles],
        portal_cheaper=PortalCheaperOut.model_validate(result.portal_cheaper) if result.portal_cheaper else None,
        audit=AuditOut.model_validate(result.audit),
    )
