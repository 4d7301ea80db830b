from app.services.comparison_service import ComparisonService, ComparisonSettings


def get_comparison_service() -> ComparisonService:
    # Settings are re-read per request so environment changes apply without a restart.
    return ComparisonService(ComparisonSettings())
