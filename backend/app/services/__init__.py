from .comparison_service import ComparisonService, ComparisonSettings
from .errors import ServiceError

__all__ = [
    "ComparisonService",
    "ComparisonSettings",
    "ServiceError",
]
