"""Promotions domain - Commission rules and promotion impact reporting"""

from .attribution import AttributionEngine
from .report import build_promotion_report
from .repository import CommissionRepository
from .schemas import CommissionAppliesTo, CommissionRule, CommissionType, PromotionImpact

__all__ = [
    "AttributionEngine",
    "CommissionAppliesTo",
    "CommissionRepository",
    "CommissionRule",
    "CommissionType",
    "PromotionImpact",
    "build_promotion_report",
]
