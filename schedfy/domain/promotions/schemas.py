"""Promotion domain schemas - commission rules and promotion impact"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ...shared.validators import validate_amount, validate_percentage


class CommissionType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class CommissionAppliesTo(str, Enum):
    SERVICE = "service"
    PROFESSIONAL = "professional"
    SERVICE_CATEGORY = "service_category"


class CommissionRule(BaseModel):
    """What a professional earns per completed booking"""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    entityId: Optional[str] = None
    name: Optional[str] = None
    type: CommissionType
    value: float
    appliesTo: CommissionAppliesTo
    serviceIds: list[str] = Field(default_factory=list)
    professionalIds: list[str] = Field(default_factory=list)
    serviceCategoryIds: list[str] = Field(default_factory=list)
    isActive: bool

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "_id" in data:
            data.setdefault("id", data.pop("_id"))
        # Older promotion screens saved category rules as "category"/"categoryIds"
        if data.get("appliesTo") == "category":
            data["appliesTo"] = CommissionAppliesTo.SERVICE_CATEGORY.value
        if not data.get("serviceCategoryIds") and data.get("categoryIds"):
            data["serviceCategoryIds"] = data.pop("categoryIds")
        for key in ("serviceIds", "professionalIds", "serviceCategoryIds"):
            if data.get(key) is None:
                data[key] = []
        return data

    @model_validator(mode="after")
    def validate_value(self):
        if self.type == CommissionType.PERCENTAGE:
            validate_percentage(self.value)
        else:
            validate_amount(self.value)
        return self


class PromotionImpact(BaseModel):
    """Discount and commission totals over completed bookings"""

    totalDiscountAmount: float = 0
    totalCommissionAmount: float = 0
    bookingsWithPromotion: int = 0
    revenueFromPromotions: float = 0
    promotionRate: float = 0
