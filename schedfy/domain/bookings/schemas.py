"""Booking domain schemas - Pydantic models for the booking API payloads"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...shared.validators import validate_amount, validate_iso_datetime


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"
    # Professional unavailability: no client, zero price
    BLOCKED = "blocked"


TERMINAL_STATUSES = frozenset(
    {BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW}
)


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    REFUNDED = "refunded"
    FAILED = "failed"


def _promote_id(data: Any) -> Any:
    """Servers backed by Mongo send `_id`; models always expose `id`"""
    if isinstance(data, dict) and "_id" in data:
        data = dict(data)
        _id = data.pop("_id")
        if not data.get("id"):
            data["id"] = _id
    return data


def _full_name(data: dict) -> Optional[str]:
    name = f"{data.get('firstName') or ''} {data.get('lastName') or ''}".strip()
    return name or None


# ---------------------------------------------------------------------------
# Expanded references
# ---------------------------------------------------------------------------


class ClientInfo(BaseModel):
    """Client as populated by the server (or typed in for walk-ins)"""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    isFirstTime: Optional[bool] = None

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data):
        data = _promote_id(data)
        if isinstance(data, dict) and not data.get("name"):
            data = {**data, "name": _full_name(data)}
        return data


class ProfessionalInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data):
        data = _promote_id(data)
        if isinstance(data, dict) and not data.get("name"):
            data = {**data, "name": _full_name(data)}
        return data


class ServiceInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: Optional[str] = None
    duration: float = 0
    price: float = 0
    category: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data):
        data = _promote_id(data)
        if not isinstance(data, dict):
            return data
        data = dict(data)
        # duration may arrive as {"duration": 60, "unit": "minutes"}
        duration = data.get("duration")
        if isinstance(duration, dict):
            data["duration"] = duration.get("duration") or 0
        elif duration is None:
            data["duration"] = 0
        pricing = data.get("pricing")
        if isinstance(pricing, dict) and pricing.get("basePrice") is not None:
            data["price"] = pricing["basePrice"]
        elif data.get("price") is None:
            data["price"] = 0
        return data


# A reference is either a bare id or the object the server chose to expand
ClientRef = Union[str, ClientInfo]
ProfessionalRef = Union[str, ProfessionalInfo]
ServiceRef = Union[str, ServiceInfo]


def ref_id(ref: Optional[Union[str, BaseModel]]) -> Optional[str]:
    """Id behind a reference, whichever shape the server sent"""
    if ref is None:
        return None
    if isinstance(ref, str):
        return ref or None
    return getattr(ref, "id", None)


# ---------------------------------------------------------------------------
# Pricing and payment
# ---------------------------------------------------------------------------


class AdditionalCharge(BaseModel):
    name: str
    amount: float
    description: Optional[str] = None


class Pricing(BaseModel):
    """
    Amounts are in major currency units (euros, not cents).

    totalPrice == basePrice - discountAmount + sum(additionalCharges) is
    enforced by the server and never recomputed here.
    """

    model_config = ConfigDict(extra="allow")

    basePrice: float = 0
    discountAmount: Optional[float] = None
    discountReason: Optional[str] = None
    additionalCharges: list[AdditionalCharge] = Field(default_factory=list)
    totalPrice: Optional[float] = None
    currency: Optional[str] = None

    @field_validator("basePrice", "discountAmount", "totalPrice")
    @classmethod
    def validate_amounts(cls, v):
        return validate_amount(v)


class Payment(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: Optional[PaymentStatus] = None
    method: Optional[str] = None
    paidAmount: Optional[float] = None
    transactionIds: list[str] = Field(default_factory=list)
    depositRequired: Optional[bool] = None
    depositAmount: Optional[float] = None
    depositPaid: Optional[bool] = None


# ---------------------------------------------------------------------------
# Booking
# ---------------------------------------------------------------------------


class Booking(BaseModel):
    """A booking as returned by the API, normalised to a single shape"""

    model_config = ConfigDict(extra="allow")

    id: str
    entityId: Optional[str] = None
    serviceId: Optional[ServiceRef] = None
    clientId: Optional[ClientRef] = None
    professionalId: Optional[ProfessionalRef] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    status: BookingStatus = BookingStatus.PENDING
    notes: Optional[str] = None
    pricing: Optional[Pricing] = None
    payment: Optional[Payment] = None
    paymentStatus: Optional[PaymentStatus] = None
    client: Optional[ClientInfo] = None
    professional: Optional[ProfessionalInfo] = None
    service: Optional[ServiceInfo] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_server_shape(cls, data):
        data = _promote_id(data)
        if not isinstance(data, dict):
            return data
        data = dict(data)

        if not data.get("startTime") and data.get("startDateTime"):
            data["startTime"] = data.pop("startDateTime")
        if not data.get("endTime") and data.get("endDateTime"):
            data["endTime"] = data.pop("endDateTime")

        if data.get("status") == "no-show":
            data["status"] = BookingStatus.NO_SHOW.value

        # Expanded references win over separately populated objects
        if isinstance(data.get("professionalId"), dict):
            data["professional"] = data["professionalId"]
        elif not data.get("professional") and data.get("professionalId"):
            data["professional"] = {"id": data["professionalId"]}

        if isinstance(data.get("serviceId"), dict):
            data["service"] = data["serviceId"]

        if isinstance(data.get("clientId"), dict):
            data["client"] = data["clientId"]
        elif not data.get("client") and data.get("clientInfo"):
            data["client"] = data["clientInfo"]

        return data

    @field_validator("startTime", "endTime")
    @classmethod
    def validate_times(cls, v):
        return validate_iso_datetime(v)

    @property
    def service_id(self) -> Optional[str]:
        return ref_id(self.serviceId)

    @property
    def client_id(self) -> Optional[str]:
        return ref_id(self.clientId) or (self.client.id if self.client else None)

    @property
    def professional_id(self) -> Optional[str]:
        return ref_id(self.professionalId)

    @property
    def service_category(self) -> Optional[str]:
        if isinstance(self.serviceId, ServiceInfo):
            return self.serviceId.category
        if self.service is not None:
            return self.service.category
        return None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class ClientDetails(BaseModel):
    """Walk-in client details sent instead of a clientId"""

    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class BookingCreate(BaseModel):
    """Schema for creating a new booking"""

    entityId: str
    serviceId: str
    professionalId: Optional[str] = None
    clientId: Optional[str] = None
    clientInfo: Optional[ClientDetails] = None
    startDateTime: str
    endDateTime: str
    status: Optional[BookingStatus] = None
    notes: Optional[str] = None
    internalNotes: Optional[str] = None
    pricing: Pricing
    payment: Optional[Payment] = None
    createdBy: str

    @field_validator("startDateTime", "endDateTime")
    @classmethod
    def validate_times(cls, v):
        return validate_iso_datetime(v)

    @model_validator(mode="after")
    def validate_interval(self):
        start = datetime.fromisoformat(self.startDateTime.replace("Z", "+00:00"))
        end = datetime.fromisoformat(self.endDateTime.replace("Z", "+00:00"))
        if end <= start:
            raise ValueError("endDateTime must be after startDateTime")
        return self


class PricingUpdate(BaseModel):
    basePrice: Optional[float] = None
    discountAmount: Optional[float] = None
    discountReason: Optional[str] = None
    additionalCharges: Optional[list[AdditionalCharge]] = None
    totalPrice: Optional[float] = None
    currency: Optional[str] = None


class BookingUpdate(BaseModel):
    """Schema for updating a booking; only fields that were set are sent"""

    serviceId: Optional[str] = None
    clientId: Optional[str] = None
    professionalId: Optional[str] = None
    clientInfo: Optional[dict] = None
    startDateTime: Optional[str] = None
    endDateTime: Optional[str] = None
    notes: Optional[str] = None
    internalNotes: Optional[str] = None
    status: Optional[BookingStatus] = None
    pricing: Optional[PricingUpdate] = None
    payment: Optional[Payment] = None
    updatedBy: Optional[str] = None

    @field_validator("startDateTime", "endDateTime")
    @classmethod
    def validate_times(cls, v):
        return validate_iso_datetime(v)


class BookingScope(BaseModel):
    """Single filter dimension for a booking list fetch"""

    entityId: Optional[str] = None
    clientId: Optional[str] = None
    professionalId: Optional[str] = None
    serviceId: Optional[str] = None

    def resolve(self) -> Optional[tuple[str, str]]:
        """(kind, id) of the first scope set, in entity/client/professional/service order"""
        for kind, value in (
            ("entity", self.entityId),
            ("client", self.clientId),
            ("professional", self.professionalId),
            ("service", self.serviceId),
        ):
            if value:
                return kind, value
        return None


class AvailabilityQuery(BaseModel):
    serviceId: str
    professionalId: Optional[str] = None
    startTime: str
    endTime: str

    @field_validator("startTime", "endTime")
    @classmethod
    def validate_times(cls, v):
        return validate_iso_datetime(v)


class SlotAvailability(BaseModel):
    available: bool
    conflicts: list[Booking] = Field(default_factory=list)


class TimeSlot(BaseModel):
    time: str
    startDateTime: str
    endDateTime: str
    professionalId: Optional[str] = None
    professionalName: Optional[str] = None
    duration: float
