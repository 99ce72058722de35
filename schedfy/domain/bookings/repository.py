"""Booking repository - REST calls against the booking API"""

from typing import Any, Optional

from ...api_client import ApiClient
from .schemas import (
    AvailabilityQuery,
    Booking,
    BookingCreate,
    BookingUpdate,
    SlotAvailability,
    TimeSlot,
)

BOOKINGS_PATH = "/api/bookings"


def _to_bookings(payload: Any) -> list[Booking]:
    """List endpoints occasionally answer with a single object"""
    if payload is None:
        return []
    if isinstance(payload, list):
        return [Booking.model_validate(item) for item in payload]
    return [Booking.model_validate(payload)]


class BookingRepository:
    """Repository for booking API operations"""

    @staticmethod
    async def get_by_entity(
        api: ApiClient, entity_id: str, params: Optional[dict[str, Any]] = None
    ) -> list[Booking]:
        """Get all bookings of a business"""
        payload = await api.get(f"{BOOKINGS_PATH}/entity/{entity_id}", params)
        return _to_bookings(payload)

    @staticmethod
    async def get_by_client(api: ApiClient, client_id: str) -> list[Booking]:
        payload = await api.get(f"{BOOKINGS_PATH}/client/{client_id}")
        return _to_bookings(payload)

    @staticmethod
    async def get_by_professional(api: ApiClient, professional_id: str) -> list[Booking]:
        payload = await api.get(f"{BOOKINGS_PATH}/professional/{professional_id}")
        return _to_bookings(payload)

    @staticmethod
    async def get_by_service(api: ApiClient, service_id: str) -> list[Booking]:
        payload = await api.get(f"{BOOKINGS_PATH}/service/{service_id}")
        return _to_bookings(payload)

    @staticmethod
    async def get_by_date_range(
        api: ApiClient, entity_id: str, start_date: str, end_date: str
    ) -> list[Booking]:
        """Get bookings of a business between two ISO dates"""
        payload = await api.get(
            f"{BOOKINGS_PATH}/entity/{entity_id}/range",
            {"startDate": start_date, "endDate": end_date},
        )
        return _to_bookings(payload)

    @staticmethod
    async def get_by_id(api: ApiClient, booking_id: str) -> Booking:
        payload = await api.get(f"{BOOKINGS_PATH}/{booking_id}")
        return Booking.model_validate(payload)

    @staticmethod
    async def create(api: ApiClient, data: BookingCreate) -> Booking:
        payload = await api.post(BOOKINGS_PATH, data.model_dump(mode="json", exclude_none=True))
        return Booking.model_validate(payload)

    @staticmethod
    async def update(api: ApiClient, booking_id: str, data: BookingUpdate) -> Booking:
        payload = await api.patch(
            f"{BOOKINGS_PATH}/{booking_id}", data.model_dump(mode="json", exclude_unset=True)
        )
        return Booking.model_validate(payload)

    @staticmethod
    async def cancel(api: ApiClient, booking_id: str, reason: Optional[str] = None) -> Booking:
        body = {"reason": reason} if reason else {}
        payload = await api.patch(f"{BOOKINGS_PATH}/{booking_id}/cancel", body)
        return Booking.model_validate(payload)

    @staticmethod
    async def confirm(api: ApiClient, booking_id: str) -> Booking:
        payload = await api.patch(f"{BOOKINGS_PATH}/{booking_id}/confirm", {})
        return Booking.model_validate(payload)

    @staticmethod
    async def complete(
        api: ApiClient,
        booking_id: str,
        tax_id: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> Booking:
        """Complete a booking; tax id and payment method feed the receipt"""
        body = {}
        if tax_id:
            body["taxId"] = tax_id
        if payment_method:
            body["paymentMethod"] = payment_method
        payload = await api.patch(f"{BOOKINGS_PATH}/{booking_id}/complete", body)
        return Booking.model_validate(payload)

    @staticmethod
    async def mark_no_show(api: ApiClient, booking_id: str) -> Booking:
        payload = await api.patch(f"{BOOKINGS_PATH}/{booking_id}/no-show", {})
        return Booking.model_validate(payload)

    @staticmethod
    async def delete(api: ApiClient, booking_id: str) -> None:
        await api.delete(f"{BOOKINGS_PATH}/{booking_id}")

    @staticmethod
    async def check_availability(api: ApiClient, query: AvailabilityQuery) -> SlotAvailability:
        payload = await api.post(
            f"{BOOKINGS_PATH}/check-availability", query.model_dump(mode="json", exclude_none=True)
        )
        return SlotAvailability.model_validate(payload)

    @staticmethod
    async def get_available_slots(
        api: ApiClient,
        entity_id: str,
        date: str,
        service_id: Optional[str] = None,
        professional_id: Optional[str] = None,
        duration: Optional[int] = None,
        include_overbooking: Optional[bool] = None,
    ) -> list[TimeSlot]:
        """
        Get bookable slots for a day.

        Slots are computed server side; include_overbooking is honoured only
        for authenticated staff.
        """
        payload = await api.get(
            f"{BOOKINGS_PATH}/available-slots",
            {
                "entityId": entity_id,
                "date": date,
                "serviceId": service_id,
                "professionalId": professional_id,
                "duration": duration,
                "includeOverbooking": include_overbooking,
            },
        )
        return [TimeSlot.model_validate(slot) for slot in payload or []]
