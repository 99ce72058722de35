"""Booking service - BookingStore keeps a scoped booking list in sync with the API"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, Optional, TypeVar

from pydantic import ValidationError

from ...api_client import ApiClient, ApiError
from ...config import SCHEDFY_SERIALIZE_MUTATIONS
from .exceptions import BookingConflict, BookingError
from .repository import BookingRepository
from .schemas import (
    AvailabilityQuery,
    Booking,
    BookingCreate,
    BookingScope,
    BookingUpdate,
    SlotAvailability,
    TimeSlot,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _generic_error(e: ApiError, fallback: str) -> BookingError:
    return BookingError(e.message or fallback, status_code=e.status_code, error=e.error)


def _conflict_or_generic(e: ApiError, fallback: str) -> BookingError:
    """409 on create means the slot was taken; everything else is generic"""
    if e.status_code != 409:
        return _generic_error(e, fallback)

    # validation-style bodies send errors as a list or a plain string
    errors = e.errors if isinstance(e.errors, dict) else {}
    raw_conflicts = errors.get("conflicts")
    if not isinstance(raw_conflicts, list):
        raw_conflicts = []

    conflicts = []
    for raw in raw_conflicts:
        try:
            conflicts.append(Booking.model_validate(raw))
        except ValidationError as ve:
            logger.warning(f"⚠️ Skipping unparseable conflicting booking: {ve}")
    return BookingConflict(e.message or "This time slot is no longer available", conflicts)


class BookingStore:
    """
    In-memory list of bookings for one scope, patched after each mutation.

    The server is the single source of truth: nothing is applied to
    `collection` before the API confirms it, and a failed call leaves
    `collection` exactly as it was. Errors are stored in `last_error` and
    re-raised to the caller.
    """

    def __init__(self, api: ApiClient, serialize_mutations: Optional[bool] = None):
        self.api = api
        self.repo = BookingRepository()
        self.collection: list[Booking] = []
        self.last_error: Optional[BookingError] = None
        self.serialize_mutations = (
            SCHEDFY_SERIALIZE_MUTATIONS if serialize_mutations is None else serialize_mutations
        )
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._in_flight = 0
        self._active = True

    @property
    def is_loading(self) -> bool:
        return self._active and self._in_flight > 0

    def detach(self) -> None:
        """Stop applying results; calls already in flight still complete"""
        self._active = False

    def find(self, booking_id: str) -> Optional[Booking]:
        return next((b for b in self.collection if b.id == booking_id), None)

    # ------------------------------------------------------------------
    # plumbing
    # ------------------------------------------------------------------

    def _record(self, error: BookingError) -> BookingError:
        if self._active:
            self.last_error = error
        return error

    async def _call(
        self,
        operation: Awaitable[T],
        fallback: str,
        translate: Callable[[ApiError, str], BookingError] = _generic_error,
    ) -> T:
        self._in_flight += 1
        if self._active:
            self.last_error = None
        try:
            return await operation
        except ApiError as e:
            raise self._record(translate(e, fallback)) from e
        except ValidationError as e:
            logger.error(f"❌ {fallback}: unexpected payload from API: {e}")
            raise self._record(BookingError(f"{fallback}: invalid response from server")) from e
        finally:
            self._in_flight -= 1

    @asynccontextmanager
    async def _mutation_guard(self, booking_id: str):
        if not self.serialize_mutations:
            yield
            return
        lock = self._locks.setdefault(booking_id, asyncio.Lock())
        # an entry lives while anyone holds or waits on the lock
        self._lock_users[booking_id] = self._lock_users.get(booking_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[booking_id] -= 1
            if not self._lock_users[booking_id]:
                del self._lock_users[booking_id]
                del self._locks[booking_id]

    def _replace(self, booking_id: str, updated: Booking) -> None:
        if self._active:
            self.collection = [updated if b.id == booking_id else b for b in self.collection]

    async def _mutate(
        self, booking_id: str, operation: Callable[[], Awaitable[Booking]], fallback: str
    ) -> Booking:
        async with self._mutation_guard(booking_id):
            updated = await self._call(operation(), fallback)
            self._replace(booking_id, updated)
        return updated

    # ------------------------------------------------------------------
    # loading
    # ------------------------------------------------------------------

    async def load(self, scope: Optional[BookingScope] = None) -> list[Booking]:
        """
        Replace the collection with the bookings of one scope.

        Without any scope field the collection is emptied and no request is
        made, so an unscoped fetch can never leak other tenants' bookings.
        """
        resolved = scope.resolve() if scope is not None else None
        if resolved is None:
            if self._active:
                self.collection = []
            return []

        kind, scope_id = resolved
        fetchers = {
            "entity": self.repo.get_by_entity,
            "client": self.repo.get_by_client,
            "professional": self.repo.get_by_professional,
            "service": self.repo.get_by_service,
        }
        bookings = await self._call(fetchers[kind](self.api, scope_id), "Failed to load bookings")
        logger.info(f"📅 Loaded {len(bookings)} bookings for {kind} {scope_id}")
        if self._active:
            self.collection = bookings
        return bookings

    async def load_by_date_range(
        self, entity_id: Optional[str], start_date: str, end_date: str
    ) -> list[Booking]:
        if not entity_id:
            error = BookingError("Entity ID is required to fetch bookings by date range")
            logger.error(f"❌ {error.message}")
            raise self._record(error)

        bookings = await self._call(
            self.repo.get_by_date_range(self.api, entity_id, start_date, end_date),
            "Failed to load bookings",
        )
        logger.info(
            f"📅 Loaded {len(bookings)} bookings for entity {entity_id} ({start_date} - {end_date})"
        )
        if self._active:
            self.collection = bookings
        return bookings

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------

    async def create(self, data: BookingCreate) -> Booking:
        """
        Create a booking and append the server's copy to the collection.

        Raises:
            BookingConflict: the slot is taken (HTTP 409), with the conflicting bookings
            BookingError: any other failure
        """
        try:
            booking = await self._call(
                self.repo.create(self.api, data),
                "Failed to create booking",
                translate=_conflict_or_generic,
            )
        except BookingConflict as e:
            logger.warning(f"⚠️ Booking conflict: {e.message} ({len(e.conflicts)} conflicting)")
            raise

        if self._active:
            self.collection = [*self.collection, booking]
        logger.info(f"✅ Booking created: {booking.id}")
        return booking

    async def update(self, booking_id: str, data: BookingUpdate) -> Booking:
        booking = await self._mutate(
            booking_id, lambda: self.repo.update(self.api, booking_id, data), "Failed to update booking"
        )
        logger.info(f"✅ Booking updated: {booking_id}")
        return booking

    async def cancel(self, booking_id: str, reason: Optional[str] = None) -> Booking:
        booking = await self._mutate(
            booking_id,
            lambda: self.repo.cancel(self.api, booking_id, reason),
            "Failed to cancel booking",
        )
        logger.info(f"✅ Booking cancelled: {booking_id}")
        return booking

    async def confirm(self, booking_id: str) -> Booking:
        booking = await self._mutate(
            booking_id, lambda: self.repo.confirm(self.api, booking_id), "Failed to confirm booking"
        )
        logger.info(f"✅ Booking confirmed: {booking_id}")
        return booking

    async def complete(
        self,
        booking_id: str,
        tax_id: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> Booking:
        booking = await self._mutate(
            booking_id,
            lambda: self.repo.complete(self.api, booking_id, tax_id, payment_method),
            "Failed to complete booking",
        )
        logger.info(f"✅ Booking marked as completed: {booking_id}")
        return booking

    async def mark_no_show(self, booking_id: str) -> Booking:
        booking = await self._mutate(
            booking_id,
            lambda: self.repo.mark_no_show(self.api, booking_id),
            "Failed to mark booking as no-show",
        )
        logger.info(f"✅ Booking marked as no-show: {booking_id}")
        return booking

    async def delete(self, booking_id: str) -> None:
        async with self._mutation_guard(booking_id):
            await self._call(self.repo.delete(self.api, booking_id), "Failed to delete booking")
            if self._active:
                self.collection = [b for b in self.collection if b.id != booking_id]
        logger.info(f"🗑️ Booking deleted: {booking_id}")

    # ------------------------------------------------------------------
    # reads that leave the collection alone
    # ------------------------------------------------------------------

    async def check_availability(self, query: AvailabilityQuery) -> SlotAvailability:
        try:
            return await self.repo.check_availability(self.api, query)
        except ApiError as e:
            raise _generic_error(e, "Failed to check availability") from e
        except ValidationError as e:
            logger.error(f"❌ Failed to check availability: unexpected payload from API: {e}")
            raise BookingError("Failed to check availability: invalid response from server") from e

    async def get_available_slots(self, entity_id: str, date: str, **filters) -> list[TimeSlot]:
        try:
            return await self.repo.get_available_slots(self.api, entity_id, date, **filters)
        except ApiError as e:
            raise _generic_error(e, "Failed to load available slots") from e
        except ValidationError as e:
            logger.error(f"❌ Failed to load available slots: unexpected payload from API: {e}")
            raise BookingError("Failed to load available slots: invalid response from server") from e
