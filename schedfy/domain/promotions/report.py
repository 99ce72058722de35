"""Promotion impact report for one business"""

import logging
from typing import Optional

from pydantic import ValidationError

from ...api_client import ApiClient, ApiError
from ..bookings.exceptions import BookingError
from ..bookings.schemas import BookingScope
from ..bookings.service import BookingStore
from .attribution import AttributionEngine
from .repository import CommissionRepository
from .schemas import PromotionImpact

logger = logging.getLogger(__name__)


async def build_promotion_report(
    api: ApiClient,
    entity_id: str,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> PromotionImpact:
    """
    Load an entity's bookings and commission rules and summarise them.

    Bookings come from the date range endpoint when both dates are given,
    otherwise every booking of the entity is used. All rules are fetched and
    the engine skips inactive ones itself.

    Raises:
        BookingError: bookings or commission rules could not be loaded
    """
    store = BookingStore(api)
    if start_date and end_date:
        bookings = await store.load_by_date_range(entity_id, start_date, end_date)
    else:
        bookings = await store.load(BookingScope(entityId=entity_id))

    try:
        rules = await CommissionRepository.get_all(api, entity_id)
    except ApiError as e:
        raise BookingError(e.message, status_code=e.status_code, error=e.error) from e
    except ValidationError as e:
        logger.error(f"❌ Invalid commission rules for entity {entity_id}: {e}")
        raise BookingError("Failed to load commission rules: invalid response from server") from e

    logger.info(
        f"📊 Building promotion report for entity {entity_id}: "
        f"{len(bookings)} bookings, {len(rules)} commission rules"
    )
    return AttributionEngine.summarize(bookings, rules)
