"""
Promotion impact report
Usage: python run_promotion_report.py <entity_id> [start_date end_date]
"""

import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from schedfy.api_client import ApiClient
from schedfy.config import LOG_LEVEL
from schedfy.domain.bookings import BookingError
from schedfy.domain.promotions import build_promotion_report

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


async def run_report(entity_id: str, start_date: str = None, end_date: str = None) -> None:
    async with ApiClient() as api:
        impact = await build_promotion_report(api, entity_id, start_date, end_date)

    print(f"Total discounts:        {impact.totalDiscountAmount:.2f}")
    print(f"Estimated commissions:  {impact.totalCommissionAmount:.2f}")
    print(f"Bookings with promo:    {impact.bookingsWithPromotion}")
    print(f"Promotional revenue:    {impact.revenueFromPromotions:.2f}")
    print(f"Promotion usage:        {impact.promotionRate:.1f}%")


if __name__ == "__main__":
    if len(sys.argv) not in (2, 4):
        logger.error("Usage: python run_promotion_report.py <entity_id> [start_date end_date]")
        sys.exit(1)

    try:
        asyncio.run(run_report(*sys.argv[1:]))
    except BookingError as e:
        logger.error(f"❌ Report failed: {e.message}")
        sys.exit(1)
