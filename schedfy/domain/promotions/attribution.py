"""Commission attribution and promotion impact over completed bookings"""

import logging
from typing import Iterable, Iterator, Optional, Sequence

from ..bookings.schemas import Booking, BookingStatus
from .schemas import CommissionAppliesTo, CommissionRule, CommissionType, PromotionImpact

logger = logging.getLogger(__name__)


def _first_match(
    rules: Sequence[CommissionRule],
    applies_to: CommissionAppliesTo,
    ids_of: str,
    key: Optional[str],
) -> Optional[CommissionRule]:
    if not key:
        return None
    return next(
        (
            rule
            for rule in rules
            if rule.appliesTo == applies_to and rule.isActive and key in getattr(rule, ids_of)
        ),
        None,
    )


class AttributionEngine:
    """Pure calculations; inputs are never mutated"""

    @staticmethod
    def resolve_rule(booking: Booking, rules: Sequence[CommissionRule]) -> Optional[CommissionRule]:
        """
        Pick the one commission rule that pays for a booking.

        Service rules beat professional rules, which beat service category
        rules. Within a tier the first matching rule in `rules` wins, so the
        caller's ordering matters.
        """
        return (
            _first_match(rules, CommissionAppliesTo.SERVICE, "serviceIds", booking.service_id)
            or _first_match(
                rules, CommissionAppliesTo.PROFESSIONAL, "professionalIds", booking.professional_id
            )
            or _first_match(
                rules,
                CommissionAppliesTo.SERVICE_CATEGORY,
                "serviceCategoryIds",
                booking.service_category,
            )
        )

    @staticmethod
    def commission_for(booking: Booking, rule: Optional[CommissionRule]) -> float:
        if rule is None:
            return 0
        if rule.type == CommissionType.PERCENTAGE:
            price = (booking.pricing.totalPrice if booking.pricing else None) or 0
            return price * rule.value / 100
        return rule.value

    @staticmethod
    def attribute(
        bookings: Iterable[Booking], rules: Sequence[CommissionRule]
    ) -> Iterator[tuple[Booking, Optional[CommissionRule], float]]:
        """(booking, rule, commission) for every completed booking"""
        for booking in bookings:
            if booking.status != BookingStatus.COMPLETED:
                continue
            rule = AttributionEngine.resolve_rule(booking, rules)
            yield booking, rule, AttributionEngine.commission_for(booking, rule)

    @staticmethod
    def summarize(bookings: Iterable[Booking], rules: Sequence[CommissionRule]) -> PromotionImpact:
        total_discount = 0.0
        total_commission = 0.0
        with_promotion = 0
        promotion_revenue = 0.0
        completed = 0

        for booking, rule, commission in AttributionEngine.attribute(bookings, rules):
            completed += 1
            pricing = booking.pricing
            discount = (pricing.discountAmount if pricing else None) or 0
            if discount > 0:
                total_discount += discount
                with_promotion += 1
                promotion_revenue += (pricing.totalPrice or 0) if pricing else 0
            total_commission += commission

        impact = PromotionImpact(
            totalDiscountAmount=total_discount,
            totalCommissionAmount=total_commission,
            bookingsWithPromotion=with_promotion,
            revenueFromPromotions=promotion_revenue,
            promotionRate=(with_promotion / completed * 100) if completed else 0,
        )
        logger.debug(f"Promotion impact over {completed} completed bookings: {impact}")
        return impact
