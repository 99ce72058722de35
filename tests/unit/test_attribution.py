"""Tests for AttributionEngine - commission priority and promotion totals."""

import pytest
from pydantic import ValidationError

from schedfy.domain.bookings import Booking
from schedfy.domain.promotions import AttributionEngine, CommissionAppliesTo, CommissionRule


def completed(make_booking, booking_id="b1", total=100.0, discount=None, **overrides):
    pricing = {"basePrice": total + (discount or 0), "totalPrice": total, "currency": "EUR"}
    if discount is not None:
        pricing["discountAmount"] = discount
    return Booking.model_validate(
        make_booking(booking_id, status="completed", pricing=pricing, **overrides)
    )


def rule(applies_to, value, type_="percentage", active=True, **ids):
    return CommissionRule(appliesTo=applies_to, type=type_, value=value, isActive=active, **ids)


# ==============================================================================
# rule resolution
# ==============================================================================


def test_service_rule_beats_professional_rule(make_booking):
    booking = completed(make_booking, total=100)
    rules = [
        rule("professional", 20, professionalIds=["pro-1"]),
        rule("service", 10, serviceIds=["svc-1"]),
    ]

    impact = AttributionEngine.summarize([booking], rules)

    assert impact.totalCommissionAmount == 10
    assert AttributionEngine.resolve_rule(booking, rules) is rules[1]


def test_professional_rule_beats_category_rule(make_booking):
    booking = completed(
        make_booking, serviceId={"_id": "svc-1", "name": "Cut", "category": "hair"}
    )
    rules = [
        rule("service_category", 50, serviceCategoryIds=["hair"]),
        rule("professional", 5, type_="fixed", professionalIds=["pro-1"]),
    ]

    assert AttributionEngine.resolve_rule(booking, rules) is rules[1]
    assert AttributionEngine.summarize([booking], rules).totalCommissionAmount == 5


def test_category_rule_uses_expanded_service(make_booking):
    booking = completed(
        make_booking, total=80, serviceId={"_id": "svc-1", "name": "Cut", "category": "hair"}
    )
    rules = [rule("service_category", 25, serviceCategoryIds=["hair"])]

    assert AttributionEngine.summarize([booking], rules).totalCommissionAmount == 20


def test_first_matching_rule_in_tier_wins(make_booking):
    booking = completed(make_booking, total=100)
    rules = [
        rule("service", 15, serviceIds=["svc-1"]),
        rule("service", 30, serviceIds=["svc-1", "svc-2"]),
    ]

    assert AttributionEngine.resolve_rule(booking, rules) is rules[0]
    assert AttributionEngine.summarize([booking], rules).totalCommissionAmount == 15


def test_inactive_rules_never_match(make_booking):
    booking = completed(make_booking, total=100)
    rules = [
        rule("service", 10, active=False, serviceIds=["svc-1"]),
        rule("professional", 20, professionalIds=["pro-1"]),
    ]

    assert AttributionEngine.summarize([booking], rules).totalCommissionAmount == 20


def test_unmatched_booking_earns_nothing(make_booking):
    raw = make_booking("b1", status="completed", pricing={"basePrice": 60, "totalPrice": 60})
    raw.pop("professionalId")
    raw.pop("serviceId")
    booking = Booking.model_validate(raw)
    rules = [
        rule("service", 10, serviceIds=["svc-1"]),
        rule("service_category", 10, serviceCategoryIds=["hair"]),
    ]

    assert AttributionEngine.resolve_rule(booking, rules) is None
    assert AttributionEngine.summarize([booking], rules).totalCommissionAmount == 0


def test_fixed_commission_ignores_price(make_booking):
    booking = completed(make_booking, total=250)
    rules = [rule("service", 12.5, type_="fixed", serviceIds=["svc-1"])]

    assert AttributionEngine.summarize([booking], rules).totalCommissionAmount == 12.5


def test_percentage_without_price_is_zero(make_booking):
    booking = Booking.model_validate(make_booking("b1", status="completed", pricing=None))
    rules = [rule("service", 10, serviceIds=["svc-1"])]

    assert AttributionEngine.summarize([booking], rules).totalCommissionAmount == 0


# ==============================================================================
# aggregation
# ==============================================================================


def test_no_completed_bookings_gives_zero_rate(make_booking):
    pending = Booking.model_validate(make_booking("b1"))

    impact = AttributionEngine.summarize([pending], [rule("service", 10, serviceIds=["svc-1"])])

    assert impact.promotionRate == 0
    assert impact.totalCommissionAmount == 0
    assert AttributionEngine.summarize([], []).promotionRate == 0


def test_discount_aggregation(make_booking):
    bookings = [
        completed(make_booking, "b1", total=45, discount=5),
        completed(make_booking, "b2", total=50, discount=0),
    ]

    impact = AttributionEngine.summarize(bookings, [])

    assert impact.totalDiscountAmount == 5
    assert impact.bookingsWithPromotion == 1
    assert impact.revenueFromPromotions == 45
    assert impact.promotionRate == 50


def test_only_completed_bookings_count(make_booking):
    bookings = [
        completed(make_booking, "b1", total=100, discount=10),
        Booking.model_validate(
            make_booking(
                "b2",
                status="cancelled",
                pricing={"basePrice": 100, "discountAmount": 20, "totalPrice": 80},
            )
        ),
    ]
    rules = [rule("service", 10, serviceIds=["svc-1"])]

    impact = AttributionEngine.summarize(bookings, rules)

    assert impact.totalDiscountAmount == 10
    assert impact.totalCommissionAmount == 10
    assert impact.promotionRate == 100


def test_attribute_yields_per_booking_breakdown(make_booking):
    bookings = [
        completed(make_booking, "b1", total=100),
        completed(make_booking, "b2", total=40, serviceId="svc-9"),
        Booking.model_validate(make_booking("b3")),
    ]
    service_rule = rule("service", 10, serviceIds=["svc-1"])

    breakdown = list(AttributionEngine.attribute(bookings, [service_rule]))

    assert [(b.id, r, amount) for b, r, amount in breakdown] == [
        ("b1", service_rule, 10),
        ("b2", None, 0),
    ]


def test_inputs_are_not_mutated(make_booking):
    bookings = [completed(make_booking, "b1", total=100, discount=5)]
    rules = [rule("service", 10, serviceIds=["svc-1"])]
    bookings_before = [b.model_copy(deep=True) for b in bookings]
    rules_before = [r.model_copy(deep=True) for r in rules]

    AttributionEngine.summarize(bookings, rules)

    assert bookings == bookings_before
    assert rules == rules_before


# ==============================================================================
# rule schema
# ==============================================================================


def test_legacy_category_rule_shape():
    legacy = CommissionRule.model_validate(
        {
            "_id": "c1",
            "type": "percentage",
            "value": 10,
            "appliesTo": "category",
            "categoryIds": ["hair"],
            "serviceIds": None,
            "isActive": True,
        }
    )

    assert legacy.id == "c1"
    assert legacy.appliesTo == CommissionAppliesTo.SERVICE_CATEGORY
    assert legacy.serviceCategoryIds == ["hair"]
    assert legacy.serviceIds == []


def test_percentage_above_hundred_rejected():
    with pytest.raises(ValidationError):
        rule("service", 120, serviceIds=["svc-1"])


def test_negative_fixed_value_rejected():
    with pytest.raises(ValidationError):
        rule("service", -3, type_="fixed", serviceIds=["svc-1"])
