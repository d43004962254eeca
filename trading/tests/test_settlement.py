import uuid
from decimal import Decimal

from django.test import SimpleTestCase

from trading.domain.exceptions import (
    ExceedsFullOwnership,
    InsufficientAvailability,
    InsufficientOwnership,
    TradeValidationError,
)
from trading.domain.settlement import (
    check_availability,
    compute_new_ownership,
    parse_trade_request,
    total_price,
)


def payload(**overrides):
    data = {
        "assetId": str(uuid.uuid4()),
        "userId": str(uuid.uuid4()),
        "percentage": 12.5,
        "mode": "buy",
        "pricePerPercent": 150,
    }
    data.update(overrides)
    return data


class ParseTradeRequestTest(SimpleTestCase):

    def test_valid_payload_is_converted_to_decimals(self):
        trade = parse_trade_request(payload())

        self.assertEqual(trade.percentage, Decimal("12.5"))
        self.assertEqual(trade.price_per_percent, Decimal("150"))
        self.assertEqual(trade.mode, "buy")
        self.assertIsInstance(trade.asset_id, uuid.UUID)

    def test_full_ownership_is_a_valid_percentage(self):
        self.assertEqual(parse_trade_request(payload(percentage=100)).percentage, Decimal("100"))

    def test_each_required_field_is_checked(self):
        for field in ("assetId", "userId", "percentage", "mode", "pricePerPercent"):
            data = payload()
            del data[field]
            with self.assertRaisesMessage(TradeValidationError, "Missing required fields"):
                parse_trade_request(data)

    def test_non_numeric_percentage_is_rejected(self):
        for value in ("ten", True, "NaN"):
            with self.assertRaises(TradeValidationError):
                parse_trade_request(payload(percentage=value))

    def test_excess_precision_is_rejected(self):
        with self.assertRaises(TradeValidationError):
            parse_trade_request(payload(percentage="1.00001"))

    def test_non_positive_price_is_rejected(self):
        with self.assertRaises(TradeValidationError):
            parse_trade_request(payload(pricePerPercent=-1))

    def test_non_object_body_is_rejected(self):
        with self.assertRaises(TradeValidationError):
            parse_trade_request(["buy", 10])


class OwnershipArithmeticTest(SimpleTestCase):

    def test_buy_adds_percentage(self):
        self.assertEqual(
            compute_new_ownership("a", "buy", Decimal("40"), Decimal("10.25")),
            Decimal("50.25"),
        )

    def test_buy_past_full_ownership_is_rejected(self):
        with self.assertRaises(ExceedsFullOwnership):
            compute_new_ownership("a", "buy", Decimal("95"), Decimal("5.0001"))

    def test_sell_never_goes_negative(self):
        with self.assertRaises(InsufficientOwnership):
            compute_new_ownership("a", "sell", Decimal("5"), Decimal("5.0001"))

    def test_sell_of_full_position_reaches_zero(self):
        self.assertEqual(compute_new_ownership("a", "sell", Decimal("5"), Decimal("5")), 0)

    def test_availability_counts_all_owners(self):
        check_availability("a", Decimal("60"), Decimal("40"))
        with self.assertRaises(InsufficientAvailability):
            check_availability("a", Decimal("60"), Decimal("40.0001"))


class TotalPriceTest(SimpleTestCase):

    def test_total_is_percentage_times_price(self):
        self.assertEqual(total_price(Decimal("12.5"), Decimal("150")), Decimal("1875.00"))

    def test_half_cent_rounds_to_even(self):
        self.assertEqual(total_price(Decimal("0.5"), Decimal("100.25")), Decimal("50.12"))
        self.assertEqual(total_price(Decimal("0.5"), Decimal("100.27")), Decimal("50.14"))
