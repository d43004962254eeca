import uuid
from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from trading.models import Asset


class MarketplaceReadEndpointsTest(TestCase):
    """Tests for the catalogue, portfolio and transaction history endpoints."""

    def setUp(self):
        self.client = APIClient()
        self.solar = Asset.objects.create(
            name="Rooftop Solar",
            type="PV",
            total_capacity_kw=Decimal("2000"),
            price_per_percent=Decimal("150"),
        )
        self.battery = Asset.objects.create(
            name="Community Battery",
            type="Battery",
            total_capacity_kw=Decimal("1000"),
            price_per_percent=Decimal("100"),
        )
        self.user_id = uuid.uuid4()

    def trade(self, asset, mode, percentage, user_id=None):
        response = self.client.post("/api/trades/execute/", {
            "assetId": str(asset.id),
            "userId": str(user_id or self.user_id),
            "percentage": percentage,
            "mode": mode,
            "pricePerPercent": float(asset.price_per_percent),
        })
        self.assertEqual(response.status_code, 200)

    def test_asset_list_reports_available_share(self):
        self.trade(self.solar, "buy", 30)
        self.trade(self.solar, "buy", 15, user_id=uuid.uuid4())

        response = self.client.get("/api/assets/")

        self.assertEqual(response.status_code, 200)
        by_id = {item["id"]: item for item in response.data}
        self.assertEqual(by_id[str(self.solar.id)]["available_percent"], Decimal("55"))
        self.assertEqual(by_id[str(self.battery.id)]["available_percent"], Decimal("100"))

    def test_sample_assets_are_seeded(self):
        names = {item["name"] for item in self.client.get("/api/assets/").data}

        self.assertIn("Solar Farm Alpha", names)
        self.assertIn("Wind Farm Epsilon", names)

    def test_portfolio_values_holdings(self):
        self.trade(self.solar, "buy", 10)
        self.trade(self.battery, "buy", 25)

        response = self.client.get(f"/api/users/{self.user_id}/portfolio/")

        self.assertEqual(response.status_code, 200)
        holdings = {item["asset_name"]: item for item in response.data["holdings"]}
        self.assertEqual(holdings["Rooftop Solar"]["value"], Decimal("1500.00"))
        self.assertEqual(holdings["Rooftop Solar"]["capacity_share_kw"], Decimal("200.00"))
        self.assertEqual(holdings["Community Battery"]["value"], Decimal("2500.00"))
        self.assertEqual(response.data["total_value"], Decimal("4000.00"))

    def test_empty_portfolio(self):
        response = self.client.get(f"/api/users/{uuid.uuid4()}/portfolio/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["holdings"], [])
        self.assertEqual(response.data["total_value"], Decimal("0"))

    def test_transaction_history_lists_buys_and_sells_newest_first(self):
        self.trade(self.solar, "buy", 10)
        self.trade(self.solar, "sell", 4)
        self.trade(self.battery, "buy", 5, user_id=uuid.uuid4())

        response = self.client.get(f"/api/users/{self.user_id}/transactions/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 2)
        self.assertEqual(response.data[0]["transaction_type"], "sell")
        self.assertEqual(response.data[0]["asset_name"], "Rooftop Solar")
        self.assertEqual(response.data[1]["total_price"], Decimal("1500.00"))
