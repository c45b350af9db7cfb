"""Unit tests for pydantic message models and enum parsing."""
from decimal import Decimal

import pytest
from pydantic import ValidationError

from pricewatch.db.models import ReportStatus
from pricewatch.models import ScrapeRequestMessage, ScrapeResult, ScrapedProduct


class TestScrapedProduct:
    """Tests for ScrapedProduct validation."""

    def test_valid_product(self):
        item = ScrapedProduct(
            category="COMMERCIAL RICE",
            commodity="Premium Rice",
            origin="Local",
            unit="kg",
            price="50.59",
        )
        assert item.price == Decimal("50.59")
        assert item.origin == "Local"

    def test_strips_identity_fields(self):
        item = ScrapedProduct(category="  FISH  ", commodity=" Bangus ", price=1)
        assert item.category == "FISH"
        assert item.commodity == "Bangus"

    def test_blank_commodity_rejected(self):
        with pytest.raises(ValidationError):
            ScrapedProduct(category="FISH", commodity="   ", price=1)

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            ScrapedProduct(category="FISH", commodity="Bangus", price=-1)

    def test_origin_and_unit_optional(self):
        item = ScrapedProduct(category="FISH", commodity="Bangus", price=1)
        assert item.origin is None
        assert item.unit is None


class TestScrapeResult:
    """Tests for ScrapeResult parsing with wire aliases."""

    def test_parses_wire_document(self):
        result = ScrapeResult.model_validate({
            "status": "Success",
            "date_processed": "2025-12-15",
            "original_url": "https://www.da.gov.ph/price-monitoring/",
            "covered_markets": ["Agora Public Market", "Bicutan Market"],
            "price_data": [
                {"category": "CORN", "commodity": "Corn White", "origin": "Local", "unit": "kg", "price": 108.13},
            ],
        })
        assert result.url == "https://www.da.gov.ph/price-monitoring/"
        assert len(result.products) == 1
        assert result.products[0].commodity == "Corn White"
        assert result.covered_markets == ["Agora Public Market", "Bicutan Market"]

    def test_all_fields_optional(self):
        result = ScrapeResult.model_validate({})
        assert result.status is None
        assert result.products is None
        assert result.covered_markets is None

    def test_invalid_nested_product_rejected(self):
        with pytest.raises(ValidationError):
            ScrapeResult.model_validate({"price_data": [{"category": "X"}]})


class TestReportStatus:
    """Tests for mapping scraper status strings."""

    @pytest.mark.parametrize("value", ["success", "Success", "SUCCESS", "partial success"])
    def test_success_variants_complete(self, value):
        assert ReportStatus.from_scrape_status(value) == ReportStatus.COMPLETED

    @pytest.mark.parametrize("value", [None, "", "failed", "error", "unknown"])
    def test_everything_else_fails(self, value):
        assert ReportStatus.from_scrape_status(value) == ReportStatus.FAILED


class TestScrapeRequestMessage:
    """Tests for ScrapeRequestMessage validation."""

    def test_defaults(self):
        message = ScrapeRequestMessage(url=" https://example.com/prices ")
        assert message.url == "https://example.com/prices"
        assert message.triggered_by == "manual"
        assert message.requested_at

    def test_non_http_url_rejected(self):
        with pytest.raises(ValidationError):
            ScrapeRequestMessage(url="ftp://example.com")

    def test_unknown_trigger_rejected(self):
        with pytest.raises(ValidationError):
            ScrapeRequestMessage(url="https://example.com", triggered_by="cron")
