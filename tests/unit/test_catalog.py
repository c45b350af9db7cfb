"""Unit tests for catalog curation services."""
import uuid
from datetime import date, time
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from pricewatch.db.models import MarketLocation, MarketStatus, MarketType, ProductInfo, ProductStatus
from pricewatch.errors.exceptions import ResourceNotFoundError, ValidationError
from pricewatch.services.catalog import (
    create_market,
    get_market_products,
    get_market_stats,
    get_product_markets,
    get_product_stats,
    update_market_details,
    update_market_status,
    update_product_details,
    update_product_status,
)


class TestStats:
    """Tests for dashboard counters."""

    @pytest.mark.asyncio
    async def test_product_stats_from_grouped_counts(self, mock_session):
        result = MagicMock()
        result.all.return_value = [(ProductStatus.ACTIVE, 5), (ProductStatus.PENDING, 2)]
        mock_session.execute = AsyncMock(return_value=result)

        stats = await get_product_stats(mock_session)

        assert stats.total == 7
        assert stats.active == 5
        assert stats.pending == 2
        assert stats.inactive == 0

    @pytest.mark.asyncio
    async def test_market_stats_handles_empty_table(self, mock_session):
        result = MagicMock()
        result.one.return_value = (0, None, None, None)
        mock_session.execute = AsyncMock(return_value=result)

        stats = await get_market_stats(mock_session)

        assert stats.total == 0
        assert stats.active == 0
        assert stats.wet_markets == 0
        assert stats.supermarkets == 0


class TestUpdateProduct:
    """Tests for product curation."""

    @pytest.mark.asyncio
    async def test_update_status(self, mock_session):
        product = ProductInfo(id=uuid.uuid4(), category="FISH", product_name="Bangus", status=ProductStatus.PENDING)
        mock_session.get = AsyncMock(return_value=product)

        updated = await update_product_status(mock_session, product.id, "active")

        assert updated.status == ProductStatus.ACTIVE
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_status_missing_product(self, mock_session):
        mock_session.get = AsyncMock(return_value=None)
        product_id = uuid.uuid4()

        with pytest.raises(ResourceNotFoundError) as exc_info:
            await update_product_status(mock_session, product_id, ProductStatus.ACTIVE)

        assert exc_info.value.message == f"Product not found with id: '{product_id}'"

    @pytest.mark.asyncio
    async def test_update_status_invalid_value(self, mock_session):
        with pytest.raises(ValidationError):
            await update_product_status(mock_session, uuid.uuid4(), "archived")
        mock_session.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_details_only_given_fields(self, mock_session):
        product = ProductInfo(id=uuid.uuid4(), category="FISH", product_name="Bangus", local_name=None)
        mock_session.get = AsyncMock(return_value=product)

        updated = await update_product_details(mock_session, product.id, local_name=" Milkfish ")

        assert updated.local_name == "Milkfish"
        assert updated.product_name == "Bangus"
        assert updated.category == "FISH"
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_details_no_changes_skips_flush(self, mock_session):
        product = ProductInfo(id=uuid.uuid4(), category="FISH", product_name="Bangus")
        mock_session.get = AsyncMock(return_value=product)

        await update_product_details(mock_session, product.id)

        mock_session.flush.assert_not_awaited()


class TestUpdateMarket:
    """Tests for market curation."""

    @pytest.mark.asyncio
    async def test_deactivate_market(self, mock_session):
        market = MarketLocation(id=uuid.uuid4(), name="Agora", status=MarketStatus.ACTIVE)
        mock_session.get = AsyncMock(return_value=market)

        updated = await update_market_status(mock_session, market.id, MarketStatus.INACTIVE)

        assert updated.status == MarketStatus.INACTIVE
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_market(self, mock_session):
        mock_session.get = AsyncMock(return_value=None)

        with pytest.raises(ResourceNotFoundError):
            await update_market_status(mock_session, uuid.uuid4(), "inactive")


class TestCreateMarket:
    """Tests for manual market registration."""

    @pytest.mark.asyncio
    async def test_creates_active_market_with_zero_rating(self, mock_session):
        mock_session.scalar.return_value = False

        market = await create_market(
            mock_session,
            "  SM Hypermarket Cubao ",
            market_type="SUPERMARKET",
            latitude=14.62,
            longitude=121.05,
            opening_time=time(9, 0),
        )

        assert market.name == "SM Hypermarket Cubao"
        assert market.market_type == MarketType.SUPERMARKET
        assert market.status == MarketStatus.ACTIVE
        assert market.rating == 0.0
        assert market.opening_time == time(9, 0)
        mock_session.add.assert_called_once_with(market)
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_explicit_status_kept(self, mock_session):
        mock_session.scalar.return_value = False

        market = await create_market(mock_session, "Agora", status=MarketStatus.INACTIVE)

        assert market.status == MarketStatus.INACTIVE
        assert market.market_type is None

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected(self, mock_session):
        mock_session.scalar.return_value = True

        with pytest.raises(ValidationError):
            await create_market(mock_session, "Agora")
        mock_session.add.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   ", None])
    async def test_blank_name_rejected(self, mock_session, name):
        with pytest.raises(ValidationError):
            await create_market(mock_session, name)
        mock_session.scalar.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_type_rejected(self, mock_session):
        with pytest.raises(ValidationError):
            await create_market(mock_session, "Agora", market_type="mall")


class TestUpdateMarketDetails:
    """Tests for market detail edits."""

    @pytest.mark.asyncio
    async def test_rename_and_retype(self, mock_session):
        market = MarketLocation(id=uuid.uuid4(), name="Agora", status=MarketStatus.ACTIVE)
        mock_session.get = AsyncMock(return_value=market)
        mock_session.scalar.return_value = False

        updated = await update_market_details(
            mock_session, market.id, name=" Agora Public Market ", market_type=MarketType.WET_MARKET
        )

        assert updated.name == "Agora Public Market"
        assert updated.market_type == MarketType.WET_MARKET
        assert updated.status == MarketStatus.ACTIVE
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_name_used_by_other_market_rejected(self, mock_session):
        market = MarketLocation(id=uuid.uuid4(), name="Agora")
        mock_session.get = AsyncMock(return_value=market)
        mock_session.scalar.return_value = True

        with pytest.raises(ValidationError):
            await update_market_details(mock_session, market.id, name="Bicutan Market")

        assert market.name == "Agora"
        mock_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_market(self, mock_session):
        mock_session.get = AsyncMock(return_value=None)

        with pytest.raises(ResourceNotFoundError):
            await update_market_details(mock_session, uuid.uuid4(), description="x")

    @pytest.mark.asyncio
    async def test_no_changes_skips_flush(self, mock_session):
        market = MarketLocation(id=uuid.uuid4(), name="Agora")
        mock_session.get = AsyncMock(return_value=market)

        await update_market_details(mock_session, market.id)

        mock_session.scalar.assert_not_awaited()
        mock_session.flush.assert_not_awaited()


class TestCrossViews:
    """Tests for product-to-markets and market-to-products views."""

    @pytest.mark.asyncio
    async def test_product_markets(self, mock_session):
        product = ProductInfo(id=uuid.uuid4(), category="FISH", product_name="Bangus")
        mock_session.get = AsyncMock(return_value=product)
        market_id = uuid.uuid4()
        result = MagicMock()
        result.all.return_value = [(market_id, "Agora", MarketType.WET_MARKET, time(5, 0), None)]
        mock_session.execute = AsyncMock(return_value=result)

        view = await get_product_markets(mock_session, product.id)

        assert view.product_name == "Bangus"
        assert len(view.markets) == 1
        assert view.markets[0].id == market_id
        assert view.markets[0].market_type == "wet_market"
        assert view.markets[0].closing_time is None

    @pytest.mark.asyncio
    async def test_product_markets_missing_product(self, mock_session):
        mock_session.get = AsyncMock(return_value=None)

        with pytest.raises(ResourceNotFoundError):
            await get_product_markets(mock_session, uuid.uuid4())
        mock_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_market_products(self, mock_session):
        market = MarketLocation(id=uuid.uuid4(), name="Agora", market_type=None)
        mock_session.get = AsyncMock(return_value=market)
        mock_session.scalar.return_value = 2
        result = MagicMock()
        result.all.return_value = [
            ("Bangus", "FISH", Decimal("180.00"), "kg", date(2025, 12, 15)),
            ("Bangus", "FISH", Decimal("200.00"), "kg", date(2025, 12, 16)),
        ]
        mock_session.execute = AsyncMock(return_value=result)

        view = await get_market_products(mock_session, market.id)

        assert view.market_name == "Agora"
        assert view.market_type is None
        assert view.total_records == 2
        assert [p.price for p in view.products] == [Decimal("180.00"), Decimal("200.00")]

    @pytest.mark.asyncio
    async def test_market_products_missing_market(self, mock_session):
        mock_session.get = AsyncMock(return_value=None)

        with pytest.raises(ResourceNotFoundError):
            await get_market_products(mock_session, uuid.uuid4())
