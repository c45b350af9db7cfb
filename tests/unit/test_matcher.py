"""Unit tests for product identity matching."""
import uuid
from unittest.mock import AsyncMock, patch

import pytest

from pricewatch.db.models import ProductInfo, ProductStatus
from pricewatch.errors.exceptions import ConsistencyError
from pricewatch.models import ScrapedProduct
from pricewatch.services.matching import MatchOutcome, find_or_create_product

MATCHER = "pricewatch.services.matching.matcher"


@pytest.fixture
def item():
    return ScrapedProduct(
        category="COMMERCIAL RICE",
        commodity="Premium Rice",
        origin="Local",
        unit="kg",
        price="50.59",
    )


def make_product(status):
    return ProductInfo(
        id=uuid.uuid4(),
        category="COMMERCIAL RICE",
        product_name="Premium Rice",
        status=status,
    )


class TestFindOrCreateProduct:
    """Tests for the matcher decision procedure."""

    @pytest.mark.asyncio
    async def test_history_and_active_product_returned_unchanged(self, mock_session, item):
        product = make_product(ProductStatus.ACTIVE)
        with patch(f"{MATCHER}.product_has_origin_history", AsyncMock(return_value=True)), \
             patch(f"{MATCHER}.find_product", AsyncMock(return_value=product)):
            match = await find_or_create_product(mock_session, item)

        assert match.product is product
        assert match.outcome == MatchOutcome.ACTIVE
        mock_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [ProductStatus.PENDING, ProductStatus.INACTIVE])
    async def test_history_reactivates_dormant_product(self, mock_session, item, status):
        product = make_product(status)
        with patch(f"{MATCHER}.product_has_origin_history", AsyncMock(return_value=True)), \
             patch(f"{MATCHER}.find_product", AsyncMock(return_value=product)):
            match = await find_or_create_product(mock_session, item)

        assert match.product.status == ProductStatus.ACTIVE
        assert match.outcome == MatchOutcome.REACTIVATED
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_history_without_product_raises(self, mock_session, item):
        with patch(f"{MATCHER}.product_has_origin_history", AsyncMock(return_value=True)), \
             patch(f"{MATCHER}.find_product", AsyncMock(return_value=None)):
            with pytest.raises(ConsistencyError) as exc_info:
                await find_or_create_product(mock_session, item)

        assert "Premium Rice" in exc_info.value.message
        mock_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_history_existing_product_not_reactivated(self, mock_session, item):
        product = make_product(ProductStatus.INACTIVE)
        with patch(f"{MATCHER}.product_has_origin_history", AsyncMock(return_value=False)), \
             patch(f"{MATCHER}.find_product", AsyncMock(return_value=product)):
            match = await find_or_create_product(mock_session, item)

        assert match.product.status == ProductStatus.INACTIVE
        assert match.outcome == MatchOutcome.EXISTING_UNVERIFIED
        mock_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_history_no_product_creates_pending(self, mock_session, item):
        with patch(f"{MATCHER}.product_has_origin_history", AsyncMock(return_value=False)), \
             patch(f"{MATCHER}.find_product", AsyncMock(return_value=None)):
            match = await find_or_create_product(mock_session, item)

        assert match.outcome == MatchOutcome.CREATED_PENDING
        assert match.product.status == ProductStatus.PENDING
        assert match.product.category == "COMMERCIAL RICE"
        assert match.product.product_name == "Premium Rice"
        mock_session.add.assert_called_once_with(match.product)
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_history_lookup_uses_keyword_identity(self, mock_session, item):
        history = AsyncMock(return_value=False)
        with patch(f"{MATCHER}.product_has_origin_history", history), \
             patch(f"{MATCHER}.find_product", AsyncMock(return_value=None)):
            await find_or_create_product(mock_session, item)

        history.assert_awaited_once_with(
            mock_session,
            category="COMMERCIAL RICE",
            product_name="Premium Rice",
            origin="Local",
        )
