"""Unit tests for bulk market resolution."""
import uuid

import pytest

from pricewatch.db.models import MarketLocation, MarketStatus
from pricewatch.services.markets import find_or_create_markets, normalize_market_names


class TestNormalizeMarketNames:
    """Tests for normalize_market_names."""

    def test_trims_and_deduplicates(self):
        names = [" Agora ", "Agora", "Bicutan", "  Bicutan", "Cartimar"]
        assert normalize_market_names(names) == ["Agora", "Bicutan", "Cartimar"]

    def test_drops_blank_and_none(self):
        assert normalize_market_names(["", "   ", None, "Agora"]) == ["Agora"]

    @pytest.mark.parametrize("names", [None, []])
    def test_empty_input(self, names):
        assert normalize_market_names(names) == []


class TestFindOrCreateMarkets:
    """Tests for find_or_create_markets."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("names", [None, [], ["  ", ""]])
    async def test_empty_input_issues_no_queries(self, mock_session, names):
        result = await find_or_create_markets(mock_session, names)

        assert result == []
        mock_session.scalars.assert_not_awaited()
        mock_session.add_all.assert_not_called()
        mock_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_creates_only_missing_markets(self, mock_session, scalars_result):
        existing = MarketLocation(id=uuid.uuid4(), name="Agora", status=MarketStatus.ACTIVE)
        mock_session.scalars.return_value = scalars_result([existing])

        result = await find_or_create_markets(mock_session, ["Agora", " Bicutan ", "Cartimar", "Bicutan"])

        assert [m.name for m in result] == ["Agora", "Bicutan", "Cartimar"]
        assert result[0] is existing
        mock_session.scalars.assert_awaited_once()
        mock_session.add_all.assert_called_once()
        created = mock_session.add_all.call_args[0][0]
        assert [m.name for m in created] == ["Bicutan", "Cartimar"]
        assert all(m.status == MarketStatus.ACTIVE for m in created)
        assert all(m.market_type is None for m in created)
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_all_existing_skips_write(self, mock_session, scalars_result):
        rows = [
            MarketLocation(id=uuid.uuid4(), name="Agora", status=MarketStatus.ACTIVE),
            MarketLocation(id=uuid.uuid4(), name="Bicutan", status=MarketStatus.INACTIVE),
        ]
        mock_session.scalars.return_value = scalars_result(rows)

        result = await find_or_create_markets(mock_session, ["Agora", "Bicutan"])

        assert result == rows
        mock_session.add_all.assert_not_called()
        mock_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_existing_inactive_market_not_reactivated(self, mock_session, scalars_result):
        inactive = MarketLocation(id=uuid.uuid4(), name="Agora", status=MarketStatus.INACTIVE)
        mock_session.scalars.return_value = scalars_result([inactive])

        result = await find_or_create_markets(mock_session, ["Agora"])

        assert result[0].status == MarketStatus.INACTIVE
