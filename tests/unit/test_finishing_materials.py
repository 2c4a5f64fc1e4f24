"""
Unit Tests for the Finishing Material Resolver.

Test Coverage:
- first candidate of every sub-group is the default pick
- concurrent loads of one service share a single fetch
- fetch failures are not cached and do not raise
- picking replaces only the sub-group that offers the material
- customer-supplied flags and persistence
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from jamb_estimate.config.errors import ErrorCode, PricingGatewayError, ValidationError
from jamb_estimate.models.pricing import FinishingMaterialSet
from jamb_estimate.services.finishing_materials import FinishingMaterialResolver
from jamb_estimate.services.session_store import SessionKeys
from tests.fixtures.mock_pricing_data import NO_FINISHING_MATERIALS, TILE_FINISHING_MATERIALS


def _tile_set() -> FinishingMaterialSet:
    return FinishingMaterialSet.model_validate(TILE_FINISHING_MATERIALS)


class TestLoading:
    """Tests for ensure_loaded."""

    @pytest.mark.asyncio
    async def test_defaults_to_first_candidate_per_group(self, mock_gateway):
        resolver = FinishingMaterialResolver(mock_gateway)
        assert await resolver.ensure_loaded("4-1-1") is True
        assert resolver.selection_by_group("4-1-1") == {"Tile": "T-100", "Grout": "G-1"}
        assert resolver.current_selection("4-1-1") == ["T-100", "G-1"]

    @pytest.mark.asyncio
    async def test_loaded_candidates_are_cached(self, mock_gateway):
        resolver = FinishingMaterialResolver(mock_gateway)
        await resolver.ensure_loaded("4-1-1")
        await resolver.ensure_loaded("4-1-1")
        assert mock_gateway.resolve_finishing_materials.await_count == 1
        assert resolver.is_loaded("4-1-1")

    @pytest.mark.asyncio
    async def test_concurrent_loads_share_one_fetch(self):
        release = asyncio.Event()

        async def slow_resolve(service_id):
            await release.wait()
            return _tile_set()

        gateway = MagicMock()
        gateway.resolve_finishing_materials = AsyncMock(side_effect=slow_resolve)
        resolver = FinishingMaterialResolver(gateway)

        first = asyncio.ensure_future(resolver.ensure_loaded("4-1-1"))
        second = asyncio.ensure_future(resolver.ensure_loaded("4-1-1"))
        await asyncio.sleep(0)
        release.set()

        assert await asyncio.gather(first, second) == [True, True]
        assert gateway.resolve_finishing_materials.await_count == 1

    @pytest.mark.asyncio
    async def test_failed_fetch_is_not_cached(self, mock_gateway):
        mock_gateway.resolve_finishing_materials.side_effect = [
            PricingGatewayError(code=ErrorCode.PRICING_TIMEOUT, message="timed out", work_code="4.1.1"),
            _tile_set(),
        ]
        resolver = FinishingMaterialResolver(mock_gateway)

        assert await resolver.ensure_loaded("4-1-1") is False
        assert resolver.current_selection("4-1-1") == []
        assert not resolver.is_loaded("4-1-1")

        assert await resolver.ensure_loaded("4-1-1") is True
        assert resolver.current_selection("4-1-1") == ["T-100", "G-1"]

    @pytest.mark.asyncio
    async def test_service_without_materials(self, mock_gateway):
        mock_gateway.resolve_finishing_materials.return_value = FinishingMaterialSet.model_validate(
            NO_FINISHING_MATERIALS
        )
        resolver = FinishingMaterialResolver(mock_gateway)
        assert await resolver.ensure_loaded("2-2-2") is True
        assert resolver.candidates("2-2-2").is_empty
        assert resolver.current_selection("2-2-2") == []


class TestPicking:
    """Tests for picking materials."""

    @pytest.mark.asyncio
    async def test_pick_replaces_only_its_group(self, mock_gateway):
        resolver = FinishingMaterialResolver(mock_gateway)
        await resolver.ensure_loaded("4-1-1")

        assert resolver.pick("4-1-1", "T-200") == "Tile"
        assert resolver.selection_by_group("4-1-1") == {"Tile": "T-200", "Grout": "G-1"}

    @pytest.mark.asyncio
    async def test_pick_survives_reload(self, mock_gateway):
        resolver = FinishingMaterialResolver(mock_gateway)
        await resolver.ensure_loaded("4-1-1")
        resolver.pick("4-1-1", "G-2")
        await resolver.ensure_loaded("4-1-1")
        assert resolver.selection_by_group("4-1-1")["Grout"] == "G-2"

    @pytest.mark.asyncio
    async def test_pick_unknown_material_raises(self, mock_gateway):
        resolver = FinishingMaterialResolver(mock_gateway)
        await resolver.ensure_loaded("4-1-1")
        with pytest.raises(ValidationError) as exc_info:
            resolver.pick("4-1-1", "X-999")
        assert exc_info.value.field == "external_id"

    def test_pick_before_load_raises(self, mock_gateway):
        resolver = FinishingMaterialResolver(mock_gateway)
        with pytest.raises(ValidationError):
            resolver.pick("4-1-1", "T-100")


class TestCustomerSupplied:
    """Tests for customer-supplied flags and persistence."""

    def test_flag_and_unflag(self, mock_gateway):
        resolver = FinishingMaterialResolver(mock_gateway)
        resolver.mark_customer_supplied("4-1-1", "T-100")
        assert resolver.customer_supplied("4-1-1") == {"T-100"}
        resolver.mark_customer_supplied("4-1-1", "T-100", supplied=False)
        assert resolver.customer_supplied("4-1-1") == set()
        assert resolver.customer_supplied_dict() == {}

    @pytest.mark.asyncio
    async def test_forget_drops_picks_but_keeps_candidates(self, mock_gateway):
        resolver = FinishingMaterialResolver(mock_gateway)
        await resolver.ensure_loaded("4-1-1")
        resolver.mark_customer_supplied("4-1-1", "G-1")

        resolver.forget("4-1-1")
        assert resolver.current_selection("4-1-1") == []
        assert resolver.customer_supplied("4-1-1") == set()
        assert resolver.is_loaded("4-1-1")

    @pytest.mark.asyncio
    async def test_state_round_trips_through_store(self, mock_gateway, memory_store):
        resolver = FinishingMaterialResolver(mock_gateway, memory_store)
        await resolver.ensure_loaded("4-1-1")
        resolver.pick("4-1-1", "T-200")
        resolver.mark_customer_supplied("4-1-1", "G-1")

        assert memory_store.get(SessionKeys.FINISHING_SELECTIONS) == {
            "4-1-1": {"Tile": "T-200", "Grout": "G-1"}
        }
        assert memory_store.get(SessionKeys.CUSTOMER_SUPPLIED) == {"4-1-1": ["G-1"]}

        restored = FinishingMaterialResolver(mock_gateway, memory_store)
        assert restored.current_selection("4-1-1") == ["T-200", "G-1"]
        assert restored.customer_supplied("4-1-1") == {"G-1"}
