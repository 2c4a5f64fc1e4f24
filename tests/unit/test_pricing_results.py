"""
Unit Tests for the Pricing Result Cache.

Test Coverage:
- supersession tokens: only the latest request of a tracked service applies
- materials-removed override is a projection that outlives repricing
- customer-supplied materials zero their line cost
- persistence keeps fetched results and overrides apart
"""

import pytest

from jamb_estimate.models.pricing import CalculationResult
from jamb_estimate.services.pricing_results import PricingResultCache, project_result
from jamb_estimate.services.session_store import SessionKeys
from tests.fixtures.mock_pricing_data import LABOR_ONLY_CALCULATION, TILE_CALCULATION


@pytest.fixture
def tile_result():
    return CalculationResult.from_response(TILE_CALCULATION)


class TestProjection:
    """Tests for project_result."""

    def test_no_overrides_returns_fetched(self, tile_result):
        assert project_result(tile_result) is tile_result

    def test_materials_removed(self, tile_result):
        effective = project_result(tile_result, materials_removed=True)
        assert effective.labor_cost == 100.0
        assert effective.material_cost == 0.0
        assert effective.material_lines == []
        assert effective.derived
        # fetched result untouched
        assert tile_result.material_cost == 50.0

    def test_customer_supplied_line_is_zeroed(self, tile_result):
        effective = project_result(tile_result, customer_supplied={"T-100"})
        assert effective.material_cost == pytest.approx(15.0)
        tile_line, grout_line = effective.material_lines
        assert tile_line.customer_supplied and tile_line.line_cost == 0.0
        assert not grout_line.customer_supplied and grout_line.line_cost == 15.0
        assert effective.total == pytest.approx(115.0)

    def test_unknown_supplied_id_changes_nothing(self, tile_result):
        assert project_result(tile_result, customer_supplied={"X-1"}) is tile_result


class TestSupersession:
    """Tests for request tokens."""

    def test_latest_token_applies(self, tile_result):
        cache = PricingResultCache()
        token = cache.begin_request("4-1-1")
        assert cache.apply("4-1-1", token, tile_result)
        assert cache.effective("4-1-1") is tile_result

    def test_stale_token_is_discarded(self, tile_result):
        cache = PricingResultCache()
        older = cache.begin_request("4-1-1")
        newer = cache.begin_request("4-1-1")
        labor_only = CalculationResult.from_response(LABOR_ONLY_CALCULATION)

        assert cache.apply("4-1-1", newer, labor_only)
        assert not cache.apply("4-1-1", older, tile_result)
        assert cache.effective("4-1-1").total == 80.0

    def test_forgotten_service_discards_in_flight_result(self, tile_result):
        cache = PricingResultCache()
        token = cache.begin_request("4-1-1")
        cache.forget("4-1-1")
        assert not cache.apply("4-1-1", token, tile_result)
        assert "4-1-1" not in cache

    def test_tokens_are_unique_across_services(self):
        cache = PricingResultCache()
        first = cache.begin_request("4-1-1")
        second = cache.begin_request("2-2-2")
        assert first != second
        assert cache.is_current("4-1-1", first)
        assert not cache.is_current("4-1-1", second)


class TestOverrides:
    """Tests for the materials-removed override."""

    def test_remove_without_result_is_noop(self):
        assert PricingResultCache().remove_finishing_materials("4-1-1") is None

    def test_remove_is_idempotent(self, tile_result):
        cache = PricingResultCache()
        cache.apply("4-1-1", cache.begin_request("4-1-1"), tile_result)
        first = cache.remove_finishing_materials("4-1-1")
        second = cache.remove_finishing_materials("4-1-1")
        assert first == second
        assert first.material_cost == 0.0

    def test_override_outlives_repricing(self, tile_result):
        cache = PricingResultCache()
        cache.apply("4-1-1", cache.begin_request("4-1-1"), tile_result)
        cache.remove_finishing_materials("4-1-1")

        cache.apply("4-1-1", cache.begin_request("4-1-1"), tile_result)
        assert cache.materials_removed("4-1-1")
        assert cache.effective("4-1-1").material_cost == 0.0
        assert cache.fetched("4-1-1").material_cost == 50.0

    def test_restore_brings_materials_back(self, tile_result):
        cache = PricingResultCache()
        cache.apply("4-1-1", cache.begin_request("4-1-1"), tile_result)
        cache.remove_finishing_materials("4-1-1")
        restored = cache.restore_finishing_materials("4-1-1")
        assert restored.material_cost == 50.0

    def test_customer_supplied_lookup_is_used(self, tile_result):
        cache = PricingResultCache(customer_supplied=lambda sid: {"G-1"})
        cache.apply("4-1-1", cache.begin_request("4-1-1"), tile_result)
        assert cache.effective("4-1-1").material_cost == pytest.approx(35.0)
        assert cache.effective_results()["4-1-1"].derived


class TestPersistence:
    """Tests for session store round trips."""

    def test_fetched_and_override_persist_separately(self, tile_result, memory_store):
        cache = PricingResultCache(memory_store)
        cache.apply("4-1-1", cache.begin_request("4-1-1"), tile_result)
        cache.remove_finishing_materials("4-1-1")

        stored = memory_store.get(SessionKeys.CALCULATION_RESULTS)
        assert stored["4-1-1"]["materials_removed"] is True
        assert stored["4-1-1"]["fetched"]["material_cost"] == 50.0

        restored = PricingResultCache(memory_store)
        assert restored.fetched("4-1-1").material_cost == 50.0
        assert restored.effective("4-1-1").material_cost == 0.0

        restored.restore_finishing_materials("4-1-1")
        assert restored.effective("4-1-1").material_lines[0].external_id == "T-100"

    def test_pending_request_is_not_persisted(self, memory_store):
        cache = PricingResultCache(memory_store)
        cache.begin_request("4-1-1")
        cache.forget("4-1-1")
        assert memory_store.get(SessionKeys.CALCULATION_RESULTS) == {}
