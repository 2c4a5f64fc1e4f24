"""JAMB Estimate services.

This package contains the engine components:
- catalog_index: section / category / service lookup
- selection_state, finishing_materials, pricing_gateway, pricing_results
- estimate_pipeline: resolve-then-price coordination for one session
- cost_aggregator, order_view: totals and the shared view model
- session_store: per-session key-value bus and estimate snapshot
"""

from jamb_estimate.services.catalog_index import CatalogIndex, get_catalog_index
from jamb_estimate.services.cost_aggregator import aggregate_costs, build_breakdown
from jamb_estimate.services.estimate_pipeline import EstimatePipeline, WarningBoard
from jamb_estimate.services.order_view import OrderViewComposer

__all__ = [
    "CatalogIndex",
    "get_catalog_index",
    "aggregate_costs",
    "build_breakdown",
    "EstimatePipeline",
    "WarningBoard",
    "OrderViewComposer",
]
