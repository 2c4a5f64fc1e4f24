"""JAMB Estimate Engine.

This package contains the estimate aggregation and composite order engine
behind the JAMB home-services calculator.

Architecture:
- Catalog Index: static section -> category -> service lookup
- Selection State: sparse service -> quantity map, partitioned by group
- Finishing Material Resolver + Pricing Gateway Client: two-phase remote pricing
- Cost Aggregator: subtotals, time coefficient, fees, tax, final total
- Order View Composer: one view model for live estimates and persisted orders
"""

__version__ = "1.0.0"
