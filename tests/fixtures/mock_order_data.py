"""Canned composite order payloads for testing.

TILE_ORDER has two works in the same category (4-1 Tile Flooring) and a date
coefficient of 1, so the stored subtotal equals the sum of the work totals
plus both service fees:

    works: 500.00 (materials 200.00) + 150.00 (no materials) = 650.00
    fee on labor: (300 + 150) x 0.15 = 67.50
    fee on materials: 200 x 0.05 = 10.00
    subtotal: 727.50, tax 8.875% -> 64.57
"""

from typing import Any, Dict


TILE_ORDER: Dict[str, Any] = {
    "id": 501,
    "code": "ORD-1001",
    "user_id": 7,
    "zipcode": "10006",
    "subtotal": "727.50",
    "tax_rate": "8.875",
    "tax_amount": "64.57",
    "service_fee_on_labor": "67.50",
    "service_fee_on_materials": "10.00",
    "common": {
        "id": 90,
        "address": "1 Liberty Plaza, New York, NY 10006",
        "description": "Kitchen floor redo",
        "selected_date": "Tue, 8 Jul 2025",
        "date_coefficient": "1.00",
        "photos": ["https://cdn.example.com/p1.jpg"],
    },
    "works": [
        {
            "id": 1,
            "code": "4.1.1",
            "name": "Ceramic Tile Installation",
            "type": "services",
            "unit_of_measurement": "sq ft",
            "work_count": "40",
            "total": "500.00",
            "materials": [
                {
                    "id": 31,
                    "external_id": "T-100",
                    "name": "Ceramic Tile 12x12",
                    "quantity": 40,
                    "cost_per_unit": "5.00",
                    "cost": "200.00",
                }
            ],
        },
        {
            "id": 2,
            "code": "4.1.3",
            "name": "Tile Removal",
            "type": "services",
            "unit_of_measurement": "sq ft",
            "work_count": "40",
            "total": "150.00",
            "materials": [],
        },
    ],
}


MIXED_ORDER: Dict[str, Any] = {
    "id": 502,
    "code": "ORD-1002",
    "zipcode": "90001",
    "subtotal": "314.10",
    "tax_rate": "8.85",
    "tax_amount": "27.80",
    "service_fee_on_labor": "39.60",
    "service_fee_on_materials": "0.50",
    "common": {
        "address": "100 Main St, Los Angeles, CA 90001",
        "description": None,
        "selected_date": "Sat, 12 Jul 2025",
        "date_coefficient": "1.10",
        "photos": None,
    },
    "works": [
        {
            "code": "9.9.9",
            "name": "Legacy Service",
            "unit_of_measurement": "each",
            "work_count": 1,
            "total": "100.00",
            "materials": None,
        },
        {
            "code": "1.1.1",
            "name": "1-Gang Switch Installation",
            "unit_of_measurement": "each",
            "work_count": 2,
            "total": "150.00",
            "materials": [
                {
                    "external_id": "SW-1",
                    "name": "Decora Switch",
                    "quantity": 2,
                    "cost_per_unit": "5.00",
                    "cost": "10.00",
                }
            ],
        },
    ],
}
