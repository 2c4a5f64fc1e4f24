"""Static service catalog for JAMB Estimate.

Service ids follow "<section>-<category>-<index>"; category ids are the first
two tokens. Order in these tables is the display order.
"""

from typing import Dict, List

# =============================================================================
# Sections
# =============================================================================

SECTIONS: List[str] = [
    "Electrical",
    "Plumbing",
    "Painting",
    "Flooring",
    "Kitchen",
    "Bathroom",
    "Outdoor",
]

# =============================================================================
# Categories
# =============================================================================

CATEGORIES: List[Dict] = [
    # Electrical
    {"id": "1-1", "title": "Switches and Outlets", "section": "Electrical"},
    {"id": "1-2", "title": "Lighting", "section": "Electrical"},
    {"id": "1-3", "title": "Panels and Wiring", "section": "Electrical"},
    # Plumbing
    {"id": "2-1", "title": "Faucets and Fixtures", "section": "Plumbing"},
    {"id": "2-2", "title": "Pipes and Drains", "section": "Plumbing"},
    {"id": "2-3", "title": "Water Heaters", "section": "Plumbing"},
    # Painting
    {"id": "3-1", "title": "Interior Painting", "section": "Painting"},
    {"id": "3-2", "title": "Exterior Painting", "section": "Painting"},
    # Flooring
    {"id": "4-1", "title": "Tile Flooring", "section": "Flooring"},
    {"id": "4-2", "title": "Hardwood and Laminate", "section": "Flooring"},
    # Kitchen
    {"id": "5-1", "title": "Cabinets and Countertops", "section": "Kitchen"},
    {"id": "5-2", "title": "Kitchen Appliances", "section": "Kitchen"},
    # Bathroom
    {"id": "6-1", "title": "Showers and Tubs", "section": "Bathroom"},
    {"id": "6-2", "title": "Toilets and Vanities", "section": "Bathroom"},
    # Outdoor
    {"id": "7-1", "title": "Decks and Fences", "section": "Outdoor"},
    {"id": "7-2", "title": "Gutters and Roofing", "section": "Outdoor"},
]

# =============================================================================
# Services
# =============================================================================

SERVICES: List[Dict] = [
    # 1-1 Switches and Outlets
    {"id": "1-1-1", "title": "1-Gang Switch Installation", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 20, "base_price": 85,
     "description": "Install a single-gang switch for lights or appliances."},
    {"id": "1-1-2", "title": "2-Gang Switch Installation", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 20, "base_price": 150,
     "description": "Install a dual-gang switch to control multiple devices."},
    {"id": "1-1-3", "title": "15 Amp Outlet Installation", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 30, "base_price": 100,
     "description": "Add or upgrade 15-amp outlets for everyday devices."},
    {"id": "1-1-4", "title": "GFCI Outlet Installation", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 10, "base_price": 140,
     "description": "Install ground-fault protected outlets in wet areas."},
    # 1-2 Lighting
    {"id": "1-2-1", "title": "Recessed Light Installation", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 40, "base_price": 160,
     "description": "Install recessed can lights in finished ceilings."},
    {"id": "1-2-2", "title": "Ceiling Fan Installation", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 10, "base_price": 220,
     "description": "Mount and wire a ceiling fan on an existing box."},
    {"id": "1-2-3", "title": "Pendant Light Installation", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 15, "base_price": 130},
    # 1-3 Panels and Wiring
    {"id": "1-3-1", "title": "Electrical Panel Upgrade", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 2, "base_price": 2200,
     "description": "Replace the main panel with a higher-amperage unit."},
    {"id": "1-3-2", "title": "Circuit Rewiring", "unit_of_measurement": "linear ft",
     "min_quantity": 10, "max_quantity": 2000, "base_price": 9},
    # 2-1 Faucets and Fixtures
    {"id": "2-1-1", "title": "Kitchen Faucet Replacement", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 3, "base_price": 180},
    {"id": "2-1-2", "title": "Bathroom Faucet Replacement", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 6, "base_price": 150},
    {"id": "2-1-3", "title": "Garbage Disposal Installation", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 2, "base_price": 240},
    # 2-2 Pipes and Drains
    {"id": "2-2-1", "title": "1/2\" Pipe Repair", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 10, "base_price": 150,
     "description": "Repair leaking or burst 1/2-inch supply pipes."},
    {"id": "2-2-2", "title": "Drain Unclogging", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 10, "base_price": 120},
    {"id": "2-2-3", "title": "PEX Repiping", "unit_of_measurement": "linear ft",
     "min_quantity": 10, "max_quantity": 1500, "base_price": 12},
    # 2-3 Water Heaters
    {"id": "2-3-1", "title": "Tank Water Heater Replacement", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 2, "base_price": 1400},
    {"id": "2-3-2", "title": "Tankless Water Heater Installation", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 2, "base_price": 2600},
    # 3-1 Interior Painting
    {"id": "3-1-1", "title": "Wall Painting", "unit_of_measurement": "sq ft",
     "min_quantity": 50, "max_quantity": 10000, "base_price": 2.5,
     "description": "Two coats of paint on prepared interior walls."},
    {"id": "3-1-2", "title": "Ceiling Painting", "unit_of_measurement": "sq ft",
     "min_quantity": 50, "max_quantity": 5000, "base_price": 2.8},
    {"id": "3-1-3", "title": "Trim and Baseboard Painting", "unit_of_measurement": "linear ft",
     "min_quantity": 20, "max_quantity": 3000, "base_price": 1.6},
    # 3-2 Exterior Painting
    {"id": "3-2-1", "title": "Siding Painting", "unit_of_measurement": "sq ft",
     "min_quantity": 100, "max_quantity": 8000, "base_price": 3.2},
    {"id": "3-2-2", "title": "Fence Staining", "unit_of_measurement": "linear ft",
     "min_quantity": 20, "max_quantity": 2000, "base_price": 4.5},
    # 4-1 Tile Flooring
    {"id": "4-1-1", "title": "Ceramic Tile Installation", "unit_of_measurement": "sq ft",
     "min_quantity": 20, "max_quantity": 3000, "base_price": 11},
    {"id": "4-1-2", "title": "Porcelain Tile Installation", "unit_of_measurement": "sq ft",
     "min_quantity": 20, "max_quantity": 3000, "base_price": 13},
    {"id": "4-1-3", "title": "Tile Removal", "unit_of_measurement": "sq ft",
     "min_quantity": 20, "max_quantity": 3000, "base_price": 3},
    # 4-2 Hardwood and Laminate
    {"id": "4-2-1", "title": "Hardwood Floor Installation", "unit_of_measurement": "sq ft",
     "min_quantity": 50, "max_quantity": 5000, "base_price": 14},
    {"id": "4-2-2", "title": "Laminate Floor Installation", "unit_of_measurement": "sq ft",
     "min_quantity": 50, "max_quantity": 5000, "base_price": 7},
    {"id": "4-2-3", "title": "Hardwood Refinishing", "unit_of_measurement": "sq ft",
     "min_quantity": 50, "max_quantity": 5000, "base_price": 4.5},
    # 5-1 Cabinets and Countertops
    {"id": "5-1-1", "title": "Cabinet Installation", "unit_of_measurement": "linear ft",
     "min_quantity": 4, "max_quantity": 100, "base_price": 320},
    {"id": "5-1-2", "title": "Quartz Countertop Installation", "unit_of_measurement": "sq ft",
     "min_quantity": 10, "max_quantity": 300, "base_price": 85},
    {"id": "5-1-3", "title": "Backsplash Tiling", "unit_of_measurement": "sq ft",
     "min_quantity": 10, "max_quantity": 300, "base_price": 24},
    # 5-2 Kitchen Appliances
    {"id": "5-2-1", "title": "Dishwasher Installation", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 2, "base_price": 210},
    {"id": "5-2-2", "title": "Range Hood Installation", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 2, "base_price": 340},
    # 6-1 Showers and Tubs
    {"id": "6-1-1", "title": "Shower Valve Replacement", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 4, "base_price": 380},
    {"id": "6-1-2", "title": "Bathtub Installation", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 3, "base_price": 1200},
    {"id": "6-1-3", "title": "Shower Wall Tiling", "unit_of_measurement": "sq ft",
     "min_quantity": 20, "max_quantity": 600, "base_price": 26},
    # 6-2 Toilets and Vanities
    {"id": "6-2-1", "title": "Toilet Replacement", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 5, "base_price": 260},
    {"id": "6-2-2", "title": "Vanity Installation", "unit_of_measurement": "each",
     "min_quantity": 1, "max_quantity": 5, "base_price": 420},
    # 7-1 Decks and Fences
    {"id": "7-1-1", "title": "Deck Board Replacement", "unit_of_measurement": "sq ft",
     "min_quantity": 20, "max_quantity": 2000, "base_price": 18},
    {"id": "7-1-2", "title": "Wood Fence Installation", "unit_of_measurement": "linear ft",
     "min_quantity": 10, "max_quantity": 1000, "base_price": 32},
    # 7-2 Gutters and Roofing
    {"id": "7-2-1", "title": "Gutter Cleaning", "unit_of_measurement": "linear ft",
     "min_quantity": 20, "max_quantity": 600, "base_price": 1.2},
    {"id": "7-2-2", "title": "Gutter Installation", "unit_of_measurement": "linear ft",
     "min_quantity": 20, "max_quantity": 600, "base_price": 9.5},
    {"id": "7-2-3", "title": "Roof Shingle Repair", "unit_of_measurement": "sq ft",
     "min_quantity": 10, "max_quantity": 1000, "base_price": 7.5},
]

# =============================================================================
# Rooms (rooms flow)
# =============================================================================

ROOMS: List[Dict] = [
    {"id": "kitchen", "title": "Kitchen", "type": "indoor",
     "category_ids": ["5-1", "5-2", "2-1", "1-1", "1-2", "4-1", "3-1"]},
    {"id": "bathroom", "title": "Bathroom", "type": "indoor",
     "category_ids": ["6-1", "6-2", "2-1", "2-2", "1-1", "4-1", "3-1"]},
    {"id": "living-room", "title": "Living Room", "type": "indoor",
     "category_ids": ["1-1", "1-2", "3-1", "4-2"]},
    {"id": "bedroom", "title": "Bedroom", "type": "indoor",
     "category_ids": ["1-1", "1-2", "3-1", "4-2"]},
    {"id": "utility-room", "title": "Utility Room", "type": "indoor",
     "category_ids": ["1-3", "2-2", "2-3"]},
    {"id": "backyard", "title": "Backyard", "type": "outdoor",
     "category_ids": ["7-1", "3-2"]},
    {"id": "roof-and-facade", "title": "Roof and Facade", "type": "outdoor",
     "category_ids": ["7-2", "3-2"]},
]

# =============================================================================
# Packages (packages flow)
# =============================================================================

PACKAGES: List[Dict] = [
    {
        "id": "basic",
        "title": "Basic Package",
        "description": "Seasonal upkeep of the essentials.",
        "indoor_service_ids": ["2-2-2", "1-1-4", "6-2-1"],
        "outdoor_service_ids": ["7-2-1"],
    },
    {
        "id": "enhanced",
        "title": "Enhanced Package",
        "description": "Upkeep plus refresh of high-traffic rooms.",
        "indoor_service_ids": ["2-2-2", "1-1-4", "3-1-1", "4-2-3", "2-1-2"],
        "outdoor_service_ids": ["7-2-1", "3-2-2"],
    },
    {
        "id": "all-inclusive",
        "title": "All-Inclusive Package",
        "description": "Full-house care with priority scheduling.",
        "indoor_service_ids": ["2-2-2", "1-1-4", "3-1-1", "3-1-2", "4-2-3", "2-1-2", "2-3-1"],
        "outdoor_service_ids": ["7-2-1", "3-2-2", "7-1-1"],
    },
]
