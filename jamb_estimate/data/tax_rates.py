"""Sales tax rate tables for JAMB Estimate.

Combined state + average local sales tax (percent) per US state, and
GST + PST per Canadian province/territory. Keyed by postal code.
"""

from typing import Dict

# code -> (name, state rate, average local rate, combined rate)
US_SALES_TAX_RATES: Dict[str, tuple] = {
    "AL": ("Alabama", 4.00, 5.24, 9.24),
    "AK": ("Alaska", 0.00, 1.81, 1.81),
    "AZ": ("Arizona", 5.60, 2.77, 8.37),
    "AR": ("Arkansas", 6.50, 2.94, 9.44),
    "CA": ("California", 7.25, 1.60, 8.85),
    "CO": ("Colorado", 2.90, 4.89, 7.79),
    "CT": ("Connecticut", 6.35, 0.00, 6.35),
    "DE": ("Delaware", 0.00, 0.00, 0.00),
    "FL": ("Florida", 6.00, 1.02, 7.02),
    "GA": ("Georgia", 4.00, 3.39, 7.39),
    "HI": ("Hawaii", 4.00, 0.44, 4.44),
    "ID": ("Idaho", 6.00, 0.03, 6.03),
    "IL": ("Illinois", 6.25, 2.59, 8.84),
    "IN": ("Indiana", 7.00, 0.00, 7.00),
    "IA": ("Iowa", 6.00, 0.93, 6.93),
    "KS": ("Kansas", 6.50, 2.25, 8.75),
    "KY": ("Kentucky", 6.00, 0.00, 6.00),
    "LA": ("Louisiana", 4.45, 5.10, 9.55),
    "ME": ("Maine", 5.50, 0.00, 5.50),
    "MD": ("Maryland", 6.00, 0.00, 6.00),
    "MA": ("Massachusetts", 6.25, 0.00, 6.25),
    "MI": ("Michigan", 6.00, 0.00, 6.00),
    "MN": ("Minnesota", 6.88, 0.65, 7.53),
    "MS": ("Mississippi", 7.00, 0.07, 7.07),
    "MO": ("Missouri", 4.23, 4.14, 8.37),
    "MT": ("Montana", 0.00, 0.00, 0.00),
    "NE": ("Nebraska", 5.50, 1.47, 6.97),
    "NV": ("Nevada", 6.85, 1.39, 8.24),
    "NH": ("New Hampshire", 0.00, 0.00, 0.00),
    "NJ": ("New Jersey", 6.63, -0.02, 6.61),
    "NM": ("New Mexico", 5.13, 2.69, 7.82),
    "NY": ("New York", 4.00, 4.53, 8.53),
    "NC": ("North Carolina", 4.75, 2.20, 6.95),
    "ND": ("North Dakota", 5.00, 2.04, 7.04),
    "OH": ("Ohio", 5.75, 1.49, 7.24),
    "OK": ("Oklahoma", 4.50, 4.47, 8.97),
    "OR": ("Oregon", 0.00, 0.00, 0.00),
    "PA": ("Pennsylvania", 6.00, 0.34, 6.34),
    "RI": ("Rhode Island", 7.00, 0.00, 7.00),
    "SC": ("South Carolina", 6.00, 1.50, 7.50),
    "SD": ("South Dakota", 4.50, 1.90, 6.40),
    "TN": ("Tennessee", 7.00, 2.55, 9.55),
    "TX": ("Texas", 6.25, 1.94, 8.19),
    "UT": ("Utah", 6.10, 1.10, 7.20),
    "VT": ("Vermont", 6.00, 0.36, 6.36),
    "VA": ("Virginia", 5.30, 0.43, 5.73),
    "WA": ("Washington", 6.50, 2.90, 9.40),
    "WV": ("West Virginia", 6.00, 0.43, 6.43),
    "WI": ("Wisconsin", 5.00, 0.43, 5.43),
    "WY": ("Wyoming", 4.00, 1.44, 5.44),
    "DC": ("District of Columbia", 6.00, 0.00, 6.00),
}

# code -> (name, GST, PST, combined rate)
CANADA_SALES_TAX_RATES: Dict[str, tuple] = {
    "AB": ("Alberta", 5.0, 0.0, 5.0),
    "BC": ("British Columbia", 5.0, 7.0, 12.0),
    "MB": ("Manitoba", 5.0, 7.0, 12.0),
    "NB": ("New Brunswick", 5.0, 10.0, 15.0),
    "NL": ("Newfoundland and Labrador", 5.0, 10.0, 15.0),
    "NS": ("Nova Scotia", 5.0, 10.0, 15.0),
    "ON": ("Ontario", 5.0, 8.0, 13.0),
    "PE": ("Prince Edward Island", 5.0, 10.0, 15.0),
    "QC": ("Quebec", 5.0, 9.975, 14.975),
    "SK": ("Saskatchewan", 5.0, 6.0, 11.0),
    "NT": ("Northwest Territories", 5.0, 0.0, 5.0),
    "NU": ("Nunavut", 5.0, 0.0, 5.0),
    "YT": ("Yukon", 5.0, 0.0, 5.0),
}
