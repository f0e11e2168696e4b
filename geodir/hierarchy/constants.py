"""
Static reference data for the seeded countries.

Province codes in the Nepal feed are the numeric strings "1".."7"; rows with
any other code are skipped by the builder.
"""

NEPAL: dict = {
    "name": "nepal",
    "name_local": "नेपाल",
    "iso_code": "NP",
    "icon": "🇳🇵",
    "structure": "province>district>city>ward",
    "continent": "asia",
    "timezone": "Asia/Kathmandu",
}

NEPAL_PROVINCES: dict[str, dict[str, str]] = {
    "1": {"name": "koshi", "code": "NP-P1"},
    "2": {"name": "madhesh", "code": "NP-P2"},
    "3": {"name": "bagmati", "code": "NP-P3"},
    "4": {"name": "gandaki", "code": "NP-P4"},
    "5": {"name": "lumbini", "code": "NP-P5"},
    "6": {"name": "karnali", "code": "NP-P6"},
    "7": {"name": "sudurpashchim", "code": "NP-P7"},
}

# type token → level, used by the ranked search endpoints
LEVEL_BY_TYPE: dict[str, int] = {
    "province": 1,
    "district": 2,
    "city": 3,
}
