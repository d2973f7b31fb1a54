from typing import Dict


DEFAULT_SHIPPING_SETTINGS: Dict = {
    "free_shipping_threshold": 2000,
    "standard_shipping": 200,
    "express_shipping": 500,
    "city_wise_shipping": {
        "karachi": 150,
        "lahore": 180,
        "islamabad": 200,
        "other": 250,
    },
}
