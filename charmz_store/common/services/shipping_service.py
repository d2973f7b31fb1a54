import copy
import threading
from decimal import Decimal, InvalidOperation
from typing import Any, Dict

from ..errors import ValidationError
from ..models.shipping_settings import DEFAULT_SHIPPING_SETTINGS


class ShippingService:
    """Process-wide shipping configuration, reset to defaults on restart."""

    def __init__(self, defaults: Dict = None):
        self._settings = copy.deepcopy(defaults or DEFAULT_SHIPPING_SETTINGS)
        self._lock = threading.Lock()

    def get_settings(self) -> Dict:
        with self._lock:
            return copy.deepcopy(self._settings)

    def update_settings(self, patch: Dict) -> Dict:
        # values are stored as given; no rate validation
        if not isinstance(patch, dict):
            raise ValidationError("shipping settings update must be an object")
        with self._lock:
            self._settings = {**self._settings, **patch}
            return copy.deepcopy(self._settings)

    def quote(self, city: str, subtotal: Any, express: bool = False) -> Decimal:
        """Shipping cost for an order of ``subtotal`` delivered to ``city``."""
        settings = self.get_settings()
        amount = _decimal(subtotal, "subtotal")
        threshold = settings.get("free_shipping_threshold")
        if threshold is not None and amount >= _decimal(threshold, "free_shipping_threshold"):
            return Decimal("0")
        if express:
            return _decimal(settings.get("express_shipping", 0), "express_shipping")
        rates = {str(k).lower(): v for k, v in (settings.get("city_wise_shipping") or {}).items()}
        rate = rates.get((city or "").strip().lower(), rates.get("other"))
        if rate is None:
            rate = settings.get("standard_shipping", 0)
        return _decimal(rate, "shipping rate")


def _decimal(value: Any, field: str) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"{field} must be numeric") from exc
