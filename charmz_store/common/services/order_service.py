import itertools
import json
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4

from ..errors import ValidationError
from ..models.order import INITIAL_PAYMENT_STATUS, ORDER_STATUSES, Order
from ..utils.validators import require_fields


REQUIRED_ORDER_FIELDS = (
    "customer_name",
    "customer_email",
    "customer_address",
    "customer_city",
    "customer_state",
    "customer_zip",
    "subtotal",
    "tax",
    "shipping",
    "total",
)


class OrderService:
    """Orders held in process memory; immutable once created."""

    ORDER_PREFIX = "ORD"

    def __init__(self, first_number: int = 10001):
        self._orders: List[Order] = []
        self._lock = threading.Lock()
        self._sequence = itertools.count(first_number)

    def _next_order_number(self) -> str:
        return f"{self.ORDER_PREFIX}{next(self._sequence):05d}"

    def create_order(self, data: Dict) -> Order:
        """Record an order snapshot.

        payment_status comes from the payment method, never from the caller.
        """
        missing = require_fields(data, REQUIRED_ORDER_FIELDS)
        if missing:
            raise ValidationError("Invalid order data", errors=missing)
        method = data.get("payment_method") or "cod"
        if method not in INITIAL_PAYMENT_STATUS:
            raise ValidationError(f"unsupported payment method: {method}")
        status = data.get("status") or "pending"
        if status not in ORDER_STATUSES:
            raise ValidationError(f"unsupported order status: {status}")

        items = data.get("items")
        if not isinstance(items, str):
            items = json.dumps(items if items is not None else [], ensure_ascii=False)

        with self._lock:
            order = Order(
                id=str(uuid4()),
                order_number=self._next_order_number(),
                customer_name=data["customer_name"],
                customer_email=data["customer_email"],
                customer_phone=data.get("customer_phone") or None,
                customer_address=data["customer_address"],
                customer_city=data["customer_city"],
                customer_state=data["customer_state"],
                customer_zip=data["customer_zip"],
                payment_method=method,
                payment_status=INITIAL_PAYMENT_STATUS[method],
                items=items,
                subtotal=str(data["subtotal"]),
                tax=str(data["tax"]),
                shipping=str(data["shipping"]),
                total=str(data["total"]),
                status=status,
                created_at=datetime.now(timezone.utc).isoformat(),
            )
            self._orders.append(order)
        return order

    def get_orders(self) -> List[Order]:
        with self._lock:
            return list(self._orders)

    def get_order(self, order_id: str) -> Optional[Order]:
        with self._lock:
            for o in self._orders:
                if o.id == order_id:
                    return o
        return None
