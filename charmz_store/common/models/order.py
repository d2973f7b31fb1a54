from dataclasses import asdict, dataclass
from typing import Dict, Optional

from ..errors import ValidationError


PAYMENT_METHODS = ("cod", "jazzcash", "card", "bank")
PAYMENT_STATUSES = ("pending", "processing", "completed", "failed")
ORDER_STATUSES = ("pending", "confirmed", "shipped", "delivered", "cancelled")

# cod/bank settle manually or on delivery; jazzcash/card await gateway confirmation
INITIAL_PAYMENT_STATUS = {
    "cod": "pending",
    "bank": "pending",
    "jazzcash": "processing",
    "card": "processing",
}


@dataclass(frozen=True)
class Order:
    id: str
    order_number: str
    customer_name: str
    customer_email: str
    customer_address: str
    customer_city: str
    customer_state: str
    customer_zip: str
    items: str
    subtotal: str
    tax: str
    shipping: str
    total: str
    customer_phone: Optional[str] = None
    payment_method: str = "cod"
    payment_status: str = "pending"
    status: str = "pending"
    created_at: str = ""

    def to_dict(self) -> Dict:
        return asdict(self)

    def __post_init__(self) -> None:
        if self.payment_status not in PAYMENT_STATUSES:
            raise ValidationError(f"unsupported payment status: {self.payment_status}")
        if self.status not in ORDER_STATUSES:
            raise ValidationError(f"unsupported order status: {self.status}")
