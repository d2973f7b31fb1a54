import threading
from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from ..errors import NotFoundError, ValidationError
from ..models.cart_item import CartItem
from ..utils.validators import ensure_min_int


class CartService:
    """Session carts held in process memory."""

    def __init__(self):
        self._items: List[CartItem] = []
        self._lock = threading.Lock()

    def get_cart_items(self, session_id: str) -> List[CartItem]:
        with self._lock:
            return [it for it in self._items if it.session_id == session_id]

    def add_to_cart(
        self,
        *,
        session_id: str,
        product_id: str,
        quantity: int = 1,
        selected_size: Optional[str] = None,
        selected_color: Optional[str] = None,
    ) -> CartItem:
        """Upsert by (session, product, size, color).

        A matching line has its quantity increased and is returned as-is;
        otherwise a new line is appended.
        """
        if not session_id or not product_id:
            raise ValidationError("Product ID and session ID are required")
        qnty = ensure_min_int(quantity, "quantity", minimum=1)
        candidate = CartItem(
            id=str(uuid4()),
            session_id=session_id,
            product_id=product_id,
            quantity=qnty,
            selected_size=selected_size or None,
            selected_color=selected_color or None,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            for existing in self._items:
                if existing.merge_key == candidate.merge_key:
                    existing.quantity += qnty
                    return existing
            self._items.append(candidate)
            return candidate

    def update_cart_item(self, item_id: str, *, quantity: int) -> CartItem:
        qnty = ensure_min_int(quantity, "quantity", minimum=1)
        with self._lock:
            for it in self._items:
                if it.id == item_id:
                    it.quantity = qnty
                    return it
        raise NotFoundError(f"Cart item {item_id} not found")

    def remove_from_cart(self, item_id: str) -> bool:
        with self._lock:
            remaining = [it for it in self._items if it.id != item_id]
            changed = len(remaining) != len(self._items)
            self._items = remaining
            return changed

    def clear_cart(self, session_id: str) -> None:
        with self._lock:
            self._items = [it for it in self._items if it.session_id != session_id]
