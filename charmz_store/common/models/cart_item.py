from dataclasses import asdict, dataclass
from typing import Dict, Optional, Tuple


@dataclass
class CartItem:
    id: str
    session_id: str
    product_id: str
    quantity: int = 1
    selected_size: Optional[str] = None
    selected_color: Optional[str] = None
    created_at: str = ""

    @property
    def merge_key(self) -> Tuple[str, str, Optional[str], Optional[str]]:
        return (self.session_id, self.product_id, self.selected_size, self.selected_color)

    def to_dict(self) -> Dict:
        return asdict(self)
