from typing import Any, Dict, List, Sequence, Tuple


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def normalize_paging(page: Any, page_size: Any, default_page_size: int = 12, max_page_size: int = 100) -> Tuple[int, int]:
    p = _as_int(page)
    ps = _as_int(page_size)
    p = p if p > 0 else 1
    ps = ps if ps > 0 else default_page_size
    ps = min(ps, max_page_size)
    return p, ps


def paginate(items: Sequence, page: int, page_size: int) -> Tuple[List, Dict]:
    total = len(items)
    offset = (page - 1) * page_size
    return list(items[offset:offset + page_size]), {
        "current_page": page,
        "total_pages": (total + page_size - 1) // page_size if total > 0 else 0,
        "total_products": total,
        "has_more": offset + page_size < total,
    }
