"""商品、分類、購物車、訂單與運費的 API 路由。"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from flask import Blueprint, current_app, jsonify, request

from ..common.errors import StoreError, ValidationError
from ..common.models.order import ORDER_STATUSES, PAYMENT_METHODS
from ..common.services.logging import log_event
from ..common.services.order_service import REQUIRED_ORDER_FIELDS
from ..common.utils.pagination import normalize_paging, paginate
from ..common.utils.validators import (
    ensure_min_int,
    is_email,
    parse_bool,
    parse_json_list,
    require_choice,
    require_fields,
)
from ..services.product_repository import parse_color_variants
from .auth import is_admin_request


api_bp = Blueprint("charmz_api", __name__, url_prefix="/api")

UNAUTHORIZED = {"error": "Unauthorized"}


def _components() -> Dict[str, Any]:
    return current_app.extensions["charmz_components"]


def _config():
    return current_app.config["CHARMZ_CONFIG"]


def _ensure_admin() -> bool:
    return is_admin_request()


def _payload() -> Dict[str, Any]:
    """JSON 請求直接使用內容，multipart 表單轉為一般 dict。"""

    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def _uploaded_images() -> List:
    files = [f for f in request.files.getlist("images") if f and f.filename]
    if len(files) > _config().max_uploads:
        raise ValidationError(f"At most {_config().max_uploads} images can be uploaded")
    return files


def _product_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    """解析商品欄位，只保留請求中有提供的欄位。"""

    data: Dict[str, Any] = {}
    for key in ("name", "description", "category", "color", "image"):
        if payload.get(key) is not None:
            data[key] = payload[key]
    for key in ("price", "original_price"):
        if payload.get(key) not in (None, ""):
            data[key] = str(payload[key])
    if payload.get("discount") not in (None, ""):
        data["discount"] = ensure_min_int(payload["discount"], "discount")
    if payload.get("stock") not in (None, ""):
        data["stock"] = ensure_min_int(payload["stock"], "stock")
    for key in ("featured", "is_new"):
        flag = parse_bool(payload.get(key))
        if flag is not None:
            data[key] = flag
    for key in ("colors", "sizes", "images"):
        values = parse_json_list(payload.get(key), key)
        if values is not None:
            data[key] = values
    return data


def _requested_variants(raw: Any) -> Optional[List[Dict[str, Any]]]:
    if raw in (None, ""):
        return None
    return parse_color_variants(raw)


def _attach_uploads(variants: Optional[List[Dict[str, Any]]], saved: Dict[str, str]) -> None:
    photo_service = _components()["photo_service"]
    for variant in variants or []:
        variant["images"] = photo_service.resolve_variant_images(variant["images"], saved)


# --- Products ---

@api_bp.get("/products")
def list_products():
    repo = _components()["product_repo"]
    category = (request.args.get("category") or "").strip()
    page, limit = normalize_paging(request.args.get("page"), request.args.get("limit"))

    if category in ("", "all"):
        products = repo.list_products()
    elif category == "new-arrivals":
        products = repo.get_new_arrivals()
    elif category == "sale":
        products = repo.get_sale_products()
    elif "," in category:
        wanted = {c.strip().lower() for c in category.split(",") if c.strip()}
        products = [p for p in repo.list_products() if p.category.lower() in wanted]
    else:
        products = repo.get_products_by_category(category)

    if parse_bool(request.args.get("featured")):
        products = [p for p in products if p.featured]

    page_items, pagination = paginate(products, page, limit)
    return jsonify({"products": [p.to_dict() for p in page_items], "pagination": pagination})


@api_bp.get("/products/featured")
def featured_products():
    return jsonify([p.to_dict() for p in _components()["product_repo"].get_featured_products()])


@api_bp.get("/products/new-arrivals")
def new_arrivals():
    return jsonify([p.to_dict() for p in _components()["product_repo"].get_new_arrivals()])


@api_bp.get("/products/sale")
def sale_products():
    return jsonify([p.to_dict() for p in _components()["product_repo"].get_sale_products()])


@api_bp.get("/products/<product_id>")
def get_product(product_id: str):
    product = _components()["product_repo"].get_product(product_id)
    if product is None:
        return jsonify({"error": "Product not found"}), 404
    return jsonify(product.to_dict())


@api_bp.post("/products")
def create_product():
    if not _ensure_admin():
        return jsonify(UNAUTHORIZED), 401

    payload = _payload()
    missing = require_fields(payload, ("name", "category", "price"))
    if missing:
        raise ValidationError("Invalid product data", errors=missing)

    data = _product_fields(payload)
    variants = _requested_variants(payload.get("color_variants"))
    uploads = _uploaded_images()
    saved = _components()["photo_service"].save_product_images(uploads) if uploads else {}
    if saved:
        data["images"] = list(saved.values())
        data.pop("image", None)
    if variants is not None:
        _attach_uploads(variants, saved)
        data["color_variants"] = variants

    # 寫入失敗時移除本次上傳的圖片
    try:
        product = _components()["product_repo"].create_product(data)
    except StoreError:
        _components()["photo_service"].discard(saved.values())
        raise
    log_event("info", "product.created", product_id=product.id, images=len(product.images))
    return jsonify(product.to_dict()), 201


@api_bp.put("/products/<product_id>")
def update_product(product_id: str):
    if not _ensure_admin():
        return jsonify(UNAUTHORIZED), 401

    payload = _payload()
    patch = _product_fields(payload)

    images = parse_json_list(payload.get("existing_images"), "existing_images") or patch.pop("images", None) or []
    variants = _requested_variants(payload.get("color_variants"))
    uploads = _uploaded_images()
    saved = _components()["photo_service"].save_product_images(uploads) if uploads else {}
    images = [*images, *saved.values()]
    if images:
        patch["images"] = images
    else:
        patch.pop("images", None)
    if variants is not None:
        _attach_uploads(variants, saved)
        patch["color_variants"] = variants

    try:
        product = _components()["product_repo"].update_product(product_id, patch)
    except StoreError:
        _components()["photo_service"].discard(saved.values())
        raise
    log_event("info", "product.updated", product_id=product_id, fields=sorted(patch))
    return jsonify(product.to_dict())


@api_bp.delete("/products/<product_id>")
def delete_product(product_id: str):
    if not _ensure_admin():
        return jsonify(UNAUTHORIZED), 401

    if not _components()["product_repo"].delete_product(product_id):
        return jsonify({"error": "Product not found"}), 404
    log_event("info", "product.deleted", product_id=product_id)
    return jsonify({"message": "Product deleted successfully"})


# --- Categories ---

def _category_image(payload: Dict[str, Any]) -> Tuple[str, List[str]]:
    """回傳 (圖片參照, 本次請求新寫入的檔案參照)。"""

    uploaded = request.files.get("image")
    if uploaded and uploaded.filename:
        reference = _components()["photo_service"].save_category_image(uploaded)
        return reference, [reference]
    return str(payload.get("image") or "").strip(), []


@api_bp.get("/categories")
def list_categories():
    return jsonify([c.to_dict() for c in _components()["category_repo"].list_categories()])


@api_bp.get("/categories/<category_id>")
def get_category(category_id: str):
    category = _components()["category_repo"].get_category(category_id)
    if category is None:
        return jsonify({"error": "Category not found"}), 404
    return jsonify(category.to_dict())


@api_bp.post("/categories")
def create_category():
    if not _ensure_admin():
        return jsonify(UNAUTHORIZED), 401

    payload = _payload()
    name = str(payload.get("name") or "").strip()
    if not name:
        raise ValidationError("Category name is required")
    image, saved = _category_image(payload)
    try:
        category = _components()["category_repo"].create_category(
            name=name,
            description=payload.get("description") or "",
            image=image,
        )
    except StoreError:
        _components()["photo_service"].discard(saved)
        raise
    log_event("info", "category.created", category_id=category.id)
    return jsonify(category.to_dict()), 201


@api_bp.put("/categories/<category_id>")
def update_category(category_id: str):
    if not _ensure_admin():
        return jsonify(UNAUTHORIZED), 401

    payload = _payload()
    image, saved = _category_image(payload)
    try:
        category = _components()["category_repo"].update_category(
            category_id,
            name=payload.get("name") or None,
            description=payload.get("description"),
            image=image or None,
        )
    except StoreError:
        _components()["photo_service"].discard(saved)
        raise
    return jsonify(category.to_dict())


@api_bp.delete("/categories/<category_id>")
def delete_category(category_id: str):
    if not _ensure_admin():
        return jsonify(UNAUTHORIZED), 401

    if not _components()["category_repo"].delete_category(category_id):
        return jsonify({"error": "Category not found"}), 404
    return jsonify({"message": "Category deleted successfully"})


# --- Cart ---

@api_bp.get("/cart/<session_id>")
def get_cart(session_id: str):
    items = _components()["cart_service"].get_cart_items(session_id)
    return jsonify([it.to_dict() for it in items])


@api_bp.post("/cart")
def add_to_cart():
    payload = request.get_json(silent=True) or {}
    item = _components()["cart_service"].add_to_cart(
        session_id=str(payload.get("session_id") or ""),
        product_id=str(payload.get("product_id") or ""),
        quantity=payload.get("quantity", 1),
        selected_size=payload.get("selected_size"),
        selected_color=payload.get("selected_color"),
    )
    log_event("info", "cart.added", session_id=item.session_id, item_id=item.id, quantity=item.quantity)
    return jsonify(item.to_dict()), 201


@api_bp.patch("/cart/<item_id>")
def update_cart_item(item_id: str):
    payload = request.get_json(silent=True) or {}
    item = _components()["cart_service"].update_cart_item(item_id, quantity=payload.get("quantity"))
    return jsonify(item.to_dict())


@api_bp.delete("/cart/<item_id>")
def remove_cart_item(item_id: str):
    if not _components()["cart_service"].remove_from_cart(item_id):
        return jsonify({"error": "Cart item not found"}), 404
    return jsonify({"message": "Item removed from cart"})


@api_bp.delete("/cart/clear/<session_id>")
def clear_cart(session_id: str):
    _components()["cart_service"].clear_cart(session_id)
    return jsonify({"message": "Cart cleared"})


# --- Orders ---

@api_bp.post("/orders")
def create_order():
    payload = dict(request.get_json(silent=True) or {})
    payload.pop("payment_status", None)

    errors = require_fields(payload, (*REQUIRED_ORDER_FIELDS, "items"))
    if payload.get("customer_email") and not is_email(payload["customer_email"]):
        errors.append("customer_email must be a valid email")
    errors += require_choice(payload, "payment_method", PAYMENT_METHODS, default="cod")
    errors += require_choice(payload, "status", ORDER_STATUSES, default="pending")
    if errors:
        raise ValidationError("Invalid order data", errors=errors)

    order = _components()["order_service"].create_order(payload)
    log_event(
        "info",
        "order.created",
        order_id=order.id,
        order_number=order.order_number,
        payment_method=order.payment_method,
        total=order.total,
    )
    return jsonify(order.to_dict()), 201


@api_bp.get("/orders")
def list_orders():
    if not _ensure_admin():
        return jsonify(UNAUTHORIZED), 401
    return jsonify([o.to_dict() for o in _components()["order_service"].get_orders()])


@api_bp.get("/orders/<order_id>")
def get_order(order_id: str):
    order = _components()["order_service"].get_order(order_id)
    if order is None:
        return jsonify({"error": "Order not found"}), 404
    return jsonify(order.to_dict())


# --- Shipping ---

@api_bp.get("/shipping")
def shipping_settings():
    return jsonify(_components()["shipping_service"].get_settings())


@api_bp.get("/shipping/quote")
def shipping_quote():
    city = request.args.get("city", "")
    cost = _components()["shipping_service"].quote(
        city,
        request.args.get("subtotal", "0"),
        express=bool(parse_bool(request.args.get("express"))),
    )
    return jsonify({"city": city, "shipping": str(cost), "currency": _config().currency})
