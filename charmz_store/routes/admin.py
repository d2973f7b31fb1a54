"""管理後台 API 路由。"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from flask import Blueprint, current_app, jsonify, request

from ..common.services.logging import log_event
from ..services.catalog_seed import seed_catalog
from .auth import is_admin_request


admin_bp = Blueprint("charmz_admin", __name__, url_prefix="/api/admin")


def _components() -> dict:
    return current_app.extensions["charmz_components"]


def _config():
    return current_app.config["CHARMZ_CONFIG"]


@admin_bp.before_request
def guard_private_routes():
    if request.endpoint and request.endpoint.startswith("charmz_admin."):
        public = {
            "charmz_admin.login",
            "charmz_admin.update_credentials",
        }
        if request.endpoint not in public and not is_admin_request():
            return jsonify({"error": "Unauthorized"}), 401
    return None


@admin_bp.post("/login")
def login():
    payload = request.get_json(silent=True) or {}
    email = str(payload.get("email", "")).strip()
    password = str(payload.get("password", "")).strip()
    cfg = _config()
    if email == cfg.admin_email and password == cfg.admin_password:
        log_event("info", "admin.login", email=email)
        return jsonify({"success": True, "token": cfg.admin_token})
    log_event("warning", "admin.login_failed", email=email)
    return jsonify({"error": "Invalid credentials"}), 401


@admin_bp.post("/update-credentials")
def update_credentials():
    """修改管理員帳密（需提供目前帳密）。"""

    payload = request.get_json(silent=True) or {}
    current_email = str(payload.get("current_email", "")).strip()
    current_password = str(payload.get("current_password", "")).strip()
    new_email = str(payload.get("new_email", "")).strip()
    new_password = str(payload.get("new_password", "")).strip()

    cfg = _config()
    if current_email != cfg.admin_email or current_password != cfg.admin_password:
        return jsonify({"error": "Current credentials are incorrect"}), 401
    if not new_email or not new_password:
        return jsonify({"error": "New email and password are required"}), 400
    if len(new_password) < 6:
        return jsonify({"error": "New password must be at least 6 characters"}), 400

    cfg.save_admin_credentials(new_email, new_password)
    log_event("info", "admin.credentials_updated", email=new_email)
    return jsonify({"success": True, "message": "Credentials updated successfully"})


@admin_bp.get("/stats")
def stats():
    components = _components()
    orders = components["order_service"].get_orders()
    revenue = Decimal("0")
    for order in orders:
        try:
            revenue += Decimal(order.total)
        except InvalidOperation:
            log_event("warning", "stats.bad_total", order_id=order.id, total=order.total)
    return jsonify(
        {
            "total_products": len(components["product_repo"].list_products()),
            "total_orders": len(orders),
            "total_categories": len(components["category_repo"].list_categories()),
            "total_revenue": f"{revenue:.2f}",
            "currency": _config().currency,
        }
    )


@admin_bp.post("/seed")
def seed():
    payload = request.get_json(silent=True) or {}
    components = _components()
    seeded = seed_catalog(
        components["product_repo"],
        components["category_repo"],
        force=bool(payload.get("force", False)),
    )
    log_event("info", "catalog.seeded", **seeded)
    return jsonify({"status": "ok", "seeded": seeded})


@admin_bp.get("/shipping")
def get_shipping():
    return jsonify(_components()["shipping_service"].get_settings())


@admin_bp.put("/shipping")
def update_shipping():
    payload = request.get_json(silent=True)
    settings = _components()["shipping_service"].update_settings(payload)
    log_event("info", "shipping.updated", keys=sorted(payload))
    return jsonify(settings)
