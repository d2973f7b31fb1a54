"""Little Charmz 商店後端 Flask 應用。"""

from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request

from .common.errors import NotFoundError, PersistenceError, ValidationError
from .common.services.cart_service import CartService
from .common.services.logging import configure_logging, log_event
from .common.services.order_service import OrderService
from .common.services.shipping_service import ShippingService
from .config import StoreConfig
from .routes import admin, api
from .services import CategoryRepository, PhotoService, ProductRepository


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def handle_validation(exc: ValidationError):
        body = {"error": str(exc)}
        if exc.errors:
            body["errors"] = exc.errors
        return jsonify(body), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(exc: NotFoundError):
        return jsonify({"error": str(exc)}), 404

    @app.errorhandler(PersistenceError)
    def handle_persistence(exc: PersistenceError):
        log_event("error", "request.failed", path=request.path, method=request.method, error=str(exc))
        return jsonify({"error": "Storage unavailable"}), 500


def create_app(config: Optional[StoreConfig] = None) -> Flask:
    config = config or StoreConfig.load()
    configure_logging(config.log_level)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.secret_key
    app.config["CHARMZ_CONFIG"] = config
    # 圖片上傳上限：每張約 10MB
    app.config["MAX_CONTENT_LENGTH"] = config.max_uploads * 10 * 1024 * 1024

    components = {
        "product_repo": ProductRepository(config.products_file),
        "category_repo": CategoryRepository(config.categories_file),
        "cart_service": CartService(),
        "order_service": OrderService(),
        "shipping_service": ShippingService(),
        "photo_service": PhotoService(config.upload_dir),
    }
    app.extensions["charmz_components"] = components

    app.register_blueprint(api.api_bp)
    app.register_blueprint(admin.admin_bp)
    _register_error_handlers(app)

    return app


def main() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=False)


if __name__ == "__main__":
    main()
