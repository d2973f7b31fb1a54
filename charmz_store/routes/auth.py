"""管理者權杖驗證。"""

from __future__ import annotations

import hmac

from flask import current_app, request


def _config():
    return current_app.config["CHARMZ_CONFIG"]


def request_token() -> str:
    header = request.headers.get("Authorization", "").strip()
    if header.lower().startswith("bearer "):
        header = header[7:].strip()
    return header


def is_admin_request() -> bool:
    token = request_token()
    if not token:
        return False
    return hmac.compare_digest(token, _config().admin_token)
