import os
from itsdangerous import BadSignature, URLSafeTimedSerializer
from fastapi import Request

SESSION_COOKIE = "mo_session"
SESSION_MAX_AGE = 60 * 60 * 24 * 7  # 7 days


def _get_signer() -> URLSafeTimedSerializer:
    key = os.environ.get("SECRET_KEY", "dev-secret-change-in-production")
    return URLSafeTimedSerializer(key, salt="marmita-ops-admin")


def create_session_token() -> str:
    return _get_signer().dumps("admin")


def verify_session_token(token: str) -> bool:
    try:
        _get_signer().loads(token, max_age=SESSION_MAX_AGE)
        return True
    except BadSignature:
        return False


def get_gateway(request: Request):
    return request.app.state.gateway


def get_ledger(request: Request):
    return request.app.state.ledger


# Paths that don't require an admin session. The webhook is called by the
# WPPConnect server, which has no session cookie.
_PUBLIC_PREFIXES = ("/login", "/logout", "/webhook", "/health")


def is_public(path: str) -> bool:
    return any(path.startswith(p) for p in _PUBLIC_PREFIXES)
