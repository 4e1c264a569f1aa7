"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, Response, request

from lof_auth.api.deps import current_identity, json_response, require_auth, timing
from lof_auth.core.config import parse_bool
from lof_auth.core.wiring import get_components
from lof_auth.schemas import (
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
    WhoAmISchema,
)
from lof_auth.services.auth.dto import LoginIn, LogoutIn, RefreshIn, RegisterIn

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
token_schema = TokenPairSchema()
whoami_schema = WhoAmISchema()


@bp.post("/register")
@timing
def register():
    """Register a new user and return their first token pair."""

    data = register_schema.load(request.get_json(silent=True) or {})
    pair = get_components().auth_service.register(RegisterIn(**data))
    return json_response({"data": token_schema.dump(pair)}, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    data = login_schema.load(request.get_json(silent=True) or {})
    pair = get_components().auth_service.login(LoginIn(**data))
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/refresh")
@timing
def refresh():
    """Exchange a refresh token for a new pair; the old one stops working."""

    data = refresh_schema.load(request.get_json(silent=True) or {})
    pair = get_components().auth_service.refresh(RefreshIn(**data))
    return json_response({"data": token_schema.dump(pair)})


@bp.delete("/logout")
@require_auth
@timing
def logout():
    """End the current session, or every session with ``?all=true``."""

    identity = current_identity()
    get_components().auth_service.logout(
        LogoutIn(
            user_id=identity.user_id,
            token_id=identity.token_id,
            all_sessions=parse_bool(request.args.get("all")),
        )
    )
    return Response(status=204)


@bp.get("/whoami")
@require_auth
@timing
def whoami():
    identity = current_identity()
    body = {
        "data": whoami_schema.dump(
            {
                "id": identity.user_id,
                "username": identity.username,
                "session_id": identity.token_id,
            }
        )
    }
    return json_response(body)
