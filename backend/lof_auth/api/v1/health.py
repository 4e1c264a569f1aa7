"""Health check endpoint."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from lof_auth.api.deps import json_response, timing
from lof_auth.core.extensions import db

bp = Blueprint("health", __name__)

log = logging.getLogger(__name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application, database and refresh-store health."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        log.exception("healthcheck.db_error")
        db_status = "fail"
    payload = {
        "status": "ok" if db_status == "ok" else "degraded",
        "db": db_status,
        "refresh_store": current_app.config.get("REFRESH_TOKEN_BACKEND", "sql"),
        "version": current_app.config.get("APP_VERSION", "dev"),
    }
    return json_response(payload)
