# tests/unit/api/test_blueprint_group.py
from __future__ import annotations

import pytest
from flask import Blueprint, Flask

from lof_auth.api import register_blueprint_group


@pytest.mark.parametrize(
    "base, rel, path",
    [
        ("/api/v1", "", "/api/v1/ping"),
        ("/api/v1/", "/auth", "/api/v1/auth/ping"),
        ("api/v1", "auth/", "/api/v1/auth/ping"),
    ],
)
def test_prefixes_are_joined_with_single_slashes(base, rel, path):
    app = Flask(__name__)
    bp = Blueprint("ping", __name__)
    bp.add_url_rule("/ping", "ping", lambda: "pong")

    register_blueprint_group(app, base_prefix=base, entries=[(bp, rel)])

    assert app.test_client().get(path).data == b"pong"
