"""HTTP surface: mounts each API version's blueprints under its prefix."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def _join_prefix(*segments: str) -> str:
    parts = [s.strip("/") for s in segments if s.strip("/")]
    return "/" + "/".join(parts)


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Mount ``(blueprint, relative_prefix)`` pairs beneath ``base_prefix``.

    An empty relative prefix mounts the blueprint at ``base_prefix`` itself,
    which is how the v1 health blueprint serves ``/api/v1/health``.
    """
    for bp, rel_prefix in entries:
        app.register_blueprint(bp, url_prefix=_join_prefix(base_prefix, rel_prefix))


def init_app(app: Flask) -> None:
    """Register the v1 blueprints under ``API_BASE_PREFIX`` (``/api`` by default)."""
    from lof_auth.api.v1 import API_VERSION, REGISTRY

    api_base = app.config.get("API_BASE_PREFIX", "/api")
    register_blueprint_group(app, base_prefix=_join_prefix(api_base, API_VERSION), entries=REGISTRY)


__all__ = ["init_app", "register_blueprint_group"]
