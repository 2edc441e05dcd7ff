"""
Development REST backend for feature flags.

Serves the flag collection the dashboard talks to, from memory:

    GET    /flags          -> {"<name>": <bool>, ...}
    POST   /flags          <- {"name": str, "isEnabled": bool}   201
    PUT    /flags/<name>   <- {"isEnabled": bool}                200
    DELETE /flags/<name>                                         204
"""

from typing import Any, Dict, Optional

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS

from ..api import ConflictError, NotFoundError, ValidationError, setup_middleware
from ..config import settings
from ..observability import get_logger, setup_logging
from .store import FlagExistsError, FlagNotFoundError, FlagStore

logger = get_logger(__name__)

bp = Blueprint("flags", __name__, url_prefix="/flags")


def _store() -> FlagStore:
    return current_app.extensions["flag_store"]


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _addressable(flag_name: str) -> bool:
    """Whether the name survives as a /flags/<name> path once URL-decoded."""
    return all(segment not in ('', '.', '..') for segment in flag_name.split('/'))


def _enabled_field(data: Dict[str, Any], required: bool) -> bool:
    if 'isEnabled' not in data:
        if required:
            raise ValidationError("isEnabled field is required", details={"field": "isEnabled"})
        return False

    value = data['isEnabled']
    if not isinstance(value, bool):
        raise ValidationError("isEnabled must be a boolean", details={"field": "isEnabled"})
    return value


@bp.get("")
def list_flags():
    return jsonify(_store().all())


@bp.post("")
def create_flag():
    data = _json_body()

    flag_name = data.get('name')
    if not isinstance(flag_name, str) or not flag_name.strip():
        raise ValidationError("name must be a non-empty string", details={"field": "name"})
    if not _addressable(flag_name):
        raise ValidationError(
            "name must not start or end with '/', contain '//' or have '.' or '..' segments",
            details={"field": "name"}
        )

    enabled = _enabled_field(data, required=False)

    try:
        _store().create(flag_name, enabled)
    except FlagExistsError:
        raise ConflictError(f"Feature flag '{flag_name}' already exists", details={"name": flag_name})

    return jsonify({"name": flag_name, "isEnabled": enabled}), 201


@bp.put("/<path:flag_name>")
def update_flag(flag_name: str):
    enabled = _enabled_field(_json_body(), required=True)

    try:
        _store().set(flag_name, enabled)
    except FlagNotFoundError:
        raise NotFoundError(f"Feature flag '{flag_name}' not found", details={"name": flag_name})

    return jsonify({"name": flag_name, "isEnabled": enabled})


@bp.delete("/<path:flag_name>")
def delete_flag(flag_name: str):
    try:
        _store().delete(flag_name)
    except FlagNotFoundError:
        raise NotFoundError(f"Feature flag '{flag_name}' not found", details={"name": flag_name})

    return "", 204


def create_backend_app(store: Optional[FlagStore] = None, enable_metrics: bool = True) -> Flask:
    """
    Build the development backend.

    Args:
        store: Flag store to serve (a fresh empty one by default)
        enable_metrics: Collect per-request metrics

    Returns:
        Flask application
    """
    app = Flask(__name__)
    # Browser frontends call the backend from another origin
    CORS(app)
    # Names may contain '/'; a merged path would address a different flag
    app.url_map.merge_slashes = False

    app.extensions["flag_store"] = store if store is not None else FlagStore()

    setup_middleware(app, enable_metrics=enable_metrics)
    app.register_blueprint(bp)

    return app


def main():
    setup_logging(
        log_level=settings.observability.log_level,
        log_format=settings.observability.log_format,
        log_dir=settings.observability.log_dir
    )

    store = FlagStore()
    if settings.backend.seed_defaults:
        store.seed_defaults()

    app = create_backend_app(store, enable_metrics=settings.enable_metrics)

    logger.info(
        f"Flags backend listening on http://{settings.backend.host}:{settings.backend.port}/flags"
    )
    app.run(host=settings.backend.host, port=settings.backend.port, debug=False)


if __name__ == '__main__':
    main()
