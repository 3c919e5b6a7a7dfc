from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request

from ..core.exceptions import NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)


def api_errors(view):
    """Translate domain errors into {"success": false, "message": ...} responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except NotFoundError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        except StorageError as e:
            logger.error("Storage error in %s: %s", view.__name__, e)
            return jsonify({"success": False, "message": str(e)}), 500
        except Exception:
            logger.exception("Unexpected error in %s", view.__name__)
            return jsonify({"success": False, "message": "Internal server error"}), 500

    return wrapper


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object body")
    return data


def arg(name: str) -> Optional[str]:
    value = request.args.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def require_arg(name: str) -> str:
    value = arg(name)
    if not value:
        raise ValidationError(f"Missing parameter: {name}")
    return value


def csv_response(app: Flask, *, content: str, filename: str):
    return app.response_class(
        content.encode("utf-8-sig"),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
