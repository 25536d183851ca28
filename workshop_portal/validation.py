"""
Request body parsing against the pydantic schemas.
"""

from typing import Any, Dict, Type, TypeVar

from flask import request
from pydantic import BaseModel, ValidationError

from workshop_portal.errors import BadRequest

M = TypeVar("M", bound=BaseModel)


def json_body() -> Dict[str, Any]:
    """The request's JSON object, or {} for a missing/non-object body."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def parse_body(model: Type[M], data: Dict[str, Any] = None) -> M:
    """
    Validate a JSON body into `model`.

    Raises:
        BadRequest: With a short description of the first invalid field.
    """
    if data is None:
        data = json_body()
    try:
        return model.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "body"
        raise BadRequest(f"Invalid {location}: {first['msg']}")
