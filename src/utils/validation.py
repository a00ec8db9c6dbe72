"""
Boundary validation of dynamic payloads against pydantic schemas.
"""

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from src.utils.exceptions import ValidationError

PayloadT = TypeVar("PayloadT", bound=BaseModel)


def validate_payload(model: type[PayloadT], payload: PayloadT | dict[str, Any]) -> PayloadT:
    """
    Validate a raw payload against a request schema.

    Args:
        model: Pydantic schema
        payload: Already-validated instance or raw dict

    Returns:
        Fully populated schema instance

    Raises:
        ValidationError: With the pydantic error list in its context
    """
    if isinstance(payload, model):
        return payload
    if not isinstance(payload, dict):
        raise ValidationError("Payload must be a JSON object")
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid payload",
            context={"errors": e.errors(include_url=False, include_context=False)},
        ) from e
