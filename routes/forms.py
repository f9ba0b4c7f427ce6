"""
Helpers for reading posted HTML forms.

Multipart bodies may carry a file part under any field name, so values are
not guaranteed to be strings.
"""

from __future__ import annotations

from typing import Optional, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import FormData

from errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def form_text(form: FormData, name: str) -> Optional[str]:
    """Return the text value of field *name*; ``None`` if absent or a file."""
    value = form.get(name)
    return value if isinstance(value, str) else None


def parse_form(model: type[ModelT], form: FormData, message: str) -> ModelT:
    """Validate *form* into *model*, raising the app's ValidationError on failure."""
    try:
        return model.model_validate(dict(form))
    except PydanticValidationError as e:
        raise ValidationError(
            message,
            details=[
                {
                    "field": ".".join(str(part) for part in err["loc"]),
                    "message": err["msg"],
                }
                for err in e.errors()
            ],
        ) from e
