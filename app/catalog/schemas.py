"""
Pydantic schema definitions for the catalog module.

The ``Book`` model documents the four fields every record starts with.
Records are allowed to carry extra keys because a partial update may
overlay anything onto them, so the model accepts extras and does not
coerce types. ``BookFields`` is the body of a create or a full update;
the three fields are optional at the parsing level so that a missing
value surfaces as a 400 envelope rather than a framework 422. The
``Envelope`` wraps every response from the ``/books`` routes.
"""

import math
from typing import Any, List

from pydantic import BaseModel, ConfigDict
from typing_extensions import Literal


REQUIRED_FIELDS = ("title", "author", "year")


def is_blank(value: Any) -> bool:
    """Return True for values a JSON client would consider "falsy".

    That is: missing/``None``, ``False``, the empty string, zero and
    NaN. Empty lists and objects are *not* blank.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or (isinstance(value, float) and math.isnan(value))
    return False


def has_non_finite(value: Any) -> bool:
    """Return True if ``value`` holds NaN or +/-Infinity anywhere.

    ``json.loads`` accepts those literals but they cannot be written
    back out as JSON, so they must never reach the store.
    """
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, dict):
        return any(has_non_finite(v) for v in value.values())
    if isinstance(value, list):
        return any(has_non_finite(v) for v in value)
    return False


class Book(BaseModel):
    """A single catalogue record."""

    model_config = ConfigDict(extra="allow")

    id: Any
    title: Any = None
    author: Any = None
    year: Any = None


class BookFields(BaseModel):
    """Body of ``POST /books`` and ``PUT /books/{id}``.

    Keys other than title, author and year are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    title: Any = None
    author: Any = None
    year: Any = None

    def missing_fields(self) -> List[str]:
        return [name for name in REQUIRED_FIELDS if is_blank(getattr(self, name))]

    def non_finite_fields(self) -> List[str]:
        return [name for name in REQUIRED_FIELDS if has_non_finite(getattr(self, name))]


class Envelope(BaseModel):
    """Uniform response wrapper: ``{status, message, data?}``."""

    status: Literal["success", "fail"]
    message: str
    # Left unset (and therefore not serialised) on failures and on delete.
    data: Any = None

    def to_content(self) -> dict:
        return self.model_dump(exclude_unset=True)
