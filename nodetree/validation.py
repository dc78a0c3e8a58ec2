"""Schema validation with field-path error accumulation.

Field rules are reusable ``Annotated`` types, so request bodies and
command/query schemas share one definition of "valid". Every rule reports on
its own field; pydantic collects all of them instead of stopping at the first.
"""

import math
import re
from dataclasses import dataclass
from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError
from pydantic_core import PydanticCustomError

from nodetree.errors import FieldError

# RFC 4122 layout, versions 1-8. The nil UUID has version 0 and never matches.
_UUID_RE = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[1-8][0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}"
)
_PATH_RE = re.compile(r"/.+")

# Location prefixes FastAPI adds to request errors.
_REQUEST_LOCATIONS = {"body", "path", "query", "header", "cookie"}


def _uuid_string(value: Any) -> str:
    if not isinstance(value, str) or not _UUID_RE.fullmatch(value):
        raise PydanticCustomError("invalid_uuid", "Invalid UUID")
    return value


def _optional(check):
    def optional_check(value: Any) -> Any:
        return None if value is None else check(value)

    return optional_check


def _non_empty(message: str):
    def check(value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise PydanticCustomError("empty_string", message)
        return value.strip()

    return check


def _node_name(value: Any) -> str:
    name = _non_empty("Name cannot be empty")(value)
    # Names are path segments.
    if "/" in name:
        raise PydanticCustomError("invalid_name", "Name cannot contain '/'")
    return name


def _finite_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PydanticCustomError("invalid_number", "Property value must be a valid number")
    try:
        number = float(value)
    except OverflowError:
        number = math.inf
    if not math.isfinite(number):
        raise PydanticCustomError("invalid_number", "Property value must be a valid number")
    return number


def _subtree_path(value: Any) -> str:
    if not isinstance(value, str) or not _PATH_RE.fullmatch(value):
        raise PydanticCustomError(
            "invalid_path", "Path must start with a slash and not be empty"
        )
    return value


UuidString = Annotated[str, BeforeValidator(_uuid_string)]
OptionalUuidString = Annotated[str | None, BeforeValidator(_optional(_uuid_string))]
NodeName = Annotated[str, BeforeValidator(_node_name)]
PropertyName = Annotated[str, BeforeValidator(_non_empty("Property name cannot be empty"))]
PropertyNumber = Annotated[float, BeforeValidator(_finite_number)]
OptionalSubtreePath = Annotated[str | None, BeforeValidator(_optional(_subtree_path))]


class Schema(BaseModel):
    """Base for command and query schemas."""

    model_config = ConfigDict(extra="ignore", frozen=True)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class Valid(Generic[T]):
    value: T


@dataclass(frozen=True)
class Invalid:
    errors: list[FieldError]


def validate(schema: type[T], data: Any) -> Valid[T] | Invalid:
    """Check `data` against `schema`, returning every violation on failure."""
    try:
        return Valid(schema.model_validate(data))
    except ValidationError as exc:
        return Invalid(field_errors(exc.errors()))


def field_errors(errors: list[dict[str, Any]]) -> list[FieldError]:
    """Turn pydantic/FastAPI error dicts into FieldErrors, in reported order.

    The leading request location ("body", "path", ...) that FastAPI prepends
    is dropped so paths point at the field itself.
    """
    result: list[FieldError] = []
    for error in errors:
        loc = tuple(error.get("loc", ()))
        if loc and loc[0] in _REQUEST_LOCATIONS:
            loc = loc[1:]
        result.append(FieldError(path=loc, message=error.get("msg", "Invalid value")))
    return result
