"""Failure kinds raised by the domain and application layers.

Only the HTTP layer turns these into status codes.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """One violated field constraint. `path` locates the field, e.g. ("properties", 0, "name")."""

    path: tuple[str | int, ...]
    message: str

    def to_dict(self) -> dict:
        return {"path": list(self.path), "message": self.message}


class NodeTreeError(Exception):
    pass


class InvalidInputError(NodeTreeError):
    """Input failed schema validation. Carries every violation, not only the first."""

    def __init__(self, errors: list[FieldError], message: str = "Invalid input") -> None:
        self.errors = errors
        super().__init__(message)


class InvalidCommandError(InvalidInputError):
    def __init__(self, errors: list[FieldError]) -> None:
        super().__init__(errors, "Invalid command")


class InvalidQueryError(InvalidInputError):
    def __init__(self, errors: list[FieldError]) -> None:
        super().__init__(errors, "Invalid query")


class NotFoundError(NodeTreeError):
    pass


class BusinessRuleError(NodeTreeError):
    """A write would break a domain invariant, e.g. a duplicate sibling name."""
