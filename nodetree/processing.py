"""Commands, queries, and the decorators every handler is wrapped in.

A handler is any ``async (message) -> result`` callable. ``with_validation``
checks the message against a schema before the handler runs, and
``with_logging`` records each message and its outcome.
"""

import dataclasses
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pydantic import BaseModel

from nodetree.errors import InvalidCommandError, InvalidQueryError, NodeTreeError
from nodetree.validation import Invalid, validate

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Command:
    """Base for write requests."""


@dataclasses.dataclass(frozen=True)
class Query:
    """Base for read requests."""


M = TypeVar("M", Command, Query)
R = TypeVar("R")
Handler = Callable[[M], Awaitable[R]]


def with_validation(schema: type[BaseModel], handler: Handler) -> Handler:
    """Validate each message against `schema` before calling `handler`.

    Raises InvalidCommandError or InvalidQueryError with every violation.
    On success the original message is passed through unchanged.
    """

    async def validated(message):
        result = validate(schema, dataclasses.asdict(message))
        if isinstance(result, Invalid):
            if isinstance(message, Query):
                raise InvalidQueryError(result.errors)
            raise InvalidCommandError(result.errors)
        return await handler(message)

    return validated


def with_logging(handler: Handler) -> Handler:
    async def logged(message):
        name = type(message).__name__
        logger.info("Processing %s: %s", name, dataclasses.asdict(message))
        try:
            result = await handler(message)
        except NodeTreeError as e:
            logger.info("%s rejected: %s", name, e)
            raise
        except Exception:
            logger.exception("%s failed", name)
            raise
        logger.info("%s processed: %s", name, _summary(result))
        return result

    return logged


def _summary(result: object) -> object:
    # Subtrees can be large; log the root id only.
    if isinstance(result, BaseModel) and hasattr(result, "id"):
        return f"{type(result).__name__}(id={result.id})"
    return result
