"""Tests for the validation and logging decorators around handlers."""

import logging
import math

import pytest

from nodetree.errors import (
    FieldError,
    InvalidCommandError,
    InvalidQueryError,
    NotFoundError,
)
from nodetree.nodes.commands import (
    CreatePropertyCommand,
    CreatePropertyCommandSchema,
    GetSubtreeQuery,
    GetSubtreeQuerySchema,
)
from nodetree.processing import with_logging, with_validation

NODE_ID = "00000000-0000-7000-a000-100000000001"


class RecordingHandler:
    def __init__(self, result="ok", error: Exception | None = None):
        self.result = result
        self.error = error
        self.received = []

    async def __call__(self, message):
        self.received.append(message)
        if self.error is not None:
            raise self.error
        return self.result


class TestWithValidation:
    async def test_valid_command_passes_through_unchanged(self):
        handler = RecordingHandler()
        wrapped = with_validation(CreatePropertyCommandSchema, handler)
        command = CreatePropertyCommand(node_id=NODE_ID, name="  Power ", value=2)

        assert await wrapped(command) == "ok"
        assert handler.received == [command]
        assert handler.received[0] is command

    async def test_invalid_command_never_reaches_handler(self):
        handler = RecordingHandler()
        wrapped = with_validation(CreatePropertyCommandSchema, handler)
        command = CreatePropertyCommand(node_id="nope", name="", value=math.nan)

        with pytest.raises(InvalidCommandError) as exc_info:
            await wrapped(command)

        assert str(exc_info.value) == "Invalid command"
        assert [e.path for e in exc_info.value.errors] == [("node_id",), ("name",), ("value",)]
        assert handler.received == []

    async def test_invalid_query_raises_query_error(self):
        wrapped = with_validation(GetSubtreeQuerySchema, RecordingHandler())

        with pytest.raises(InvalidQueryError) as exc_info:
            await wrapped(GetSubtreeQuery.by_path("/"))

        assert str(exc_info.value) == "Invalid query"
        assert exc_info.value.errors == [
            FieldError(("by", "path"), "Path must start with a slash and not be empty"),
        ]


class TestWithLogging:
    async def test_logs_message_and_result(self, caplog):
        wrapped = with_logging(RecordingHandler(result="new-id"))

        with caplog.at_level(logging.INFO, logger="nodetree.processing"):
            result = await wrapped(GetSubtreeQuery.by_node_id(NODE_ID))

        assert result == "new-id"
        messages = [r.getMessage() for r in caplog.records]
        assert messages[0].startswith("Processing GetSubtreeQuery:")
        assert NODE_ID in messages[0]
        assert messages[1] == "GetSubtreeQuery processed: new-id"

    async def test_domain_errors_are_logged_and_reraised(self, caplog):
        error = NotFoundError("Node with id x not found")
        wrapped = with_logging(RecordingHandler(error=error))

        with caplog.at_level(logging.INFO, logger="nodetree.processing"):
            with pytest.raises(NotFoundError) as exc_info:
                await wrapped(GetSubtreeQuery.by_node_id(NODE_ID))

        assert exc_info.value is error
        rejected = caplog.records[-1]
        assert rejected.levelno == logging.INFO
        assert rejected.getMessage() == "GetSubtreeQuery rejected: Node with id x not found"

    async def test_unexpected_errors_are_logged_with_traceback(self, caplog):
        wrapped = with_logging(RecordingHandler(error=RuntimeError("disk on fire")))

        with caplog.at_level(logging.INFO, logger="nodetree.processing"):
            with pytest.raises(RuntimeError, match="disk on fire"):
                await wrapped(GetSubtreeQuery.by_node_id(NODE_ID))

        failed = caplog.records[-1]
        assert failed.levelno == logging.ERROR
        assert failed.getMessage() == "GetSubtreeQuery failed"
        assert failed.exc_info is not None

    async def test_stacks_with_validation(self):
        handler = RecordingHandler()
        wrapped = with_logging(with_validation(GetSubtreeQuerySchema, handler))

        with pytest.raises(InvalidQueryError):
            await wrapped(GetSubtreeQuery.by_node_id("invalid"))
        assert handler.received == []
