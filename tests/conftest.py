"""Pytest configuration and shared fixtures.

This module provides common fixtures used across the test suite, including
sample JavaScript snippets, parser instances, record builders and a
temporary project-tree factory.
"""

from collections.abc import Callable
from pathlib import Path

import pytest
import structlog

from flowmetrics.parser.models import CallKind, CallRecord, FunctionKind, FunctionRecord, SourceUnit


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any logging configuration a test (e.g. the CLI) applied."""
    yield
    structlog.reset_defaults()


# ---------------------------------------------------------------------------
# Sample JavaScript Code Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def room_helper_code() -> str:
    """A function calling a helper in the same file."""
    return """function generateRoomId() {
  return helper();
}

function helper() {
  return Math.random().toString(36);
}
"""


@pytest.fixture
def socket_server_code() -> str:
    """Socket.io style server with callback registrations."""
    return """const express = require('express');
const rooms = new Map();

function generateRoomId() {
  return Math.random().toString(36).substring(2, 8);
}

io.on('connection', (socket) => {
  socket.on('create-room', () => {
    const roomId = generateRoomId();
    rooms.set(roomId, []);
    socket.join(roomId);
  });

  socket.on('draw', function (data) {
    socket.to(data.roomId).emit('draw', data);
  });

  socket.on('disconnect', () => {
    console.log('user disconnected');
  });
});
"""


@pytest.fixture
def unrelated_functions_code() -> str:
    """Three functions sharing nothing."""
    return """function alpha(a) {
  first();
}

function beta(b) {
  second();
}

function gamma(c) {
  third();
}
"""


@pytest.fixture
def nested_functions_code() -> str:
    """A function declaring a nested function."""
    return """function outer() {
  setup();
  function inner() {
    deep();
  }
  return inner;
}
"""


@pytest.fixture
def anonymous_functions_code() -> str:
    """Functions that no naming rule applies to."""
    return """[1, 2].forEach(function () {
  visit();
});

[3].map(() => transform());
"""


@pytest.fixture
def module_syntax_code() -> str:
    """ES module imports, exports and a CommonJS require."""
    return """import React, { useState as useLocalState } from 'react';
import * as utils from './utils';
const { join } = require('path');

export function render() {
  return join('a', 'b');
}

export default function () {}

export { render as draw };
"""


@pytest.fixture
def recoverable_error_code() -> str:
    """Valid function followed by a broken statement."""
    return """function ok() {
  helper();
}

const broken = ;
"""


# ---------------------------------------------------------------------------
# Parser Instance Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tree_sitter_parser():
    """Create a TreeSitterParser instance."""
    from flowmetrics.parser.tree_sitter import TreeSitterParser

    return TreeSitterParser()


@pytest.fixture
def parse_js(tree_sitter_parser):
    """Helper to parse JavaScript code and return its source unit."""

    def _parse(source_code: str, file_path: str = "/project/server.js") -> SourceUnit:
        return tree_sitter_parser.parse_source(source_code, file_path=file_path).unit

    return _parse


# ---------------------------------------------------------------------------
# Record Builders
# ---------------------------------------------------------------------------


@pytest.fixture
def make_function() -> Callable[..., FunctionRecord]:
    """Factory for FunctionRecord instances."""

    def _make(
        name: str,
        *,
        file_path: str = "/p/server.js",
        calls: list[str] | None = None,
        direct_calls: list[str] | None = None,
        parameters: list[str] | None = None,
        line: int = 1,
    ) -> FunctionRecord:
        calls = calls or []
        if direct_calls is None:
            direct_calls = [call for call in calls if "." not in call]
        return FunctionRecord(
            name=name,
            file_path=file_path,
            module=Path(file_path).stem,
            parameters=parameters or [],
            calls=calls,
            direct_calls=direct_calls,
            line=line,
            end_line=line + 2,
            kind=FunctionKind.DECLARATION,
        )

    return _make


@pytest.fixture
def make_unit() -> Callable[..., SourceUnit]:
    """Factory for SourceUnit instances.

    Functions are moved into the unit's file. File-level call records are
    derived from the functions' calls unless ``calls`` is given as a list
    of (target, source function) tuples.
    """

    def _make(
        path: str,
        functions: list[FunctionRecord] | None = None,
        calls: list[tuple[str, str | None]] | None = None,
    ) -> SourceUnit:
        module = Path(path).stem
        functions = [
            func.model_copy(update={"file_path": path, "module": module})
            for func in functions or []
        ]
        if calls is None:
            calls = [(target, func.name) for func in functions for target in func.calls]
        records = [
            CallRecord(
                source_file=path,
                source_function=source,
                target=target,
                line=index + 1,
                kind=CallKind.MEMBER if "." in target else CallKind.DIRECT,
            )
            for index, (target, source) in enumerate(calls)
        ]
        return SourceUnit(path=path, module=module, functions=functions, calls=records)

    return _make


# ---------------------------------------------------------------------------
# Temporary Project Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Factory fixture writing a project tree under a temporary directory.

    Keys are '/'-separated paths relative to the project root.
    """

    def _make(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path

    return _make
