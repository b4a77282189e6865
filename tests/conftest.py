"""Shared test doubles for the exampledocs test suite."""

import json
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from exampledocs.errors import ProcessFailure
from exampledocs.schemas import ProcessResult


# -----------------------------
# Test doubles
# -----------------------------
class FakeRunner:
    """Records invocations; ``handler`` may return a ProcessResult or raise."""

    def __init__(self, handler=None):
        self.calls: List[tuple] = []
        self.handler = handler

    async def run(self, command, args=(), cwd=None, input=None):
        self.calls.append((command, list(args), input))
        if self.handler is not None:
            result = self.handler(command, list(args), input)
            if result is not None:
                return result
        return ProcessResult()


class FakeCursor:
    """One result per entry of ``results``; None stands for a statement without rows."""

    def __init__(self, results):
        self._results = list(results)
        self._index = 0

    @property
    def description(self):
        return [("col",)] if self._results[self._index] is not None else None

    async def fetchall(self):
        return list(self._results[self._index] or [])

    def nextset(self):
        if self._index + 1 < len(self._results):
            self._index += 1
            return True
        return None


class FakeConnection:
    def __init__(self, rows=None, results=None):
        self.results = results if results is not None else [rows]
        self.executed: List[tuple] = []
        self.transactions = 0

    async def execute(self, query, params=None):
        self.executed.append((query, params))
        return FakeCursor(self.results)

    @asynccontextmanager
    async def transaction(self):
        self.transactions += 1
        yield


class FakePool:
    def __init__(self, rows=None, results=None):
        self.conn = FakeConnection(rows, results)
        self.closed = False

    @asynccontextmanager
    async def connection(self):
        yield self.conn


class PoolFactory:
    """Stand-in for open_pool that records acquisition and release."""

    def __init__(self, pool: Optional[FakePool] = None):
        self.pool = pool or FakePool()
        self.opened_with: Optional[str] = None

    @asynccontextmanager
    async def __call__(self, conninfo):
        self.opened_with = conninfo
        try:
            yield self.pool
        finally:
            self.pool.closed = True


def failure(command, stderr="", code=1, stdout=""):
    return ProcessFailure([command], stdout=stdout, stderr=stderr, code=code)


# -----------------------------
# Helpers
# -----------------------------
def write_tree(root: Path, files: Dict[str, Any]) -> Path:
    """Create files from a ``{"a/b.txt": "text"}`` mapping; dicts are dumped as JSON."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, dict):
            content = json.dumps(content)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def pool_factory():
    return PoolFactory()
