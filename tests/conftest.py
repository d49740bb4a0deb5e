from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from elastical import Client
from elastical.transport import Request, TransportResponse


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    target_dir = Path(config.rootpath) / "tests" / marker
    target_dir = target_dir.resolve()

    for item in items:
        p = Path(str(item.fspath)).resolve()
        if p == target_dir or target_dir in p.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: offline tests without a live server")


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    _mark_tests_by_directory(config, items, "unit")


@dataclass
class RecordingTransport:
    """Transport stub replaying canned responses (or raising canned errors)."""

    responses: list[object] = field(default_factory=list)
    requests: list[Request] = field(default_factory=list)

    def perform(self, request: Request) -> TransportResponse:
        self.requests.append(request)
        if not self.responses:
            return TransportResponse(status=200, headers={}, body=b"{}")
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def reply(self, status: int, body: bytes = b"{}") -> None:
        self.responses.append(TransportResponse(status=status, headers={}, body=body))

    @property
    def last(self) -> Request:
        return self.requests[-1]


@dataclass
class HookRecorder:
    """Collects the requests handed to ``Client.test_hook``."""

    requests: list[Request] = field(default_factory=list)

    def __call__(self, request: Request) -> None:
        self.requests.append(request)

    @property
    def last(self) -> Request:
        return self.requests[-1]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def client(transport: RecordingTransport) -> Client:
    return Client(transport=transport)


@pytest.fixture
def hook(client: Client) -> HookRecorder:
    recorder = HookRecorder()
    client.test_hook = recorder
    return recorder
