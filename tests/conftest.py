"""Shared fixtures: an in-memory option store, a live config holder and the app service on top."""

from __future__ import annotations

import threading

import pytest

from kvconf.apps.service import AppService
from kvconf.config.holder import ConfigHolder
from kvconf.config.schema import Config
from kvconf.store.base import StoreError
from kvconf.store.memory import MemoryOptionStore


class FailingStore(MemoryOptionStore):
    """Memory store whose N-th set_option call (1-based) fails."""

    def __init__(self, fail_on: int):
        super().__init__()
        self.fail_on = fail_on
        self.calls = 0

    def set_option(self, key: str, value: str) -> None:
        self.calls += 1
        if self.calls == self.fail_on:
            raise StoreError(f"disk full while writing {key}")
        super().set_option(key, value)


class PausingStore(MemoryOptionStore):
    """Memory store that blocks the first writer of a key ending in `suffix` until `resume` is set."""

    def __init__(self, suffix: str):
        super().__init__()
        self.suffix = suffix
        self.paused = threading.Event()
        self.resume = threading.Event()

    def set_option(self, key: str, value: str) -> None:
        super().set_option(key, value)
        if key.endswith(self.suffix) and not self.paused.is_set():
            self.paused.set()
            self.resume.wait(timeout=5)


@pytest.fixture
def store() -> MemoryOptionStore:
    return MemoryOptionStore()


@pytest.fixture
def holder() -> ConfigHolder:
    return ConfigHolder(Config())


@pytest.fixture
def service(holder: ConfigHolder, store: MemoryOptionStore) -> AppService:
    return AppService(holder, store)
