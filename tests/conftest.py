"""Shared test fixtures for matchrouter."""

from __future__ import annotations

import pytest

from matchrouter.config import MatchRouterConfig
from matchrouter.container import Container
from matchrouter.dispatcher import Dispatcher
from matchrouter.extractors import builtin_extractors
from tests.helpers import Recorder


@pytest.fixture()
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture()
def dispatcher() -> Dispatcher:
    """Dispatcher with every built-in extractor registered."""
    d = Dispatcher()
    d.register_all(builtin_extractors())
    return d


@pytest.fixture()
def test_container() -> Container:
    return Container.create_default(MatchRouterConfig())
