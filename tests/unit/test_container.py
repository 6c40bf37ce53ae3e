"""Tests for the DI container."""

from __future__ import annotations

import pytest

from matchrouter.config import MatchRouterConfig, RouteConfig
from matchrouter.container import Container
from matchrouter.core.errors import UnknownExtractorName
from matchrouter.extractors.similarity import SimilarityExtractor
from matchrouter.extractors.text import TextExtractor
from tests.helpers import Recorder, make_message


class TestContainer:
    def test_create_default_registers_builtins(self, test_container: Container) -> None:
        names = set(test_container.dispatcher.descriptors)
        assert {"text", "similarity", "all", "any", "command", "chat"} <= names

    def test_create_default_honours_disabled(self) -> None:
        config = MatchRouterConfig(disabled_extractors=["media", "chat"])
        container = Container.create_default(config)
        assert "media" not in container.dispatcher.descriptors
        assert "chat" not in container.dispatcher.descriptors

    def test_similarity_uses_config_options(self) -> None:
        config = MatchRouterConfig(similarity={"threshold": 0.9})
        container = Container.create_default(config)
        extractor = container.dispatcher.descriptors["similarity"].extractor
        assert isinstance(extractor, SimilarityExtractor)
        assert extractor.options.threshold == 0.9

    def test_create_for_testing_empty(self) -> None:
        container = Container.create_for_testing()
        assert len(container.dispatcher.descriptors) == 0

    def test_create_for_testing_with_extractors(self) -> None:
        container = Container.create_for_testing(extractors={"text": TextExtractor()})
        assert list(container.dispatcher.descriptors) == ["text"]


class TestApplyRoutes:
    def test_binds_routes_with_factory(self) -> None:
        recorders: dict[str, Recorder] = {}

        def factory(route: RouteConfig) -> Recorder:
            recorders[route.name] = Recorder()
            return recorders[route.name]

        config = MatchRouterConfig(
            routes=[
                RouteConfig(name="hi", extractor="text", pattern={"regex": "^hi"}),
                RouteConfig(name="chat", extractor="chat", pattern=100),
            ]
        )
        container = Container.create_default(config)

        assert container.apply_routes(factory) == 2
        container.dispatcher.dispatch(make_message("hi all", chat_id=100), "message")

        assert recorders["hi"].count == 1
        assert recorders["chat"].count == 1

    def test_unknown_extractor_route(self) -> None:
        config = MatchRouterConfig(
            routes=[RouteConfig(name="x", extractor="nope", pattern="a")]
        )
        container = Container.create_default(config)
        with pytest.raises(UnknownExtractorName):
            container.apply_routes(lambda route: Recorder())
