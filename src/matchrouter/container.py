"""Dependency injection container for matchrouter."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from matchrouter.config import MatchRouterConfig, RouteConfig
from matchrouter.core.interfaces import Extractor, Handler
from matchrouter.dispatcher import Dispatcher


@dataclass
class Container:
    """DI container holding configuration and the wired dispatcher."""

    config: MatchRouterConfig
    dispatcher: Dispatcher

    @staticmethod
    def create_default(config: MatchRouterConfig) -> Container:
        """Create a container with every enabled built-in extractor registered."""
        from matchrouter.extractors import builtin_extractors

        dispatcher = Dispatcher(max_composite_depth=config.max_composite_depth)
        disabled = set(config.disabled_extractors)
        for name, extractor in builtin_extractors(config.similarity).items():
            if name not in disabled:
                dispatcher.register(name, extractor)

        return Container(config=config, dispatcher=dispatcher)

    @staticmethod
    def create_for_testing(
        config: MatchRouterConfig | None = None,
        extractors: Mapping[str, Extractor] | None = None,
    ) -> Container:
        """Create a container with only the given extractors registered.

        Without ``extractors`` the dispatcher starts empty.
        """
        if config is None:
            config = MatchRouterConfig()

        dispatcher = Dispatcher(max_composite_depth=config.max_composite_depth)
        dispatcher.register_all(extractors or {})
        return Container(config=config, dispatcher=dispatcher)

    def apply_routes(self, handler_factory: Callable[[RouteConfig], Handler]) -> int:
        """Bind every configured route, using ``handler_factory`` for its handler.

        Returns:
            Number of routes bound.

        Raises:
            UnknownExtractorName: If a route names an unregistered extractor.
        """
        for route in self.config.routes:
            self.dispatcher.bind(route.extractor).add(route.pattern, handler_factory(route))
        return len(self.config.routes)
