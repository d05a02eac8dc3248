"""Read-only view handed to every cross-entity validator."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from chatops_config.config.models import Config
from chatops_config.validation.result import ViolationCollector
from chatops_config.validation.tree import Node


@dataclass(frozen=True, slots=True)
class CheckContext:
    root: Config
    collector: ViolationCollector
    builtin_verbs: frozenset[str]

    def report(self, tag: str, path: str, *params: str) -> None:
        self.collector.report(tag, path, *params)


CrossEntityValidator = Callable[[CheckContext, Node], None]

__all__ = ["CheckContext", "CrossEntityValidator"]
