"""Thread-safe accumulation of token usage and cost across requests."""

from __future__ import annotations

import threading

from .catalog import ModelInfo
from .types import Cost, Usage


class UsageCollector:
    """Running totals of ``Usage`` and ``Cost``.

    Usage of models missing from the catalog is counted with zero cost.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._usage = Usage.ZERO
        self._cost = Cost.ZERO

    def add(self, usage: Usage, model: ModelInfo | None = None) -> None:
        cost = usage.cost(model) if model is not None else Cost.ZERO
        with self._lock:
            self._usage = self._usage + usage
            self._cost = self._cost + cost

    @property
    def usage(self) -> Usage:
        with self._lock:
            return self._usage

    @property
    def cost(self) -> Cost:
        with self._lock:
            return self._cost
