"""Filter-and-route stage: dedup, filter, and write tokens to their sink."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional, TextIO

from uwx.filters import GATES, FilterChain, SeenSet
from uwx.models import FilterConfig, OriginTag, Token

SINK_STDOUT = "stdout"
SINK_PATHS = "paths"
SINK_PARAMS = "params"


@dataclass
class Sinks:
    """Output streams; unset specialized sinks fall back to ``default``."""

    default: TextIO
    paths: Optional[TextIO] = None
    params: Optional[TextIO] = None

    def for_origin(self, origin: OriginTag) -> tuple[str, TextIO]:
        if origin is OriginTag.PATH and self.paths is not None:
            return SINK_PATHS, self.paths
        if origin is OriginTag.PARAM_NAME and self.params is not None:
            return SINK_PARAMS, self.params
        return SINK_STDOUT, self.default


@dataclass
class RouterStats:
    received: int = 0
    duplicates: int = 0
    rejected: Counter[str] = field(default_factory=Counter)
    emitted: Counter[str] = field(default_factory=Counter)

    def to_dict(self) -> dict[str, int]:
        payload = {
            "received": self.received,
            "duplicates": self.duplicates,
        }
        for gate in GATES:
            payload[f"rejected_{gate}"] = self.rejected.get(gate, 0)
        for sink in (SINK_STDOUT, SINK_PATHS, SINK_PARAMS):
            payload[f"emitted_{sink}"] = self.emitted.get(sink, 0)
        return payload


class TokenRouter:
    """Consumer side of the pipeline.

    Every distinct token value is evaluated against the filter chain exactly
    once, on its first occurrence. A value rejected by a filter stays in the
    seen-set, so later occurrences are dropped without being re-checked.
    """

    def __init__(self, config: FilterConfig, sinks: Sinks, seen: Optional[SeenSet] = None) -> None:
        self._filters = FilterChain(config)
        self._sinks = sinks
        self._seen = seen if seen is not None else SeenSet()
        self.stats = RouterStats()

    @property
    def seen(self) -> SeenSet:
        return self._seen

    def process(self, token: Token) -> None:
        self.stats.received += 1
        if not self._seen.add(token.value):
            self.stats.duplicates += 1
            return

        failed_gate = self._filters.check(token.value)
        if failed_gate is not None:
            self.stats.rejected[failed_gate] += 1
            return

        sink_name, sink = self._sinks.for_origin(token.origin)
        sink.write(token.value + "\n")
        self.stats.emitted[sink_name] += 1
