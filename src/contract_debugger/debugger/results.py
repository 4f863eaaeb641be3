from __future__ import annotations

from collections import deque
from typing import Iterator, Optional

from ..models import InvocationResult


class ResultLog:
    """
    Session history of invocation outcomes, most recent first.

    ``append`` is the only mutator. It also maintains the latest result per
    function name.
    """

    def __init__(self) -> None:
        self._entries: deque[InvocationResult] = deque()
        self._latest: dict[str, InvocationResult] = {}

    def append(self, result: InvocationResult) -> None:
        self._entries.appendleft(result)
        self._latest[result.function_name] = result

    @property
    def entries(self) -> list[InvocationResult]:
        return list(self._entries)

    @property
    def latest_by_function(self) -> dict[str, InvocationResult]:
        return dict(self._latest)

    def latest(self, function_name: str) -> Optional[InvocationResult]:
        return self._latest.get(function_name)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[InvocationResult]:
        return iter(list(self._entries))
