from __future__ import annotations


class FormState:
    """Raw per-function input values, keyed by function then parameter name."""

    def __init__(self) -> None:
        self._inputs: dict[str, dict[str, str]] = {}

    def set_input(self, function_name: str, param_name: str, value: str) -> None:
        self._inputs.setdefault(function_name, {})[param_name] = value

    def get_inputs(self, function_name: str) -> dict[str, str]:
        return dict(self._inputs.get(function_name, {}))
