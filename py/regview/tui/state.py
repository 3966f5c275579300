"""Runtime state classes for regview-tui."""

from __future__ import annotations

from regview.fields import RegisterRegistry
from regview.sync import RegisterSynchronizer


class AppState:
    """Application-level state."""

    def __init__(self, registry: RegisterRegistry, config_path: str | None = None) -> None:
        self.registry = registry
        self.config_path = config_path
        self.sync = RegisterSynchronizer(registry)
        self.values: dict[str, int | None] = {reg_id: None for reg_id in registry}
        self.selected: str | None = next(iter(registry), None)

    def set_value(self, register_id: str, value: int | None) -> None:
        self.values[register_id] = value
