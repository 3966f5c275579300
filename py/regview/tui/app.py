"""regview-tui: Interactive register value editor."""

from __future__ import annotations

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import ContentSwitcher, Footer, Header

from regview.fields import RegisterRegistry

from .editor import RegisterEditor
from .state import AppState
from .tree import RegisterTree
from .types import editor_id


class RegviewTuiApp(App):
    """Edit register values as hex text or as individual fields."""

    CSS = """
    #main-container {
        height: 1fr;
    }
    #reg-tree {
        width: 1fr;
        min-width: 30;
        max-width: 40%;
        border-right: solid $accent;
    }
    #editors {
        width: 2fr;
    }
    RegisterEditor {
        padding: 1;
    }
    .hex-row {
        height: auto;
    }
    .hex-prefix {
        padding: 1 0 0 1;
    }
    #hex-input {
        width: 16;
    }
    #binary-display {
        padding: 0 1;
    }
    .bit-diagram {
        padding: 1;
    }
    .field-row {
        height: auto;
    }
    .field-name {
        width: 20;
        padding: 1 1 0 1;
    }
    .field-bits {
        width: 12;
        padding: 1 1 0 0;
        color: $text-muted;
    }
    .field-value {
        padding: 1 0 0 0;
    }
    .reserved-non-zero {
        color: $error;
        text-style: bold;
    }
    .unknown {
        color: $warning;
    }
    """

    BINDINGS = [
        Binding('ctrl+r', 'clear', 'Clear', show=True),
        Binding('ctrl+n', 'zero', 'Zero', show=True),
        Binding('q', 'quit', 'Quit', show=True),
    ]

    TITLE = 'regview-tui'

    def __init__(
        self,
        registry: RegisterRegistry,
        config_path: str | None = None,
        initial_register: str | None = None,
    ) -> None:
        super().__init__()
        self.state = AppState(registry, config_path)
        if initial_register is not None:
            # Raises UnknownRegisterError for a bad id
            self.state.selected = registry[initial_register].id
        self._editor_ids = {reg_id: editor_id(i) for i, reg_id in enumerate(registry)}

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id='main-container'):
            yield RegisterTree()
            initial = self._editor_ids.get(self.state.selected) if self.state.selected else None
            with ContentSwitcher(initial=initial, id='editors'):
                for reg_id, eid in self._editor_ids.items():
                    yield RegisterEditor(self.state.registry[reg_id], self.state.sync, id=eid)
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = self.state.config_path or '<no config>'
        self.query_one(RegisterTree).rebuild(self.state)

    def current_editor(self) -> RegisterEditor | None:
        if self.state.selected is None:
            return None
        return self.query_one(f'#{self._editor_ids[self.state.selected]}', RegisterEditor)

    def _select(self, register_id: str) -> None:
        if register_id == self.state.selected:
            return
        self.state.selected = register_id
        self.query_one(ContentSwitcher).current = self._editor_ids[register_id]

    # --- Event handlers ---

    def on_register_tree_register_selected(self, event: RegisterTree.RegisterSelected) -> None:
        self._select(event.reg.id)

    def on_register_tree_field_selected(self, event: RegisterTree.FieldSelected) -> None:
        self._select(event.reg.id)

    def on_register_editor_value_changed(self, event: RegisterEditor.ValueChanged) -> None:
        self.state.set_value(event.register_id, event.value)
        self.query_one(RegisterTree).update_value(self.state, event.register_id)

    # --- Actions ---

    def action_clear(self) -> None:
        editor = self.current_editor()
        if editor is None:
            self.notify('Select a register first', severity='warning')
            return
        editor.clear()

    def action_zero(self) -> None:
        editor = self.current_editor()
        if editor is None:
            self.notify('Select a register first', severity='warning')
            return
        editor.apply_hex('0')
