"""Right-pane register editor widgets for regview-tui."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Checkbox, Input, Label, Select, Static

from regview.diagnostics import Diagnostic, Severity
from regview.fields import (
    CheckboxField,
    FieldDefinition,
    RegisterDefinition,
    SelectField,
)
from regview.sync import (
    CheckboxState,
    FieldState,
    LabelState,
    RegisterSynchronizer,
    SelectState,
    UnknownState,
    binary_text,
)

from .types import FIELD_COLORS, control_id, select_options


class BitDiagram(Static):
    """Renders the register bits colored by owning field."""

    def __init__(self, reg: RegisterDefinition, **kwargs) -> None:
        super().__init__('', **kwargs)
        self._reg = reg
        self._value: int | None = None

    def on_mount(self) -> None:
        self._refresh_content()

    def set_value(self, value: int | None) -> None:
        self._value = value
        self._refresh_content()

    def _refresh_content(self) -> None:
        reg = self._reg
        value = self._value

        # Build field map: bit_index -> color_index
        field_map: dict[int, int] = {}
        for i, field in enumerate(reg.fields):
            for bit in field.indices:
                field_map[bit] = i % len(FIELD_COLORS)

        lines = []

        # Render 16 bits per row, MSB first
        bits_per_row = 16
        for row_start_bit in range(reg.width - 1, -1, -bits_per_row):
            row_end_bit = max(row_start_bit - bits_per_row + 1, 0)

            hdr = ''
            for bit in range(row_start_bit, row_end_bit - 1, -1):
                hdr += f'{bit:>4}'
            lines.append(f'[dim]{hdr}[/dim]')

            vals = ''
            for bit in range(row_start_bit, row_end_bit - 1, -1):
                bv = (value >> bit) & 1 if value is not None else '-'
                if bit in field_map:
                    color = FIELD_COLORS[field_map[bit]]
                    vals += f'[{color}]{bv:>4}[/{color}]'
                else:
                    vals += f'[dim]{bv:>4}[/dim]'
            lines.append(vals)

        legend = []
        for i, field in enumerate(reg.fields):
            color = FIELD_COLORS[i % len(FIELD_COLORS)]
            legend.append(f'[{color}]{field.name}[/{color}]')
        if legend:
            lines.append('')
            lines.append('  '.join(legend))

        self.update('\n'.join(lines))


class RegisterEditor(VerticalScroll):
    """Hex/binary text plus one control per field, kept in step."""

    class ValueChanged(Message):
        def __init__(self, register_id: str, value: int | None) -> None:
            super().__init__()
            self.register_id = register_id
            self.value = value

    def __init__(self, reg: RegisterDefinition, sync: RegisterSynchronizer, **kwargs) -> None:
        super().__init__(**kwargs)
        self.reg = reg
        self.sync = sync
        self.value: int | None = None
        self._last_diagnostics: list[Diagnostic] = []

    def compose(self) -> ComposeResult:
        reg = self.reg

        title = f'[bold]{reg.id}[/bold]'
        if reg.title:
            title += f'  {reg.title}'
        if reg.is_read_only:
            title += '  [dim](read-only)[/dim]'
        yield Static(title, classes='register-title')
        if reg.description:
            yield Static(f'[dim]{reg.description}[/dim]', classes='register-description')

        with Horizontal(classes='hex-row'):
            yield Label('0x', classes='hex-prefix')
            yield Input(placeholder='0' * reg.hex_digits, id='hex-input')
        yield Static(binary_text(0, reg.width), id='binary-display')
        yield BitDiagram(reg, classes='bit-diagram')

        for i, field in enumerate(reg.fields):
            with Horizontal(classes='field-row'):
                yield Label(field.name, classes='field-name')
                yield Label(field.bit_label, classes='field-bits')
                yield self._make_control(i, field)

    def _make_control(self, index: int, field: FieldDefinition) -> Widget:
        cid = control_id(index)
        read_only = self.reg.is_read_only

        if not field.is_configured:
            return Static('', id=cid, classes='field-value')
        if isinstance(field, CheckboxField):
            return Checkbox(field.description or '', value=False, id=cid, disabled=read_only)
        if isinstance(field, SelectField):
            return Select(
                select_options(field),
                value=field.default_option,
                allow_blank=False,
                id=cid,
                disabled=read_only,
            )
        return Static('', id=cid, classes='field-value')

    def on_mount(self) -> None:
        self.apply_hex('')

    # --- Passes ---

    def apply_hex(self, raw_hex: str) -> None:
        """Run a decode pass for ``raw_hex`` and update every view."""
        result = self.sync.decode(self.reg.id, raw_hex)

        with self.prevent(Input.Changed, Checkbox.Changed, Select.Changed):
            hex_input = self.query_one('#hex-input', Input)
            if hex_input.value != result.sanitized_hex:
                hex_input.value = result.sanitized_hex
            self._apply_field_states(result.fields)

        self._set_value(result.value, result.binary_text)
        self._report(result.diagnostics)

    def apply_controls(self) -> None:
        """Run an encode pass from the current control states."""
        result = self.sync.encode(self.reg.id, self.collect_controls())
        if result is None:
            return

        with self.prevent(Input.Changed):
            self.query_one('#hex-input', Input).value = result.hex_text

        self._set_value(result.value, result.binary_text)
        self._report(result.diagnostics)

    def clear(self) -> None:
        """Blank the editor without running a decode pass."""
        result = self.sync.clear(self.reg.id)

        with self.prevent(Input.Changed, Checkbox.Changed, Select.Changed):
            self.query_one('#hex-input', Input).value = ''
            self._apply_field_states(result.fields)

        self._set_value(None, binary_text(0, self.reg.width))
        self._report(result.diagnostics)

    def collect_controls(self) -> dict[str, object]:
        controls: dict[str, object] = {}
        for i, field in enumerate(self.reg.fields):
            if not field.is_configured:
                continue
            if isinstance(field, CheckboxField):
                controls[field.name] = self.query_one(f'#{control_id(i)}', Checkbox).value
            elif isinstance(field, SelectField):
                controls[field.name] = self.query_one(f'#{control_id(i)}', Select).value
        return controls

    def _apply_field_states(self, states: dict[str, FieldState]) -> None:
        for i, field in enumerate(self.reg.fields):
            state = states.get(field.name)
            cid = f'#{control_id(i)}'

            if isinstance(state, CheckboxState):
                self.query_one(cid, Checkbox).value = state.checked
            elif isinstance(state, SelectState):
                self.query_one(cid, Select).value = state.value
            elif isinstance(state, LabelState):
                control = self.query_one(cid, Static)
                control.update(state.text)
                control.set_class(state.alert, 'reserved-non-zero')
            elif isinstance(state, UnknownState):
                control = self.query_one(cid, Static)
                control.update(state.marker)
                control.add_class('unknown')

    def _set_value(self, value: int | None, binary: str) -> None:
        self.value = value
        self.query_one('#binary-display', Static).update(binary)
        self.query_one(BitDiagram).set_value(value)
        self.post_message(self.ValueChanged(self.reg.id, value))

    def _report(self, diagnostics: list[Diagnostic]) -> None:
        # Only surface what changed since the previous pass
        for diag in diagnostics:
            if diag in self._last_diagnostics:
                continue
            severity = 'error' if diag.severity is Severity.Error else 'warning'
            self.notify(str(diag), severity=severity)
        self._last_diagnostics = list(diagnostics)

    # --- Event handlers ---

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != 'hex-input':
            return
        event.stop()
        self.apply_hex(event.value)

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        event.stop()
        self.apply_controls()

    def on_select_changed(self, event: Select.Changed) -> None:
        event.stop()
        self.apply_controls()
