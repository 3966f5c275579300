"""Left-pane register tree widget for regview-tui."""

from __future__ import annotations

from textual.message import Message
from textual.widgets import Tree
from textual.widgets._tree import TreeNode

from regview.fields import FieldDefinition, RegisterDefinition
from regview.formatting import dec_to_hex

from .state import AppState
from .types import FieldNodeData, RegisterNodeData


class RegisterTree(Tree):
    """Left pane: register/field tree."""

    class RegisterSelected(Message):
        def __init__(self, reg: RegisterDefinition) -> None:
            super().__init__()
            self.reg = reg

    class FieldSelected(Message):
        def __init__(self, reg: RegisterDefinition, field: FieldDefinition) -> None:
            super().__init__()
            self.reg = reg
            self.field = field

    def __init__(self) -> None:
        super().__init__('Registers', id='reg-tree')
        self._reg_nodes: dict[str, TreeNode] = {}

    def _make_reg_label(self, reg: RegisterDefinition, state: AppState) -> str:
        label = reg.id
        if reg.title:
            label += f' ({reg.title})'
        value = state.values.get(reg.id)
        if value is not None:
            label += f' = 0x{dec_to_hex(value, reg.hex_digits)}'
        if reg.is_read_only:
            label += ' [dim]ro[/dim]'
        return label

    def _make_field_label(self, field: FieldDefinition) -> str:
        label = f'{field.name} [{field.bit_label}]'
        if not field.is_configured:
            label += ' [red]?[/red]'
        return label

    def rebuild(self, state: AppState) -> None:
        self.clear()
        self._reg_nodes.clear()

        if not state.registry:
            self.root.add_leaf('No registers defined.')
            return

        if state.config_path:
            self.root.set_label(state.config_path)

        for reg in state.registry.values():
            reg_label = self._make_reg_label(reg, state)
            if reg.fields:
                reg_node = self.root.add(reg_label, data=RegisterNodeData(reg))
                for field in reg.fields:
                    reg_node.add_leaf(self._make_field_label(field), data=FieldNodeData(reg, field))
                # Fields collapsed by default
            else:
                reg_node = self.root.add_leaf(reg_label, data=RegisterNodeData(reg))
            self._reg_nodes[reg.id] = reg_node

        self.root.expand()

    def update_value(self, state: AppState, register_id: str) -> None:
        """Update a register label in-place after its value changed."""
        node = self._reg_nodes.get(register_id)
        if node is not None:
            node.set_label(self._make_reg_label(state.registry[register_id], state))

    def on_tree_node_highlighted(self, event: Tree.NodeHighlighted) -> None:
        data = event.node.data
        # The root and placeholder leaves carry no data and keep the selection
        if isinstance(data, RegisterNodeData):
            self.post_message(self.RegisterSelected(data.reg))
        elif isinstance(data, FieldNodeData):
            self.post_message(self.FieldSelected(data.reg, data.field))
