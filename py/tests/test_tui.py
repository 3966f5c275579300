"""Tests for regview-tui."""

from __future__ import annotations

import os
import unittest

import pytest

from regview.config import load_registry

REGISTERS_JSON = os.path.join(os.path.dirname(__file__), 'data', 'registers.json')


class CliTests(unittest.TestCase):
    def test_parse_args(self):
        from regview.tui.cli import parse_args

        args = parse_args(['-c', 'regs.json'])
        self.assertEqual(args.config, 'regs.json')
        self.assertIsNone(args.register)
        self.assertIsNone(args.log)

    def test_parse_args_with_register(self):
        from regview.tui.cli import parse_args

        args = parse_args(['-c', 'regs.json', '--log', 'out.log', 'CTRL'])
        self.assertEqual(args.register, 'CTRL')
        self.assertEqual(args.log, 'out.log')


class TypesTests(unittest.TestCase):
    def test_select_options(self):
        from regview.tui.types import select_options

        registry = load_registry(REGISTERS_JSON)
        mode = registry['CTRL'].get_field('MODE')
        self.assertEqual(
            select_options(mode),
            [('0: Off', 0), ('1: Slow', 1), ('2: Fast', 2), ('5: Turbo', 5)],
        )

    def test_select_options_adds_default(self):
        from regview.fields import SelectField
        from regview.tui.types import select_options

        field = SelectField('S', bits=[1, 0], options={1: 'one'})
        self.assertEqual(select_options(field), [('0', 0), ('1: one', 1)])


def _make_app(initial_register: str | None = None):
    from regview.tui.app import RegviewTuiApp

    return RegviewTuiApp(
        load_registry(REGISTERS_JSON),
        config_path=REGISTERS_JSON,
        initial_register=initial_register,
    )


@pytest.mark.asyncio
async def test_app_starts():
    app = _make_app()
    async with app.run_test() as pilot:
        await pilot.pause()
        tree = app.query_one('#reg-tree')
        assert tree is not None
        assert app.state.selected == 'CTRL'
        assert app.current_editor().reg.id == 'CTRL'


@pytest.mark.asyncio
async def test_tree_highlight_switches_register():
    from regview.tui.tree import RegisterTree

    app = _make_app('CTRL')
    async with app.run_test() as pilot:
        await pilot.pause()
        tree = app.query_one(RegisterTree)

        # Line 0 is the root, registers follow in definition order
        tree.cursor_line = 2
        await pilot.pause()
        assert app.state.selected == 'STATUS'
        assert app.current_editor().reg.id == 'STATUS'

        tree.cursor_line = 0
        await pilot.pause()
        assert app.state.selected == 'STATUS'


@pytest.mark.asyncio
async def test_hex_edit_updates_fields():
    from textual.widgets import Checkbox, Input, Select, Static

    app = _make_app('CTRL')
    async with app.run_test() as pilot:
        await pilot.pause()
        editor = app.current_editor()

        editor.query_one('#hex-input', Input).value = '08ac'
        await pilot.pause()

        assert editor.query_one('#hex-input', Input).value == '08AC'
        assert editor.value == 0x08AC
        assert app.state.values['CTRL'] == 0x08AC
        # EN is field 0, MODE field 3, RSVD field 2, RSVD1 field 4
        assert editor.query_one('#field-0', Checkbox).value is False
        assert editor.query_one('#field-3', Select).value == 5
        assert editor.query_one('#field-2', Static).has_class('reserved-non-zero')
        assert editor.query_one('#field-4', Static).has_class('reserved-non-zero')


@pytest.mark.asyncio
async def test_control_edit_updates_hex():
    from textual.widgets import Checkbox, Input

    app = _make_app('CTRL')
    async with app.run_test() as pilot:
        await pilot.pause()
        editor = app.current_editor()

        editor.query_one('#hex-input', Input).value = '00A0'
        await pilot.pause()

        editor.query_one('#field-0', Checkbox).value = True
        await pilot.pause()

        assert editor.query_one('#hex-input', Input).value == '00A1'
        assert editor.value == 0xA1


@pytest.mark.asyncio
async def test_read_only_register_ignores_controls():
    from textual.widgets import Checkbox, Input

    app = _make_app('STATUS')
    async with app.run_test() as pilot:
        await pilot.pause()
        editor = app.current_editor()
        assert editor.query_one('#field-0', Checkbox).disabled

        editor.query_one('#hex-input', Input).value = '3'
        await pilot.pause()
        assert editor.query_one('#field-0', Checkbox).value is True

        editor.apply_controls()
        assert editor.query_one('#hex-input', Input).value == '3'


@pytest.mark.asyncio
async def test_clear():
    from textual.widgets import Checkbox, Input, Static

    app = _make_app('CTRL')
    async with app.run_test() as pilot:
        await pilot.pause()
        editor = app.current_editor()

        editor.query_one('#hex-input', Input).value = '08A1'
        await pilot.pause()

        app.action_clear()
        await pilot.pause()

        assert editor.query_one('#hex-input', Input).value == ''
        assert editor.query_one('#field-0', Checkbox).value is False
        assert not editor.query_one('#field-4', Static).has_class('reserved-non-zero')
        assert editor.value is None


@pytest.mark.asyncio
async def test_misconfigured_register_shows_unknown():
    from textual.widgets import Static

    app = _make_app('BROKEN')
    async with app.run_test() as pilot:
        await pilot.pause()
        editor = app.current_editor()
        assert editor.query_one('#field-1', Static).has_class('unknown')

        app.action_clear()
        await pilot.pause()
        assert editor.query_one('#field-1', Static).has_class('unknown')


if __name__ == '__main__':
    unittest.main()
