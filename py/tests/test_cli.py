"""Tests for the regview command-line interface."""

from __future__ import annotations

import contextlib
import io
import os
import unittest

from regview.cli import describe_state, main, parse_args, parse_assignments, parse_flag
from regview.config import load_registry
from regview.sync import CheckboxState, LabelState, SelectState, UnknownState

REGISTERS_JSON = os.path.join(os.path.dirname(__file__), 'data', 'registers.json')


def run_main(argv: list[str]) -> tuple[str, str, int]:
    out = io.StringIO()
    err = io.StringIO()
    code = 0
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        try:
            main(argv)
        except SystemExit as e:
            code = e.code
    return out.getvalue(), err.getvalue(), code


class ParseTests(unittest.TestCase):
    def test_parse_args_decode(self):
        args = parse_args(['-c', 'regs.json', 'decode', 'CTRL', '00A1'])
        self.assertEqual(args.config, 'regs.json')
        self.assertEqual(args.command, 'decode')
        self.assertEqual(args.register, 'CTRL')
        self.assertEqual(args.value, '00A1')

    def test_parse_args_encode(self):
        args = parse_args(['-c', 'regs.json', 'encode', 'CTRL', 'EN=1', 'MODE=5'])
        self.assertEqual(args.assignments, ['EN=1', 'MODE=5'])

    def test_parse_flag(self):
        self.assertTrue(parse_flag('1'))
        self.assertTrue(parse_flag('On'))
        self.assertFalse(parse_flag('false'))
        with self.assertRaises(ValueError):
            parse_flag('maybe')

    def test_parse_assignments(self):
        reg = load_registry(REGISTERS_JSON)['CTRL']
        controls = parse_assignments(reg, ['EN=yes', 'MODE=0x5'])
        self.assertEqual(controls, {'EN': True, 'MODE': 5})

        controls = parse_assignments(reg, [])
        self.assertEqual(controls, {'EN': False, 'MODE': 0})

    def test_parse_assignments_errors(self):
        reg = load_registry(REGISTERS_JSON)['CTRL']
        for item in ('EN', 'NOPE=1', 'REV=3', 'MODE=x'):
            with self.subTest(item=item):
                with self.assertRaises(ValueError):
                    parse_assignments(reg, [item])

    def test_describe_state(self):
        reg = load_registry(REGISTERS_JSON)['CTRL']
        mode = reg.get_field('MODE')
        self.assertEqual(describe_state(mode, SelectState(5)), '5 (Turbo)')
        self.assertEqual(describe_state(mode, SelectState(3)), '3')
        self.assertEqual(describe_state(reg.get_field('EN'), CheckboxState(True)), 'True')
        self.assertEqual(describe_state(reg.get_field('RSVD'), LabelState('0x3', alert=True)), '0x3 (!)')
        self.assertEqual(describe_state(reg.get_field('RSVD'), UnknownState()), '?')


class CommandTests(unittest.TestCase):
    def test_list(self):
        out, _err, code = run_main(['-c', REGISTERS_JSON, 'list'])
        self.assertEqual(code, 0)
        for name in ('CTRL', 'STATUS', 'MODE', '7,6,5', 'select'):
            self.assertIn(name, out)

    def test_decode(self):
        out, _err, code = run_main(['-c', REGISTERS_JSON, 'decode', 'CTRL', '00a1'])
        self.assertEqual(code, 0)
        self.assertIn('CTRL: 0x00A1', out)
        self.assertIn('0000 0000 1010 0001', out)
        self.assertIn('5 (Turbo)', out)

    def test_encode(self):
        out, _err, code = run_main(['-c', REGISTERS_JSON, 'encode', 'CTRL', 'EN=1', 'MODE=5'])
        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines(), ['0x00A1', '0000 0000 1010 0001'])

    def test_encode_read_only(self):
        _out, err, code = run_main(['-c', REGISTERS_JSON, 'encode', 'STATUS', 'READY=1'])
        self.assertEqual(code, 1)
        self.assertIn('read-only', err)

    def test_unknown_register(self):
        _out, err, code = run_main(['-c', REGISTERS_JSON, 'decode', 'NOPE', '0'])
        self.assertEqual(code, 1)
        self.assertIn("unknown register 'NOPE'", err)

    def test_missing_config(self):
        _out, err, code = run_main(['-c', '/nonexistent/regs.json', 'list'])
        self.assertEqual(code, 1)
        self.assertIn('Error', err)


if __name__ == '__main__':
    unittest.main()
