"""Command-line interface for regview-tui."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from regview.config import load_registry
from regview.fields import RegisterDefinitionError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='regview-tui',
        description='Interactive register value editor',
    )
    parser.add_argument('-c', '--config', metavar='FILE', required=True,
                        help='JSON file with register definitions')
    parser.add_argument('--log', metavar='FILE', help='Write diagnostics to FILE')
    parser.add_argument('register', nargs='?', help='Register to show first')

    return parser.parse_args(argv)


def main(argv: list[str] | None = None):
    args = parse_args(argv)

    # Logging to the terminal would corrupt the screen
    logging.basicConfig(
        filename=args.log or os.devnull,
        level=logging.DEBUG if args.log else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        registry = load_registry(args.config)
    except (OSError, RegisterDefinitionError) as e:
        print(f'Error: {e}', file=sys.stderr)
        sys.exit(1)

    if args.register is not None and args.register not in registry:
        print(f'Error: unknown register {args.register!r}', file=sys.stderr)
        sys.exit(1)

    from .app import RegviewTuiApp

    app = RegviewTuiApp(registry, config_path=args.config, initial_register=args.register)
    app.run()
