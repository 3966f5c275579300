"""Diagnostic events produced while decoding, encoding or clearing a register."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum


class Severity(Enum):
    Warning = logging.WARNING
    Error = logging.ERROR


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    register_id: str
    field_name: str | None
    message: str

    def __str__(self) -> str:
        where = self.register_id
        if self.field_name:
            where += f'.{self.field_name}'
        return f'{where}: {self.message}'


class DiagnosticSink:
    """Collects diagnostics for one pass and mirrors them to a logger."""

    def __init__(self, register_id: str, logger: logging.Logger) -> None:
        self.register_id = register_id
        self.logger = logger
        self.items: list[Diagnostic] = []

    def warning(self, field_name: str | None, message: str) -> None:
        self._add(Severity.Warning, field_name, message)

    def error(self, field_name: str | None, message: str) -> None:
        self._add(Severity.Error, field_name, message)

    def _add(self, severity: Severity, field_name: str | None, message: str) -> None:
        diag = Diagnostic(severity, self.register_id, field_name, message)
        self.items.append(diag)
        self.logger.log(severity.value, str(diag))
