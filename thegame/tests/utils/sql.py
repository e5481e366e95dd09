"""Capture the SQL an engine sends to the database driver."""

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import Engine

COMMIT = "COMMIT"


@dataclass
class CapturedStatement:
    sql: str
    params: tuple[Any, ...] = ()


@dataclass
class StatementRecorder:
    """Records executed statements (whitespace normalised) and commits."""

    statements: list[CapturedStatement] = field(default_factory=list)

    def attach(self, engine: Engine) -> None:
        event.listen(engine, "before_cursor_execute", self._before_cursor_execute)
        event.listen(engine, "commit", self._commit)

    def detach(self, engine: Engine) -> None:
        event.remove(engine, "before_cursor_execute", self._before_cursor_execute)
        event.remove(engine, "commit", self._commit)

    def clear(self) -> None:
        self.statements.clear()

    def _before_cursor_execute(
        self, conn, cursor, statement, parameters, context, executemany
    ) -> None:
        if executemany:
            params = tuple(value for row in parameters for value in row)
        else:
            params = tuple(parameters or ())
        self.statements.append(CapturedStatement(" ".join(statement.split()), params))

    def _commit(self, conn) -> None:
        self.statements.append(CapturedStatement(COMMIT))

    def matching(self, *prefixes: str) -> list[CapturedStatement]:
        """Statements starting with any of ``prefixes``, in execution order."""
        return [s for s in self.statements if s.sql.startswith(prefixes)]
