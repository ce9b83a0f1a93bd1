"""Statement executors for evalfilter, installed onto the statement node classes."""
from __future__ import annotations
from typing import Any

from .ast_nodes import IfStatement, ReturnStatement, CallStatement
from .environment import Environment
from .runtime import Outcome, CONTINUE, Terminate, run, does_match


def _install_statement_executors():
    """Install `execute` onto each built-in statement kind."""

    def _exec_if(self: IfStatement, env: Environment, obj: Any) -> Outcome:
        # The outcome of whichever branch runs is the outcome of the if.
        if does_match(self, env, obj):
            return run(self.true_branch, env, obj)
        return run(self.false_branch, env, obj)

    def _exec_return(self: ReturnStatement, env: Environment, obj: Any) -> Outcome:
        return Terminate(self.value)

    def _exec_call(self: CallStatement, env: Environment, obj: Any) -> Outcome:
        self.call.resolve(env, obj)
        return CONTINUE

    IfStatement.execute = _exec_if
    ReturnStatement.execute = _exec_return
    CallStatement.execute = _exec_call


_install_statement_executors()
