import logging
import operator
from collections.abc import Callable, Mapping
from typing import Any

from .scanner import Node, scan

logger = logging.getLogger(__name__)


class EvaluationError(ValueError):
    pass


def _div(left: int, right: int) -> int:
    if right == 0:
        raise EvaluationError("Division by zero")
    quotient = abs(left) // abs(right)
    return quotient if (left >= 0) == (right >= 0) else -quotient


def _mod(left: int, right: int) -> int:
    return left - right * _div(left, right)


def _pow(base: int, exponent: int) -> int:
    if exponent < 0:
        raise EvaluationError(f"Negative exponent {exponent}")
    return base**exponent


_PREDEFINED: dict[str, Callable[..., Any]] = {
    "neg": operator.neg,
    "abs": abs,
    "add": operator.add,
    "sub": operator.sub,
    "mul": operator.mul,
    "div": _div,
    "mod": _mod,
    "pow": _pow,
    "min": min,
    "max": max,
    "eq": operator.eq,
    "ne": operator.ne,
    "neq": operator.ne,
    "ge": operator.ge,
    "gt": operator.gt,
    "le": operator.le,
    "lt": operator.lt,
    "not": operator.not_,
    "xor": lambda left, right: bool(left) != bool(right),
    "iff": lambda left, right: bool(left) == bool(right),
}

_CONTROL_FLOW = ("if", "ite", "and", "or")

_CONSTANTS: dict[str, bool] = {"true": True, "false": False}


class Evaluator:
    """Evaluates predicate expressions over integer and boolean values.

    Function names follow the XCSP predicate conventions. ``if``/``ite``,
    ``and`` and ``or`` evaluate their operands lazily, every other function
    receives its evaluated operands followed by the node parameters.
    Functions registered on an evaluator are only visible to that evaluator.
    """

    def __init__(
        self, functions: Mapping[str, Callable[..., Any]] | None = None
    ) -> None:
        self._functions = dict(_PREDEFINED)
        for name, callback in (functions or {}).items():
            self.register_function(name, callback)

    def register_function(self, name: str, callback: Callable[..., Any]) -> None:
        if name in _CONTROL_FLOW:
            raise ValueError(f"Can not override builtin control flow '{name}'")
        if name in _PREDEFINED:
            raise ValueError(f"Can not override predefined function '{name}'")
        self._functions[name] = callback

    def evaluate(
        self, expression: str, bindings: Mapping[str, Any] | None = None
    ) -> bool:
        result = self.evaluate_node(scan(expression), bindings)
        logger.debug(f"Evaluated '{expression}' to {result}")
        return bool(result)

    def evaluate_node(
        self, node: Node, bindings: Mapping[str, Any] | None = None
    ) -> Any:
        return self._eval(node, bindings or {})

    def _eval(self, node: Node, bindings: Mapping[str, Any]) -> Any:
        if node.is_integer():
            return node.value

        if node.is_identifier():
            if node.operator in bindings:
                return bindings[node.operator]
            if node.operator in _CONSTANTS:
                return _CONSTANTS[node.operator]
            raise EvaluationError(f"Unbound identifier '{node.operator}'")

        name = node.operator
        if name in ("if", "ite"):
            if len(node.children) != 3:
                raise EvaluationError(
                    f"'{name}' expects 3 arguments but got {len(node.children)}"
                )
            condition, then_branch, else_branch = node.children
            branch = (
                then_branch if self._eval(condition, bindings) else else_branch
            )
            return self._eval(branch, bindings)

        if name in ("and", "or"):
            short_circuit = name == "or"
            for child in node.children:
                if bool(self._eval(child, bindings)) is short_circuit:
                    return short_circuit
            return not short_circuit

        function = self._functions.get(name)
        if function is None:
            raise EvaluationError(f"Unknown function '{name}'")

        args = [self._eval(child, bindings) for child in node.children]
        args.extend(node.parameters)
        try:
            return function(*args)
        except EvaluationError:
            raise
        except (TypeError, ValueError) as e:
            raise EvaluationError(f"Invalid call {node}: {e}") from e
