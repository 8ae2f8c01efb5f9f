from collections.abc import Generator, Sequence
from typing import override

from .scanner import ParameterType
from .variables import Variable


class Constraint:
    def __init__(
        self,
        operator: str,
        parameters: Sequence[ParameterType] | None = None,
        operands: Sequence[Variable] = (),
    ):
        if self.__class__.__name__ == "Constraint":
            raise TypeError(
                "Constraint is abstract, use GeneralConstraint or FunctionalConstraint"
            )
        for idx, operand in enumerate(operands):
            if not isinstance(operand, Variable):
                raise TypeError(
                    f"Operand {idx + 1} of constraint '{operator}' has incompatible type. "
                    f"Expected Variable, got {type(operand).__name__}"
                )

        self.operator = operator
        self.parameters: list[ParameterType] = list(parameters or [])
        self.operands: list[Variable] = list(operands)

    @property
    def arity(self) -> int:
        return len(self.operands)

    @property
    def scope(self) -> list[Variable]:
        return list(self.operands)

    def involves(self, variable: Variable) -> bool:
        return any(v is variable for v in self.scope)

    def format_call(self) -> str:
        name = self.operator
        if self.parameters:
            name += "{" + ", ".join(str(p) for p in self.parameters) + "}"
        args_str = ", ".join(str(operand) for operand in self.operands)
        return f"{name}({args_str})"

    def node_label(self) -> str:
        return self.__class__.__name__

    def node_symbol(self) -> str | None:
        return self.operator

    def __repr__(self):
        return self.format_call()

    def __str__(self) -> str:
        return self.__repr__()

    def __iter__(self) -> Generator[Variable]:
        yield from self.scope


class GeneralConstraint(Constraint):
    """A relation holding over its operands, with no result variable."""


class FunctionalConstraint(Constraint):
    """Defines ``result`` as ``operator`` applied to the operands."""

    def __init__(
        self,
        result: Variable,
        operator: str,
        parameters: Sequence[ParameterType] | None = None,
        operands: Sequence[Variable] = (),
    ):
        if not isinstance(result, Variable):
            raise TypeError(
                f"Result of constraint '{operator}' must be a Variable, got {type(result).__name__}"
            )
        super().__init__(operator, parameters, operands)
        self.result = result

    @property
    @override
    def scope(self) -> list[Variable]:
        return [self.result, *self.operands]

    def __repr__(self):
        return f"{self.result} = {self.format_call()}"
