import logging
from typing import TYPE_CHECKING

from .constraints import FunctionalConstraint, GeneralConstraint
from .scanner import Node, scan
from .variables import Variable

if TYPE_CHECKING:
    from .problem import Problem

logger = logging.getLogger(__name__)


class InvalidExpressionError(ValueError):
    pass


class ConstraintParser:
    """Lowers predicate expressions into the variables and constraints of a
    problem.

    Every nested call gets an auxiliary result variable and a functional
    constraint defining it. The outermost call becomes the single general
    constraint asserted by the expression. Identifiers are interned by name
    in the problem, integer literals become fresh constant variables.
    """

    def __init__(self, problem: "Problem") -> None:
        self.problem = problem

    def split(self, expression: str) -> None:
        root = scan(expression)

        if root.is_leaf():
            raise InvalidExpressionError(
                f"Constraint expected, got {root.kind.value} '{root.operator}'"
            )

        nb_variables = len(self.problem.variables)
        nb_constraints = len(self.problem.constraints)

        operands = [self.lower_operand(child) for child in root.children]
        self.problem.add_constraint(
            GeneralConstraint(root.operator, root.parameters, operands)
        )
        self.problem.record_expression()

        logger.debug(
            f"Compiled '{expression}': "
            f"{len(self.problem.variables) - nb_variables} variables, "
            f"{len(self.problem.constraints) - nb_constraints} constraints"
        )

    def lower_operand(self, node: Node) -> Variable:
        if node.is_identifier():
            return self.problem.intern(node.operator)

        if node.is_integer():
            constant = Variable.constant(node.value)
            self.problem.add_variable(constant)
            return constant

        result = Variable(auxiliary=True)
        self.problem.add_variable(result)

        operands = [self.lower_operand(child) for child in node.children]
        self.problem.add_constraint(
            FunctionalConstraint(
                result, node.operator, node.parameters, operands
            )
        )
        return result
