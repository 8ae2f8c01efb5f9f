import logging
import threading
from dataclasses import dataclass

from .compiler import ConstraintParser
from .constraints import Constraint, FunctionalConstraint, GeneralConstraint
from .utils import VerboseLevel, setup_logging
from .variables import Variable

logger = logging.getLogger(__name__)


@dataclass
class Statistics:
    variables: int = 0
    auxiliary_variables: int = 0
    functional_constraints: int = 0
    general_constraints: int = 0
    expressions: int = 0

    @property
    def constraints(self) -> int:
        return self.functional_constraints + self.general_constraints


class Problem:
    _id = 0

    def __init__(
        self,
        name: str | None = None,
        *,
        verbose: VerboseLevel | str | None = None,
    ) -> None:
        Problem._id += 1
        self.name = name or f"problem{Problem._id}"
        self.verbose = VerboseLevel.parse(verbose)
        setup_logging(self.verbose)

        self.statistics = Statistics()
        self._variables: list[Variable] = []
        self._named: dict[str, Variable] = {}
        self._members: set[Variable] = set()
        self._constraints: list[Constraint] = []
        self._lock = threading.RLock()

    @property
    def variables(self) -> list[Variable]:
        return list(self._variables)

    @property
    def named_variables(self) -> list[Variable]:
        return [v for v in self._variables if v.name is not None]

    @property
    def auxiliary_variables(self) -> list[Variable]:
        return [v for v in self._variables if v.auxiliary]

    @property
    def constraints(self) -> list[Constraint]:
        return list(self._constraints)

    def __contains__(self, variable: object) -> bool:
        return variable in self._members

    def get_variable(self, name: str) -> Variable | None:
        return self._named.get(name)

    def add_variable(self, variable: Variable) -> None:
        with self._lock:
            if variable in self:
                raise ValueError(
                    f"Variable {variable} is already part of problem {self.name}"
                )
            if variable.name is not None:
                if variable.name in self._named:
                    raise ValueError(
                        f"Problem {self.name} already has a variable named '{variable.name}'"
                    )
                self._named[variable.name] = variable

            self._variables.append(variable)
            self._members.add(variable)
            self.statistics.variables += 1
            if variable.auxiliary:
                self.statistics.auxiliary_variables += 1

    def intern(self, name: str) -> Variable:
        """Return the variable called ``name``, creating it on first use."""
        with self._lock:
            existing = self._named.get(name)
            if existing is not None:
                return existing
            variable = Variable(name)
            self.add_variable(variable)
            logger.debug(f"New variable '{name}' in {self.name}")
            return variable

    def var(self, name: str) -> Variable:
        variable = Variable(name)
        self.add_variable(variable)
        return variable

    def add_constraint(self, constraint: Constraint) -> None:
        with self._lock:
            for variable in constraint.scope:
                if variable not in self:
                    raise ValueError(
                        f"Constraint {constraint} involves variable {variable} "
                        f"which is not part of problem {self.name}"
                    )
            self._constraints.append(constraint)
            if isinstance(constraint, FunctionalConstraint):
                self.statistics.functional_constraints += 1
            elif isinstance(constraint, GeneralConstraint):
                self.statistics.general_constraints += 1

    def record_expression(self) -> None:
        with self._lock:
            self.statistics.expressions += 1

    def ctr(self, expression: str) -> None:
        ConstraintParser(self).split(expression)

    def constraints_of(self, variable: Variable) -> list[Constraint]:
        return [c for c in self._constraints if c.involves(variable)]

    def to_gml(self) -> str:
        """Export the hypergraph as GML.

        Variables and constraints are both nodes, each constraint is linked to
        the variables of its scope.
        """
        lines = ["graph [", "  directed 0"]
        node_ids: dict[int, int] = {}
        for variable in self._variables:
            node_ids[id(variable)] = len(node_ids)
            lines.extend(
                [
                    "  node [",
                    f"    id {node_ids[id(variable)]}",
                    f'    label "{variable.label}"',
                    f'    type "{variable.node_label().lower()}"',
                    "  ]",
                ]
            )

        for offset, constraint in enumerate(self._constraints):
            constraint_id = len(node_ids) + offset
            lines.extend(
                [
                    "  node [",
                    f"    id {constraint_id}",
                    f'    label "{constraint.operator}"',
                    '    type "constraint"',
                    "  ]",
                ]
            )
            for variable in constraint.scope:
                lines.extend(
                    [
                        "  edge [",
                        f"    source {constraint_id}",
                        f"    target {node_ids[id(variable)]}",
                        "  ]",
                    ]
                )

        lines.append("]")
        return "\n".join(lines)

    def __repr__(self):
        lines = [str(v) for v in self._variables]
        lines.extend(str(c) for c in self._constraints)
        return "\n".join(lines)
