from .compiler import ConstraintParser, InvalidExpressionError
from .constraints import Constraint, FunctionalConstraint, GeneralConstraint
from .evaluator import EvaluationError, Evaluator
from .problem import Problem, Statistics
from .scanner import Node, NodeKind, PredicateParseError, scan
from .utils import VerboseLevel, setup_logging
from .variables import Variable
from .viz import Renderer, viz

ParseError = PredicateParseError

__all__ = [
    "Constraint",
    "ConstraintParser",
    "EvaluationError",
    "Evaluator",
    "FunctionalConstraint",
    "GeneralConstraint",
    "InvalidExpressionError",
    "Node",
    "NodeKind",
    "ParseError",
    "PredicateParseError",
    "Problem",
    "Renderer",
    "Statistics",
    "Variable",
    "VerboseLevel",
    "scan",
    "setup_logging",
    "viz",
]
