import math
import re
from dataclasses import dataclass, field
from enum import Enum

ParameterType = int | float | str

MAX_DEPTH = 256

_IDENTIFIER = re.compile(r"[A-Za-z][A-Za-z0-9_]*\Z")
_INTEGER = re.compile(r"-?[0-9]+\Z")
_TOKEN = re.compile(
    r"""
    (?P<space>\s+)
    | (?P<string>"[^"]*")
    | (?P<decimal>-?[0-9]+(?:\.[0-9]+(?:[eE][+-]?[0-9]+)?|[eE][+-]?[0-9]+))
    | (?P<word>-?[A-Za-z0-9_]+)
    | (?P<punct>[(){},])
    """,
    re.VERBOSE,
)


class PredicateParseError(ValueError):
    def __init__(self, message: str, expression: str, position: int):
        self.expression = expression
        self.position = position
        self.line = expression.count("\n", 0, position) + 1
        self.column = position - (expression.rfind("\n", 0, position) + 1) + 1
        super().__init__(
            f"{message} at line {self.line}, column {self.column}"
        )


class NodeKind(Enum):
    IDENTIFIER = "identifier"
    INTEGER = "integer"
    OPERATOR = "operator"


def _format_parameter(value: ParameterType) -> str:
    if isinstance(value, str):
        if _IDENTIFIER.match(value) and not _is_integer(value):
            return value
        return f'"{value}"'
    return str(value)


def _is_integer(text: str) -> bool:
    return _INTEGER.match(text) is not None


@dataclass
class Node:
    """A node of a parsed predicate expression.

    Leaves carry an identifier or an integer literal in ``operator``. Operator
    nodes carry the function name, their operands in ``children`` and the
    configuration literals given between braces in ``parameters``.
    """

    operator: str
    kind: NodeKind = NodeKind.OPERATOR
    children: list["Node"] = field(default_factory=list)
    parameters: list[ParameterType] = field(default_factory=list)

    def is_leaf(self) -> bool:
        return self.kind is not NodeKind.OPERATOR

    def is_identifier(self) -> bool:
        return self.kind is NodeKind.IDENTIFIER

    def is_integer(self) -> bool:
        return self.kind is NodeKind.INTEGER

    @property
    def value(self) -> int:
        if not self.is_integer():
            raise TypeError(f"Node {self.operator} is not an integer literal")
        return int(self.operator)

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()

    def node_label(self) -> str:
        return self.kind.name.capitalize()

    def node_symbol(self) -> str | None:
        if self.parameters:
            params = ",".join(_format_parameter(p) for p in self.parameters)
            return f"{self.operator}{{{params}}}"
        return self.operator

    def __str__(self) -> str:
        if self.is_leaf():
            return self.operator
        args = ",".join(str(child) for child in self.children)
        return f"{self.node_symbol()}({args})"


@dataclass
class _Token:
    kind: str
    text: str
    position: int


class _Scanner:
    def __init__(self, expression: str):
        self.expression = expression
        self.tokens = self._tokenize(expression)
        self.index = 0

    def _error(self, message: str, position: int | None = None):
        if position is None:
            position = self._peek().position
        return PredicateParseError(message, self.expression, position)

    def _tokenize(self, expression: str) -> list[_Token]:
        tokens = []
        position = 0
        while position < len(expression):
            match = _TOKEN.match(expression, position)
            if match is None:
                raise PredicateParseError(
                    f"Unexpected character {expression[position]!r}",
                    expression,
                    position,
                )
            kind = match.lastgroup
            if kind != "space":
                text = match.group()
                tokens.append(
                    _Token(text if kind == "punct" else kind, text, position)
                )
            position = match.end()
        tokens.append(_Token("end", "", len(expression)))
        return tokens

    def _peek(self) -> _Token:
        return self.tokens[self.index]

    def _next(self) -> _Token:
        token = self.tokens[self.index]
        if token.kind != "end":
            self.index += 1
        return token

    def _expect(self, kind: str) -> _Token:
        token = self._next()
        if token.kind != kind:
            found = token.text or "end of expression"
            raise self._error(
                f"Expected '{kind}' but found '{found}'", token.position
            )
        return token

    def parse(self) -> Node:
        if self._peek().kind == "end":
            raise self._error("Empty expression")
        root = self._term(0)
        token = self._peek()
        if token.kind != "end":
            raise self._error(f"Unexpected trailing input '{token.text}'")
        return root

    def _term(self, depth: int) -> Node:
        token = self._next()
        if token.kind != "word":
            found = token.text or "end of expression"
            raise self._error(
                f"Expected identifier or integer but found '{found}'",
                token.position,
            )

        if self._peek().kind not in ("(", "{"):
            return self._leaf(token)

        if not _IDENTIFIER.match(token.text):
            raise self._error(
                f"Invalid operator name '{token.text}'", token.position
            )

        if depth >= MAX_DEPTH:
            raise self._error(
                f"Expression nested too deeply (more than {MAX_DEPTH} calls)",
                token.position,
            )

        node = Node(token.text)
        if self._peek().kind == "{":
            node.parameters = self._parameters()

        self._expect("(")
        if self._peek().kind == ")":
            self._next()
            return node

        node.children.append(self._term(depth + 1))
        while self._peek().kind == ",":
            self._next()
            node.children.append(self._term(depth + 1))
        self._expect(")")
        return node

    def _leaf(self, token: _Token) -> Node:
        if _is_integer(token.text):
            return Node(token.text, NodeKind.INTEGER)
        if _IDENTIFIER.match(token.text):
            return Node(token.text, NodeKind.IDENTIFIER)
        raise self._error(
            f"Invalid identifier '{token.text}'", token.position
        )

    def _parameters(self) -> list[ParameterType]:
        self._expect("{")
        parameters = [self._literal()]
        while self._peek().kind == ",":
            self._next()
            parameters.append(self._literal())
        self._expect("}")
        return parameters

    def _literal(self) -> ParameterType:
        token = self._next()
        if token.kind == "string":
            return token.text[1:-1]
        if token.kind == "decimal":
            value = float(token.text)
            if math.isfinite(value):
                return value
        if token.kind == "word":
            if _is_integer(token.text):
                return int(token.text)
            if _IDENTIFIER.match(token.text):
                return token.text
        found = token.text or "end of expression"
        raise self._error(f"Invalid parameter '{found}'", token.position)


def scan(expression: str) -> Node:
    """Parse ``expression`` into a tree of :class:`Node`.

    Raises :class:`PredicateParseError` on any syntax error. The returned tree
    may be a single leaf, callers decide whether that is acceptable.
    """
    return _Scanner(expression).parse()
