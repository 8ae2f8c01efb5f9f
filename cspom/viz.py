from collections.abc import Callable
from pathlib import Path
from typing import Any

from graphviz import Source
from IPython.display import Image

from .constraints import Constraint, FunctionalConstraint
from .problem import Problem
from .scanner import Node
from .variables import Variable


class Renderer:
    def __init__(self, dot_content: str):
        self._dot_content = dot_content
        self._source = Source(dot_content, format="png")

    def get_dot_string(self) -> str:
        return self._dot_content

    def save_dot(self, filename: str) -> None:
        Path(filename).write_text(self._dot_content)

    def save_png(self, filename: str) -> None:
        png_data = self._source.pipe()
        Path(filename).write_bytes(png_data)

    def render_png(self) -> bytes:
        return self._source.pipe()

    def render_png_repl(self) -> Image:  # type: ignore
        return Image(self._source.pipe())


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


class _Parser:
    @staticmethod
    def _create_graph_header(name: str, *, directed: bool) -> list[str]:
        return [
            f"{'digraph' if directed else 'graph'} {name} {{",
            "    graph [rankdir=TB, nodesep=0.3, ranksep=0.4];",
            "    node [shape=box, style=rounded, fontsize=12];",
            "    edge [arrowhead=none];",
            "",
        ]

    @staticmethod
    def _finalize_graph(
        nodes: list[str], edges: list[str], name: str, *, directed: bool
    ) -> str:
        dot_content = _Parser._create_graph_header(name, directed=directed)
        dot_content.extend(nodes)
        if edges:
            dot_content.append("")
            dot_content.extend(edges)
        dot_content.append("}")
        return "\n".join(dot_content)

    @staticmethod
    def _create_node_adder(
        nodes: list[str], edges: list[str], counter: list[int], connector: str
    ) -> Callable:
        def add_node(
            content: str, parent_id: str | None = None, shape: str = "box"
        ) -> str:
            node_id = f"node{counter[0]}"
            counter[0] += 1

            nodes.append(f'    {node_id} [label="{content}", shape={shape}];')

            if parent_id:
                edges.append(f"    {parent_id} {connector} {node_id};")

            return node_id

        return add_node

    @staticmethod
    def _add_tree(node: Node, parent_id: str | None, add_node: Callable) -> str:
        content = f"{node.node_label()}\\n{_escape(node.node_symbol() or '')}"
        node_id = add_node(content, parent_id)
        for child in node.children:
            _Parser._add_tree(child, node_id, add_node)
        return node_id

    @staticmethod
    def parse_node(node: Node) -> Renderer:
        nodes: list[str] = []
        edges: list[str] = []
        add_node = _Parser._create_node_adder(nodes, edges, [0], "->")
        _Parser._add_tree(node, None, add_node)
        return Renderer(
            _Parser._finalize_graph(nodes, edges, "AST", directed=True)
        )

    @staticmethod
    def parse_constraints(
        constraints: list[Constraint], variables: list[Variable] | None = None
    ) -> Renderer:
        nodes: list[str] = []
        edges: list[str] = []
        counter = [0]
        add_node = _Parser._create_node_adder(nodes, edges, counter, "--")
        variable_ids: dict[Variable, str] = {}

        def variable_node(variable: Variable) -> str:
            if variable not in variable_ids:
                shape = "ellipse" if variable.name is not None else "circle"
                variable_ids[variable] = add_node(
                    _escape(variable.label), shape=shape
                )
            return variable_ids[variable]

        for variable in variables or []:
            variable_node(variable)

        for constraint in constraints:
            constraint_id = add_node(
                _escape(constraint.format_call()), shape="box"
            )
            if isinstance(constraint, FunctionalConstraint):
                edges.append(
                    f"    {constraint_id} -- {variable_node(constraint.result)}"
                    ' [style=bold, label="="];'
                )
            for position, operand in enumerate(constraint.operands):
                edges.append(
                    f"    {constraint_id} -- {variable_node(operand)}"
                    f' [label="{position}"];'
                )

        return Renderer(
            _Parser._finalize_graph(nodes, edges, "CSP", directed=False)
        )

    @staticmethod
    def parse_problem(problem: Problem) -> Renderer:
        return _Parser.parse_constraints(problem.constraints, problem.variables)


def viz(obj: Node | Constraint | Problem | list[Any]) -> Renderer:
    if isinstance(obj, Problem):
        return _Parser.parse_problem(obj)

    if isinstance(obj, Node):
        return _Parser.parse_node(obj)

    if isinstance(obj, Constraint):
        return _Parser.parse_constraints([obj])

    if isinstance(obj, list) and all(isinstance(c, Constraint) for c in obj):
        return _Parser.parse_constraints(obj)

    raise TypeError(
        f"Unsupported object type for rendering: {type(obj).__name__}. "
        f"Supported types: Node, Constraint, Problem, or lists of Constraints."
    )
