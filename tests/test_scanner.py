"""Tests for the predicate expression scanner."""

import pytest

from cspom import NodeKind, PredicateParseError, scan
from cspom.scanner import MAX_DEPTH


class TestScanStructure:
    """Tests for the shape of the trees produced by scan()."""

    def test_nested_calls(self) -> None:
        root = scan("neq(abs(sub(q0,q1)),2)")

        assert root.operator == "neq"
        assert root.kind is NodeKind.OPERATOR
        assert [c.operator for c in root.children] == ["abs", "2"]

        abs_node, two = root.children
        assert two.kind is NodeKind.INTEGER
        assert two.value == 2

        (sub_node,) = abs_node.children
        assert sub_node.operator == "sub"
        assert [c.operator for c in sub_node.children] == ["q0", "q1"]
        assert all(c.is_identifier() for c in sub_node.children)

    def test_whitespace_is_ignored(self) -> None:
        assert scan("neq( abs( sub(q0 , q1) ) ,\n 2 )") == scan(
            "neq(abs(sub(q0,q1)),2)"
        )

    def test_sibling_order_is_preserved(self) -> None:
        root = scan("f(c, a, b, 3, -1)")
        assert [c.operator for c in root.children] == ["c", "a", "b", "3", "-1"]

    def test_zero_operands(self) -> None:
        root = scan("alldifferent()")
        assert root.children == []
        assert not root.is_leaf()

    def test_bare_identifier_is_a_leaf(self) -> None:
        root = scan("x")
        assert root.is_leaf()
        assert root.kind is NodeKind.IDENTIFIER

    def test_bare_integer_is_a_leaf(self) -> None:
        root = scan("  42 ")
        assert root.is_leaf()
        assert root.kind is NodeKind.INTEGER

    def test_operator_node_is_never_a_leaf(self) -> None:
        for node in scan("f(g(x), h(), 1)").walk():
            assert node.is_leaf() == (node.kind is not NodeKind.OPERATOR)
            if node.is_leaf():
                assert node.children == []


class TestLeafClassification:
    """Integer parsing wins over identifiers."""

    @pytest.mark.parametrize(
        ("text", "value"), [("0", 0), ("17", 17), ("-3", -3), ("007", 7)]
    )
    def test_integers(self, text: str, value: int) -> None:
        node = scan(f"f({text})").children[0]
        assert node.kind is NodeKind.INTEGER
        assert node.operator == text
        assert node.value == value

    @pytest.mark.parametrize("text", ["x", "q0", "V_12", "abc_def_"])
    def test_identifiers(self, text: str) -> None:
        node = scan(f"f({text})").children[0]
        assert node.kind is NodeKind.IDENTIFIER
        assert node.operator == text

    def test_identifier_has_no_value(self) -> None:
        with pytest.raises(TypeError):
            _ = scan("x").value


class TestParameters:
    """Tests for the brace-delimited parameter block."""

    def test_parameters_are_kept_apart_from_operands(self) -> None:
        root = scan("mod{3}(x)")
        assert root.parameters == [3]
        assert [c.operator for c in root.children] == ["x"]

    def test_literal_types(self) -> None:
        root = scan('f{a, -2, 1.5, "hello world", "12"}(x)')
        assert root.parameters == ["a", -2, 1.5, "hello world", "12"]

    def test_nested_parameters(self) -> None:
        root = scan("eq(mod{5}(x), y)")
        assert root.parameters == []
        assert root.children[0].parameters == [5]

    def test_parameters_with_zero_operands(self) -> None:
        root = scan("table{1,2}()")
        assert root.parameters == [1, 2]
        assert root.children == []

    def test_exponent_decimals(self) -> None:
        root = scan("f{1e5, 2.5E-3, -1e+2}(x)")
        assert root.parameters == [100000.0, 0.0025, -100.0]

    def test_small_decimal_is_written_in_exponent_form(self) -> None:
        assert str(scan("f{0.00001}(x)")) == "f{1e-05}(x)"

    @pytest.mark.parametrize("literal", ["1e999", "-1e999"])
    def test_non_finite_decimal(self, literal: str) -> None:
        with pytest.raises(PredicateParseError, match="Invalid parameter"):
            scan(f"f{{{literal}}}(x)")


class TestCanonicalForm:
    """str(node) gives a canonical form that scans back to an equal tree."""

    def test_canonical_string(self) -> None:
        assert str(scan("neq( abs(sub(q0, q1)), 2)")) == "neq(abs(sub(q0,q1)),2)"

    def test_canonical_parameters(self) -> None:
        assert str(scan('f{ a , 3, "b c" }( x )')) == 'f{a,3,"b c"}(x)'

    @pytest.mark.parametrize(
        "expression",
        [
            "neq(x,y)",
            "neq(abs(sub(q0,q1)),2)",
            "f()",
            "f(g(h(i(j))), -4, k)",
            'f{1, -2, 0.5, name, "12", ""}(a, b)',
            "ite(lt(x, 0), neg(x), x)",
            "f{0.00001}(x)",
            "f{100000000000000000000.0}(x)",
            "f{1e5, -2.5E-3}(x)",
            "x",
            "-12",
        ],
    )
    def test_round_trip(self, expression: str) -> None:
        tree = scan(expression)
        assert scan(str(tree)) == tree


class TestScanErrors:
    """Tests for syntax errors."""

    @pytest.mark.parametrize(
        "expression",
        [
            "",
            "   ",
            "f(x",
            "f(x))",
            "f(x,)",
            "f(,x)",
            "f(x y)",
            "f{}(x)",
            "f{1}",
            "f{1(x)",
            "f(x) g(y)",
            "1abc",
            "f(1abc)",
            "12(x)",
            "f(x;y)",
            "(x)",
            "-x",
            "f(-)",
        ],
    )
    def test_invalid_expressions(self, expression: str) -> None:
        with pytest.raises(PredicateParseError):
            scan(expression)

    def test_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError, match="Empty expression"):
            scan("")

    def test_error_position(self) -> None:
        with pytest.raises(PredicateParseError) as info:
            scan("f(x,)")
        assert info.value.position == 4
        assert info.value.line == 1
        assert info.value.column == 5

    def test_error_line_and_column(self) -> None:
        with pytest.raises(PredicateParseError, match="line 2, column 3") as info:
            scan("f(x,\n  )")
        assert info.value.position == 7

    def test_unclosed_call_reports_end_of_input(self) -> None:
        with pytest.raises(PredicateParseError, match="end of expression") as info:
            scan("f(x")
        assert info.value.position == 3


class TestNestingDepth:
    """Nesting is bounded so that deep input fails with a syntax error."""

    def test_deep_nesting_within_limit(self) -> None:
        depth = MAX_DEPTH
        root = scan("f(" * depth + "x" + ")" * depth)
        assert sum(1 for node in root.walk() if not node.is_leaf()) == depth

    def test_nesting_beyond_limit(self) -> None:
        depth = MAX_DEPTH + 1
        with pytest.raises(PredicateParseError, match="nested too deeply"):
            scan("f(" * depth + "x" + ")" * depth)

    def test_very_deep_nesting(self) -> None:
        with pytest.raises(PredicateParseError, match="nested too deeply") as info:
            scan("f(" * 1200 + "x" + ")" * 1200)
        assert info.value.position == 2 * MAX_DEPTH
