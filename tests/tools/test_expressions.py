import numpy as np
import pytest

from gaussdiff.tools.expressions import ScalarExpression, parse_expr_guarded


def test_parse_expr_guarded():
    """Test parsing expressions with reserved sympy names."""
    expr = parse_expr_guarded("beta * x + gamma", symbols=["beta", "gamma", "x"])
    assert {str(s) for s in expr.free_symbols} == {"beta", "gamma", "x"}


def test_scalar_expression():
    """Test evaluating scalar expressions."""
    expr = ScalarExpression("x**2 + y", signature=["x", "y"])
    assert not expr.constant
    assert expr(2, 3) == pytest.approx(7)
    np.testing.assert_allclose(expr(np.arange(3), 1), [1, 2, 5])
    with pytest.raises(TypeError):
        expr.value
    assert "x**2" in expr.expression
    assert "ScalarExpression" in repr(expr)

    expr2 = ScalarExpression(expr)
    assert expr2(2, 3) == pytest.approx(7)


def test_constant_expression():
    """Test expressions without variables."""
    expr = ScalarExpression("3", signature=["x"])
    assert expr.constant
    assert expr.value == pytest.approx(3)
    np.testing.assert_allclose(expr(np.zeros(4)), 3)
    assert expr(np.zeros(4)).shape == (4,)

    assert ScalarExpression(2.5).value == pytest.approx(2.5)
    assert ScalarExpression("").value == 0
    assert ScalarExpression(None).value == 0


def test_expression_errors():
    """Test invalid expressions."""
    with pytest.raises(ValueError):
        ScalarExpression("x * z", signature=["x", "y"])
    with pytest.raises(TypeError):
        ScalarExpression(lambda x: x)
