import numpy as np
import pytest

import symlin.mat as mat
from symlin.mat import Polynomial, WILDCARD
from symlin.handlers.linearizer import Linearizer, linearize_expression, get_aux_name, get_interval
from symlin.handlers.problembuilder import add_variable, add_variables
import symlin.handlers.nodebuilder as nb
from test_util import *


# Nodes
# ----------------------------------------------------------------------------------------------------------------------

X = nb.build_variable_node("x")
Y = nb.build_variable_node("y")
Z = nb.build_variable_node("z")


def get_name(p: Polynomial) -> str:
    return p.variables()[0]


def get_new_variables(before: symlin.Problem, after: symlin.Problem):
    return [v for n, v in after.variables.items() if n not in before.variables]


# No-Op
# ----------------------------------------------------------------------------------------------------------------------

def test_linearize_linear_expression():

    problem, m = build_scalar_problem(["x", "y"])

    result_problem, poly = linearize_expression(problem, 2 * X + Y - 1)

    assert result_problem is problem
    assert poly == m["x"].scale(2).add(m["y"]).subtract(1)


# Absolute Value
# ----------------------------------------------------------------------------------------------------------------------

def test_linearize_absolute_value():

    problem, m = build_scalar_problem(["x"])

    result_problem, aux = linearize_expression(problem, nb.build_absolute_value_node(X))

    assert problem.get_variable_count() == 1
    assert problem.get_constraint_count() == 0
    assert result_problem.get_variable_count() == 2
    assert result_problem.get_constraint_count() == 2
    assert get_name(aux).startswith("abs_")

    values = {get_name(m["x"]): -5, get_name(aux): 5}
    assert is_feasible(result_problem, values)

    values[get_name(aux)] = 4
    assert not is_feasible(result_problem, values)


def test_linearize_absolute_value_within_sum():

    problem, m = build_scalar_problem(["x", "y"])

    result_problem, poly = linearize_expression(problem, X + nb.build_absolute_value_node(Y))

    aux = [v for v in poly.variables() if v != get_name(m["x"])]
    assert len(aux) == 1
    assert poly == m["x"].add(Polynomial.variable(aux[0]))


def test_linearize_absolute_value_operand_count():

    problem, _ = build_scalar_problem(["x", "y"])
    node = mat.ArithmeticTransformationNode(fcn=mat.ABSOLUTE_VALUE_FUNCTION, operands=[X, Y])

    with pytest.raises(mat.ShapeError):
        linearize_expression(problem, node)


# Maximum and Minimum
# ----------------------------------------------------------------------------------------------------------------------

def test_linearize_maximum():

    problem, m = build_scalar_problem(["x", "y", "z"])

    result_problem, aux = linearize_expression(problem, nb.build_maximum_node([X, Y, Z]))

    assert get_name(aux).startswith("max_")
    assert result_problem.get_constraint_count() == 3
    assert all(c.operator == mat.GREATER_EQUAL_INEQUALITY_OPERATOR for c in result_problem.constraints.values())

    values = get_values(problem, {"x": 1, "y": 4, "z": 2})
    values[get_name(aux)] = 4
    assert is_feasible(result_problem, values)
    values[get_name(aux)] = 3
    assert not is_feasible(result_problem, values)


def test_linearize_minimum():

    problem, _ = build_scalar_problem(["x", "y"])

    result_problem, aux = linearize_expression(problem, nb.build_minimum_node([X, Y]))

    assert get_name(aux).startswith("min_")
    assert result_problem.get_constraint_count() == 2
    assert all(c.operator == mat.LESS_EQUAL_INEQUALITY_OPERATOR for c in result_problem.constraints.values())


def test_linearize_extremum_operand_count():

    problem, _ = build_scalar_problem(["x"])

    with pytest.raises(mat.ShapeError):
        linearize_expression(problem, nb.build_maximum_node([X]))
    with pytest.raises(mat.ShapeError):
        linearize_expression(problem, nb.build_minimum_node([]))


def test_linearize_pattern_maximum():

    problem, family = build_family_problem("x", [1, 2], [1, 2])

    result_problem, aux = linearize_expression(problem, nb.build_maximum_node(nb.build_variable_node("x", 1, WILDCARD)))
    assert result_problem.get_constraint_count() == 2

    # the operands of a pattern are the matched entries
    for con in result_problem.constraints.values():
        assert any(con.lhs == aux.subtract(family[idx]) for idx in [(1, 1), (1, 2)])

    with pytest.raises(mat.LookupFailureError):
        linearize_expression(problem, nb.build_minimum_node(nb.build_variable_node("x", 3, WILDCARD)))


# Conjunction and Disjunction
# ----------------------------------------------------------------------------------------------------------------------

def test_linearize_conjunction():

    problem, _ = build_scalar_problem(["x", "y", "z"], lb=0, ub=1)

    result_problem, aux = linearize_expression(problem, nb.build_conjunction_node([X, Y, Z]))

    assert get_name(aux).startswith("and_")
    assert result_problem.get_variable(get_name(aux)).var_type == mat.BINARY_VAR_TYPE
    assert result_problem.get_constraint_count() == 4

    for x, y, z in [(0, 0, 0), (1, 0, 1), (1, 1, 1)]:
        values = get_values(problem, {"x": x, "y": y, "z": z})
        values[get_name(aux)] = x * y * z
        assert is_feasible(result_problem, values)
        values[get_name(aux)] = 1 - x * y * z
        assert not is_feasible(result_problem, values)


def test_linearize_disjunction():

    problem, _ = build_scalar_problem(["x", "y"], lb=0, ub=1)

    result_problem, aux = linearize_expression(problem, nb.build_disjunction_node([X, Y]))

    assert get_name(aux).startswith("or_")
    assert result_problem.get_constraint_count() == 3

    for x, y in [(0, 0), (0, 1), (1, 1)]:
        values = get_values(problem, {"x": x, "y": y})
        values[get_name(aux)] = max(x, y)
        assert is_feasible(result_problem, values)
        values[get_name(aux)] = 1 - max(x, y)
        assert not is_feasible(result_problem, values)


def test_linearize_logical_operand_count():

    problem, _ = build_scalar_problem(["x"])

    with pytest.raises(mat.ShapeError):
        linearize_expression(problem, nb.build_conjunction_node([X]))


def build_binary_family_problem():
    problem = symlin.build_problem(direction=mat.MINIMIZE)
    return add_variables(problem, "b", [mat.Generator("i", [1, 2, 3])], var_type=mat.BINARY_VAR_TYPE)


def test_linearize_pattern_conjunction():

    problem, family = build_binary_family_problem()
    b = nb.build_variable_node("b", WILDCARD)

    result_problem, aux = linearize_expression(problem, nb.build_conjunction_node([b]))

    assert get_name(aux).startswith("and_")
    assert len(get_new_variables(problem, result_problem)) == 1
    assert result_problem.get_constraint_count() == 3 + 1

    for entries in [(1, 1, 1), (1, 0, 1), (0, 0, 0)]:
        values = {get_name(family[(i + 1,)]): v for i, v in enumerate(entries)}
        values[get_name(aux)] = min(entries)
        assert is_feasible(result_problem, values)
        values[get_name(aux)] = 1 - min(entries)
        assert not is_feasible(result_problem, values)

    # the matched entries are the operands of the explicit form
    explicit = nb.build_conjunction_node([nb.build_variable_node("b", i) for i in [3, 1, 2]])
    second_problem, explicit_aux = linearize_expression(result_problem, explicit)
    assert explicit_aux == aux
    assert second_problem.get_constraint_count() == 4


def test_linearize_pattern_disjunction():

    problem, family = build_binary_family_problem()

    result_problem, aux = linearize_expression(problem,
                                               nb.build_disjunction_node([nb.build_variable_node("b", WILDCARD)]))

    assert get_name(aux).startswith("or_")
    assert result_problem.get_constraint_count() == 3 + 1

    values = {get_name(family[(1,)]): 0, get_name(family[(2,)]): 1, get_name(family[(3,)]): 0, get_name(aux): 1}
    assert is_feasible(result_problem, values)
    values[get_name(aux)] = 0
    assert not is_feasible(result_problem, values)


def test_linearize_pattern_logical_operation_without_match():

    problem, _ = build_family_problem("x", [1, 2], [1, 2])

    with pytest.raises(mat.LookupFailureError):
        linearize_expression(problem, nb.build_conjunction_node([nb.build_variable_node("x", 3, WILDCARD)]))
    with pytest.raises(mat.LookupFailureError):
        linearize_expression(problem, nb.build_disjunction_node([nb.build_variable_node("y", WILDCARD)]))


# Conditional
# ----------------------------------------------------------------------------------------------------------------------

def test_linearize_conditional():

    problem, _ = build_scalar_problem(["x", "y"], lb=0, ub=10)
    problem, c = add_variable(problem, "c", var_type=mat.BINARY_VAR_TYPE)
    node = nb.build_conditional_node(nb.build_variable_node("c"), X, Y)

    result_problem, aux = linearize_expression(problem, node)

    new_vars = get_new_variables(problem, result_problem)
    assert len(new_vars) == 2
    assert result_problem.get_constraint_count() == 4

    selector = result_problem.get_variable("{0}_sel".format(get_name(aux)))
    assert selector.var_type == mat.BINARY_VAR_TYPE

    values = get_values(problem, {"x": 3, "y": 7, "c": 0})
    values[selector.name] = 1
    values[get_name(aux)] = 3
    assert is_feasible(result_problem, values)
    values[get_name(aux)] = 7
    assert not is_feasible(result_problem, values)


def test_linearize_linked_conditional():

    problem, _ = build_scalar_problem(["x", "y"], lb=0, ub=10)
    problem, c = add_variable(problem, "c", var_type=mat.BINARY_VAR_TYPE)
    node = nb.build_conditional_node(nb.build_variable_node("c"), X, Y)

    result_problem, aux = Linearizer(link_condition=True).linearize_expression(problem, node)

    assert result_problem.get_constraint_count() == 5
    link = list(result_problem.constraints.values())[-1]
    assert link.operator == mat.EQUALITY_OPERATOR
    assert link.lhs == Polynomial.variable("{0}_sel".format(get_name(aux))).subtract(c)


# Piecewise-Linear Function
# ----------------------------------------------------------------------------------------------------------------------

BREAKPOINTS = [0, 5, 10]
SLOPES = [1, 2]
INTERCEPTS = [0, -5]


def test_linearize_piecewise():

    problem, m = build_scalar_problem(["x"], lb=0, ub=10)
    node = nb.build_piecewise_linear_node(X, BREAKPOINTS, SLOPES, INTERCEPTS)

    result_problem, aux = linearize_expression(problem, node)

    name = get_name(aux)
    assert name.startswith("pwl_")
    assert len(get_new_variables(problem, result_problem)) == 3
    assert result_problem.get_constraint_count() == 1 + 4 * 2
    assert result_problem.get_variable("{0}_s1".format(name)).var_type == mat.BINARY_VAR_TYPE
    assert result_problem.get_variable("{0}_s2".format(name)).var_type == mat.BINARY_VAR_TYPE

    values = {get_name(m["x"]): 7, "{0}_s1".format(name): 0, "{0}_s2".format(name): 1, name: 9}
    assert is_feasible(result_problem, values)

    values[name] = 8
    assert not is_feasible(result_problem, values)

    # the first segment does not cover x = 7
    values.update({"{0}_s1".format(name): 1, "{0}_s2".format(name): 0, name: 7})
    assert not is_feasible(result_problem, values)


def test_linearize_piecewise_shape():

    problem, _ = build_scalar_problem(["x"])

    with pytest.raises(mat.ShapeError):
        linearize_expression(problem, nb.build_piecewise_linear_node(X, [0, 5], SLOPES, INTERCEPTS))
    with pytest.raises(mat.ShapeError):
        linearize_expression(problem, nb.build_piecewise_linear_node(X, BREAKPOINTS, SLOPES, [0]))
    with pytest.raises(mat.ShapeError):
        linearize_expression(problem, nb.build_piecewise_linear_node(X, [0, 10, 5], SLOPES, INTERCEPTS))
    with pytest.raises(mat.ShapeError):
        linearize_expression(problem, nb.build_piecewise_linear_node(X, [0], [], []))


# Composition
# ----------------------------------------------------------------------------------------------------------------------

def test_linearize_maximum_of_absolute_values():

    problem, _ = build_scalar_problem(["x", "y"])
    node = nb.build_maximum_node([nb.build_absolute_value_node(X), nb.build_absolute_value_node(Y)])

    result_problem, aux = linearize_expression(problem, node)

    assert result_problem.get_variable_count() == 2 + 3
    assert result_problem.get_constraint_count() == 2 + 2 + 2
    assert get_name(aux).startswith("max_")

    # operands are linearized first and named after their own resolved operands
    _, abs_x = linearize_expression(problem, nb.build_absolute_value_node(X))
    _, abs_y = linearize_expression(problem, nb.build_absolute_value_node(Y))
    assert result_problem.contains_variable(get_name(abs_x))
    assert result_problem.contains_variable(get_name(abs_y))

    values = get_values(problem, {"x": -3, "y": 2})
    values.update({get_name(abs_x): 3, get_name(abs_y): 2, get_name(aux): 3})
    assert is_feasible(result_problem, values)

    values[get_name(aux)] = 2
    assert not is_feasible(result_problem, values)


def test_linearize_absolute_value_of_non_linear_operand():

    problem, _ = build_scalar_problem(["x", "y", "z"])

    for inner in [X, nb.build_maximum_node([X, Y, Z]), nb.build_minimum_node([nb.build_absolute_value_node(X), Y])]:

        inner_problem, _ = linearize_expression(problem, inner)
        result_problem, aux = linearize_expression(problem, nb.build_absolute_value_node(inner))

        # one auxiliary variable and 2 constraints on top of the operand structure
        assert get_name(aux).startswith("abs_")
        assert result_problem.get_variable_count() == inner_problem.get_variable_count() + 1
        assert result_problem.get_constraint_count() == inner_problem.get_constraint_count() + 2


def test_linearize_conjunction_within_conditional():

    problem, _ = build_scalar_problem(["x", "y"], lb=0, ub=10)
    problem, _ = add_variable(problem, "b1", var_type=mat.BINARY_VAR_TYPE)
    problem, _ = add_variable(problem, "b2", var_type=mat.BINARY_VAR_TYPE)
    condition = nb.build_conjunction_node([nb.build_variable_node("b1"), nb.build_variable_node("b2")])
    node = nb.build_conditional_node(condition, X, Y)

    result_problem, aux = linearize_expression(problem, node)

    assert len(get_new_variables(problem, result_problem)) == 1 + 2
    assert result_problem.get_constraint_count() == 3 + 4

    _, conjunction = linearize_expression(problem, condition)
    selector = "{0}_sel".format(get_name(aux))

    values = get_values(problem, {"x": 3, "y": 7, "b1": 1, "b2": 1})
    values.update({get_name(conjunction): 1, selector: 1, get_name(aux): 3})
    assert is_feasible(result_problem, values)

    values[get_name(aux)] = 7
    assert not is_feasible(result_problem, values)

    # the linked selector mirrors the conjunction
    linked_problem, linked_aux = Linearizer(link_condition=True).linearize_expression(problem, node)
    assert linked_problem.get_constraint_count() == 3 + 5
    link = list(linked_problem.constraints.values())[-1]
    assert link.lhs == Polynomial.variable("{0}_sel".format(get_name(linked_aux))).subtract(conjunction)


def test_linearize_scaled_non_linear_expression():

    problem, _ = build_scalar_problem(["x"])

    result_problem, poly = linearize_expression(problem, 2 * nb.build_absolute_value_node(X) - 1)

    _, aux = linearize_expression(problem, nb.build_absolute_value_node(X))
    assert poly == aux.scale(2).subtract(1)
    assert result_problem.get_constraint_count() == 2


# Memoization and Naming
# ----------------------------------------------------------------------------------------------------------------------

def test_memoization():

    problem, _ = build_scalar_problem(["x"])
    node = nb.build_absolute_value_node(X)

    result_problem, poly = linearize_expression(problem, node + node)
    assert result_problem.get_constraint_count() == 2
    assert len(poly.variables()) == 1
    assert poly.coefficients() == [2]

    # repeated construct in the same context
    second_problem, aux = linearize_expression(result_problem, node)
    assert second_problem.get_constraint_count() == 2
    assert second_problem.get_variable_count() == 2
    assert aux.variables() == poly.variables()

    # same construct in another context
    third_problem, other_aux = linearize_expression(result_problem, node, context="c1")
    assert third_problem.get_constraint_count() == 4
    assert other_aux != aux


def test_aux_name():

    name = get_aux_name(mat.ABS_AUX_KIND, ["x:1"], "")

    assert name == get_aux_name(mat.ABS_AUX_KIND, ["x:1"], "")
    assert name != get_aux_name(mat.ABS_AUX_KIND, ["x:1"], "con")
    assert name != get_aux_name(mat.ABS_AUX_KIND, ["x:2"], "")
    assert len(name) == len("abs_") + mat.AUX_DIGEST_LENGTH


def test_commutative_operands_share_auxiliary():

    problem, _ = build_scalar_problem(["x", "y"])

    problem_1, aux_1 = linearize_expression(problem, nb.build_maximum_node([X, Y]))
    problem_2, aux_2 = linearize_expression(problem_1, nb.build_maximum_node([Y, X]))

    assert aux_1 == aux_2
    assert problem_2.get_constraint_count() == 2


# Big-M
# ----------------------------------------------------------------------------------------------------------------------

def get_first_upper_constraint(problem: symlin.Problem) -> mat.Constraint:
    return [c for c in problem.constraints.values() if c.operator == mat.LESS_EQUAL_INEQUALITY_OPERATOR][0]


def test_big_m_derivation():

    node = nb.build_conditional_node(nb.build_variable_node("c"), X, Y)

    # bounded operands: M = max |x - y| = 10
    problem, _ = build_scalar_problem(["x", "y"], lb=0, ub=10)
    problem, _ = add_variable(problem, "c", var_type=mat.BINARY_VAR_TYPE)
    result_problem, _ = linearize_expression(problem, node)
    assert get_first_upper_constraint(result_problem).rhs == 10

    # unbounded operands: fallback constant
    problem, _ = build_scalar_problem(["x", "y"])
    problem, _ = add_variable(problem, "c", var_type=mat.BINARY_VAR_TYPE)
    result_problem, _ = linearize_expression(problem, node)
    assert get_first_upper_constraint(result_problem).rhs == mat.DEFAULT_BIG_M

    result_problem, _ = linearize_expression(problem, node, big_m=50)
    assert get_first_upper_constraint(result_problem).rhs == 50


def test_big_m_with_infinite_bounds():

    node = nb.build_conditional_node(nb.build_variable_node("c"), X, Y)

    for lb, ub in [(-np.inf, np.inf), (0, np.inf), (-np.inf, 0)]:

        problem, _ = build_scalar_problem(["x", "y"], lb=lb, ub=ub)
        problem, _ = add_variable(problem, "c", var_type=mat.BINARY_VAR_TYPE)

        result_problem, _ = linearize_expression(problem, node)

        # an infinite bound falls back to the configured constant
        assert get_first_upper_constraint(result_problem).rhs == mat.DEFAULT_BIG_M
        for con in result_problem.constraints.values():
            assert np.isfinite(con.rhs)
            assert all(np.isfinite(c) for c in con.lhs.coefficients())


def test_big_m_validation():
    with pytest.raises(mat.ConstructionError):
        Linearizer(big_m=0)
    with pytest.raises(mat.ConstructionError):
        Linearizer(big_m=-10)


def test_get_interval():

    problem, m = build_scalar_problem(["x", "y"], lb=-1, ub=2)

    assert get_interval(problem, m["x"].subtract(m["y"])) == (-3, 3)
    assert get_interval(problem, m["x"].scale(-2).add(1)) == (-3, 3)
    assert get_interval(problem, m["x"].multiply(m["y"])) == (-2, 4)
    assert get_interval(problem, Polynomial.constant(5)) == (5, 5)

    problem, m = build_scalar_problem(["x"])
    assert get_interval(problem, m["x"]) is None

    problem, m = build_scalar_problem(["x", "y"], lb=0, ub=np.inf)
    assert get_interval(problem, m["x"].subtract(m["y"])) is None
    assert get_interval(problem, m["x"].scale(0.5)) is None
