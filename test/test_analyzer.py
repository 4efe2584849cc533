import pytest

import symlin.mat as mat
from symlin.mat import WILDCARD
import symlin.handlers.analyzer as anl
import symlin.handlers.nodebuilder as nb
from test_util import *


# Nodes
# ----------------------------------------------------------------------------------------------------------------------

X = nb.build_variable_node("x")
Y = nb.build_variable_node("y")
C = nb.build_parameter_node("c")
I = nb.build_dummy_node("i")


# Tests
# ----------------------------------------------------------------------------------------------------------------------

def test_classify_leaves():

    assert anl.classify(nb.build_numeric_node(3)) == mat.CONSTANT_CLASS
    assert anl.classify(C) == mat.CONSTANT_CLASS
    assert anl.classify(I) == mat.CONSTANT_CLASS
    assert anl.classify(X) == mat.VARIABLE_CLASS
    assert anl.classify(nb.build_variable_node("z", 1, WILDCARD)) == mat.LINEAR_CLASS


def test_classify_operations():

    assert anl.classify(X + Y) == mat.LINEAR_CLASS
    assert anl.classify(X - 3) == mat.LINEAR_CLASS
    assert anl.classify(-X) == mat.LINEAR_CLASS
    assert anl.classify(2 * X) == mat.LINEAR_CLASS
    assert anl.classify(C * X) == mat.LINEAR_CLASS
    assert anl.classify(X / 2) == mat.LINEAR_CLASS
    assert anl.classify(C * 2) == mat.CONSTANT_CLASS
    assert anl.classify(C + 1) == mat.CONSTANT_CLASS

    # a constant factor or divisor keeps the operation linear even over a non-linear operand
    assert anl.classify(2 * nb.build_absolute_value_node(X)) == mat.LINEAR_CLASS
    assert anl.classify(nb.build_absolute_value_node(X) / 2) == mat.LINEAR_CLASS
    assert anl.classify(C * nb.build_maximum_node([X, Y])) == mat.LINEAR_CLASS
    assert anl.classify(C / 2) == mat.CONSTANT_CLASS

    assert anl.classify(X * Y) == mat.NON_LINEAR_CLASS
    assert anl.classify(2 / X) == mat.NON_LINEAR_CLASS
    assert anl.classify(X * Y + 1) == mat.NON_LINEAR_CLASS
    assert anl.classify(X * nb.build_absolute_value_node(Y)) == mat.NON_LINEAR_CLASS
    assert anl.classify(nb.build_absolute_value_node(X) + 1) == mat.NON_LINEAR_CLASS


def test_classify_transformations():

    generators = nb.build_generators(("i", [1, 2]))

    assert anl.classify(nb.build_summation_node(nb.build_variable_node("z", I), generators)) == mat.LINEAR_CLASS
    assert anl.classify(nb.build_absolute_value_node(X)) == mat.NON_LINEAR_CLASS
    assert anl.classify(nb.build_maximum_node([X, Y])) == mat.NON_LINEAR_CLASS
    assert anl.classify(nb.build_minimum_node([X, Y])) == mat.NON_LINEAR_CLASS
    assert anl.classify(nb.build_conjunction_node([X, Y])) == mat.NON_LINEAR_CLASS
    assert anl.classify(nb.build_disjunction_node([X, Y])) == mat.NON_LINEAR_CLASS
    assert anl.classify(nb.build_conditional_node(X, Y, 0)) == mat.NON_LINEAR_CLASS
    assert anl.classify(nb.build_piecewise_linear_node(X, [0, 1], [1], [0])) == mat.NON_LINEAR_CLASS


def test_analyze():

    analysis = anl.analyze(2 * X + Y)
    assert analysis == anl.Analysis(mat.LINEAR_CLASS, mat.OrderedSet(["x", "y"]))
    assert analysis.is_linear()

    analysis = anl.analyze(X * Y)
    assert analysis.classification == mat.NON_LINEAR_CLASS
    assert not analysis.is_linear()

    assert list(anl.get_variables(nb.build_absolute_value_node(Y - X + Y))) == ["y", "x"]
    assert list(anl.get_variables(C + 1)) == []


def test_contains_non_linear():

    assert not anl.contains_non_linear(2 * X + Y)
    assert anl.contains_non_linear(X + nb.build_absolute_value_node(Y))
    assert anl.contains_non_linear(2 * nb.build_absolute_value_node(X))
    assert anl.contains_non_linear(nb.build_absolute_value_node(X) / 2)
    assert anl.contains_non_linear(
        nb.build_summation_node(nb.build_maximum_node([X, Y]), nb.build_generators(("i", [1, 2])))
    )

    assert anl.is_linear(X + 1)
    assert anl.is_non_linear(X * Y)


def test_complexity_score():

    assert anl.complexity_score(X) == 0
    assert anl.complexity_score(X + Y) == 1
    assert anl.complexity_score(X * Y) == 2
    assert anl.complexity_score(nb.build_absolute_value_node(X + Y)) == 4
    assert anl.complexity_score(nb.build_maximum_node([X * Y, Y])) == 5


def test_classify_unknown_node():
    with pytest.raises(ValueError):
        anl.classify(mat.EnumeratedSetNode([1, 2]))
