from copy import copy
from numbers import Number
from typing import List, Sequence, Tuple, Union

import symlin.mat as mat
from symlin.prob.problem import Problem
import symlin.handlers.evaluator as ev
from symlin.handlers.linearizer import Linearizer
import symlin.util.util as util

OBJECTIVE_CONTEXT = "objective"


def build_problem(direction: str = None, symbol: str = None, description: str = None) -> Problem:
    return Problem(direction=direction, symbol=symbol, description=description)


# Variables
# ----------------------------------------------------------------------------------------------------------------------

def add_variable(problem: Problem,
                 label: str,
                 var_type: str = mat.CONTINUOUS_VAR_TYPE,
                 lb: Number = None,
                 ub: Number = None,
                 description: str = None) -> Tuple[Problem, mat.Polynomial]:
    clone = copy(problem)
    monomial = clone.new_variable(label, var_type=var_type, lb=lb, ub=ub, description=description)
    return clone, monomial


def add_variables(problem: Problem,
                  symbol: str,
                  generators: Sequence[mat.Generator],
                  var_type: str = mat.CONTINUOUS_VAR_TYPE,
                  lb: Number = None,
                  ub: Number = None,
                  state: mat.State = None) -> Tuple[Problem, mat.Family]:
    """
    Instantiate an indexed variable family: one variable per combination of the generator elements. Each variable is
    named after the family symbol and its index, e.g. x_1_2 for x[1, 2].

    :param problem: current problem
    :param symbol: symbol of the new family
    :param generators: generators of the family indices
    :param var_type: 'continuous', 'integer' or 'binary'
    :param lb: lower bound of every variable of the family
    :param ub: upper bound of every variable of the family
    :param state: enclosing bindings and data context
    :return: the new problem, and the map of family indices to variable monomials
    """

    if state is None:
        state = mat.State()

    if problem.get_family(symbol) is not None:
        raise mat.ConstructionError("Variable family '{0}' is already defined".format(symbol))

    clone = copy(problem)
    index_map = {}
    indices_by_name = {}

    for idx, _ in ev.get_combinations(generators, state):

        name = generate_indexed_name(symbol, idx)
        if name in indices_by_name:
            raise mat.ConstructionError(
                "Indices {0} and {1} of variable family '{2}' both map to the variable name '{3}'".format(
                    list(indices_by_name[name]), list(idx), symbol, name
                )
            )
        indices_by_name[name] = idx

        index_map[idx] = clone.new_named_variable(name,
                                                  var_type=var_type,
                                                  lb=lb,
                                                  ub=ub,
                                                  description="{0}{1}".format(symbol, list(idx)))

    clone.put_family(symbol, index_map)

    return clone, index_map


# Constraints
# ----------------------------------------------------------------------------------------------------------------------

def add_constraint(problem: Problem,
                   lhs: Union[mat.ArithmeticExpressionNode, Number],
                   operator: str,
                   rhs: Union[mat.ArithmeticExpressionNode, Number],
                   label: str = None,
                   state: mat.State = None,
                   context: str = None,
                   linearizer: Linearizer = None) -> Tuple[Problem, mat.Constraint]:
    """
    Linearize both sides of a constraint expression and add the normalized constraint to the problem.

    :param problem: current problem
    :param lhs: left-hand side expression
    :param operator: relational operator symbol
    :param rhs: right-hand side expression
    :param label: optional label appended to the constraint identifier
    :param state: generator bindings and data context
    :param context: context tag of the auxiliary variables; derived from the label and the bindings by default
    :param linearizer: linearizer to use; a default linearizer is used if None
    :return: the new problem, and the stored constraint
    """

    if state is None:
        state = mat.State()
    if context is None:
        context = __generate_context(label, state)
    if linearizer is None:
        linearizer = Linearizer()

    lhs, rhs = mat.wrap_operand(lhs), mat.wrap_operand(rhs)

    problem, lhs_poly = linearizer.linearize_expression(problem, lhs, state=state, context=context)
    problem, rhs_poly = linearizer.linearize_expression(problem, rhs, state=state, context=context)

    metadata = {
        "expression": "{0} {1} {2}".format(lhs, operator, rhs),
        "bindings": state.bindings,
    }
    constraint = mat.Constraint.build(lhs_poly, operator, rhs_poly, label=label, metadata=metadata)

    clone = copy(problem)
    constraint = clone.add_constraint(constraint)

    return clone, constraint


def add_constraints(problem: Problem,
                    generators: Sequence[mat.Generator],
                    lhs: Union[mat.ArithmeticExpressionNode, Number],
                    operator: str,
                    rhs: Union[mat.ArithmeticExpressionNode, Number],
                    label: str = None,
                    state: mat.State = None,
                    linearizer: Linearizer = None) -> Tuple[Problem, List[mat.Constraint]]:
    """
    Add one constraint per combination of the generator elements. The label of each constraint is suffixed with its
    index, e.g. balance_1_2.
    """

    if state is None:
        state = mat.State()

    constraints = []
    for idx, s in ev.get_combinations(generators, state):
        indexed_label = generate_indexed_name(label, idx) if label is not None else None
        problem, constraint = add_constraint(problem, lhs, operator, rhs,
                                             label=indexed_label,
                                             state=s,
                                             linearizer=linearizer)
        constraints.append(constraint)

    return problem, constraints


# Objective
# ----------------------------------------------------------------------------------------------------------------------

def set_objective(problem: Problem,
                  node: Union[mat.ArithmeticExpressionNode, Number],
                  state: mat.State = None,
                  direction: str = None,
                  linearizer: Linearizer = None) -> Tuple[Problem, mat.Polynomial]:
    """
    Replace the objective of the problem. If a direction is given that differs from the direction of the problem, the
    expression is negated so that optimizing the problem optimizes the expression in the requested direction.
    """

    if direction is not None and direction not in mat.DIRECTIONS:
        raise mat.ConstructionError(
            "Objective direction must be {0}, got '{1}'".format(" or ".join(mat.DIRECTIONS), direction)
        )

    problem, poly = __linearize_objective(problem, node, state, linearizer)

    clone = copy(problem)
    clone.set_objective(0)
    if direction == mat.MAXIMIZE:
        clone.maximize(poly)
    elif direction == mat.MINIMIZE:
        clone.minimize(poly)
    else:
        clone.increment_objective(poly)

    return clone, clone.objective


def increment_objective(problem: Problem,
                        node: Union[mat.ArithmeticExpressionNode, Number],
                        state: mat.State = None,
                        linearizer: Linearizer = None) -> Tuple[Problem, mat.Polynomial]:
    problem, poly = __linearize_objective(problem, node, state, linearizer)
    clone = copy(problem)
    clone.increment_objective(poly)
    return clone, clone.objective


def __linearize_objective(problem: Problem,
                          node: Union[mat.ArithmeticExpressionNode, Number],
                          state: mat.State = None,
                          linearizer: Linearizer = None) -> Tuple[Problem, mat.Polynomial]:
    if linearizer is None:
        linearizer = Linearizer()
    return linearizer.linearize_expression(problem, mat.wrap_operand(node), state=state, context=OBJECTIVE_CONTEXT)


# Naming
# ----------------------------------------------------------------------------------------------------------------------

def generate_indexed_name(symbol: str, idx: Sequence) -> str:
    """
    Combine a symbol and an index into a name that only contains letters, digits and underscores.
    :param symbol: base symbol
    :param idx: index tuple
    :return: name of the form symbol_i_j
    """
    components = [util.sanitize_name(symbol)] + [util.sanitize_name(c) for c in idx]
    return "_".join(components)


def __generate_context(label: str, state: mat.State) -> str:
    context = label if label is not None else ""
    bindings_key = state.get_bindings_key()
    if len(bindings_key) > 0:
        context += "[{0}]".format(",".join("{0}={1}".format(k, v) for k, v in bindings_key))
    return context
