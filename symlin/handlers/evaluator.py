from collections.abc import Mapping
from numbers import Number
from typing import List, Sequence, Tuple

import numpy as np

import symlin.mat as mat
from symlin.prob.problem import Problem


# Index Resolution
# ----------------------------------------------------------------------------------------------------------------------

def resolve_index_component(component, state: mat.State):
    """
    Resolve an index component under the bindings of a state. Wildcards are kept as-is. A dummy node resolves to the
    value bound to its symbol, or to itself if the symbol is unbound; an unresolved dummy never matches a concrete
    index. Arithmetic components are evaluated eagerly.
    :param component: literal, dummy node, wildcard or arithmetic expression node
    :param state: state holding the generator bindings
    :return: resolved component
    """

    if mat.is_wildcard(component):
        return component

    elif isinstance(component, mat.DummyNode):
        if state.is_bound(component.symbol):
            return state.get_binding(component.symbol)
        return component

    # data entries may be non-numeric, e.g. the name of a city
    elif isinstance(component, mat.ParameterNode):
        return get_parameter_value(component, state)

    elif isinstance(component, mat.ArithmeticExpressionNode):
        return evaluate_numeric(component, state)

    elif isinstance(component, (str, Number)):
        return component

    else:
        raise ValueError("Unable to resolve index component '{0}'".format(component))


def resolve_indices(node: mat.DeclaredEntityNode, state: mat.State) -> tuple:
    return tuple(resolve_index_component(c, state) for c in node.indices)


# Numeric Evaluation
# ----------------------------------------------------------------------------------------------------------------------

def evaluate_numeric(node: mat.ExpressionNode, state: mat.State) -> Number:
    """
    Evaluate an expression that does not reference any variable, e.g. an index expression such as i + 1 or a
    coefficient such as cost[i, j].
    """

    if isinstance(node, mat.NumericNode):
        return node.value

    elif isinstance(node, mat.DummyNode):
        if not state.is_bound(node.symbol):
            raise mat.LookupFailureError(
                "Dummy symbol '{0}' is unbound (bindings {1})".format(node.symbol, state)
            )
        return _check_numeric(state.get_binding(node.symbol), node, state)

    elif isinstance(node, mat.ParameterNode):
        return _check_numeric(get_parameter_value(node, state), node, state)

    elif isinstance(node, mat.ArithmeticOperationNode):

        args = [evaluate_numeric(o, state) for o in node.operands]

        if node.operator == mat.UNARY_POSITIVE_OPERATOR:
            return args[0]
        elif node.operator == mat.UNARY_NEGATION_OPERATOR:
            return -args[0]
        elif node.operator == mat.ADDITION_OPERATOR:
            return sum(args)
        elif node.operator == mat.SUBTRACTION_OPERATOR:
            return args[0] - args[1]
        elif node.operator == mat.MULTIPLICATION_OPERATOR:
            return np.prod(args).item()
        elif node.operator == mat.DIVISION_OPERATOR:
            if args[1] == 0:
                raise mat.DomainError("Division by zero in '{0}' (bindings {1})".format(node, state))
            return args[0] / args[1]
        else:
            raise ValueError("Unable to resolve operator '{0}' as an arithmetic operator".format(node.operator))

    elif isinstance(node, mat.VariableNode):
        raise mat.DomainError("Expression '{0}' references a variable where a constant is expected".format(node))

    else:
        raise ValueError("Unable to resolve node '{0}' as a numeric expression".format(node))


def _check_numeric(value, node: mat.ExpressionNode, state: mat.State) -> Number:
    if isinstance(value, bool) or not isinstance(value, Number):
        raise mat.DomainError(
            "Expression '{0}' evaluates to the non-numeric value '{1}' (bindings {2})".format(node, value, state)
        )
    return value


def get_parameter_value(node: mat.ParameterNode, state: mat.State):
    """
    Retrieve a value of the external data context. A multi-dimensional index is first looked up as a tuple key, and
    otherwise used to traverse nested containers one component at a time.
    """

    value = state.get_data(node.symbol)
    idx = resolve_indices(node, state)

    if len(idx) == 0:
        return value

    if len(idx) > 1 and isinstance(value, Mapping) and idx in value:
        return value[idx]

    for component in idx:
        try:
            value = value[component]
        except (KeyError, IndexError, TypeError):
            raise mat.LookupFailureError(
                "Data entry {0}{1} is undefined (bindings {2})".format(node.symbol, list(idx), state)
            )

    return value


# Generators
# ----------------------------------------------------------------------------------------------------------------------

def evaluate_domain(domain: mat.BaseSetNode, state: mat.State) -> mat.OrderedSet:
    """
    Expand the domain of a generator into its ordered list of elements.
    :param domain: set node of the generator
    :param state: state holding the bindings of the enclosing generators and the data context
    :return: ordered set of elements
    """

    if isinstance(domain, mat.RangeSetNode):

        bounds = [evaluate_numeric(n, state) for n in (domain.start, domain.end, domain.step)]
        if any(not float(b).is_integer() for b in bounds):
            raise mat.DomainError("Bounds of range '{0}' must be integral, got {1}".format(domain, bounds))

        start, end, step = [int(b) for b in bounds]
        if step == 0:
            raise mat.DomainError("Step of range '{0}' must be non-zero".format(domain))

        stop = end + 1 if step > 0 else end - 1
        return mat.OrderedSet(np.arange(start, stop, step).tolist())

    elif isinstance(domain, mat.EnumeratedSetNode):
        return mat.OrderedSet([
            evaluate_numeric(e, state) if isinstance(e, mat.ExpressionNode) else e for e in domain.elements
        ])

    elif isinstance(domain, mat.DataSetNode):

        value = state.get_data(domain.symbol)
        for key in domain.keys:
            key = resolve_index_component(key, state)
            try:
                value = value[key]
            except (KeyError, IndexError, TypeError):
                raise mat.LookupFailureError(
                    "Data entry {0}[{1}] is undefined (bindings {2})".format(domain.symbol, key, state)
                )

        if isinstance(value, Mapping):
            return mat.OrderedSet(value.keys())
        elif isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
            raise ValueError("Data symbol '{0}' of value '{1}' is not a valid generator domain".format(domain,
                                                                                                      value))
        return mat.OrderedSet(value)

    else:
        raise ValueError("Unsupported generator domain '{0}'".format(domain))


def expand_generators(generators: Sequence[mat.Generator], state: mat.State) -> List[mat.State]:
    """
    Expand generators into the states of every combination of their elements. Combinations are produced in nested-loop
    order, the first generator being the outermost loop. The domain of a generator is evaluated under the bindings of
    the generators that precede it.
    :param generators: ordered generators
    :param state: enclosing state
    :return: one state per combination, each extending the enclosing bindings
    """

    if len(generators) == 0:
        return [state]

    head = generators[0]
    if not isinstance(head, mat.Generator):
        raise ValueError("Unsupported generator '{0}'".format(head))

    states = []
    for element in evaluate_domain(head.domain, state):
        states.extend(expand_generators(generators[1:], state.bind([(head.symbol, element)])))
    return states


def get_combinations(generators: Sequence[mat.Generator], state: mat.State) -> List[Tuple[tuple, mat.State]]:
    return [(tuple(s.get_binding(g.symbol) for g in generators), s) for s in expand_generators(generators, state)]


# Linear Evaluation
# ----------------------------------------------------------------------------------------------------------------------

def evaluate_variable(problem: Problem, node: mat.VariableNode, state: mat.State) -> mat.Polynomial:
    """
    Resolve a variable reference into a polynomial. A pattern reference evaluates to the sum of the matching entries,
    which is the zero polynomial when nothing matches.
    """

    family = problem.get_family(node.symbol)
    if family is None:
        raise mat.LookupFailureError("Variable family '{0}' is undefined".format(node.symbol))

    idx = resolve_indices(node, state)

    if mat.has_wildcard(idx):
        return mat.sum_matching(family, idx)

    try:
        return mat.lookup(family, idx, node.symbol)
    except mat.LookupFailureError as e:
        raise mat.LookupFailureError("{0} (in '{1}', bindings {2})".format(e, node, state)) from e


def evaluate_expression(problem: Problem, node: mat.ExpressionNode, state: mat.State = None) -> mat.Polynomial:
    """
    Evaluate an expression tree that does not require linearization into a polynomial.
    :param problem: problem holding the variable families
    :param node: root of the expression tree
    :param state: generator bindings and data context
    :return: polynomial of the expression
    """

    if state is None:
        state = mat.State()

    if isinstance(node, (mat.NumericNode, mat.ParameterNode, mat.DummyNode)):
        return mat.Polynomial.constant(evaluate_numeric(node, state))

    elif isinstance(node, mat.VariableNode):
        return evaluate_variable(problem, node, state)

    elif isinstance(node, mat.ArithmeticOperationNode):
        return apply_operator(node, [evaluate_expression(problem, o, state) for o in node.operands])

    elif isinstance(node, mat.ArithmeticTransformationNode) and node.fcn == mat.SUMMATION_FUNCTION:
        total = mat.Polynomial()
        for s in expand_generators(node.generators, state):
            for operand in node.operands:
                total = total.add(evaluate_expression(problem, operand, s))
        return total

    elif isinstance(node, (mat.ArithmeticTransformationNode,
                           mat.LogicalOperationNode,
                           mat.ArithmeticConditionalNode,
                           mat.PiecewiseLinearNode)):
        raise ValueError("Expression '{0}' requires linearization".format(node))

    else:
        raise ValueError("Unable to resolve node '{0}' of type '{1}'".format(node, type(node).__name__))


def apply_operator(node: mat.ArithmeticOperationNode, args: List[mat.Polynomial]) -> mat.Polynomial:

    if node.operator == mat.UNARY_POSITIVE_OPERATOR:
        return args[0]

    elif node.operator == mat.UNARY_NEGATION_OPERATOR:
        return args[0].negate()

    elif node.operator == mat.ADDITION_OPERATOR:
        return mat.Polynomial.sum_all(args)

    elif node.operator == mat.SUBTRACTION_OPERATOR:
        return args[0].subtract(args[1])

    elif node.operator == mat.MULTIPLICATION_OPERATOR:
        return mat.Polynomial.product(args)

    elif node.operator == mat.DIVISION_OPERATOR:
        try:
            return args[0].divide(args[1])
        except mat.DomainError as e:
            raise mat.DomainError("{0} (in '{1}')".format(e, node)) from e

    else:
        raise ValueError("Unable to resolve operator '{0}' as an arithmetic operator".format(node.operator))
