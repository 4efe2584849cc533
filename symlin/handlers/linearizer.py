from copy import copy
import hashlib
from numbers import Number
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

import symlin.mat as mat
from symlin.mat.polynomial import format_number
from symlin.prob.problem import Problem
import symlin.handlers.analyzer as anl
import symlin.handlers.evaluator as ev

"""
References:
-   H.P. Williams, Model Building in Mathematical Programming, 5th edition, Wiley, 2013. Chapter 9: building integer
    programming models.
-   J.P. Vielma, S. Ahmed, G. Nemhauser, Mixed-integer models for nonseparable piecewise-linear optimization: unifying
    framework and extensions, Operations Research 58(2), 2010, Pages 303-315. https://doi.org/10.1287/opre.1090.0721
"""


def linearize_expression(
    problem: Problem,
    node: mat.ExpressionNode,
    state: mat.State = None,
    context: str = "",
    big_m: Number = None,
    link_condition: bool = False,
) -> Tuple[Problem, mat.Polynomial]:
    linearizer = Linearizer(big_m=big_m, link_condition=link_condition)
    return linearizer.linearize_expression(problem=problem, node=node, state=state, context=context)


def get_aux_name(kind: str, fingerprint: Sequence[Any], context: str = "") -> str:
    """
    Generate the name of an auxiliary variable. The name is a deterministic function of the kind of construct, the
    canonical form of its resolved operands and the context tag of the caller.
    :param kind: kind of construct, e.g. 'abs'
    :param fingerprint: canonical description of the resolved operands and of the construct parameters
    :param context: context tag that separates otherwise identical constructs
    :return: auxiliary variable name of the form <kind>_<digest>
    """
    literal = "{0}|{1}|{2}".format(kind, "|".join(str(f) for f in fingerprint), context)
    digest = hashlib.sha256(literal.encode("utf-8")).hexdigest()
    return "{0}_{1}".format(kind, digest[:mat.AUX_DIGEST_LENGTH])


def canonicalize_polynomial(p: mat.Polynomial) -> str:
    terms = sorted(p.terms().items())
    return " ".join("{0}:{1}".format("*".join(term), format_number(coeff)) for term, coeff in terms)


class Linearizer:
    def __init__(self, big_m: Number = None, link_condition: bool = False):
        """
        Constructor of the Linearizer class.

        :param big_m: fallback big-M constant, used whenever the bounds of the variables involved in a disjunctive
        constraint are not all finite
        :param link_condition: if True, the binary selector of a conditional expression is constrained to be equal to
        the linearized condition
        """

        self.big_m: Number = big_m if big_m is not None else mat.DEFAULT_BIG_M
        self.link_condition: bool = link_condition

        if self.big_m <= 0:
            raise mat.ConstructionError("Big-M constant must be positive, got {0}".format(self.big_m))

        self.__problem: Optional[Problem] = None
        self.__context: str = ""

    # Core
    # ------------------------------------------------------------------------------------------------------------------

    def reset(self):
        self.__problem = None
        self.__context = ""

    def linearize_expression(
        self,
        problem: Problem,
        node: mat.ExpressionNode,
        state: mat.State = None,
        context: str = "",
    ) -> Tuple[Problem, mat.Polynomial]:
        """
        Transform an expression tree into a polynomial. Non-linear constructs are replaced by auxiliary variables,
        which are defined by auxiliary constraints. The argument problem is never modified: auxiliary entities are
        added to a copy of the problem. A linear expression is evaluated directly, in which case the argument problem
        itself is returned.

        :param problem: problem holding the variable families
        :param node: root of the expression tree
        :param state: generator bindings and data context
        :param context: context tag included in the names of the auxiliary variables
        :return: the problem holding the auxiliary entities, and the polynomial of the expression
        """

        if state is None:
            state = mat.State()

        if not anl.contains_non_linear(node):
            return problem, ev.evaluate_expression(problem, node, state)

        self.__problem = copy(problem)
        self.__context = context if context is not None else ""

        try:
            result = self.__linearize_node(node, state)
            return self.__problem, result
        finally:
            self.reset()

    def __linearize_node(self, node: mat.ExpressionNode, state: mat.State) -> mat.Polynomial:

        if isinstance(node, (mat.NumericNode, mat.ParameterNode, mat.DummyNode, mat.VariableNode)):
            return ev.evaluate_expression(self.__problem, node, state)

        elif isinstance(node, mat.ArithmeticOperationNode):
            args = [self.__linearize_node(o, state) for o in node.operands]
            return ev.apply_operator(node, args)

        elif isinstance(node, mat.ArithmeticTransformationNode):

            if node.fcn == mat.SUMMATION_FUNCTION:
                total = mat.Polynomial()
                for s in ev.expand_generators(node.generators, state):
                    for operand in node.operands:
                        total = total.add(self.__linearize_node(operand, s))
                return total

            elif node.fcn == mat.ABSOLUTE_VALUE_FUNCTION:
                if len(node.operands) != 1:
                    raise mat.ShapeError(
                        "Absolute value '{0}' requires exactly 1 operand, got {1} (bindings {2})".format(
                            node, len(node.operands), state
                        )
                    )
                return self.__linearize_absolute_value(node, self.__linearize_node(node.operands[0], state), state)

            elif node.fcn in (mat.MAXIMUM_FUNCTION, mat.MINIMUM_FUNCTION):
                return self.__linearize_extremum(node, self.__linearize_variadic_operands(node, state), state)

            else:
                raise ValueError("Unable to resolve symbol '{0}' as an arithmetic transformation".format(node.fcn))

        elif isinstance(node, mat.LogicalOperationNode):
            return self.__linearize_logical_operation(node, self.__linearize_variadic_operands(node, state), state)

        elif isinstance(node, mat.ArithmeticConditionalNode):
            condition = self.__linearize_node(node.condition, state)
            then_value = self.__linearize_node(node.then_operand, state)
            else_value = self.__linearize_node(node.else_operand, state)
            return self.__linearize_conditional(node, condition, then_value, else_value, state)

        elif isinstance(node, mat.PiecewiseLinearNode):
            self.__check_piecewise_shape(node, state)
            operand = self.__linearize_node(node.operand, state)
            return self.__linearize_piecewise(node, operand, state)

        else:
            raise ValueError("Unable to resolve node '{0}' of type '{1}'".format(node, type(node).__name__))

    # Absolute Value
    # ------------------------------------------------------------------------------------------------------------------

    def __linearize_absolute_value(self,
                                   node: mat.ArithmeticTransformationNode,
                                   operand: mat.Polynomial,
                                   state: mat.State) -> mat.Polynomial:

        name = get_aux_name(mat.ABS_AUX_KIND, [canonicalize_polynomial(operand)], self.__context)
        memo = self.__problem.get_registered_auxiliary(name)
        if memo is not None:
            return memo

        aux = self.__problem.new_named_variable(name, description=node.get_literal())

        # a >= e, a >= -e
        self.__add_constraint(node, name, state, aux, mat.GREATER_EQUAL_INEQUALITY_OPERATOR, operand)
        self.__add_constraint(node, name, state, aux, mat.GREATER_EQUAL_INEQUALITY_OPERATOR, operand.negate())

        self.__problem.register_auxiliary(name, aux)
        return aux

    # Maximum and Minimum
    # ------------------------------------------------------------------------------------------------------------------

    def __linearize_variadic_operands(self,
                                      node: Union[mat.ArithmeticTransformationNode, mat.LogicalOperationNode],
                                      state: mat.State) -> List[mat.Polynomial]:

        # max(x[_]), min(x[_]), and(b[_]) and or(b[_]) range over the matched entries of the family
        if node.is_pattern():

            var_node = node.operands[0]
            family = self.__problem.get_family(var_node.symbol)
            if family is None:
                raise mat.LookupFailureError("Variable family '{0}' is undefined".format(var_node.symbol))

            entries = mat.match_entries(family, ev.resolve_indices(var_node, state))
            if len(entries) == 0:
                raise mat.LookupFailureError(
                    "Pattern '{0}' of '{1}' does not match any variable (bindings {2})".format(var_node, node, state)
                )

            return [p for _, p in entries]

        self.__check_variadic_operand_count(node, node.operands, state)
        return [self.__linearize_node(o, state) for o in node.operands]

    def __linearize_extremum(self,
                             node: mat.ArithmeticTransformationNode,
                             operands: List[mat.Polynomial],
                             state: mat.State) -> mat.Polynomial:

        if node.fcn == mat.MAXIMUM_FUNCTION:
            kind = mat.MAX_AUX_KIND
            operator = mat.GREATER_EQUAL_INEQUALITY_OPERATOR
        else:
            kind = mat.MIN_AUX_KIND
            operator = mat.LESS_EQUAL_INEQUALITY_OPERATOR

        name = get_aux_name(kind, sorted(canonicalize_polynomial(p) for p in operands), self.__context)
        memo = self.__problem.get_registered_auxiliary(name)
        if memo is not None:
            return memo

        aux = self.__problem.new_named_variable(name, description=node.get_literal())

        # a >= e_i for max, a <= e_i for min
        for operand in operands:
            self.__add_constraint(node, name, state, aux, operator, operand)

        self.__problem.register_auxiliary(name, aux)
        return aux

    # Conjunction and Disjunction
    # ------------------------------------------------------------------------------------------------------------------

    def __linearize_logical_operation(self,
                                      node: mat.LogicalOperationNode,
                                      operands: List[mat.Polynomial],
                                      state: mat.State) -> mat.Polynomial:

        kind = mat.AND_AUX_KIND if node.operator == mat.CONJUNCTION_OPERATOR else mat.OR_AUX_KIND

        name = get_aux_name(kind, sorted(canonicalize_polynomial(p) for p in operands), self.__context)
        memo = self.__problem.get_registered_auxiliary(name)
        if memo is not None:
            return memo

        aux = self.__problem.new_named_variable(name, var_type=mat.BINARY_VAR_TYPE, description=node.get_literal())
        total = mat.Polynomial.sum_all(operands)
        n = len(operands)

        if node.operator == mat.CONJUNCTION_OPERATOR:
            # a <= e_i, a >= sum(e_i) - (n - 1)
            for operand in operands:
                self.__add_constraint(node, name, state, aux, mat.LESS_EQUAL_INEQUALITY_OPERATOR, operand)
            self.__add_constraint(node, name, state, aux, mat.GREATER_EQUAL_INEQUALITY_OPERATOR, total.subtract(n - 1))

        else:
            # a >= e_i, a <= sum(e_i)
            for operand in operands:
                self.__add_constraint(node, name, state, aux, mat.GREATER_EQUAL_INEQUALITY_OPERATOR, operand)
            self.__add_constraint(node, name, state, aux, mat.LESS_EQUAL_INEQUALITY_OPERATOR, total)

        self.__problem.register_auxiliary(name, aux)
        return aux

    # Conditional
    # ------------------------------------------------------------------------------------------------------------------

    def __linearize_conditional(self,
                                node: mat.ArithmeticConditionalNode,
                                condition: mat.Polynomial,
                                then_value: mat.Polynomial,
                                else_value: mat.Polynomial,
                                state: mat.State) -> mat.Polynomial:

        fingerprint = [canonicalize_polynomial(p) for p in (condition, then_value, else_value)]
        name = get_aux_name(mat.IF_THEN_ELSE_AUX_KIND, fingerprint, self.__context)
        memo = self.__problem.get_registered_auxiliary(name)
        if memo is not None:
            return memo

        selector = self.__problem.new_named_variable("{0}_sel".format(name),
                                                     var_type=mat.BINARY_VAR_TYPE,
                                                     description="condition of {0}".format(node))
        aux = self.__problem.new_named_variable(name, description=node.get_literal())

        big_m = self.__get_big_m([then_value.subtract(else_value)])
        inactive_then = selector.negate().add(1).scale(big_m)  # M (1 - c')
        inactive_else = selector.scale(big_m)  # M c'

        # a <= t + M (1 - c'), a >= t - M (1 - c'), a <= f + M c', a >= f - M c'
        self.__add_constraint(node, name, state, aux, mat.LESS_EQUAL_INEQUALITY_OPERATOR,
                              then_value.add(inactive_then))
        self.__add_constraint(node, name, state, aux, mat.GREATER_EQUAL_INEQUALITY_OPERATOR,
                              then_value.subtract(inactive_then))
        self.__add_constraint(node, name, state, aux, mat.LESS_EQUAL_INEQUALITY_OPERATOR,
                              else_value.add(inactive_else))
        self.__add_constraint(node, name, state, aux, mat.GREATER_EQUAL_INEQUALITY_OPERATOR,
                              else_value.subtract(inactive_else))

        if self.link_condition:
            self.__add_constraint(node, name, state, selector, mat.EQUALITY_OPERATOR, condition)

        self.__problem.register_auxiliary(name, aux)
        return aux

    # Piecewise-Linear Function
    # ------------------------------------------------------------------------------------------------------------------

    def __check_piecewise_shape(self, node: mat.PiecewiseLinearNode, state: mat.State):

        k = node.get_segment_count()

        if k == 0:
            raise mat.ShapeError("Piecewise-linear function '{0}' has no segment".format(node))

        if len(node.breakpoints) != k + 1 or len(node.intercepts) != k:
            raise mat.ShapeError(
                "Piecewise-linear function '{0}' requires {1} breakpoints and {2} intercepts for {2} slopes, "
                "got {3} breakpoints and {4} intercepts (bindings {5})".format(
                    node, k + 1, k, len(node.breakpoints), len(node.intercepts), state
                )
            )

        if any(b1 >= b2 for b1, b2 in zip(node.breakpoints[:-1], node.breakpoints[1:])):
            raise mat.ShapeError(
                "Breakpoints {0} of piecewise-linear function '{1}' must be strictly ascending".format(
                    node.breakpoints, node
                )
            )

    def __linearize_piecewise(self,
                              node: mat.PiecewiseLinearNode,
                              operand: mat.Polynomial,
                              state: mat.State) -> mat.Polynomial:

        fingerprint = [canonicalize_polynomial(operand),
                       ",".join(format_number(b) for b in node.breakpoints),
                       ",".join(format_number(s) for s in node.slopes),
                       ",".join(format_number(c) for c in node.intercepts)]
        name = get_aux_name(mat.PIECEWISE_AUX_KIND, fingerprint, self.__context)
        memo = self.__problem.get_registered_auxiliary(name)
        if memo is not None:
            return memo

        k = node.get_segment_count()

        selectors = [
            self.__problem.new_named_variable("{0}_s{1}".format(name, i + 1),
                                              var_type=mat.BINARY_VAR_TYPE,
                                              description="segment {0} of {1}".format(i + 1, node))
            for i in range(k)
        ]
        aux = self.__problem.new_named_variable(name, description=node.get_literal())

        # exactly one active segment
        self.__add_constraint(node, name, state, mat.Polynomial.sum_all(selectors), mat.EQUALITY_OPERATOR, 1)

        segment_values = [operand.scale(node.slopes[i]).add(node.intercepts[i]) for i in range(k)]

        for i in range(k):

            inactive = selectors[i].negate().add(1)  # 1 - s_i

            # value sandwich: a = slope_i e + intercept_i when s_i = 1
            value_m = self.__get_big_m([segment_values[j].subtract(segment_values[i]) for j in range(k)])
            self.__add_constraint(node, name, state, aux, mat.LESS_EQUAL_INEQUALITY_OPERATOR,
                                  segment_values[i].add(inactive.scale(value_m)))
            self.__add_constraint(node, name, state, aux, mat.GREATER_EQUAL_INEQUALITY_OPERATOR,
                                  segment_values[i].subtract(inactive.scale(value_m)))

            # domain sandwich: b_i <= e <= b_i+1 when s_i = 1
            lb_m = self.__get_big_m([operand.negate().add(node.breakpoints[i])])
            ub_m = self.__get_big_m([operand.subtract(node.breakpoints[i + 1])])
            self.__add_constraint(node, name, state, operand, mat.GREATER_EQUAL_INEQUALITY_OPERATOR,
                                  inactive.scale(-lb_m).add(node.breakpoints[i]))
            self.__add_constraint(node, name, state, operand, mat.LESS_EQUAL_INEQUALITY_OPERATOR,
                                  inactive.scale(ub_m).add(node.breakpoints[i + 1]))

        self.__problem.register_auxiliary(name, aux)
        return aux

    # Big-M
    # ------------------------------------------------------------------------------------------------------------------

    def __get_big_m(self, polynomials: Sequence[mat.Polynomial]) -> Number:
        """
        Derive the smallest constant that bounds the absolute value of each polynomial over the box defined by the
        bounds of its variables. The configured constant is returned if any variable involved is unbounded.
        """

        big_m = 0
        for p in polynomials:
            interval = get_interval(self.__problem, p)
            if interval is None:
                return self.big_m
            big_m = max(big_m, abs(interval[0]), abs(interval[1]))

        return big_m

    # Utility
    # ------------------------------------------------------------------------------------------------------------------

    @staticmethod
    def __check_variadic_operand_count(node: mat.ExpressionNode, operands: list, state: mat.State):
        if len(operands) < 2:
            raise mat.ShapeError(
                "Expression '{0}' requires at least 2 operands, got {1} (bindings {2})".format(
                    node, len(operands), state
                )
            )

    def __add_constraint(self,
                         node: mat.ExpressionNode,
                         aux_name: str,
                         state: mat.State,
                         lhs: mat.Polynomial,
                         operator: str,
                         rhs):

        metadata: Dict[str, Any] = {
            "expression": node.get_literal(),
            "bindings": state.bindings,
            "context": self.__context,
        }
        con = mat.Constraint.build(lhs, operator, rhs, label=aux_name, metadata=metadata)
        self.__problem.add_constraint(con)


def get_interval(problem: Problem, p: mat.Polynomial) -> Optional[Tuple[float, float]]:
    """
    Evaluate the range of a polynomial over the box defined by the bounds of its variables by interval arithmetic.
    :param problem: problem holding the variable definitions
    :param p: polynomial
    :return: lower and upper bound of the polynomial, None if any of its variables is unbounded
    """

    lb, ub = 0.0, 0.0

    for term, coeff in p.terms().items():

        term_lb, term_ub = coeff, coeff

        for name in term:
            var = problem.get_variable(name)
            if not var.is_bounded():
                return None
            products = np.outer([term_lb, term_ub], [var.lb, var.ub])
            term_lb, term_ub = products.min().item(), products.max().item()

        lb += term_lb
        ub += term_ub

    return lb, ub
