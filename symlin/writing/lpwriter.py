from numbers import Number
from typing import List, Optional
import warnings

import numpy as np

import symlin.mat as mat
from symlin.prob.problem import Problem
import symlin.util.util as util

OBJECTIVE_NAME = "obj"

STRICT_RELAXATIONS = {
    mat.LESS_INEQUALITY_OPERATOR: mat.LESS_EQUAL_INEQUALITY_OPERATOR,
    mat.GREATER_INEQUALITY_OPERATOR: mat.GREATER_EQUAL_INEQUALITY_OPERATOR,
}


class LPWriter:
    """
    Writer of problems in the CPLEX LP file format.

    The writer is the serialization boundary of a problem: every polynomial that reaches it must be of degree 2 or
    less. Quadratic terms are written between brackets; the quadratic part of the objective is written with doubled
    coefficients and divided by 2, as the format requires.
    """

    def __init__(self):
        self.lp_script: str = ""

    def write(self, problem: Problem) -> str:

        self.lp_script = ""

        self.lp_script += "{0}\n".format("Maximize" if problem.direction == mat.MAXIMIZE else "Minimize")
        self.lp_script += "  {0}: {1}\n".format(OBJECTIVE_NAME, self.generate_objective_literal(problem.objective))

        self.lp_script += "Subject To\n"
        for name in sorted(problem.constraints):
            self.lp_script += self.generate_constraint_literal(problem.get_constraint(name))

        variables = [problem.variables[n] for n in sorted(problem.variables)]

        self.lp_script += "Bounds\n"
        for var in variables:
            self.lp_script += self.generate_bounds_literal(var)

        self.lp_script += "General\n"
        for var in variables:
            if var.var_type == mat.INTEGER_VAR_TYPE:
                self.lp_script += "  {0}\n".format(var.name)

        self.lp_script += "Binary\n"
        for var in variables:
            if var.var_type == mat.BINARY_VAR_TYPE:
                self.lp_script += "  {0}\n".format(var.name)

        self.lp_script += "End\n"

        return self.lp_script

    # Objective and Constraints
    # ------------------------------------------------------------------------------------------------------------------

    def generate_objective_literal(self, objective: mat.Polynomial) -> str:

        if objective.degree() > 2:
            raise mat.DomainError("Objective '{0}' is of degree {1}:".format(objective, objective.degree())
                                  + " only polynomials of degree 2 or less can be written")

        linear_terms, quadratic_terms = self.__split_by_degree(objective)

        literal = self.generate_terms_literal(linear_terms) if len(linear_terms) > 0 else ""
        if len(quadratic_terms) > 0:
            quadratic_literal = "[ {0} ] / 2".format(
                self.generate_terms_literal([(t, 2 * c) for t, c in quadratic_terms])
            )
            literal = quadratic_literal if literal == "" else "{0} + {1}".format(literal, quadratic_literal)

        return literal if literal != "" else "0"

    def generate_constraint_literal(self, constraint: mat.Constraint) -> str:

        if constraint.degree() > 2:
            raise mat.DomainError("Constraint '{0}' is of degree {1}:".format(constraint.name, constraint.degree())
                                  + " only polynomials of degree 2 or less can be written")

        operator = constraint.operator
        if operator in STRICT_RELAXATIONS:
            warnings.warn("Strict inequality of constraint '{0}' is written as a non-strict inequality".format(
                constraint.name))
            operator = STRICT_RELAXATIONS[operator]
        if operator == mat.EQUALITY_OPERATOR:
            operator = "="

        linear_terms, quadratic_terms = self.__split_by_degree(constraint.lhs)

        body = self.generate_terms_literal(linear_terms) if len(linear_terms) > 0 else ""
        if len(quadratic_terms) > 0:
            quadratic_literal = "[ {0} ]".format(self.generate_terms_literal(quadratic_terms))
            body = quadratic_literal if body == "" else "{0} + {1}".format(body, quadratic_literal)
        if body == "":
            body = "0"

        return "  {0}: {1} {2} {3}\n".format(constraint.name,
                                              body,
                                              operator,
                                              format_bound(constraint.rhs))

    @staticmethod
    def generate_terms_literal(terms: List[tuple]) -> str:
        literal = ""
        for i, (term, coeff) in enumerate(terms):

            coeff_literal = mat.format_number(abs(coeff))
            if len(term) == 0:
                body = coeff_literal
            else:
                body = "{0} {1}".format(coeff_literal, generate_product_literal(term))

            if i == 0:
                literal = body if coeff > 0 else "- " + body
            else:
                literal += " {0} {1}".format("+" if coeff > 0 else "-", body)

        return literal

    @staticmethod
    def __split_by_degree(polynomial: mat.Polynomial):
        terms = sorted(polynomial.terms().items(), key=lambda tc: (len(tc[0]), tc[0]))
        linear_terms = [(t, c) for t, c in terms if len(t) < 2]
        quadratic_terms = [(t, c) for t, c in terms if len(t) == 2]
        return linear_terms, quadratic_terms

    # Bounds
    # ------------------------------------------------------------------------------------------------------------------

    @staticmethod
    def generate_bounds_literal(var: mat.Variable) -> str:

        lb = None if var.lb is None or var.lb == -np.inf else var.lb
        ub = None if var.ub is None or var.ub == np.inf else var.ub

        # binary variables are bounded by their section
        if var.var_type == mat.BINARY_VAR_TYPE and lb == 0 and ub == 1:
            return ""

        # a missing lower bound defaults to 0 in the format
        if lb is None and ub is None:
            return "  {0} free\n".format(var.name)
        elif lb is None:
            return "  -inf <= {0} <= {1}\n".format(var.name, format_bound(ub))
        elif ub is None:
            return "  {0} >= {1}\n".format(var.name, format_bound(lb))
        elif lb == ub:
            return "  {0} = {1}\n".format(var.name, format_bound(lb))
        return "  {0} <= {1} <= {2}\n".format(format_bound(lb), var.name, format_bound(ub))


# Utilities
# ----------------------------------------------------------------------------------------------------------------------

def generate_product_literal(term: mat.Term) -> str:
    if len(term) == 2 and term[0] == term[1]:
        return "{0} ^ 2".format(term[0])
    return " * ".join(term)


def format_bound(value: Number) -> str:
    if value == np.inf:
        return "inf"
    elif value == -np.inf:
        return "-inf"
    return mat.format_number(value)


def to_lp(problem: Problem) -> str:
    return LPWriter().write(problem)


def write_lp_file(problem: Problem, file_name: str = None, dir_path: Optional[str] = None) -> str:
    """
    Write a problem to a CPLEX LP file.
    :param problem: problem to write
    :param file_name: name of the file; defaults to the symbol of the problem with the '.lp' extension
    :param dir_path: directory of the file; defaults to the working directory
    :return: the written LP text
    """
    if file_name is None:
        file_name = problem.symbol + ".lp"
    literal = to_lp(problem)
    util.write_file(dir_path, file_name, literal)
    return literal
