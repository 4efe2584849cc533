from abc import ABC, abstractmethod
from numbers import Number
import os
import subprocess
import tempfile
from typing import Dict, List, Optional, Union

import symlin.mat as mat
from symlin.prob.problem import Problem
import symlin.util.util as util


class SolverError(RuntimeError):
    def __init__(self, message: str, solver_output: str = "", model_text: str = ""):
        super().__init__(message)
        self.solver_output: str = solver_output
        self.model_text: str = model_text

    def __str__(self):
        literal = self.args[0]
        if self.model_text != "":
            literal += "\n\nInput problem:\n{0}".format(util.indent(self.model_text))
        if self.solver_output != "":
            literal += "\n\nSolver output:\n{0}".format(util.indent(self.solver_output))
        return literal


class Solution:
    def __init__(
        self,
        model_status: str = None,
        feasibility: Union[str, bool] = True,
        objective: Number = None,
        variables: Dict[str, Number] = None,
        constraints: Dict[str, Number] = None,
    ):
        """
        Constructor of the Solution class.

        :param model_status: status reported by the solver, e.g. 'Optimal'
        :param feasibility: feasibility of the primal solution, e.g. 'Feasible'
        :param objective: objective value
        :param variables: value of each variable
        :param constraints: value of each constraint body
        """

        self.model_status: Optional[str] = model_status
        self.feasibility: Union[str, bool] = feasibility
        self.objective: Optional[Number] = objective
        self.variables: Dict[str, Number] = dict(variables) if variables is not None else {}
        self.constraints: Dict[str, Number] = dict(constraints) if constraints is not None else {}

    def __str__(self):
        return "Solution<{0}, objective={1}, {2} variables, {3} constraints>".format(
            self.model_status, self.objective, len(self.variables), len(self.constraints)
        )

    def __repr__(self):
        return str(self)

    def get_variable_count(self) -> int:
        return len(self.variables)

    def get_constraint_count(self) -> int:
        return len(self.constraints)

    def evaluate(self, expression: Union[mat.Polynomial, Number]) -> Union[mat.Polynomial, Number]:
        """
        Substitute the values of the solution into a polynomial.
        :param expression: polynomial or number
        :return: a number if every variable of the polynomial has a value, otherwise the reduced polynomial
        """
        if isinstance(expression, Number):
            return expression
        return expression.substitute(self.variables).to_number_if_possible()


class Engine(ABC):
    """Boundary between a problem and an external solver."""

    def __init__(self):
        self._solver_output: str = ""

    @abstractmethod
    def solve(self, problem: Problem) -> Solution:
        pass

    def get_solver_output(self) -> str:
        return self._solver_output


class HiGHSEngine(Engine):
    """
    Solve problems with the HiGHS command-line executable. The problem is written to a temporary LP file, and the
    solution file written by the executable is parsed.
    """

    def __init__(self, binary_path: str = "highs", options: List[str] = None):
        super().__init__()
        self.binary_path: str = binary_path
        self.options: List[str] = list(options) if options is not None else []

    def solve(self, problem: Problem) -> Solution:

        from symlin.writing.lpwriter import to_lp
        from symlin.parsing.solutionparser import parse_solution

        model_text = to_lp(problem)

        with tempfile.TemporaryDirectory() as dir_path:

            model_file_name = "model.lp"
            solution_path = os.path.join(dir_path, "solution.txt")
            util.write_file(dir_path, model_file_name, model_text)

            args = [self.binary_path, os.path.join(dir_path, model_file_name), "--solution_file", solution_path]
            args += self.options

            try:
                completed = subprocess.run(args, capture_output=True, text=True)
            except OSError as e:
                raise SolverError("Unable to run the solver executable '{0}': {1}".format(self.binary_path, e),
                                  model_text=model_text) from e

            self._solver_output = completed.stdout + completed.stderr

            if not os.path.isfile(solution_path):
                raise SolverError("Solver did not produce a solution for problem '{0}'".format(problem.symbol),
                                  solver_output=self._solver_output,
                                  model_text=model_text)

            return parse_solution(util.read_file(solution_path))
