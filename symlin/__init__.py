import os
import pathlib

# allow access to the following members from the symlin directory
from symlin.mat import *
from symlin.prob.problem import Problem, put_family, get_family
from symlin.handlers.nodebuilder import *
from symlin.handlers.analyzer import (
    Analysis,
    analyze,
    classify,
    is_linear,
    is_non_linear,
    contains_non_linear,
    complexity_score,
)
from symlin.handlers.evaluator import evaluate_expression
from symlin.handlers.linearizer import linearize_expression, Linearizer
from symlin.handlers.problembuilder import (
    build_problem,
    add_variable,
    add_variables,
    add_constraint,
    add_constraints,
    set_objective,
    increment_objective,
)
from symlin.writing.lpwriter import LPWriter, to_lp, write_lp_file
from symlin.parsing.solutionparser import parse_solution
from symlin.execution.engine import Engine, HiGHSEngine, Solution, SolverError


# The directory containing this file
ROOT_DIR = pathlib.Path(__file__).parent

with open(os.path.join(ROOT_DIR, "VERSION")) as version_file:
    version = version_file.read().strip()
__version__ = version


def solve_problem(problem: Problem, engine: Engine = None) -> Solution:
    if engine is None:
        engine = HiGHSEngine()
    return engine.solve(problem)
