from numbers import Number
from typing import Dict, List, Tuple

from symlin.execution.engine import Solution

MODEL_STATUS_HEADER = "Model status"
PRIMAL_SOLUTION_HEADER = "# Primal solution values"
DUAL_SOLUTION_HEADER = "# Dual solution values"
OBJECTIVE_KEYWORD = "Objective"
COLUMNS_HEADER = "# Columns"
ROWS_HEADER = "# Rows"


def parse_solution(literal: str) -> Solution:
    """
    Parse the plain-text solution file written by the HiGHS solver. Only the model status and the primal solution
    values are read; the dual values and the basis are ignored.

    Example of the expected format:

        Model status
        Optimal

        # Primal solution values
        Feasible
        Objective 0.5
        # Columns 1
        x00000000_x 0.5
        # Rows 1
        c00000000 0.5

    :param literal: content of the solution file
    :return: parsed solution
    """

    lines = [line.strip() for line in literal.replace("\r\n", "\n").split("\n")]
    lines = [line for line in lines if line != ""]

    pos = __find_line(lines, MODEL_STATUS_HEADER, 0)
    model_status = __get_line(lines, pos + 1, "model status")

    pos = __find_line(lines, PRIMAL_SOLUTION_HEADER, pos + 2)
    feasibility = __get_line(lines, pos + 1, "feasibility")
    pos += 2

    objective = None
    tokens = __get_line(lines, pos, "objective").split()
    if tokens[0] == OBJECTIVE_KEYWORD:
        if len(tokens) != 2:
            raise ValueError("Unable to parse objective line '{0}'".format(lines[pos]))
        objective = parse_number(tokens[1])
        pos += 1

    variables, pos = __parse_section(lines, pos, COLUMNS_HEADER)
    constraints, pos = __parse_section(lines, pos, ROWS_HEADER)

    return Solution(model_status=model_status,
                    feasibility=feasibility,
                    objective=objective,
                    variables=variables,
                    constraints=constraints)


def parse_number(token: str) -> Number:
    try:
        return int(token)
    except ValueError:
        pass
    try:
        return float(token)
    except ValueError:
        raise ValueError("Unable to parse '{0}' as a number".format(token))


def __parse_section(lines: List[str], pos: int, header: str) -> Tuple[Dict[str, Number], int]:

    line = __get_line(lines, pos, header)
    if not line.startswith(header):
        raise ValueError("Expected '{0}' at line '{1}'".format(header, line))

    count_literal = line[len(header):].strip()
    if not count_literal.isdigit():
        raise ValueError("Unable to parse entry count of line '{0}'".format(line))
    count = int(count_literal)

    values = {}
    for i in range(pos + 1, pos + 1 + count):
        tokens = __get_line(lines, i, header).split()
        if len(tokens) != 2:
            raise ValueError("Unable to parse solution entry '{0}'".format(lines[i]))
        values[tokens[0]] = parse_number(tokens[1])

    return values, pos + 1 + count


def __find_line(lines: List[str], header: str, start: int) -> int:
    for i in range(start, len(lines)):
        if lines[i] == header:
            return i
        elif lines[i] == DUAL_SOLUTION_HEADER:
            break
    raise ValueError("Solution text does not contain the line '{0}'".format(header))


def __get_line(lines: List[str], pos: int, description: str) -> str:
    if pos >= len(lines):
        raise ValueError("Solution text ended before its {0}".format(description))
    return lines[pos]
