from copy import copy
from numbers import Number
from typing import Dict, Iterable, List, Optional, Union
import warnings

import symlin.mat as mat
import symlin.util.util as util


class Problem:
    def __init__(
        self,
        direction: str = None,
        symbol: str = None,
        description: str = None,
    ):
        """
        Constructor of the Problem class. A problem accumulates variable definitions, indexed variable families,
        constraints and an objective polynomial. Identifiers are generated from monotonically increasing counters that
        are never reset.

        :param direction: 'minimize' or 'maximize'; there is no default direction
        :param symbol: name of the problem
        :param description: optional description of the problem
        """

        if direction not in mat.DIRECTIONS:
            raise mat.ConstructionError(
                "Problem requires an optimization direction ({0}), got '{1}'".format(
                    " or ".join(mat.DIRECTIONS), direction
                )
            )

        self.symbol: str = symbol if symbol is not None else "Initial"
        self.description: str = description if description is not None else ""

        self._direction: str = direction
        self._objective: mat.Polynomial = mat.Polynomial()

        self._variables: Dict[str, mat.Variable] = {}
        self._constraints: Dict[str, mat.Constraint] = {}
        self._families: Dict[str, mat.Family] = {}

        # name of each auxiliary variable -> polynomial returned by the transformation that emitted it
        self._aux_registry: Dict[str, mat.Polynomial] = {}

        self._variable_counter: int = 0
        self._constraint_counter: int = 0

    def __str__(self):
        return "Problem<{0}, {1}, {2} variables, {3} constraints>".format(
            self.symbol, self._direction, len(self._variables), len(self._constraints)
        )

    def __repr__(self):
        return str(self)

    def __copy__(self):
        clone = Problem.__new__(Problem)
        self.copy(self, clone)
        return clone

    # Copying
    # ------------------------------------------------------------------------------------------------------------------

    @staticmethod
    def copy(source: "Problem", clone: "Problem"):

        clone.symbol = source.symbol
        clone.description = source.description

        clone._direction = source._direction
        clone._objective = source._objective

        # variables, constraints and polynomials are immutable and shared between copies
        clone._variables = dict(source._variables)
        clone._constraints = dict(source._constraints)
        clone._families = {sym: dict(f) for sym, f in source._families.items()}
        clone._aux_registry = dict(source._aux_registry)

        clone._variable_counter = source._variable_counter
        clone._constraint_counter = source._constraint_counter

    # Properties
    # ------------------------------------------------------------------------------------------------------------------

    @property
    def direction(self) -> str:
        return self._direction

    @property
    def objective(self) -> mat.Polynomial:
        return self._objective

    @property
    def variables(self) -> Dict[str, mat.Variable]:
        return dict(self._variables)

    @property
    def constraints(self) -> Dict[str, mat.Constraint]:
        return dict(self._constraints)

    @property
    def families(self) -> Dict[str, mat.Family]:
        return {sym: dict(f) for sym, f in self._families.items()}

    @property
    def variable_counter(self) -> int:
        return self._variable_counter

    @property
    def constraint_counter(self) -> int:
        return self._constraint_counter

    def get_variable_count(self) -> int:
        return len(self._variables)

    def get_constraint_count(self) -> int:
        return len(self._constraints)

    # Accessors
    # ------------------------------------------------------------------------------------------------------------------

    def get_variable(self, name: str) -> mat.Variable:
        if name not in self._variables:
            raise mat.LookupFailureError("Variable '{0}' is undefined".format(name))
        return self._variables[name]

    def get_constraint(self, name: str) -> mat.Constraint:
        if name not in self._constraints:
            raise mat.LookupFailureError("Constraint '{0}' is undefined".format(name))
        return self._constraints[name]

    def contains_variable(self, name: str) -> bool:
        return name in self._variables

    def get_family(self, symbol: str) -> Optional[mat.Family]:
        family = self._families.get(symbol, None)
        return dict(family) if family is not None else None

    def get_registered_auxiliary(self, name: str) -> Optional[mat.Polynomial]:
        return self._aux_registry.get(name, None)

    # Variables
    # ------------------------------------------------------------------------------------------------------------------

    def new_variable(
        self,
        label: str,
        var_type: str = mat.CONTINUOUS_VAR_TYPE,
        lb: Number = None,
        ub: Number = None,
        description: str = None,
    ) -> mat.Polynomial:
        """
        Instantiate a scalar variable. The generated name combines a zero-padded counter and the label. The variable is
        mirrored into a family named after the label under the empty index, so that it can be referenced by a
        variable node without indices.

        :param label: human-readable label of the variable; characters other than letters, digits and
        underscores are replaced by underscores in the generated name
        :param var_type: 'continuous', 'integer' or 'binary'
        :param lb: lower bound
        :param ub: upper bound
        :param description: optional description
        :return: monomial of the new variable
        """

        name = "{0}{1}_{2}".format(mat.VARIABLE_NAME_PREFIX,
                                   str(self._variable_counter).zfill(mat.VARIABLE_COUNTER_WIDTH),
                                   util.sanitize_name(label))
        monomial = self.__register_variable(
            mat.Variable(name=name, var_type=var_type, lb=lb, ub=ub, description=description)
        )

        family = self._families.get(label, None)
        if family is not None and any(len(idx) > 0 for idx in family):
            raise mat.ConstructionError(
                "Scalar variable '{0}' conflicts with the indexed family of the same name".format(label)
            )
        self._families[label] = {(): monomial}

        return monomial

    def new_named_variable(
        self,
        name: str,
        var_type: str = mat.CONTINUOUS_VAR_TYPE,
        lb: Number = None,
        ub: Number = None,
        description: str = None,
    ) -> mat.Polynomial:
        """Instantiate a variable under an exact name. The name must not be in use."""
        if name in self._variables:
            raise mat.ConstructionError("Variable '{0}' is already defined".format(name))
        return self.__register_variable(
            mat.Variable(name=name, var_type=var_type, lb=lb, ub=ub, description=description)
        )

    def new_variables(
        self,
        labels: Iterable[str],
        var_type: str = mat.CONTINUOUS_VAR_TYPE,
        lb: Number = None,
        ub: Number = None,
    ) -> List[mat.Polynomial]:
        return [self.new_variable(label, var_type=var_type, lb=lb, ub=ub) for label in labels]

    def __register_variable(self, var: mat.Variable) -> mat.Polynomial:
        self._variables[var.name] = var
        self._variable_counter += 1
        return mat.Polynomial.variable(var.name)

    def register_auxiliary(self, name: str, result: mat.Polynomial):
        self._aux_registry[name] = result

    # Families
    # ------------------------------------------------------------------------------------------------------------------

    def put_family(self, symbol: str, index_map: mat.Family):
        """
        Create or replace the index-to-polynomial map of a variable family. Every polynomial of the map must be a
        monomial of a registered variable.
        """

        family = {}
        for idx, p in index_map.items():
            idx = tuple(idx)
            undefined = [v for v in p.variables() if v not in self._variables]
            if len(undefined) > 0:
                raise mat.LookupFailureError(
                    "Entry {0}{1} of family '{0}' references undefined variable(s) {2}".format(
                        symbol, list(idx), ", ".join(undefined)
                    )
                )
            family[idx] = p

        self._families[symbol] = family

    # Constraints
    # ------------------------------------------------------------------------------------------------------------------

    def add_constraint(self, constraint: mat.Constraint) -> mat.Constraint:
        """
        Store a constraint under a newly generated identifier. The identifier combines a zero-padded counter and the
        label of the constraint, if any.

        :param constraint: normalized constraint
        :return: the stored constraint, renamed with its identifier
        """

        self.validate_constraint_variables(constraint)

        if constraint.lhs.is_constant():
            warnings.warn("Constraint '{0}' does not reference any variable".format(constraint))

        con_id = "{0}{1}".format(
            mat.CONSTRAINT_NAME_PREFIX, str(self._constraint_counter).zfill(mat.CONSTRAINT_COUNTER_WIDTH)
        )
        if constraint.label is not None:
            con_id += "_{0}".format(util.sanitize_name(constraint.label))

        constraint = constraint.rename(con_id)
        self._constraints[con_id] = constraint
        self._constraint_counter += 1

        return constraint

    def validate_constraint_variables(self, constraint: mat.Constraint):
        undefined = [v for v in constraint.lhs.variables() if v not in self._variables]
        if len(undefined) > 0:
            raise mat.LookupFailureError(
                "Constraint '{0}' references undefined variable(s) {1}".format(constraint, ", ".join(undefined))
            )

    # Objective
    # ------------------------------------------------------------------------------------------------------------------

    def set_objective(self, polynomial: Union[mat.Polynomial, Number]):
        self._objective = mat.Polynomial.to_polynomial(polynomial)

    def increment_objective(self, polynomial: Union[mat.Polynomial, Number]):
        self._objective = self._objective.add(polynomial)

    def decrement_objective(self, polynomial: Union[mat.Polynomial, Number]):
        self._objective = self._objective.subtract(polynomial)

    def minimize(self, polynomial: Union[mat.Polynomial, Number]):
        if self._direction == mat.MINIMIZE:
            self.increment_objective(polynomial)
        else:
            self.decrement_objective(polynomial)

    def maximize(self, polynomial: Union[mat.Polynomial, Number]):
        if self._direction == mat.MAXIMIZE:
            self.increment_objective(polynomial)
        else:
            self.decrement_objective(polynomial)


def put_family(problem: Problem, symbol: str, index_map: mat.Family) -> Problem:
    clone = copy(problem)
    clone.put_family(symbol, index_map)
    return clone


def get_family(problem: Problem, symbol: str) -> Optional[mat.Family]:
    return problem.get_family(symbol)
