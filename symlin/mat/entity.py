from numbers import Number
from typing import Any, Dict, Mapping, Optional, Union

import numpy as np

from .constants import *
from .exceptions import ConstructionError, DomainError
from .polynomial import Polynomial


class Variable:
    def __init__(
        self,
        name: str,
        var_type: str = CONTINUOUS_VAR_TYPE,
        lb: Optional[Number] = None,
        ub: Optional[Number] = None,
        description: str = None,
    ):
        """
        Constructor of the Variable class. A variable definition is created once and never modified afterwards.

        :param name: unique generated name that identifies the variable within a problem
        :param var_type: one of 'continuous', 'integer' or 'binary'
        :param lb: lower bound, None if unbounded below
        :param ub: upper bound, None if unbounded above
        :param description: optional human-readable description
        """

        if var_type not in VAR_TYPES:
            raise ConstructionError(
                "Variable type '{0}' of variable '{1}' is not one of {2}".format(var_type, name, ", ".join(VAR_TYPES))
            )

        # binary variables are implicitly bounded
        if var_type == BINARY_VAR_TYPE:
            lb = 0 if lb is None else lb
            ub = 1 if ub is None else ub

        if lb is not None and ub is not None and lb > ub:
            raise ConstructionError(
                "Lower bound {0} of variable '{1}' exceeds its upper bound {2}".format(lb, name, ub)
            )

        self.__name: str = name
        self.__var_type: str = var_type
        self.__lb: Optional[Number] = lb
        self.__ub: Optional[Number] = ub
        self.__description: Optional[str] = description

    def __str__(self):
        return self.__name

    def __repr__(self):
        return "Variable({0}, {1}, lb={2}, ub={3})".format(self.__name, self.__var_type, self.__lb, self.__ub)

    def __eq__(self, other):
        if isinstance(other, Variable):
            return (self.name, self.var_type, self.lb, self.ub) == (other.name, other.var_type, other.lb, other.ub)
        return False

    def __hash__(self):
        return hash((self.name, self.var_type, self.lb, self.ub))

    @property
    def name(self) -> str:
        return self.__name

    @property
    def var_type(self) -> str:
        return self.__var_type

    @property
    def lb(self) -> Optional[Number]:
        return self.__lb

    @property
    def ub(self) -> Optional[Number]:
        return self.__ub

    @property
    def description(self) -> Optional[str]:
        return self.__description

    def is_bounded(self) -> bool:
        """Returns True if both bounds are finite numbers. An infinite bound counts as no bound."""
        return self.__lb is not None and self.__ub is not None \
            and bool(np.isfinite(self.__lb)) and bool(np.isfinite(self.__ub))

    def is_integral(self) -> bool:
        return self.__var_type in (INTEGER_VAR_TYPE, BINARY_VAR_TYPE)


class Constraint:
    def __init__(
        self,
        lhs: Polynomial,
        operator: str,
        rhs: Number,
        name: str = None,
        label: str = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Constructor of the Constraint class. Prefer Constraint.build(), which normalizes both sides.

        :param lhs: left-hand side polynomial without constant term
        :param operator: relational operator symbol
        :param rhs: numeric right-hand side
        :param name: unique identifier assigned by the problem, None until the constraint is added
        :param label: optional user-supplied label
        :param metadata: optional debugging metadata
        """

        if operator not in RELATIONAL_OPERATORS:
            raise ConstructionError(
                "Operator '{0}' is not one of {1}".format(operator, ", ".join(RELATIONAL_OPERATORS))
            )
        if not isinstance(rhs, Number):
            raise DomainError("Right-hand side '{0}' of a normalized constraint must be numeric".format(rhs))

        self.__lhs: Polynomial = lhs
        self.__operator: str = operator
        self.__rhs: Number = rhs
        self.__name: Optional[str] = name
        self.__label: Optional[str] = label
        self.__metadata: Dict[str, Any] = dict(metadata) if metadata is not None else {}

    def __str__(self):
        literal = "{0} {1} {2}".format(self.__lhs, self.__operator, self.__rhs)
        if self.__name is not None:
            literal = "{0}: {1}".format(self.__name, literal)
        return literal

    def __repr__(self):
        return "Constraint<{0}>".format(self)

    def __eq__(self, other):
        if isinstance(other, Constraint):
            return (self.lhs, self.operator, self.rhs) == (other.lhs, other.operator, other.rhs)
        return False

    def __hash__(self):
        return hash((self.lhs, self.operator, self.rhs))

    # Construction
    # ------------------------------------------------------------------------------------------------------------------

    @staticmethod
    def build(
        lhs: Union[Polynomial, Number],
        operator: str,
        rhs: Union[Polynomial, Number],
        label: str = None,
        metadata: Dict[str, Any] = None,
    ) -> "Constraint":
        """
        Build a normalized constraint. All variable terms are moved to the left-hand side and the constant is moved to
        the right-hand side. The degree of the constraint is not checked.
        """
        difference = Polynomial.to_polynomial(lhs).subtract(Polynomial.to_polynomial(rhs))
        body, constant = difference.split_constant()
        rhs_value = -constant if constant != 0 else 0
        return Constraint(lhs=body, operator=operator, rhs=rhs_value, label=label, metadata=metadata)

    @staticmethod
    def build_linear(
        lhs: Union[Polynomial, Number],
        operator: str,
        rhs: Union[Polynomial, Number],
        label: str = None,
        metadata: Dict[str, Any] = None,
    ) -> "Constraint":
        con = Constraint.build(lhs, operator, rhs, label=label, metadata=metadata)
        if con.lhs.degree() > 1:
            raise DomainError("Constraint '{0}' is not linear".format(con))
        return con

    def rename(self, name: str) -> "Constraint":
        return Constraint(
            lhs=self.__lhs,
            operator=self.__operator,
            rhs=self.__rhs,
            name=name,
            label=self.__label,
            metadata=self.__metadata,
        )

    # Properties
    # ------------------------------------------------------------------------------------------------------------------

    @property
    def lhs(self) -> Polynomial:
        return self.__lhs

    @property
    def operator(self) -> str:
        return self.__operator

    @property
    def rhs(self) -> Number:
        return self.__rhs

    @property
    def name(self) -> Optional[str]:
        return self.__name

    @property
    def label(self) -> Optional[str]:
        return self.__label

    @property
    def metadata(self) -> Dict[str, Any]:
        return dict(self.__metadata)

    # Evaluation
    # ------------------------------------------------------------------------------------------------------------------

    def depends_on(self, name: str) -> bool:
        return self.__lhs.depends_on(name)

    def degree(self) -> int:
        return self.__lhs.degree()

    def get_slack(self, values: Mapping[str, Number]) -> float:
        """
        Evaluate the difference between the right-hand side and the body at a point. The sign convention is such that
        a satisfied '<=' constraint has a non-negative slack.
        """
        body = self.__lhs.evaluate(values)
        if self.__operator in (GREATER_EQUAL_INEQUALITY_OPERATOR, GREATER_INEQUALITY_OPERATOR):
            return body - self.__rhs
        return self.__rhs - body

    def is_satisfied(self, values: Mapping[str, Number], tol: float = 1e-6) -> bool:
        # strict inequalities are checked like their non-strict counterparts, as LP solvers treat them
        if self.__operator == EQUALITY_OPERATOR:
            return bool(np.isclose(self.__lhs.evaluate(values), self.__rhs, atol=tol))
        return self.get_slack(values) >= -tol
