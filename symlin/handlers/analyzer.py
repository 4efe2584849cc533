from typing import List

import symlin.mat as mat


class Analysis:

    def __init__(self, classification: str, referenced_variables: mat.OrderedSet = None):
        self.classification: str = classification
        self.referenced_variables: mat.OrderedSet = referenced_variables \
            if referenced_variables is not None else mat.OrderedSet()

    def __str__(self):
        return "{0} {{{1}}}".format(self.classification, ", ".join(self.referenced_variables))

    def __repr__(self):
        return "Analysis<{0}>".format(self)

    def __eq__(self, other):
        if isinstance(other, Analysis):
            return self.classification == other.classification \
                   and list(self.referenced_variables) == list(other.referenced_variables)
        return False

    def is_linear(self) -> bool:
        return self.classification in (mat.CONSTANT_CLASS, mat.VARIABLE_CLASS, mat.LINEAR_CLASS)


# Classification
# ----------------------------------------------------------------------------------------------------------------------

def analyze(node: mat.ExpressionNode) -> Analysis:
    """
    Classify an expression node as constant, variable, linear or non-linear, and collect the symbols of the variable
    families that it references.
    :param node: root of the expression tree
    :return: analysis of the node
    """
    return Analysis(classify(node), get_variables(node))


def classify(node: mat.ExpressionNode) -> str:

    if isinstance(node, (mat.NumericNode, mat.ParameterNode, mat.DummyNode)):
        return mat.CONSTANT_CLASS

    elif isinstance(node, mat.VariableNode):
        if node.is_pattern():  # implicit summation
            return mat.LINEAR_CLASS
        return mat.VARIABLE_CLASS

    elif isinstance(node, mat.ArithmeticTransformationNode):
        if node.fcn == mat.SUMMATION_FUNCTION:
            return mat.LINEAR_CLASS
        return mat.NON_LINEAR_CLASS

    elif isinstance(node, (mat.LogicalOperationNode, mat.ArithmeticConditionalNode, mat.PiecewiseLinearNode)):
        return mat.NON_LINEAR_CLASS

    elif isinstance(node, mat.ArithmeticOperationNode):

        classes = [classify(o) for o in node.operands]

        if node.operator == mat.MULTIPLICATION_OPERATOR:
            var_classes = [c for c in classes if c != mat.CONSTANT_CLASS]
            if len(var_classes) == 0:
                return mat.CONSTANT_CLASS
            # a constant factor keeps the product linear, whatever the class of the other factor
            elif len(var_classes) == 1:
                return mat.LINEAR_CLASS
            return mat.NON_LINEAR_CLASS

        elif node.operator == mat.DIVISION_OPERATOR:
            if classes[1] != mat.CONSTANT_CLASS:
                return mat.NON_LINEAR_CLASS
            elif classes[0] == mat.CONSTANT_CLASS:
                return mat.CONSTANT_CLASS
            return mat.LINEAR_CLASS

        # addition, subtraction, unary operations
        else:
            if mat.NON_LINEAR_CLASS in classes:
                return mat.NON_LINEAR_CLASS
            elif all(c == mat.CONSTANT_CLASS for c in classes):
                return mat.CONSTANT_CLASS
            elif node.operator == mat.UNARY_POSITIVE_OPERATOR:
                return classes[0]
            return mat.LINEAR_CLASS

    else:
        raise ValueError("Unable to resolve node '{0}' of type '{1}'".format(node, type(node).__name__))


def is_linear(node: mat.ExpressionNode) -> bool:
    return classify(node) != mat.NON_LINEAR_CLASS


def is_non_linear(node: mat.ExpressionNode) -> bool:
    return not is_linear(node)


def contains_non_linear(node: mat.ExpressionNode) -> bool:
    """
    Returns True if any node reachable from the argument is non-linear, in which case the expression must be passed
    through the linearizer.
    """

    if is_non_linear(node):
        return True

    # indices of variable and parameter nodes are constant expressions
    if isinstance(node, mat.DeclaredEntityNode):
        return False

    return any(contains_non_linear(c) for c in node.get_children())


# Introspection
# ----------------------------------------------------------------------------------------------------------------------

def get_variables(node: mat.ExpressionNode) -> mat.OrderedSet:
    """Symbols of the variable families referenced by an expression, in depth-first order."""

    symbols = mat.OrderedSet()
    queue: List[mat.ExpressionNode] = [node]

    while len(queue) > 0:
        n = queue.pop(0)
        if isinstance(n, mat.VariableNode):
            symbols.add(n.symbol)
        elif not isinstance(n, mat.DeclaredEntityNode):
            queue = list(n.get_children()) + queue

    return symbols


def complexity_score(node: mat.ExpressionNode) -> int:
    """
    Heuristic cost of an expression tree: every construct that requires linearization weighs 3, products weigh 2,
    other operations and summations weigh 1, and leaves weigh nothing.
    """

    if isinstance(node, (mat.DeclaredEntityNode, mat.NumericNode, mat.BaseDummyNode)):
        return 0

    if isinstance(node, mat.ArithmeticOperationNode):
        score = 2 if node.operator == mat.MULTIPLICATION_OPERATOR else 1
    elif isinstance(node, mat.ArithmeticTransformationNode) and node.fcn == mat.SUMMATION_FUNCTION:
        score = 1
    else:
        score = 3

    return score + sum(complexity_score(c) for c in node.get_children())
