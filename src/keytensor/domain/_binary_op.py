"""
Element-wise binary operators understood by backend kernels.
"""

from enum import Enum


class BinaryOp(Enum):
    """
    Operator applied in ``result = alpha*x op beta*y``.

    Attributes
    ----------
    ADD, SUBTRACT, MULTIPLY, DIVIDE : BinaryOp
        The four arithmetic operators.
    """

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
