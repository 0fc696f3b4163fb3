from ._tensor import Tensor
from ._tensor_context import ExecutionContext
from .mixins.memory._tensor_assign import Assignment, OperandVariant, operand_variant

__all__ = [
    Assignment.__name__,
    ExecutionContext.__name__,
    OperandVariant.__name__,
    Tensor.__name__,
    operand_variant.__name__,
]
