"""
Arithmetic mixin defining element-wise binary Tensor operations.

This module declares :class:`TensorMixinArithmetic`, which implements the four
binary forms on top of the backend's `binary_op` kernel:

- ``y = a*x op b*y``                    : :meth:`accumulate`
- ``result = a*x op b*y``               : :meth:`binary_op`
- ``y[idx] = a*x[idx] op b*y[idx]``     : :meth:`accumulate_indexed`
- ``result[idx] = a*x[idx] op b*y[idx]``: :meth:`binary_op_indexed`

``op`` is one of :class:`BinaryOp` (``+ - * /``).

Element counts of the operands may differ, as long as they are commensurate
(the smaller evenly divides the larger). The smaller operand is reapplied
cyclically instead of raising a shape mismatch, which lets a single
`accumulate` call sum a batch of equally shaped gradients into one buffer.
A separate result must be exactly as large as the largest operand.

Indexed forms select rows: the element count of an indexed operand is
``num_columns * index_count``, after which the same rules apply.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Union

from .....domain._binary_op import BinaryOp
from .....domain._errors import CommensurabilityError
from ..._compat import (
    check_partial_alias,
    ensure_commensurate,
    ensure_context_driver,
    ensure_indexes,
    ensure_matching_datatypes,
    ensure_same_device,
)

if TYPE_CHECKING:
    from ..._tensor import Tensor
    from ..._tensor_context import ExecutionContext

logger = logging.getLogger(__name__)

Number = Union[int, float]

OpLike = Union[BinaryOp, str]
"""A `BinaryOp` or its symbol (``"+"``, ``"-"``, ``"*"``, ``"/"``)."""


def _issue_binary_op(
    ctx: "ExecutionContext",
    dest: "Tensor",
    x: "Tensor",
    alpha: Number,
    y: "Tensor",
    beta: Number,
    op: BinaryOp,
) -> None:
    """Validate placement and aliasing, then issue the kernel on ``ctx.stream``."""
    ensure_context_driver(ctx, dest, x, y)
    ensure_same_device(dest, x, y)
    ensure_matching_datatypes(dest, x, y)
    check_partial_alias(dest, x, y)
    if min(dest.ecount, x.ecount, y.ecount) == 0:
        return
    logger.debug(
        "binary_op %s: dest=%d x=%d y=%d",
        op.value,
        dest.ecount,
        x.ecount,
        y.ecount,
    )
    ctx.stream.binary_op(
        dest.buffer,
        dest.index_system,
        dest.ecount,
        x.buffer,
        x.index_system,
        x.ecount,
        alpha,
        y.buffer,
        y.index_system,
        y.ecount,
        beta,
        op,
    )


class TensorMixinArithmetic:
    """
    Mixin implementing the element-wise binary forms for tensors.

    Notes
    -----
    - The receiver is always the written tensor (``y`` or ``result``).
    - Scalars `alpha` and `beta` scale the operands before `op` is applied.
    - Validation happens here, never in backend kernels, so every backend
      inherits the same edge-case behavior.
    """

    def accumulate(
        self,
        ctx: "ExecutionContext",
        alpha: Number,
        x: "Tensor",
        beta: Number = 1.0,
        op: OpLike = BinaryOp.ADD,
    ) -> None:
        """
        In-place ``self = alpha*x op beta*self``.

        Either operand may be the smaller one. When ``|self| < |x|`` the
        operation runs once per ``|self|``-sized block of `x`, each pass
        reading the result of the previous one (e.g. summing a batch into a
        single row). When ``|self| > |x|`` `x` is reapplied cyclically.

        Raises
        ------
        CommensurabilityError
            If the element counts are not commensurate.
        CompatibilityError
            On driver or datatype mismatch.
        AliasError
            If `x` partially overlaps this tensor.
        """
        op = BinaryOp(op)
        ensure_commensurate(self.ecount, x.ecount)
        _issue_binary_op(ctx, self, x, alpha, self, beta, op)

    def binary_op(
        self,
        ctx: "ExecutionContext",
        alpha: Number,
        x: "Tensor",
        beta: Number,
        y: "Tensor",
        op: OpLike,
    ) -> None:
        """
        Write ``alpha*x op beta*y`` into this tensor.

        Raises
        ------
        CommensurabilityError
            If the operand counts are not commensurate or this tensor is not
            exactly as large as the largest operand.
        """
        op = BinaryOp(op)
        largest = ensure_commensurate(x.ecount, y.ecount)
        if self.ecount != largest:
            raise CommensurabilityError(
                "Result must be as large as the largest operand",
                result_ecount=self.ecount,
                x_ecount=x.ecount,
                y_ecount=y.ecount,
            )
        _issue_binary_op(ctx, self, x, alpha, y, beta, op)

    def accumulate_indexed(
        self,
        ctx: "ExecutionContext",
        indexes: "Tensor",
        alpha: Number,
        x: "Tensor",
        x_indexes: "Tensor",
        beta: Number = 1.0,
        op: OpLike = BinaryOp.ADD,
    ) -> None:
        """
        In-place ``self[indexes] = alpha*x[x_indexes] op beta*self[indexes]``.

        Repeated entries in `indexes` write the same row more than once in a
        single pass; the result is undefined and not detected.
        """
        op = BinaryOp(op)
        ensure_indexes(indexes, x_indexes)
        y_view = self.index_rows(indexes)
        x_view = x.index_rows(x_indexes)
        ensure_commensurate(y_view.ecount, x_view.ecount)
        ensure_same_device(self, indexes, x, x_indexes)
        _issue_binary_op(ctx, y_view, x_view, alpha, y_view, beta, op)

    def binary_op_indexed(
        self,
        ctx: "ExecutionContext",
        indexes: "Tensor",
        alpha: Number,
        x: "Tensor",
        x_indexes: "Tensor",
        beta: Number,
        y: "Tensor",
        y_indexes: "Tensor",
        op: OpLike,
    ) -> None:
        """
        ``self[indexes] = alpha*x[x_indexes] op beta*y[y_indexes]``.

        Notes
        -----
        A destination row written more than once (repeated entries in
        `indexes`) gives an undefined result. This cannot be detected here.
        """
        op = BinaryOp(op)
        ensure_indexes(indexes, x_indexes, y_indexes)
        result_view = self.index_rows(indexes)
        x_view = x.index_rows(x_indexes)
        y_view = y.index_rows(y_indexes)
        largest = ensure_commensurate(x_view.ecount, y_view.ecount)
        if result_view.ecount != largest:
            raise CommensurabilityError(
                "Result must be as large as the largest operand",
                result_ecount=result_view.ecount,
                x_ecount=x_view.ecount,
                y_ecount=y_view.ecount,
            )
        ensure_same_device(self, indexes, x, x_indexes, y, y_indexes)
        _issue_binary_op(ctx, result_view, x_view, alpha, y_view, beta, op)
