"""
Assignment dispatch for KeyTensor.

Assignments are modeled as short-lived `Assignment` requests whose
``variant`` is the pair ``(dest_variant, src_variant)`` drawn from the closed
set `OperandVariant`. `Assignment.run` is templated through
`assignment_control_path_manager`, and this module registers one control
path per supported pair:

- ``(TENSOR, SCALAR)``: fill the destination with a constant.
- ``(TENSOR, TENSOR)``: copy a source tensor, replicated if smaller.

Any other pair (e.g. an unsupported source type) raises `TypeError`.

Fast paths
----------
- A *simple* destination (dense, monotonic, addressing exactly its element
  count) is filled with the backend's raw `memset`.
- Equal element counts with both operands simple and of identical datatype
  use the raw `copy_device_to_device`, which is the only operation allowed
  to cross devices. Replication (``|src| < |dest|``) and gather views always
  take the generic kernel path, even when both operands are dense.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from numbers import Number
from typing import TYPE_CHECKING, Any, Callable, Optional
import warnings

import numpy as np

from .....domain._errors import CommensurabilityError
from .....domain._tensor import ITensor
from ..._compat import (
    check_partial_alias,
    elements_commensurate,
    ensure_context_driver,
    ensure_matching_datatypes,
    ensure_same_device,
    ensure_same_driver,
    is_simple_tensor,
    memcpy_semantics,
)
from ..._tensor_builder import assignment_control_path_manager

if TYPE_CHECKING:
    from ..._tensor_context import ExecutionContext

logger = logging.getLogger(__name__)

__all__ = ["Assignment", "OperandVariant", "operand_variant"]


class OperandVariant(Enum):
    """Closed set of assignment operand kinds."""

    TENSOR = "tensor"
    SCALAR = "scalar"


def operand_variant(value: Any) -> Optional[OperandVariant]:
    """
    Classify an assignment operand.

    Returns
    -------
    Optional[OperandVariant]
        The variant, or ``None`` for values no control path accepts.
    """
    if isinstance(value, ITensor):
        return OperandVariant.TENSOR
    if isinstance(value, (Number, np.bool_)):
        return OperandVariant.SCALAR
    return None


def _unsupported_pair(method: Callable[..., Any], state: Any) -> TypeError:
    return TypeError(f"Unsupported assignment operand pair {state!r}")


@dataclass(frozen=True)
class Assignment:
    """
    One ``dest = src`` request.

    Attributes
    ----------
    ctx : ExecutionContext
        Context whose stream receives the backend calls.
    dest : ITensor
        Destination view; its buffer contents are overwritten.
    src : Any
        Source tensor or scalar.
    """

    ctx: "ExecutionContext"
    dest: Any
    src: Any

    @property
    def variant(self) -> tuple[Optional[OperandVariant], Optional[OperandVariant]]:
        return operand_variant(self.dest), operand_variant(self.src)

    def run(self) -> None:
        """
        Execute the assignment on ``ctx.stream``.

        Raises
        ------
        TypeError
            If no control path handles the operand pair.
        """
        ...


@assignment_control_path_manager(
    Assignment,
    Assignment.run,
    (OperandVariant.TENSOR, OperandVariant.SCALAR),
    _unsupported_pair,
)
def assign_scalar(self: Assignment) -> None:
    """Fill every logical element of the destination with the scalar source."""
    ctx, dest, value = self.ctx, self.dest, self.src
    ensure_context_driver(ctx, dest)
    ecount = dest.ecount
    if ecount == 0:
        return
    if is_simple_tensor(dest):
        logger.debug("assign scalar: memset %d elements", ecount)
        ctx.stream.memset(dest.buffer, 0, value, ecount)
    else:
        logger.debug(
            "assign scalar: strided fill of %d elements (%s)",
            ecount,
            dest.index_system.strategy.value,
        )
        ctx.stream.assign_constant(dest.buffer, dest.index_system, ecount, value)


@assignment_control_path_manager(
    Assignment,
    Assignment.run,
    (OperandVariant.TENSOR, OperandVariant.TENSOR),
    _unsupported_pair,
)
def assign_tensor(self: Assignment) -> None:
    """
    Copy the source into the destination.

    The source is replayed ``|dest| / |src|`` times when smaller. An empty
    source is a no-op (with a `RuntimeWarning` when the destination is not
    empty).

    Raises
    ------
    CommensurabilityError
        If ``|dest| < |src|`` or ``|src|`` does not divide ``|dest|``.
    CompatibilityError
        On a driver or datatype mismatch.
    AliasError
        If the buffers partially overlap.
    DeviceMismatchError
        If the operands live on different devices and the copy is not a raw
        equal-count transfer.
    """
    ctx, dest, src = self.ctx, self.dest, self.src
    dest_ecount, src_ecount = dest.ecount, src.ecount
    if dest_ecount < src_ecount:
        raise CommensurabilityError(
            "destination element count must be >= src element count",
            dest_ecount=dest_ecount,
            src_ecount=src_ecount,
        )
    if not elements_commensurate(dest_ecount, src_ecount):
        raise CommensurabilityError(
            "Src element count must evenly divide dest ecount.",
            dest_ecount=dest_ecount,
            src_ecount=src_ecount,
            remainder=dest_ecount % src_ecount,
        )
    ensure_same_driver(dest, src)
    ensure_context_driver(ctx, dest, src)
    ensure_matching_datatypes(dest, src)
    check_partial_alias(dest, src)

    if src_ecount == 0:
        if dest_ecount > 0:
            warnings.warn(
                "Assigning an empty source leaves the destination unchanged",
                RuntimeWarning,
                stacklevel=4,
            )
        return

    if memcpy_semantics(dest, src):
        logger.debug(
            "assign tensor: raw copy of %d elements (%s -> %s)",
            src_ecount,
            src.device,
            dest.device,
        )
        ctx.stream.copy_device_to_device(src.buffer, 0, dest.buffer, 0, src_ecount)
        return

    ensure_same_device(dest, src)
    logger.debug(
        "assign tensor: generic path, %d -> %d elements (%s -> %s)",
        src_ecount,
        dest_ecount,
        src.index_system.strategy.value,
        dest.index_system.strategy.value,
    )
    ctx.stream.assign(
        dest.buffer,
        dest.index_system,
        dest_ecount,
        src.buffer,
        src.index_system,
        src_ecount,
    )
