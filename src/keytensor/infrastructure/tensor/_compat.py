"""
Compatibility and alias checks run before every cross-tensor operation.

All error checking lives here rather than in backend kernels, so that every
backend inherits identical edge-case behavior:

- (a) every tensor must report the identical driver object;
- (b) tensors on different devices may only meet in a raw bulk transfer
  between dense, same-datatype tensors;
- (c) datatypes must match exactly;
- (d) before a write, buffer arguments may be identical or disjoint, but never
  partially overlapping.

Two obligations remain with the caller because they cannot be detected here:
gather writes that hit the same destination location more than once, and
element counts that are commensurate by coincidence.
"""

from __future__ import annotations

from itertools import combinations
from typing import TYPE_CHECKING, Any

from ...domain._errors import (
    AliasError,
    CommensurabilityError,
    CompatibilityError,
    DeviceMismatchError,
    IndexSystemError,
)
from ...domain._index_system import IndexStrategy, ensure_index_tensor
from ...domain._tensor import ITensor

if TYPE_CHECKING:
    from ._tensor_context import ExecutionContext


def ensure_same_driver(*tensors: ITensor) -> None:
    """Raise `CompatibilityError` unless all tensors share one driver object."""
    driver = tensors[0].driver
    if any(t.driver is not driver for t in tensors[1:]):
        raise CompatibilityError(
            "Tensor arguments must have same driver.",
            drivers=[repr(t.driver) for t in tensors],
        )


def ensure_context_driver(ctx: "ExecutionContext", *tensors: ITensor) -> None:
    """Raise `CompatibilityError` unless the tensors belong to the context's driver."""
    if any(t.driver is not ctx.driver for t in tensors):
        raise CompatibilityError(
            "Tensor driver does not match the execution context driver.",
            context_driver=repr(ctx.driver),
            drivers=[repr(t.driver) for t in tensors],
        )


def ensure_same_device(*tensors: ITensor) -> None:
    """
    Raise unless all tensors share one driver and one device.

    Raises
    ------
    CompatibilityError
        On a driver mismatch.
    DeviceMismatchError
        On a device mismatch.
    """
    ensure_same_driver(*tensors)
    device = tensors[0].device
    for t in tensors[1:]:
        if t.device != device:
            raise DeviceMismatchError(str(device), str(t.device))


def ensure_datatypes(datatype: Any, *tensors: ITensor) -> None:
    """Raise `CompatibilityError` unless every tensor has exactly `datatype`."""
    if any(t.datatype != datatype for t in tensors):
        raise CompatibilityError(
            "Not all arguments match required datatype",
            datatype=str(datatype),
            argument_datatypes=[str(t.datatype) for t in tensors],
        )


def ensure_matching_datatypes(*tensors: ITensor) -> None:
    ensure_datatypes(tensors[0].datatype, *tensors)


def check_partial_alias(*tensors: ITensor) -> None:
    """
    Reject any pair of arguments whose buffers partially overlap.

    Identical buffers (in-place operations) and disjoint buffers pass.

    Raises
    ------
    AliasError
        Listing the positions of every partially overlapping pair.
    """
    driver = tensors[0].driver
    overlapping = [
        (i, j)
        for (i, a), (j, b) in combinations(enumerate(tensors), 2)
        if driver.partially_alias(a.buffer, b.buffer)
    ]
    if overlapping:
        raise AliasError(
            "Partially overlapping arguments detected.", argument_pairs=overlapping
        )


def elements_commensurate(lhs_ecount: int, rhs_ecount: int) -> bool:
    """True when `rhs_ecount` evenly divides `lhs_ecount` (zero always does)."""
    return rhs_ecount == 0 or lhs_ecount % rhs_ecount == 0


def ensure_commensurate(*ecounts: int) -> int:
    """
    Require the smaller element counts to divide the largest one.

    Returns
    -------
    int
        The largest element count.

    Raises
    ------
    CommensurabilityError
        If some non-zero count does not divide the largest.
    """
    largest = max(ecounts)
    if not all(elements_commensurate(largest, n) for n in ecounts):
        raise CommensurabilityError(
            "Element counts must be commensurate",
            ecounts=list(ecounts),
            remainders=[largest % n if n else 0 for n in ecounts],
        )
    return largest


def ensure_indexes(*index_tensors: ITensor) -> None:
    """
    Index tensors must be integer, dense, simply monotonic and equally long.

    Raises
    ------
    IndexSystemError
        If any index tensor fails these requirements.
    """
    for indexes in index_tensors:
        ensure_index_tensor(indexes)
    first_len = index_tensors[0].ecount
    if any(t.ecount != first_len for t in index_tensors[1:]):
        raise IndexSystemError(
            "Index tensors must all have matching element-counts",
            element_counts=[t.ecount for t in index_tensors],
        )


def ensure_indexable_tensor(tensor: ITensor) -> None:
    """Only simply monotonic tensors may be gathered from or windowed."""
    if not tensor.index_system.is_simple_monotonic:
        raise IndexSystemError(
            "Cannot index members of non-monotonically increasing tensors.",
            strategy=tensor.index_system.strategy.value,
        )


def is_simple_tensor(tensor: ITensor) -> bool:
    """
    True if the tensor can be filled or copied with memset/memcpy semantics:
    dense, monotonic, and addressing exactly its element count.
    """
    index_system = tensor.index_system
    return (
        index_system.is_dense
        and index_system.strategy is IndexStrategy.MONOTONIC
        and tensor.ecount == index_system.length
    )


def memcpy_semantics(dest: ITensor, src: ITensor) -> bool:
    """True when a raw bulk copy reproduces the assignment exactly."""
    return (
        dest.ecount == src.ecount
        and is_simple_tensor(dest)
        and is_simple_tensor(src)
        and dest.datatype == src.datatype
    )
