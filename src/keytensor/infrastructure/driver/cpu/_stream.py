"""
Execution stream of the reference CPU driver.

`CpuStream` executes every call synchronously at issue time, which trivially
satisfies the issue-order guarantee of the stream contract. Events are
therefore complete as soon as they are created; `wait_for_event` exists so
that engine code written against asynchronous backends runs unchanged.

All kernels translate index systems into offset arrays (see
`ops.physical_offsets`), bounds-check them against the buffer, and delegate
to the NumPy kernels in `ops`.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any

import numpy as np

from ....domain._binary_op import BinaryOp
from ....domain._errors import CapacityError
from ....domain._index_system import IndexSystem
from ....domain.device._device import Device
from ... import ops
from ._buffer import CpuBuffer

if TYPE_CHECKING:
    from ._driver import CpuDriver

logger = logging.getLogger(__name__)


@dataclass
class CpuEvent:
    """Completion marker; CPU work is complete when the event is created."""

    sequence: int

    def is_complete(self) -> bool:
        return True


def _span(buffer: CpuBuffer, offset: int, ecount: int) -> np.ndarray:
    offset, ecount = int(offset), int(ecount)
    if offset < 0 or ecount < 0 or offset + ecount > buffer.ecount:
        raise CapacityError(
            "Copy range exceeds buffer",
            offset=offset,
            ecount=ecount,
            buffer_ecount=buffer.ecount,
        )
    return buffer.as_numpy()[offset : offset + ecount]


class CpuStream:
    """
    Synchronous, issue-ordered stream bound to one CPU device.

    Parameters
    ----------
    driver : CpuDriver
        Owning driver.
    device : Device
        Device the stream executes on.
    """

    def __init__(self, driver: "CpuDriver", device: Device) -> None:
        self._driver = driver
        self._device = device
        self._issued = 0

    def __repr__(self) -> str:
        return f"CpuStream(device={self._device})"

    @property
    def driver(self) -> "CpuDriver":
        return self._driver

    @property
    def device(self) -> Device:
        return self._device

    def _offsets(self, buffer: CpuBuffer, index_system: IndexSystem, ecount: int):
        offsets = ops.physical_offsets(index_system, ecount, self._driver.read_indexes)
        ops.check_bounds(offsets, buffer.ecount)
        return offsets

    def _issue(self, what: str) -> None:
        self._issued += 1
        logger.debug("cpu stream %s: #%d %s", self._device, self._issued, what)

    # ------------------------------------------------------------------
    # Raw memory
    # ------------------------------------------------------------------
    def memset(self, buffer: CpuBuffer, offset: int, value: Any, ecount: int) -> None:
        self._driver.require_buffer(buffer)
        self._issue("memset")
        _span(buffer, offset, ecount)[...] = value

    def copy_host_to_device(
        self,
        host_buffer: CpuBuffer,
        host_offset: int,
        device_buffer: CpuBuffer,
        device_offset: int,
        ecount: int,
    ) -> None:
        self.copy_device_to_device(
            host_buffer, host_offset, device_buffer, device_offset, ecount
        )

    def copy_device_to_host(
        self,
        device_buffer: CpuBuffer,
        device_offset: int,
        host_buffer: CpuBuffer,
        host_offset: int,
        ecount: int,
    ) -> None:
        self.copy_device_to_device(
            device_buffer, device_offset, host_buffer, host_offset, ecount
        )

    def copy_device_to_device(
        self,
        src_buffer: CpuBuffer,
        src_offset: int,
        dst_buffer: CpuBuffer,
        dst_offset: int,
        ecount: int,
    ) -> None:
        self._driver.require_buffer(src_buffer)
        self._driver.require_buffer(dst_buffer)
        self._issue(f"copy {src_buffer.device} -> {dst_buffer.device}")
        # NumPy handles overlapping slices with memmove semantics.
        _span(dst_buffer, dst_offset, ecount)[...] = _span(
            src_buffer, src_offset, ecount
        )

    # ------------------------------------------------------------------
    # Kernels
    # ------------------------------------------------------------------
    def assign_constant(
        self, buffer: CpuBuffer, index_system: IndexSystem, ecount: int, value: Any
    ) -> None:
        self._driver.require_buffer(buffer)
        self._issue("assign_constant")
        ops.assign_constant(
            buffer.as_numpy(), self._offsets(buffer, index_system, ecount), value
        )

    def assign(
        self,
        dest: CpuBuffer,
        dest_index_system: IndexSystem,
        dest_ecount: int,
        src: CpuBuffer,
        src_index_system: IndexSystem,
        src_ecount: int,
    ) -> None:
        self._driver.require_buffer(dest)
        self._driver.require_buffer(src)
        self._issue("assign")
        ops.assign(
            dest.as_numpy(),
            self._offsets(dest, dest_index_system, dest_ecount),
            src.as_numpy(),
            self._offsets(src, src_index_system, src_ecount),
        )

    def binary_op(
        self,
        dest: CpuBuffer,
        dest_index_system: IndexSystem,
        dest_ecount: int,
        x: CpuBuffer,
        x_index_system: IndexSystem,
        x_ecount: int,
        alpha: Any,
        y: CpuBuffer,
        y_index_system: IndexSystem,
        y_ecount: int,
        beta: Any,
        op: BinaryOp,
    ) -> None:
        for buf in (dest, x, y):
            self._driver.require_buffer(buf)
        self._issue(f"binary_op {op.value}")
        ops.binary_op(
            dest.as_numpy(),
            self._offsets(dest, dest_index_system, dest_ecount),
            x.as_numpy(),
            self._offsets(x, x_index_system, x_ecount),
            alpha,
            y.as_numpy(),
            self._offsets(y, y_index_system, y_ecount),
            beta,
            op,
        )

    # ------------------------------------------------------------------
    # Synchronization
    # ------------------------------------------------------------------
    def create_event(self) -> CpuEvent:
        return CpuEvent(self._issued)

    def wait_for_event(self, event: CpuEvent) -> None:
        if not event.is_complete():  # pragma: no cover - CPU events never pend
            raise RuntimeError(f"event {event!r} did not complete")

    def sync(self) -> None:
        """Block until all issued work has finished (immediate on CPU)."""
        self._issue("sync")
