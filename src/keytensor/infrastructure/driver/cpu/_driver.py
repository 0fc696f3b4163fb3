"""
Reference CPU driver.

`CpuDriver` implements the backend contract on top of NumPy so that the
engine can be exercised end to end without accelerator hardware. It can
expose several logical devices (``cpu:0``, ``cpu:1``, ...) so that cross-device
rules (raw transfers only) are observable.

Allocation is zero-filled. Sub-buffers are zero-copy windows sharing the
parent's root allocation; `partially_alias` compares those windows.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import numpy as np

from ....domain._errors import CapacityError, DeviceNotSupportedError
from ....domain.device._device import Device
from ....domain.device._device_protocol import DeviceLike
from ._buffer import CpuBuffer
from ._stream import CpuStream

logger = logging.getLogger(__name__)


class CpuDriver:
    """
    NumPy-backed implementation of `IDriver`.

    Parameters
    ----------
    num_devices : int, optional
        Number of logical CPU devices to expose. Defaults to 1.
    """

    def __init__(self, num_devices: int = 1) -> None:
        num_devices = int(num_devices)
        if num_devices < 1:
            raise ValueError(f"num_devices must be >= 1, got {num_devices}")
        self._devices = tuple(Device.cpu(i) for i in range(num_devices))

    def __repr__(self) -> str:
        return f"CpuDriver(num_devices={len(self._devices)})"

    @property
    def devices(self) -> tuple[Device, ...]:
        return self._devices

    def _resolve_device(self, device: Optional[DeviceLike], op: str) -> Device:
        if device is None:
            return self._devices[0]
        if device not in self._devices:
            raise DeviceNotSupportedError(op, str(device))
        return device

    def require_buffer(self, buffer: Any) -> CpuBuffer:
        """Return `buffer` if it was produced by a CPU driver."""
        if not isinstance(buffer, CpuBuffer):
            raise TypeError(f"CpuDriver cannot operate on {type(buffer).__name__}")
        return buffer

    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------
    def _allocate(
        self, ecount: int, datatype: Any, device: Device, is_host: bool
    ) -> CpuBuffer:
        ecount = int(ecount)
        if ecount < 0:
            raise CapacityError("Cannot allocate a negative element count", ecount=ecount)
        dtype = np.dtype(datatype)
        logger.debug(
            "allocate %s buffer: %d x %s on %s",
            "host" if is_host else "device",
            ecount,
            dtype,
            device,
        )
        return CpuBuffer(np.zeros(ecount, dtype=dtype), 0, ecount, device, is_host)

    def allocate_host_buffer(self, ecount: int, datatype: Any) -> CpuBuffer:
        return self._allocate(ecount, datatype, self._devices[0], True)

    def allocate_device_buffer(
        self, ecount: int, datatype: Any, device: Optional[DeviceLike] = None
    ) -> CpuBuffer:
        device = self._resolve_device(device, "allocate_device_buffer")
        return self._allocate(ecount, datatype, device, False)

    def sub_buffer(self, buffer: CpuBuffer, offset: int, length: int) -> CpuBuffer:
        """
        Zero-copy window of `length` elements starting at `offset`.

        Raises
        ------
        CapacityError
            If the window does not fit inside `buffer`.
        """
        self.require_buffer(buffer)
        offset, length = int(offset), int(length)
        if offset < 0 or length < 0 or offset + length > buffer.ecount:
            raise CapacityError(
                "Sub-buffer exceeds parent buffer",
                offset=offset,
                length=length,
                buffer_ecount=buffer.ecount,
            )
        return CpuBuffer(
            buffer.root,
            buffer.offset + offset,
            length,
            buffer.device,
            buffer.is_host,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def partially_alias(self, lhs: CpuBuffer, rhs: CpuBuffer) -> bool:
        """
        True when the buffers overlap without covering the same range.

        Identical ranges (in-place operations) and disjoint ranges are legal
        and return False.
        """
        self.require_buffer(lhs)
        self.require_buffer(rhs)
        if lhs.root is not rhs.root or lhs.length == 0 or rhs.length == 0:
            return False
        l_start, l_end = lhs.address_range()
        r_start, r_end = rhs.address_range()
        if (l_start, l_end) == (r_start, r_end):
            return False
        return l_start < r_end and r_start < l_end

    def read_indexes(self, index_buffer: CpuBuffer, index_count: int) -> np.ndarray:
        """Return the first `index_count` entries of a gather index buffer."""
        self.require_buffer(index_buffer)
        return index_buffer.as_numpy()[: int(index_count)]

    def create_stream(self, device: Optional[DeviceLike] = None) -> CpuStream:
        return CpuStream(self, self._resolve_device(device, "create_stream"))
