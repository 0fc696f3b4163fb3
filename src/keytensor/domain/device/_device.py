"""
Device descriptors.

This module defines the identity of a physical device a buffer lives on:

- `DeviceType`: the family of a device (host CPU memory or a CUDA GPU)
- `Device`: a normalized `<type>:<index>` descriptor

Devices carry no resources. The engine only compares them: buffers on
different devices may exchange data through a raw bulk transfer, and nothing
else.
"""

from enum import Enum
import re


class DeviceType(Enum):
    """
    Enumeration of supported device families.

    Attributes
    ----------
    CPU : DeviceType
        Host memory. The reference driver may expose several CPU "devices"
        to model multi-device placement.
    CUDA : DeviceType
        NVIDIA CUDA-enabled GPU memory.
    """

    CPU = "cpu"
    CUDA = "cuda"


class Device:
    """
    Normalized device descriptor.

    Parameters
    ----------
    device : str
        One of ``"cpu"`` (shorthand for ``"cpu:0"``), ``"cpu:<index>"`` or
        ``"cuda:<index>"`` where ``<index>`` is a non-negative integer.

    Raises
    ------
    ValueError
        If the device string does not match a supported format.

    Notes
    -----
    Equality and hashing use ``(type, index)``, so descriptors may be used as
    dictionary keys and compared across independently parsed strings.
    """

    __slots__ = ("type", "index")

    _PATTERN = re.compile(r"^(cpu|cuda)(?::(\d+))?$")

    def __init__(self, device: str):
        m = self._PATTERN.match(device)
        if not m:
            raise ValueError(
                f"Invalid device '{device}'. Expected 'cpu', 'cpu:<index>' "
                "or 'cuda:<index>'"
            )
        kind, index = m.group(1), m.group(2)
        if kind == "cuda" and index is None:
            raise ValueError(f"Invalid device '{device}'. CUDA devices need an index")
        self.type = DeviceType(kind)
        self.index = int(index) if index is not None else 0

    @classmethod
    def cpu(cls, index: int = 0) -> "Device":
        """Return the descriptor of CPU device `index`."""
        return cls(f"cpu:{int(index)}")

    def __str__(self) -> str:
        return f"{self.type.value}:{self.index}"

    def __repr__(self) -> str:
        return f"Device('{self}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Device):
            return NotImplemented
        return (self.type, self.index) == (other.type, other.index)

    def __hash__(self) -> int:
        return hash((self.type, self.index))

    def is_cpu(self) -> bool:
        """Return True if this is host memory."""
        return self.type is DeviceType.CPU

    def is_cuda(self) -> bool:
        """Return True if this is CUDA device memory."""
        return self.type is DeviceType.CUDA
