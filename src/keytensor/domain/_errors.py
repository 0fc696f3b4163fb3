"""
Structured tensor errors for KeyTensor.

Every violated precondition in the addressing and assignment engine is raised
immediately, synchronously, and as a subclass of `TensorError`. Each error
carries:

- `kind`: an `ErrorKind` tag identifying the failure family, and
- `data`: a dictionary of contextual values (offending shapes, datatypes,
  element counts, ...) that callers and tests can inspect.

These errors describe programming mistakes in the caller, not transient
conditions. Nothing in the engine retries or partially recovers from them.

Some classes additionally inherit from the closest built-in exception
(`ValueError`, `IndexError`) so that generic handlers keep working.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """
    Failure families raised by the engine.

    Attributes
    ----------
    SHAPE : ErrorKind
        Invalid or negative dimensions, or a rank unsupported by shape inference.
    CAPACITY : ErrorKind
        A buffer smaller than the addressing strategy requires, or
        ``num_columns > column_stride``.
    COMPATIBILITY : ErrorKind
        Driver, device or datatype mismatch between operands.
    COMMENSURABILITY : ErrorKind
        Neither operand's element count evenly divides the other.
    ALIAS : ErrorKind
        Partially overlapping buffers among the arguments of a write.
    INDEX : ErrorKind
        An index tensor that is not dense/integer/simply monotonic, an
        index/element-count mismatch, or an addressing mode an operation
        cannot accept.
    """

    SHAPE = "shape"
    CAPACITY = "capacity"
    COMPATIBILITY = "compatibility"
    COMMENSURABILITY = "commensurability"
    ALIAS = "alias"
    INDEX = "index"


class TensorError(RuntimeError):
    """
    Base class of all structured engine errors.

    Parameters
    ----------
    message : str
        Human-readable description of the violated precondition.
    **data : Any
        Contextual values stored in `data` and appended to the message.
    """

    kind: ErrorKind = ErrorKind.SHAPE

    def __init__(self, message: str, **data: Any) -> None:
        self.message = message
        self.data: dict[str, Any] = dict(data)
        if data:
            details = ", ".join(f"{k}={v!r}" for k, v in data.items())
            super().__init__(f"{message} ({details})")
        else:
            super().__init__(message)


class ShapeError(TensorError, ValueError):
    """Raised for invalid dimensions or unsupported shape-inference ranks."""

    kind = ErrorKind.SHAPE


class CapacityError(TensorError):
    """Raised when a buffer cannot hold what its addressing strategy requires."""

    kind = ErrorKind.CAPACITY


class CompatibilityError(TensorError):
    """Raised when operands disagree on driver, device or datatype."""

    kind = ErrorKind.COMPATIBILITY


class CommensurabilityError(TensorError, ValueError):
    """Raised when element counts are not commensurate."""

    kind = ErrorKind.COMMENSURABILITY


class AliasError(TensorError):
    """Raised when write arguments partially overlap in memory."""

    kind = ErrorKind.ALIAS


class IndexSystemError(TensorError, IndexError):
    """Raised for invalid index tensors or unsupported addressing modes."""

    kind = ErrorKind.INDEX


class DeviceNotSupportedError(CompatibilityError):
    """
    Raised when a driver is asked to place memory on a device it does not own.

    Attributes
    ----------
    op : str
        The operation that was attempted (e.g., "allocate_device_buffer").
    device : str
        String form of the rejected device.
    """

    def __init__(self, op: str, device: str) -> None:
        super().__init__(f"{op} is not implemented for device '{device}'.")
        self.data.update(op=op, device=device)
        self.op = op
        self.device = device


class DeviceMismatchError(CompatibilityError):
    """
    Raised when an operation combines tensors living on different devices.

    Only raw bulk transfers between dense, same-datatype tensors may cross
    devices; every other operation must see a single device.
    """

    def __init__(self, device_a: str, device_b: str) -> None:
        super().__init__(
            f"Device mismatch: '{device_a}' vs '{device_b}'.",
            device_a=device_a,
            device_b=device_b,
        )
        self.device_a = device_a
        self.device_b = device_b
