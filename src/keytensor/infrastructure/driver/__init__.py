"""
Backend drivers.

Only the NumPy reference driver ships with KeyTensor. Other backends plug in
by satisfying the protocols of `keytensor.domain._driver`.
"""

from .cpu import CpuBuffer, CpuDriver, CpuEvent, CpuStream

__all__ = [
    CpuBuffer.__name__,
    CpuDriver.__name__,
    CpuEvent.__name__,
    CpuStream.__name__,
]
