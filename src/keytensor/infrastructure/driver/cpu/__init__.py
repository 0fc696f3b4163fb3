from ._buffer import CpuBuffer
from ._driver import CpuDriver
from ._stream import CpuEvent, CpuStream

__all__ = [
    CpuBuffer.__name__,
    CpuDriver.__name__,
    CpuEvent.__name__,
    CpuStream.__name__,
]
