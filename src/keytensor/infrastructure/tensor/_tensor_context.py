from typing import Any, Optional
from dataclasses import dataclass, field, replace

import numpy as np

from ...domain._driver import IDriver, IStream
from ...domain.device._device_protocol import DeviceLike
from .._config import KeyTensorConfig


@dataclass(frozen=True)
class ExecutionContext:
    """
    Caller-owned execution context threaded through every side-effecting call.

    An `ExecutionContext` bundles the stream on which backend work is issued
    and the datatype used for tensors created without an explicit one. It is
    passed explicitly as the first argument of engine entry points instead of
    living in process-wide state.

    Attributes
    ----------
    stream : IStream
        Issue-ordered execution context of the backend. Its driver is the
        driver every participating tensor must share.
    datatype : np.dtype
        Default element datatype for newly created tensors.

    Notes
    -----
    Work issued through one context executes in issue order. Nothing orders
    work across contexts; callers combining tensors from different streams
    synchronize themselves (see `sync`).
    """

    stream: IStream
    datatype: np.dtype = field(default_factory=lambda: np.dtype(np.float64))

    def __post_init__(self) -> None:
        object.__setattr__(self, "datatype", np.dtype(self.datatype))

    @classmethod
    def create(
        cls,
        *,
        config: Optional[KeyTensorConfig] = None,
        driver: Optional[IDriver] = None,
        device: Optional[DeviceLike] = None,
        datatype: Any = None,
    ) -> "ExecutionContext":
        """
        Build a context from a configuration snapshot.

        Parameters
        ----------
        config : Optional[KeyTensorConfig]
            Configuration to use. Defaults to `KeyTensorConfig.from_env()`.
        driver : Optional[IDriver]
            Backend driver. Defaults to a `CpuDriver` exposing
            ``config.cpu_device_count`` devices.
        device : Optional[DeviceLike]
            Device of the stream. Defaults to the driver's first device.
        datatype : Any
            Default datatype. Defaults to ``config.default_datatype``.
        """
        if config is None:
            config = KeyTensorConfig.from_env()
        if driver is None:
            from ..driver.cpu._driver import CpuDriver

            driver = CpuDriver(config.cpu_device_count)
        stream = driver.create_stream(device)
        return cls(
            stream, config.default_datatype if datatype is None else datatype
        )

    @property
    def driver(self) -> IDriver:
        return self.stream.driver

    @property
    def device(self) -> DeviceLike:
        return self.stream.device

    def on_device(self, device: DeviceLike) -> "ExecutionContext":
        """Return a context with a fresh stream on `device` of the same driver."""
        return replace(self, stream=self.driver.create_stream(device))

    def with_datatype(self, datatype: Any) -> "ExecutionContext":
        """Return a context whose default datatype is `datatype`."""
        return replace(self, datatype=datatype)

    def wait(self) -> None:
        """Block until everything issued so far on the stream has completed."""
        self.stream.wait_for_event(self.stream.create_event())

    def sync(self) -> None:
        self.stream.sync()
