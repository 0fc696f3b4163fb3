"""
Environment-driven configuration.

KeyTensor reads a handful of opt-in switches from the process environment,
the same way native backend loaders read their debug and search-path
variables:

- ``KEYTENSOR_DATATYPE``: NumPy dtype name used for new tensors when no
  datatype is given (default ``float64``).
- ``KEYTENSOR_CPU_DEVICES``: number of devices exposed by the reference CPU
  driver (default ``1``).
- ``KEYTENSOR_DEBUG``: enables DEBUG logging of dispatch decisions when set
  to anything but ``0``, ``""`` or ``false``.

Nothing here is global mutable state: `KeyTensorConfig.from_env()` returns a
frozen snapshot which the caller passes on explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
from typing import Mapping, Optional

import numpy as np

_FALSY = ("0", "", "false", "False", "FALSE")

PACKAGE_LOGGER = "keytensor"


@dataclass(frozen=True)
class KeyTensorConfig:
    """
    Frozen configuration snapshot.

    Attributes
    ----------
    default_datatype : np.dtype
        Datatype of tensors created without an explicit datatype.
    cpu_device_count : int
        Number of devices the reference CPU driver exposes.
    debug : bool
        Whether `configure_logging` enables DEBUG output.
    """

    default_datatype: np.dtype = field(default_factory=lambda: np.dtype(np.float64))
    cpu_device_count: int = 1
    debug: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "default_datatype", np.dtype(self.default_datatype))
        if int(self.cpu_device_count) < 1:
            raise ValueError(
                f"cpu_device_count must be >= 1, got {self.cpu_device_count!r}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "KeyTensorConfig":
        """
        Build a configuration from environment variables.

        Parameters
        ----------
        environ : Optional[Mapping[str, str]]
            Mapping to read instead of `os.environ` (useful in tests).

        Raises
        ------
        ValueError
            If a variable holds an unparseable value.
        """
        env = os.environ if environ is None else environ

        raw_dtype = env.get("KEYTENSOR_DATATYPE", "float64")
        try:
            datatype = np.dtype(raw_dtype)
        except TypeError as e:
            raise ValueError(f"Invalid KEYTENSOR_DATATYPE {raw_dtype!r}") from e

        raw_devices = env.get("KEYTENSOR_CPU_DEVICES", "1")
        try:
            devices = int(raw_devices)
        except ValueError as e:
            raise ValueError(f"Invalid KEYTENSOR_CPU_DEVICES {raw_devices!r}") from e

        debug = env.get("KEYTENSOR_DEBUG", "0") not in _FALSY
        return cls(default_datatype=datatype, cpu_device_count=devices, debug=debug)


def configure_logging(config: KeyTensorConfig) -> logging.Logger:
    """
    Apply the logging level implied by `config` to the package logger.

    Handlers are left to the application; the package only installs a
    `NullHandler`.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if config.debug else logging.WARNING)
    return logger
