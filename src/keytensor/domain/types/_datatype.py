"""
Domain-level structural typing for element datatypes.

Buffers report their element datatype as whatever object their backend uses
(`numpy.dtype` for the reference CPU driver). The domain layer never imports a
numerical backend, so it only relies on the small attribute surface shared by
NumPy-style dtype objects.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class DatatypeLike(Protocol):
    """
    Any dtype-like object exposing a NumPy-style `kind` code and `itemsize`.

    Notes
    -----
    Datatypes are compared with `==` only. No implicit numeric coercion is
    ever performed by the engine.
    """

    kind: str
    itemsize: int
    name: str


def is_integer_datatype(datatype: object) -> bool:
    """Return True for signed or unsigned integer datatypes."""
    return getattr(datatype, "kind", None) in ("i", "u")
