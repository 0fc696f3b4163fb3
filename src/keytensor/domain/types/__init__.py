from ._datatype import DatatypeLike, is_integer_datatype
from ._numpy import NDArrayLike

__all__ = [
    DatatypeLike.__name__,
    NDArrayLike.__name__,
    is_integer_datatype.__name__,
]
