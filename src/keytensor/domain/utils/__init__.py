from ._control_path import MethodKey, create_path_builder

__all__ = [
    MethodKey.__name__,
    create_path_builder.__name__,
]
