"""
State-based method dispatch (a.k.a. "control-path" templating) via decorators.

This module routes a single method call to one of several registered
implementations based on the runtime value of a named state attribute of the
receiving object.

Core idea
---------
- A *base* method is declared on a class; its signature and docstring become
  the public ones.
- Implementations ("control paths") are registered per
  ``(ClassName, MethodName, StateVal)``.
- At call time the installed wrapper reads ``getattr(self, state_attr)`` and
  calls the matching implementation as ``impl(self, *args, **kwargs)``.

KeyTensor uses this as a closed tagged-variant switch: assignment requests
expose the ``(dest_variant, src_variant)`` pair as their state, and supporting
a new pair means registering one more control path.

Notes
-----
- The first registration for a method replaces it on the class with the
  dispatching wrapper.
- Each builder owns its own registry; builders never share control paths.
"""

from typing import Any, Callable, Dict, Hashable, NamedTuple, Optional, Type

from typing_extensions import ParamSpec, TypeVar
from functools import wraps

P = ParamSpec("P")
R = TypeVar("R")

MissingPathHandler = Callable[[Callable[..., Any], Any], BaseException]
"""Factory building the exception raised when no control path matches."""


class MethodKey(NamedTuple):
    """Key identifying one registered control path."""

    ClassName: str
    MethodName: str
    StateVal: Hashable


def create_path_builder(
    state_attr: str,
) -> Callable[
    [Type, Callable[P, R], Hashable, Optional[MissingPathHandler]],
    Callable[[Callable[P, R]], Callable[P, R]],
]:
    """
    Create a "path builder" dispatching on the attribute `state_attr`.

    Usage::

        dispatch = create_path_builder("variant")

        class Request:
            variant = "a"
            def run(self) -> int: ...

        @dispatch(Request, Request.run, "a")
        def run_a(self) -> int:
            return 1

    Parameters
    ----------
    state_attr : str
        Name of the attribute (or property) read on the receiver to select
        the control path.

    Returns
    -------
    Callable
        ``templator(cls, method, state, on_missing=None) -> decorator``.
    """

    methods_map: Dict[MethodKey, Callable] = {}

    def templator(
        cls: Type,
        method: Callable[P, R],
        state: Hashable,
        on_missing: Optional[MissingPathHandler] = None,
    ) -> Callable[[Callable[P, R]], Callable[P, R]]:
        """
        Build a decorator registering a control path for `state`.

        Parameters
        ----------
        cls : Type
            Class whose method is replaced by the dispatcher.
        method : Callable[P, R]
            Base method being templated.
        state : Hashable
            State value selecting the decorated implementation.
        on_missing : Optional[MissingPathHandler]
            Called as ``on_missing(method, state)`` when no control path
            matches; the returned exception is raised. Defaults to raising
            `NotImplementedError`.

        Raises
        ------
        TypeError
            If `state` is not hashable.
        """
        try:
            hash(state)
        except TypeError:
            raise TypeError(
                f"The argument for 'state' must be hashable. Got {state!r}"
            ) from None

        key = MethodKey(cls.__name__, method.__name__, state)

        def decorator(sub_method: Callable[P, R]) -> Callable[P, R]:
            methods_map[key] = sub_method

            @wraps(method)
            def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
                try:
                    cur_state = getattr(self, state_attr)
                except AttributeError:
                    raise NotImplementedError(
                        f"{type(self)} is missing attribute {state_attr!r}"
                    ) from None
                try:
                    sm = methods_map.get(
                        MethodKey(cls.__name__, method.__name__, cur_state)
                    )
                except TypeError:
                    sm = None
                if sm is not None:
                    return sm(self, *args, **kwargs)
                if on_missing is None:
                    raise NotImplementedError(
                        f"Missing control path (state={cur_state!r}) for {method!r}"
                    )
                raise on_missing(method, cur_state)

            setattr(cls, method.__name__, wrapper)
            return sub_method

        return decorator

    return templator
