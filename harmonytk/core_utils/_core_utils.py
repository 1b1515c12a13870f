# !/usr/bin/python
# coding=utf-8
from typing import Callable, Any
from functools import wraps

import pythontk as ptk


class CoreUtils(ptk.CoreUtils):
    """Core helpers shared by the harmonytk operations."""

    def undoable(fn: Callable) -> Callable:
        """A decorator to place a method into the scene's undo accumulation.
        Every mutation made by the method becomes one undo entry, and the whole entry
        is reverted if an exception is raised within the given method.

        The decorated method must belong to an object exposing a ``scene``
        (:class:`SceneGraphService`). The accumulation label is the object's
        ``UNDO_LABEL`` when defined, else the method name.

        Parameters:
            fn (obj): The decorated python method that will be placed into the undo que as a single entry.
        """

        @wraps(fn)
        def wrapper(self, *args, **kwargs) -> Any:
            label = getattr(self, "UNDO_LABEL", None) or fn.__name__
            with self.scene.undo_chunk(label):
                return fn(self, *args, **kwargs)

        return wrapper
