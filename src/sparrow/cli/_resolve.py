"""App import resolution: ``"module:attribute"`` strings to servable apps."""

import importlib
from typing import TypeAlias

from sparrow.app import App
from sparrow.responder import Responder

Servable: TypeAlias = App | Responder


def resolve_app(import_string: str) -> Servable:
    """Resolve an import string to an ``App`` or ``Responder``.

    Accepts ``"module:attribute"``; a bare ``"module"`` means
    ``module.app``. A callable that is neither is treated as a factory
    and called with no arguments.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the object (or factory result) is not servable.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "app"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, (App, Responder)):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, (App, Responder)):
        msg = (
            f"{import_string!r} resolved to {type(obj).__name__}, "
            "not a sparrow App or Responder"
        )
        raise TypeError(msg)

    return obj
