"""Shared type aliases used across sparrow modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: user-defined function with variable signature
Handler: TypeAlias = Callable[..., Any]

# Error stage: receives (error, request?) and returns a response value
ErrorHandler: TypeAlias = Callable[..., Any]

# Fallback for unmatched routes: receives (request?) and returns a response value
NotFoundHandler: TypeAlias = Callable[..., Any]
