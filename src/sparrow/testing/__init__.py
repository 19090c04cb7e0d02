"""Test utilities for sparrow applications.

    from sparrow.testing import TestClient
"""

from sparrow.testing.client import TestClient

__all__ = ["TestClient"]
