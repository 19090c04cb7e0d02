"""Routing: literal and ``:param`` patterns matched in registration order.

Routes are registered during setup and frozen with the app; matching
is a pure function of the compiled pattern and the request segments.
"""
