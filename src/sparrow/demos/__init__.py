"""Runnable demo programs.

    sparrow run sparrow.demos.hello:app
    sparrow run sparrow.demos.express:app
"""
