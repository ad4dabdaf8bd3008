"""
torusgrid abstract components.

This package contains the abstract base class that defines the interface of
the grid interaction engine.

Classes:
    engine.py:
        - AbstractGridEngine: Interface of the scatter, pad, stencil and
          gather stages plus the `interact` template method chaining them.

Usage:
    These classes are not meant to be instantiated directly. Instead, they
    should be inherited by concrete implementations in torusgrid.concrete.

    For example:

    from torusgrid.abstract import AbstractGridEngine

    class ConcreteEngine(AbstractGridEngine):
        # Implement abstract methods here
        ...
"""

from .engine import AbstractGridEngine

__all__ = ["AbstractGridEngine"]
