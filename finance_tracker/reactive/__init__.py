"""Reactive primitives: signals, computed values and effects."""

from finance_tracker.reactive.signals import (
    Computed,
    ReadonlySignal,
    Signal,
    Unsubscribe,
    effect,
)

__all__ = [
    "Computed",
    "ReadonlySignal",
    "Signal",
    "Unsubscribe",
    "effect",
]
