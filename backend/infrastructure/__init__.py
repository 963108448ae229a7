from __future__ import annotations

"""
Infrastructure layer (no tracker semantics).

Env/path configuration and local storage adapters that implement the
`life_tracker.ports` protocols.
"""

__all__ = [
    "bootstrap",
    "config",
    "persistence",
]
