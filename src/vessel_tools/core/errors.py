from __future__ import annotations


class PhysicsHoldError(RuntimeError):
    """Raised when the physics hold collaborator is not available."""
