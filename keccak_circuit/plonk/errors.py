"""
Error model of the arithmetization host.

Two classes of failure:

  ConfigurationError   a programming error in how a circuit is declared
                       or laid out.  Raised immediately, never recovered.

  VerificationError    the witness does not satisfy the constraint
                       system.  Carries every VerifyFailure found; there
                       is no partial acceptance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .mock_prover import VerifyFailure


class PlonkError(RuntimeError):
    """Base exception of the arithmetization host."""


class ConfigurationError(PlonkError):
    """Malformed circuit declaration or region layout."""


class VerificationError(PlonkError):
    """The assignment violates at least one gate, lookup or copy constraint."""

    def __init__(self, message: str, *, failures: list[VerifyFailure] | None = None):
        super().__init__(message)
        self.failures: list[VerifyFailure] = list(failures or [])
