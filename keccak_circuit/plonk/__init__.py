"""
Arithmetization host: the "witness sink" the Keccak gates are written
against.

Modules:
    constraint_system — columns, selectors, tables, gate/lookup registration
    constraints       — Gate and Lookup records
    layouter          — Region, AssignedCell, the recorded Assignment
    mock_prover       — Circuit, MockProver, VerifyFailure
    errors            — ConfigurationError, VerificationError
"""

from .constraint_system import (
    Column, ColumnKind, ConstraintSystem, Selector, TableColumn, VirtualCells,
)
from .constraints import Gate, Lookup
from .errors import ConfigurationError, PlonkError, VerificationError
from .layouter import AssignedCell, Assignment, Cell, Layouter, Region, Table
from .mock_prover import Circuit, FailureKind, MockProver, VerifyFailure
