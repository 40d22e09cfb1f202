"""fitstore: embedded persistence for workout sessions, daily progress and the user profile."""

__version__ = "0.1.0"

from fitstore.config import FitstoreConfig
from fitstore.errors import (
    ConstraintViolationError,
    FitstoreError,
    MigrationError,
    MissingMigrationError,
    SchemaMismatchError,
    StorageBackendError,
    StoreClosedError,
    TableSchemaDiff,
)
from fitstore.migration import OpenReport, recreate_database
from fitstore.schema import SCHEMA_VERSION, schema_identity
from fitstore.storage import Repository
from fitstore.store import FitnessStore
from fitstore.types import DailyProgress, UserProfile, WorkoutSession

__all__ = [
    "__version__",
    "FitstoreConfig",
    "FitnessStore",
    "Repository",
    "WorkoutSession",
    "DailyProgress",
    "UserProfile",
    "SCHEMA_VERSION",
    "schema_identity",
    "recreate_database",
    "OpenReport",
    "FitstoreError",
    "SchemaMismatchError",
    "TableSchemaDiff",
    "MigrationError",
    "MissingMigrationError",
    "ConstraintViolationError",
    "StorageBackendError",
    "StoreClosedError",
]
