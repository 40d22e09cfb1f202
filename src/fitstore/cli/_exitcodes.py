"""Process exit codes used by the fitstore CLI."""

OK = 0
GENERAL_ERROR = 1
USAGE_ERROR = 2
DATABASE_ERROR = 3
SCHEMA_MISMATCH = 4
NOT_FOUND = 5
