# ==============================================
# Errors
# ==============================================
#
# PURPOSE:
#   One small exception hierarchy for every failure mode of the core.
#
# CLASSES:
# --------
# - SmartzProdError      → base class, carries message + code
# - ComputationError     → zero denominator or non-finite derived metric
# - StorageError         → durable read/write or (de)serialization failed
# - RestoreError         → backup envelope malformed, or restore not persisted
# - ConfigError          → invalid environment value or field rule table
#
# NOTE:
#   Validation failures are NOT exceptions. They are collected as
#   messages in a ValidationResult (see validation/input_validator.py).
#
# ==============================================


class SmartzProdError(Exception):
    """Base exception for all SmartzProd errors."""

    code = "smartzprod_error"

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict:
        """Convert to a small dictionary for status output."""
        return {"code": self.code, "message": self.message}


class ComputationError(SmartzProdError):
    """A derived metric could not be computed (division by zero)."""

    code = "computation_error"


class StorageError(SmartzProdError):
    """Durable storage could not be read or written."""

    code = "storage_error"


class RestoreError(SmartzProdError):
    """A backup could not be restored. The live store is left untouched."""

    code = "restore_error"


class ConfigError(SmartzProdError):
    """Configuration is invalid."""

    code = "config_error"
