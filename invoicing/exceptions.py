"""
Exception classes for the invoicing domain.

Exception design:
1. Every exception carries a stable error code (for callers and logs)
2. Extra keyword context is kept as metadata, never formatted away
3. Each class also inherits the closest builtin, so ``except ValueError``
   keeps working for callers that don't know this module

All errors are raised synchronously at the point of violation.
Nothing in this package retries.
"""

from typing import Any, Dict, Optional


class InvoicingError(Exception):
    """
    Base exception for all invoicing errors.

    Every exception includes:
    - Error code (for client handling)
    - Message (for debugging)
    - Context (structured metadata for logging)
    """

    default_error_code = "invoicing_error"

    def __init__(self, message: str, error_code: Optional[str] = None, **context: Any):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.context = context

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for structured logs."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "type": self.__class__.__name__,
                "context": {key: str(value) for key, value in self.context.items()},
            }
        }


# ============================================================================
# INPUT ERRORS
# ============================================================================


class InvalidArgumentError(InvoicingError, ValueError):
    """A required input was absent, empty or of the wrong kind."""

    default_error_code = "invalid_argument"


class ValidationError(InvoicingError, ValueError):
    """
    A value object construction rule was violated.

    Raised eagerly from constructors so an invalid value can never be
    observed. The underlying pydantic error, if any, is the ``__cause__``.
    """

    default_error_code = "validation_failed"


# ============================================================================
# AGGREGATE ERRORS
# ============================================================================


class InvariantViolationError(InvoicingError):
    """
    An aggregate invariant would be broken by the requested mutation.

    Example: a second line for a product code already on the invoice.
    The aggregate is left unchanged.
    """

    default_error_code = "invariant_violation"


class NotFoundError(InvoicingError, LookupError):
    """Lookup miss (e.g. no invoice line for a product code)."""

    default_error_code = "not_found"


# ============================================================================
# MAPPING ERRORS
# ============================================================================


class UnsupportedOperationError(InvoicingError, TypeError):
    """The object lacks a capability the operation requires (traversal)."""

    default_error_code = "unsupported_operation"


class TypeMismatchError(InvoicingError, TypeError):
    """A snapshot was requested as a type it isn't."""

    default_error_code = "type_mismatch"


class MappingError(InvoicingError):
    """A mapper could not produce a snapshot for the source object."""

    default_error_code = "mapping_failed"
