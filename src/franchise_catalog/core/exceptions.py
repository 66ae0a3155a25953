"""
Exception hierarchy for the Franchise Catalog.

Provides structured error handling with specific error types for each
failure mode of the catalog: validation, missing resources, conflicts,
broken parent/child relationships and data-integrity problems.
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """Base exception for all catalog-related errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        component: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.component = component

    def __str__(self) -> str:
        """String representation of the error."""
        base_msg = f"[{self.component or 'Catalog'}] {self.message}"
        if self.error_code:
            base_msg = f"[{self.error_code}] {base_msg}"
        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "component": self.component,
            "details": self.details,
        }


class ConfigurationError(CatalogError):
    """Exception raised when configuration is invalid or missing."""

    pass


class StoreError(CatalogError):
    """Exception raised when the document store cannot be reached."""

    pass


class ValidationError(CatalogError):
    """Exception raised when input validation fails."""

    def __init__(self, field: str, value: Any, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Validation failed for field '{field}': {reason}",
            error_code="VALIDATION_ERROR",
            details={
                "field": field,
                "value": str(value),
                "reason": reason,
            },
            **kwargs,
        )


# Lookup misses


class ResourceNotFoundError(CatalogError):
    """Exception raised when an entity cannot be found by id or name."""

    entity = "Resource"

    def __init__(self, key: str, lookup: str = "id", **kwargs: Any) -> None:
        super().__init__(
            f"{self.entity} not found: {key}",
            error_code="NOT_FOUND",
            details={"entity": self.entity.lower(), lookup: key},
            **kwargs,
        )
        self.key = key


class FranchiseNotFoundError(ResourceNotFoundError):
    """Exception raised when a franchise does not exist."""

    entity = "Franchise"


class BranchNotFoundError(ResourceNotFoundError):
    """Exception raised when a branch does not exist."""

    entity = "Branch"


class ProductNotFoundError(ResourceNotFoundError):
    """Exception raised when a product does not exist."""

    entity = "Product"


# Uniqueness and concurrency conflicts


class ConflictError(CatalogError):
    """Exception raised when a write conflicts with existing data."""

    pass


class DuplicateFranchiseError(ConflictError):
    """Exception raised when a franchise name is already taken."""

    def __init__(self, name: str, **kwargs: Any) -> None:
        super().__init__(
            f"Franchise name already exists: {name}",
            error_code="DUPLICATE_FRANCHISE_NAME",
            details={"name": name},
            **kwargs,
        )


class DuplicateBranchError(ConflictError):
    """Exception raised when a branch name is already taken within a franchise."""

    def __init__(self, franchise_id: Optional[str], name: str, **kwargs: Any) -> None:
        super().__init__(
            f"Branch name already exists in franchise {franchise_id}: {name}",
            error_code="DUPLICATE_BRANCH_NAME",
            details={"franchise_id": franchise_id, "name": name},
            **kwargs,
        )


class DuplicateProductError(ConflictError):
    """Exception raised when a product name is already taken within a branch."""

    def __init__(self, branch_id: Optional[str], name: str, **kwargs: Any) -> None:
        super().__init__(
            f"Product name already exists in branch {branch_id}: {name}",
            error_code="DUPLICATE_PRODUCT_NAME",
            details={"branch_id": branch_id, "name": name},
            **kwargs,
        )


class OptimisticLockError(ConflictError):
    """Exception raised when a document changed between read and write."""

    def __init__(
        self, collection: str, document_id: str, expected_version: int, **kwargs: Any
    ) -> None:
        super().__init__(
            f"Concurrent modification of {collection}/{document_id} "
            f"(expected version {expected_version})",
            error_code="VERSION_CONFLICT",
            details={
                "collection": collection,
                "id": document_id,
                "expected_version": expected_version,
            },
            **kwargs,
        )


# Parent/child relationship violations


class InvalidRelationshipError(CatalogError):
    """Exception raised when a child does not belong to the stated parent."""

    pass


class BranchNotInFranchiseError(InvalidRelationshipError):
    """Exception raised when a branch is addressed under the wrong franchise."""

    def __init__(self, branch_id: str, franchise_id: str, **kwargs: Any) -> None:
        super().__init__(
            f"Branch {branch_id} does not belong to franchise {franchise_id}",
            error_code="BRANCH_NOT_IN_FRANCHISE",
            details={"branch_id": branch_id, "franchise_id": franchise_id},
            **kwargs,
        )


class ProductNotInBranchError(InvalidRelationshipError):
    """Exception raised when a product is addressed under the wrong branch."""

    def __init__(self, product_id: str, branch_id: str, **kwargs: Any) -> None:
        super().__init__(
            f"Product {product_id} does not belong to branch {branch_id}",
            error_code="PRODUCT_NOT_IN_BRANCH",
            details={"product_id": product_id, "branch_id": branch_id},
            **kwargs,
        )


# Internal consistency


class DataIntegrityError(CatalogError):
    """Exception raised when stored data references something that vanished."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("error_code", "DATA_INTEGRITY_ERROR")
        super().__init__(message, **kwargs)
