"""
Request and response bodies of the catalog HTTP API.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class CreateFranchiseRequest(BaseModel):
    name: Optional[str] = None


class UpdateFranchiseRequest(BaseModel):
    name: Optional[str] = None


class CreateBranchRequest(BaseModel):
    name: Optional[str] = None


class UpdateBranchRequest(BaseModel):
    name: Optional[str] = None
    franchise_id: Optional[str] = None


class CreateProductRequest(BaseModel):
    name: Optional[str] = None
    stock: Optional[int] = None


class UpdateStockRequest(BaseModel):
    stock: Optional[int] = None


class UpdateProductRequest(BaseModel):
    name: Optional[str] = None
    stock: Optional[int] = None
    branch_id: Optional[str] = None


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ProductResponse(_FromAttributes):
    id: str
    branch_id: str
    name: str
    stock: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BranchResponse(_FromAttributes):
    id: str
    franchise_id: str
    name: str
    products: List[ProductResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FranchiseResponse(_FromAttributes):
    id: str
    name: str
    branches: List[BranchResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductGlobalViewResponse(_FromAttributes):
    product_id: str
    product_name: str
    stock: int
    branch_id: str
    branch_name: str
    franchise_id: str


class MaxStockEntryResponse(_FromAttributes):
    branch_id: str
    branch_name: str
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    stock: int = 0


class ApiResponse(BaseModel):
    """Envelope wrapping every JSON response body."""

    status: int
    message: str
    data: Any = None
    error_code: Optional[str] = None
