"""
Catalog API endpoints: franchises, branches, products and reports.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Request, Response

from ..core.logging import set_request_context
from ..services.catalog_service import CatalogService
from .schemas import (
    BranchResponse,
    CreateBranchRequest,
    CreateFranchiseRequest,
    CreateProductRequest,
    FranchiseResponse,
    MaxStockEntryResponse,
    ProductGlobalViewResponse,
    ProductResponse,
    UpdateBranchRequest,
    UpdateFranchiseRequest,
    UpdateProductRequest,
    UpdateStockRequest,
)

franchise_router = APIRouter(prefix="/api/franchises", tags=["franchises"])
branch_router = APIRouter(prefix="/api/branches", tags=["branches"])
product_router = APIRouter(prefix="/api/products", tags=["products"])


def get_catalog_service(request: Request) -> CatalogService:
    """Catalog service of the running application."""
    service: CatalogService = request.app.state.container.service
    return service


async def bind_franchise_context(franchise_id: str) -> None:
    """Attach the addressed franchise to the logging context."""
    set_request_context(franchise_id=franchise_id)


FranchiseScoped = [Depends(bind_franchise_context)]


# Franchises


@franchise_router.post("", status_code=201, response_model=FranchiseResponse)
async def create_franchise(
    body: CreateFranchiseRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> FranchiseResponse:
    return await service.create_franchise(body.name)  # type: ignore


@franchise_router.get("", response_model=List[FranchiseResponse])
async def list_franchises(
    include_products: bool = False,
    service: CatalogService = Depends(get_catalog_service),
) -> List[FranchiseResponse]:
    return await service.list_franchises(include_products)  # type: ignore


@franchise_router.get("/by-name", response_model=FranchiseResponse)
async def get_franchise_by_name(
    name: Optional[str] = None,
    service: CatalogService = Depends(get_catalog_service),
) -> FranchiseResponse:
    return await service.get_franchise_by_name(name)  # type: ignore


@franchise_router.get(
    "/{franchise_id}", response_model=FranchiseResponse, dependencies=FranchiseScoped
)
async def get_franchise(
    franchise_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> FranchiseResponse:
    return await service.get_franchise(franchise_id)  # type: ignore


@franchise_router.patch(
    "/{franchise_id}", response_model=FranchiseResponse, dependencies=FranchiseScoped
)
async def update_franchise(
    franchise_id: str,
    body: UpdateFranchiseRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> FranchiseResponse:
    return await service.update_franchise(franchise_id, body.name)  # type: ignore


@franchise_router.delete(
    "/{franchise_id}",
    status_code=204,
    response_class=Response,
    dependencies=FranchiseScoped,
)
async def delete_franchise(
    franchise_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> Response:
    await service.delete_franchise(franchise_id)
    return Response(status_code=204)


# Branches of a franchise


@franchise_router.post(
    "/{franchise_id}/branches",
    status_code=201,
    response_model=BranchResponse,
    dependencies=FranchiseScoped,
)
async def add_branch(
    franchise_id: str,
    body: CreateBranchRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> BranchResponse:
    return await service.add_branch(franchise_id, body.name)  # type: ignore


@franchise_router.get(
    "/{franchise_id}/branches",
    response_model=List[BranchResponse],
    dependencies=FranchiseScoped,
)
async def list_branches(
    franchise_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> List[BranchResponse]:
    return await service.list_branches(franchise_id)  # type: ignore


@franchise_router.get(
    "/{franchise_id}/max-stock-per-branch",
    response_model=List[MaxStockEntryResponse],
    dependencies=FranchiseScoped,
)
async def max_stock_per_branch(
    franchise_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> List[MaxStockEntryResponse]:
    return await service.max_stock_per_branch(franchise_id)  # type: ignore


# Products of a branch


@franchise_router.post(
    "/{franchise_id}/branches/{branch_id}/products",
    status_code=201,
    response_model=ProductResponse,
    dependencies=FranchiseScoped,
)
async def add_product(
    franchise_id: str,
    branch_id: str,
    body: CreateProductRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> ProductResponse:
    return await service.add_product(  # type: ignore
        franchise_id, branch_id, body.name, body.stock
    )


@franchise_router.get(
    "/{franchise_id}/branches/{branch_id}/products",
    response_model=List[ProductResponse],
    dependencies=FranchiseScoped,
)
async def products_of_branch(
    franchise_id: str,
    branch_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> List[ProductResponse]:
    return await service.products_of_branch(franchise_id, branch_id)  # type: ignore


@franchise_router.delete(
    "/{franchise_id}/branches/{branch_id}/products/{product_id}",
    status_code=204,
    response_class=Response,
    dependencies=FranchiseScoped,
)
async def delete_product(
    franchise_id: str,
    branch_id: str,
    product_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> Response:
    await service.delete_product(franchise_id, branch_id, product_id)
    return Response(status_code=204)


@franchise_router.patch(
    "/{franchise_id}/branches/{branch_id}/products/{product_id}/stock",
    response_model=ProductResponse,
    dependencies=FranchiseScoped,
)
async def update_stock(
    franchise_id: str,
    branch_id: str,
    product_id: str,
    body: UpdateStockRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> ProductResponse:
    return await service.update_stock(  # type: ignore
        franchise_id, branch_id, product_id, body.stock
    )


# Branches


@branch_router.get("/{branch_id}", response_model=BranchResponse)
async def get_branch(
    branch_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> BranchResponse:
    return await service.get_branch(branch_id)  # type: ignore


@branch_router.patch("/{branch_id}", response_model=BranchResponse)
async def update_branch(
    branch_id: str,
    body: UpdateBranchRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> BranchResponse:
    return await service.update_branch(  # type: ignore
        branch_id, name=body.name, franchise_id=body.franchise_id
    )


@branch_router.delete("/{branch_id}", status_code=204, response_class=Response)
async def delete_branch(
    branch_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> Response:
    await service.delete_branch(branch_id)
    return Response(status_code=204)


# Products


@product_router.get("", response_model=List[ProductResponse])
async def all_products(
    service: CatalogService = Depends(get_catalog_service),
) -> List[ProductResponse]:
    return await service.all_products()  # type: ignore


@product_router.get("/search", response_model=List[ProductResponse])
async def search_products(
    name_like: Optional[str] = None,
    service: CatalogService = Depends(get_catalog_service),
) -> List[ProductResponse]:
    return await service.search_products(name_like)  # type: ignore


@product_router.get("/view", response_model=List[ProductGlobalViewResponse])
async def all_products_view(
    service: CatalogService = Depends(get_catalog_service),
) -> List[ProductGlobalViewResponse]:
    return await service.all_products_view()  # type: ignore


@product_router.get("/view/{product_id}", response_model=ProductGlobalViewResponse)
async def product_global_view(
    product_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> ProductGlobalViewResponse:
    return await service.product_global_view(product_id)  # type: ignore


@product_router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    body: UpdateProductRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> ProductResponse:
    return await service.update_product(  # type: ignore
        product_id, name=body.name, stock=body.stock, branch_id=body.branch_id
    )
