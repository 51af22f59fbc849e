from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from db import Database, DuplicateRecordError, ReferencedRecordError, get_database
from models.gen_response import ApiResponse
from models.product import ProductCreate, ProductPage, ProductRead, ProductUpdate, ProductUpdateResult
from repositories.base import diff_changes
from repositories.product_repo import ProductRepository
from repositories.supplier_repo import SupplierRepository
from repositories.warehouse_repo import WarehouseRepository
from utils.errors import bad_request, duplicate, internal_on_failure, not_found
from utils.pagination import PageParams, build_pagination
from utils.response import created_response, success_response

router = APIRouter(prefix="/api/products", tags=["products"])


def get_product_repo(db: Database = Depends(get_database)) -> ProductRepository:
    return ProductRepository(db)


def _get_product_or_404(repo: ProductRepository, product_id: str) -> ProductRead:
    with internal_on_failure("Failed to retrieve product"):
        product = repo.get_by_id(product_id)
    if product is None:
        raise not_found("Product not found")
    return product


@router.post("", response_model=ApiResponse[ProductRead], status_code=201, name="create_product")
def create_product(payload: ProductCreate, request: Request, repo: ProductRepository = Depends(get_product_repo)):
    """Create a new product."""
    with internal_on_failure("Failed to create product"):
        try:
            product = repo.create(payload)
        except DuplicateRecordError:
            raise duplicate("Duplicated SKU", "A product with this SKU already exists")

    response = created_response("Product created successfully", product)
    response.headers["Location"] = str(request.url_for("get_product", product_id=product.id))
    return response


@router.get("", response_model=ApiResponse[ProductPage], name="list_products")
def list_products(
    params: PageParams = Depends(),
    search: Optional[str] = Query(None, description="Matches name, description or SKU (contains)"),
    category: Optional[str] = Query(None, description="Filter by category"),
    repo: ProductRepository = Depends(get_product_repo),
):
    """List products, newest first, one page at a time."""
    raw = params.to_raw_params()
    with internal_on_failure("Failed to retrieve products"):
        products, total = repo.list_page(raw.limit, raw.offset, search=search, category=category)

    return success_response(
        "Products retrieved successfully",
        ProductPage(products=products, pagination=build_pagination(params, total)),
    )


@router.get("/list", response_model=ApiResponse[list[ProductRead]])
def list_all_products(repo: ProductRepository = Depends(get_product_repo)):
    """Every product, unpaginated."""
    with internal_on_failure("Failed to fetch products"):
        products = repo.list_all()
    return success_response("Products retrieved successfully", products)


@router.get("/{product_id}", response_model=ApiResponse[ProductRead], name="get_product")
def get_product(product_id: str, repo: ProductRepository = Depends(get_product_repo)):
    product = _get_product_or_404(repo, product_id)
    return success_response("Product retrieved successfully", product)


@router.put("/{product_id}", response_model=ApiResponse[ProductUpdateResult])
def update_product(product_id: str, payload: ProductUpdate, repo: ProductRepository = Depends(get_product_repo)):
    """Apply the supplied fields that differ from the stored product."""
    product = _get_product_or_404(repo, product_id)

    changes = diff_changes(product, payload)
    if not changes:
        return success_response("No changes detected", product)

    with internal_on_failure("Failed to update product"):
        try:
            repo.update(product_id, changes)
        except DuplicateRecordError:
            raise duplicate("Duplicated SKU", "A product with this SKU already exists")

    with internal_on_failure("Failed to retrieve updated product"):
        updated = repo.get_by_id(product_id)

    return success_response(
        "Product updated successfully",
        ProductUpdateResult(product=updated, updated_fields=list(changes)),
    )


@router.delete("/{product_id}", response_model=ApiResponse[dict])
def delete_product(product_id: str, repo: ProductRepository = Depends(get_product_repo)):
    _get_product_or_404(repo, product_id)

    with internal_on_failure("Failed to delete product"):
        try:
            repo.delete(product_id)
        except ReferencedRecordError:
            raise bad_request("Product is in use", "The product is referenced by existing orders")

    return success_response("Product deleted successfully")


@router.get("/{product_id}/suppliers", response_model=ApiResponse[dict])
def get_product_suppliers(product_id: str, db: Database = Depends(get_database)):
    """Suppliers linked to a product, primary supplier first."""
    product = _get_product_or_404(ProductRepository(db), product_id)
    with internal_on_failure("Failed to retrieve product suppliers"):
        suppliers = SupplierRepository(db).get_product_suppliers(product_id)

    return success_response(
        "Product suppliers retrieved successfully",
        {"product": product, "suppliers": suppliers, "count": len(suppliers)},
    )


@router.get("/{product_id}/inventory", response_model=ApiResponse[dict])
def get_product_inventory(product_id: str, db: Database = Depends(get_database)):
    """Stock of a product in every warehouse."""
    product = _get_product_or_404(ProductRepository(db), product_id)
    with internal_on_failure("Failed to retrieve product inventory"):
        inventory = WarehouseRepository(db).get_inventory_by_product(product_id)

    return success_response(
        "Product inventory retrieved successfully",
        {
            "product": product,
            "inventory": inventory,
            "total_quantity": sum(item.quantity for item in inventory),
            "total_available": sum(item.available_quantity for item in inventory),
        },
    )
