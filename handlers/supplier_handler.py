from fastapi import APIRouter, Depends

from db import Database, DuplicateRecordError, ReferencedRecordError, get_database
from models.gen_response import ApiResponse
from models.supplier import (
    ProductSupplierCreate,
    ProductSupplierRead,
    SupplierCreate,
    SupplierProducts,
    SupplierRead,
    SupplierUpdate,
    SupplierUpdateResult,
)
from repositories.base import diff_changes
from repositories.product_repo import ProductRepository
from repositories.supplier_repo import SupplierRepository
from utils.errors import bad_request, duplicate, internal_on_failure, not_found
from utils.response import created_response, success_response

router = APIRouter(prefix="/api/suppliers", tags=["suppliers"])


def get_supplier_repo(db: Database = Depends(get_database)) -> SupplierRepository:
    return SupplierRepository(db)


def _get_supplier_or_404(repo: SupplierRepository, supplier_id: str) -> SupplierRead:
    with internal_on_failure("Failed to retrieve supplier"):
        supplier = repo.get_by_id(supplier_id)
    if supplier is None:
        raise not_found("Supplier not found")
    return supplier


@router.post("", response_model=ApiResponse[SupplierRead], status_code=201)
def create_supplier(payload: SupplierCreate, repo: SupplierRepository = Depends(get_supplier_repo)):
    with internal_on_failure("Failed to create supplier"):
        try:
            supplier = repo.create(payload)
        except DuplicateRecordError:
            raise duplicate("Duplicate supplier code", "A supplier with this code already exists")
    return created_response("Supplier created successfully", supplier)


@router.get("", response_model=ApiResponse[list[SupplierRead]])
def list_suppliers(repo: SupplierRepository = Depends(get_supplier_repo)):
    with internal_on_failure("Failed to retrieve suppliers"):
        suppliers = repo.list_all()
    return success_response("Suppliers retrieved successfully", suppliers)


@router.get("/{supplier_id}", response_model=ApiResponse[SupplierRead])
def get_supplier(supplier_id: str, repo: SupplierRepository = Depends(get_supplier_repo)):
    supplier = _get_supplier_or_404(repo, supplier_id)
    return success_response("Supplier retrieved successfully", supplier)


@router.put("/{supplier_id}", response_model=ApiResponse[SupplierUpdateResult])
def update_supplier(supplier_id: str, payload: SupplierUpdate, repo: SupplierRepository = Depends(get_supplier_repo)):
    supplier = _get_supplier_or_404(repo, supplier_id)

    changes = diff_changes(supplier, payload)
    if not changes:
        return success_response("No changes detected", supplier)

    with internal_on_failure("Failed to update supplier"):
        try:
            repo.update(supplier_id, changes)
        except DuplicateRecordError:
            raise duplicate("Duplicate supplier code", "A supplier with this code already exists")

    with internal_on_failure("Failed to retrieve updated supplier"):
        updated = repo.get_by_id(supplier_id)

    return success_response(
        "Supplier updated successfully",
        SupplierUpdateResult(supplier=updated, updated_fields=list(changes)),
    )


@router.delete("/{supplier_id}", response_model=ApiResponse[dict])
def delete_supplier(supplier_id: str, repo: SupplierRepository = Depends(get_supplier_repo)):
    supplier = _get_supplier_or_404(repo, supplier_id)

    with internal_on_failure("Failed to delete supplier"):
        repo.delete(supplier_id)

    return success_response(
        "Supplier deleted successfully",
        {"deleted_supplier_id": supplier_id, "deleted_supplier_name": supplier.name},
    )


# ============================================================================
# Product-supplier links
# ============================================================================


@router.post("/{supplier_id}/products", response_model=ApiResponse[ProductSupplierRead], status_code=201)
def add_supplier_product(supplier_id: str, payload: ProductSupplierCreate, db: Database = Depends(get_database)):
    """Link a product to this supplier with its purchasing terms."""
    repo = SupplierRepository(db)
    supplier = _get_supplier_or_404(repo, supplier_id)

    with internal_on_failure("Failed to link product to supplier"):
        product = ProductRepository(db).get_by_id(payload.product_id)
        if product is None:
            raise bad_request("Invalid product ID", "Product not found")
        try:
            link = repo.add_product(supplier_id, payload)
        except DuplicateRecordError:
            raise duplicate("Duplicate product-supplier", "This product is already linked to this supplier")
        except ReferencedRecordError:
            raise bad_request("Invalid product ID", "Product not found")

    link.product_name = product.name
    link.supplier_name = supplier.name
    return created_response("Product linked to supplier successfully", link)


@router.get("/{supplier_id}/products", response_model=ApiResponse[SupplierProducts])
def get_supplier_products(supplier_id: str, repo: SupplierRepository = Depends(get_supplier_repo)):
    supplier = _get_supplier_or_404(repo, supplier_id)

    with internal_on_failure("Failed to retrieve supplier products"):
        products = repo.get_supplier_products(supplier_id)

    return success_response(
        "Supplier products retrieved successfully",
        SupplierProducts(supplier=supplier, products=products, count=len(products)),
    )


@router.delete("/{supplier_id}/products/{product_supplier_id}", response_model=ApiResponse[dict])
def remove_supplier_product(
    supplier_id: str,
    product_supplier_id: str,
    repo: SupplierRepository = Depends(get_supplier_repo),
):
    with internal_on_failure("Failed to remove product from supplier"):
        removed = repo.remove_product(supplier_id, product_supplier_id)
    if not removed:
        raise not_found("Product-supplier link not found")
    return success_response("Product removed from supplier successfully")
