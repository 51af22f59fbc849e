from fastapi import APIRouter, Depends

from db import Database, DuplicateRecordError, ReferencedRecordError, get_database, utcnow
from models.gen_response import ApiResponse
from models.inventory import (
    InventoryCreate,
    InventoryRead,
    InventorySummary,
    InventoryUpdate,
    InventoryUpdateResult,
    WarehouseInventory,
)
from models.warehouse import (
    LocationCreate,
    LocationRead,
    LocationUpdate,
    LocationUpdateResult,
    WarehouseCreate,
    WarehouseLocations,
    WarehouseRead,
    WarehouseUpdate,
    WarehouseUpdateResult,
)
from repositories.base import diff_changes
from repositories.product_repo import ProductRepository
from repositories.warehouse_repo import WarehouseRepository
from utils.errors import bad_request, duplicate, internal_on_failure, not_found, validation_error
from utils.response import created_response, success_response

router = APIRouter(prefix="/api/warehouses", tags=["warehouses"])
inventory_router = APIRouter(prefix="/api/inventory", tags=["inventory"])


def get_warehouse_repo(db: Database = Depends(get_database)) -> WarehouseRepository:
    return WarehouseRepository(db)


def _get_warehouse_or_404(repo: WarehouseRepository, warehouse_id: str) -> WarehouseRead:
    with internal_on_failure("Failed to retrieve warehouse"):
        warehouse = repo.get_by_id(warehouse_id)
    if warehouse is None:
        raise not_found("Warehouse not found")
    return warehouse


def _check_reserved(quantity: int, reserved: int) -> None:
    if reserved > quantity:
        raise validation_error(
            "Validation failed",
            [{"field": "reserved_quantity", "message": "Reserved quantity cannot exceed quantity"}],
        )


# ============================================================================
# Warehouses
# ============================================================================


@router.post("", response_model=ApiResponse[WarehouseRead], status_code=201)
def create_warehouse(payload: WarehouseCreate, repo: WarehouseRepository = Depends(get_warehouse_repo)):
    with internal_on_failure("Failed to create warehouse"):
        try:
            warehouse = repo.create(payload)
        except DuplicateRecordError:
            raise duplicate("Duplicate warehouse code", "A warehouse with this code already exists")
    return created_response("Warehouse created successfully", warehouse)


@router.get("", response_model=ApiResponse[list[WarehouseRead]])
def list_warehouses(repo: WarehouseRepository = Depends(get_warehouse_repo)):
    with internal_on_failure("Failed to retrieve warehouses"):
        warehouses = repo.list_all()
    return success_response("Warehouses retrieved successfully", warehouses)


@router.get("/{warehouse_id}", response_model=ApiResponse[WarehouseRead])
def get_warehouse(warehouse_id: str, repo: WarehouseRepository = Depends(get_warehouse_repo)):
    warehouse = _get_warehouse_or_404(repo, warehouse_id)
    return success_response("Warehouse retrieved successfully", warehouse)


@router.put("/{warehouse_id}", response_model=ApiResponse[WarehouseUpdateResult])
def update_warehouse(
    warehouse_id: str,
    payload: WarehouseUpdate,
    repo: WarehouseRepository = Depends(get_warehouse_repo),
):
    warehouse = _get_warehouse_or_404(repo, warehouse_id)

    changes = diff_changes(warehouse, payload)
    if not changes:
        return success_response("No changes detected", warehouse)

    with internal_on_failure("Failed to update warehouse"):
        try:
            repo.update(warehouse_id, changes)
        except DuplicateRecordError:
            raise duplicate("Duplicate warehouse code", "A warehouse with this code already exists")

    with internal_on_failure("Failed to retrieve updated warehouse"):
        updated = repo.get_by_id(warehouse_id)

    return success_response(
        "Warehouse updated successfully",
        WarehouseUpdateResult(warehouse=updated, updated_fields=list(changes)),
    )


@router.delete("/{warehouse_id}", response_model=ApiResponse[dict])
def delete_warehouse(warehouse_id: str, repo: WarehouseRepository = Depends(get_warehouse_repo)):
    """Delete a warehouse together with its locations and inventory rows."""
    warehouse = _get_warehouse_or_404(repo, warehouse_id)

    with internal_on_failure("Failed to delete warehouse"):
        repo.delete(warehouse_id)

    return success_response(
        "Warehouse deleted successfully",
        {"deleted_warehouse_id": warehouse_id, "deleted_warehouse_name": warehouse.name},
    )


# ============================================================================
# Locations
# ============================================================================


@router.post("/{warehouse_id}/locations", response_model=ApiResponse[LocationRead], status_code=201)
def create_location(
    warehouse_id: str,
    payload: LocationCreate,
    repo: WarehouseRepository = Depends(get_warehouse_repo),
):
    warehouse = _get_warehouse_or_404(repo, warehouse_id)

    with internal_on_failure("Failed to create location"):
        try:
            location = repo.create_location(warehouse_id, payload)
        except DuplicateRecordError:
            raise duplicate("Duplicate location code", "A location with this code already exists in this warehouse")

    location.warehouse_name = warehouse.name
    return created_response("Location created successfully", location)


@router.get("/{warehouse_id}/locations", response_model=ApiResponse[WarehouseLocations])
def get_warehouse_locations(warehouse_id: str, repo: WarehouseRepository = Depends(get_warehouse_repo)):
    warehouse = _get_warehouse_or_404(repo, warehouse_id)

    with internal_on_failure("Failed to retrieve warehouse locations"):
        locations = repo.get_locations(warehouse_id)

    return success_response(
        "Warehouse locations retrieved successfully",
        WarehouseLocations(warehouse=warehouse, locations=locations, count=len(locations)),
    )


@router.get("/{warehouse_id}/locations/available", response_model=ApiResponse[WarehouseLocations])
def get_available_locations(warehouse_id: str, repo: WarehouseRepository = Depends(get_warehouse_repo)):
    """Locations with status `available` that are below their max capacity."""
    warehouse = _get_warehouse_or_404(repo, warehouse_id)

    with internal_on_failure("Failed to retrieve available locations"):
        locations = repo.get_available_locations(warehouse_id)

    return success_response(
        "Available locations retrieved successfully",
        WarehouseLocations(warehouse=warehouse, locations=locations, count=len(locations)),
    )


@router.put("/{warehouse_id}/locations/{location_id}", response_model=ApiResponse[LocationUpdateResult])
def update_location(
    warehouse_id: str,
    location_id: str,
    payload: LocationUpdate,
    repo: WarehouseRepository = Depends(get_warehouse_repo),
):
    _get_warehouse_or_404(repo, warehouse_id)
    with internal_on_failure("Failed to retrieve location"):
        location = repo.get_location(warehouse_id, location_id)
    if location is None:
        raise not_found("Location not found")

    changes = diff_changes(location, payload)
    if not changes:
        return success_response("No changes detected", location)

    with internal_on_failure("Failed to update location"):
        try:
            repo.update_location(location_id, changes)
        except DuplicateRecordError:
            raise duplicate("Duplicate location code", "A location with this code already exists in this warehouse")

    with internal_on_failure("Failed to retrieve updated location"):
        updated = repo.get_location(warehouse_id, location_id)

    return success_response(
        "Location updated successfully",
        LocationUpdateResult(location=updated, updated_fields=list(changes)),
    )


# ============================================================================
# Inventory
# ============================================================================


@router.post("/{warehouse_id}/inventory", response_model=ApiResponse[InventoryRead], status_code=201)
def create_inventory(warehouse_id: str, payload: InventoryCreate, db: Database = Depends(get_database)):
    """
    Record stock of a product in this warehouse.

    `min_quantity` defaults to 10. Without `location_id` the stock is held at
    warehouse level; a product can have one such row per warehouse.
    """
    repo = WarehouseRepository(db)
    _get_warehouse_or_404(repo, warehouse_id)
    _check_reserved(payload.quantity, payload.reserved_quantity)

    with internal_on_failure("Failed to create inventory"):
        if ProductRepository(db).get_by_id(payload.product_id) is None:
            raise bad_request("Invalid product ID", "Product not found")
        if payload.location_id is not None and repo.get_location(warehouse_id, payload.location_id) is None:
            raise bad_request("Invalid location ID", "Location not found in this warehouse")
        try:
            inventory = repo.create_inventory(warehouse_id, payload)
        except DuplicateRecordError:
            raise duplicate("Duplicate inventory", "Inventory for this product already exists in this location")
        except ReferencedRecordError:
            raise bad_request("Invalid reference", "Product or location does not exist")

    return created_response("Inventory created successfully", inventory)


@router.get("/{warehouse_id}/inventory", response_model=ApiResponse[WarehouseInventory])
def get_warehouse_inventory(warehouse_id: str, repo: WarehouseRepository = Depends(get_warehouse_repo)):
    warehouse = _get_warehouse_or_404(repo, warehouse_id)

    with internal_on_failure("Failed to retrieve warehouse inventory"):
        inventory = repo.get_inventory_by_warehouse(warehouse_id)

    summary = InventorySummary(
        total_items=len(inventory),
        total_quantity=sum(item.quantity for item in inventory),
        total_reserved=sum(item.reserved_quantity for item in inventory),
        total_available=sum(item.available_quantity for item in inventory),
    )
    return success_response(
        "Warehouse inventory retrieved successfully",
        WarehouseInventory(warehouse=warehouse, inventory=inventory, summary=summary),
    )


def _get_inventory_or_404(repo: WarehouseRepository, inventory_id: str) -> InventoryRead:
    with internal_on_failure("Failed to retrieve inventory"):
        inventory = repo.get_inventory(inventory_id)
    if inventory is None:
        raise not_found("Inventory not found")
    return inventory


@inventory_router.get("/{inventory_id}", response_model=ApiResponse[InventoryRead])
def get_inventory(inventory_id: str, repo: WarehouseRepository = Depends(get_warehouse_repo)):
    inventory = _get_inventory_or_404(repo, inventory_id)
    return success_response("Inventory retrieved successfully", inventory)


@inventory_router.put("/{inventory_id}", response_model=ApiResponse[InventoryUpdateResult])
def update_inventory(
    inventory_id: str,
    payload: InventoryUpdate,
    repo: WarehouseRepository = Depends(get_warehouse_repo),
):
    """
    Adjust stock levels of an inventory record.

    Reserved stock may never exceed the quantity on hand. Raising the
    quantity stamps `last_restocked`; every applied update stamps
    `last_checked`.
    """
    inventory = _get_inventory_or_404(repo, inventory_id)

    changes = diff_changes(inventory, payload)
    if not changes:
        return success_response("No changes detected", inventory)

    quantity = changes.get("quantity", inventory.quantity)
    _check_reserved(quantity, changes.get("reserved_quantity", inventory.reserved_quantity))

    now = utcnow()
    stamped = dict(changes, last_checked=now)
    if quantity > inventory.quantity:
        stamped["last_restocked"] = now

    with internal_on_failure("Failed to update inventory"):
        repo.update_inventory(inventory_id, stamped)
        updated = repo.get_inventory(inventory_id)

    return success_response(
        "Inventory updated successfully",
        InventoryUpdateResult(inventory=updated, updated_fields=list(changes)),
    )
