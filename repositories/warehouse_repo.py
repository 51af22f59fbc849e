"""
repositories/warehouse_repo.py
------------------------------
Data access layer for warehouses, their storage locations and the
inventory held in them.
"""

from typing import Optional

from db import DuplicateRecordError, new_id, utcnow
from models.inventory import DEFAULT_MIN_QUANTITY, InventoryCreate, InventoryRead
from models.warehouse import LocationCreate, LocationRead, WarehouseCreate, WarehouseRead
from repositories.base import BaseRepository
from utils.logger import get_logger

logger = get_logger(__name__)

_WAREHOUSE_COLUMNS = (
    "id, code, name, location, manager_name, phone, email, capacity, status, created_at, updated_at"
)

# row_no / shelf_no: ROW_NUMBER is a reserved word in MySQL 8
_LOCATION_SELECT = """
    SELECT wl.id, wl.warehouse_id, wl.location_code, wl.location_name, wl.zone,
           wl.row_no, wl.shelf_no, wl.max_capacity, wl.current_quantity, wl.status,
           wl.created_at, w.name AS warehouse_name
    FROM warehouse_locations wl
    JOIN warehouses w ON w.id = wl.warehouse_id
"""
_LOCATION_ORDER = "ORDER BY wl.zone, wl.row_no, wl.shelf_no"

_INVENTORY_SELECT = """
    SELECT i.id, i.product_id, i.warehouse_id, i.location_id, i.quantity,
           i.reserved_quantity, i.min_quantity, i.max_quantity, i.last_restocked,
           i.last_checked, i.created_at, i.updated_at,
           p.name AS product_name, p.sku, w.name AS warehouse_name,
           wl.location_code
    FROM inventory i
    JOIN products p ON p.id = i.product_id
    JOIN warehouses w ON w.id = i.warehouse_id
    LEFT JOIN warehouse_locations wl ON wl.id = i.location_id
"""


def _row_to_location(row: dict) -> LocationRead:
    row["row_number"] = row.pop("row_no", None)
    row["shelf_number"] = row.pop("shelf_no", None)
    return LocationRead.model_validate(row)


def _row_to_inventory(row: dict) -> InventoryRead:
    quantity = row.get("quantity") or 0
    reserved = row.get("reserved_quantity") or 0
    row["reserved_quantity"] = reserved
    row["available_quantity"] = quantity - reserved
    row["needs_reorder"] = quantity <= (row.get("min_quantity") or 0)
    return InventoryRead.model_validate(row)


class LocationRepository(BaseRepository):
    table = "warehouse_locations"
    updatable = {
        "location_code": "location_code",
        "location_name": "location_name",
        "zone": "zone",
        "row_number": "row_no",
        "shelf_number": "shelf_no",
        "max_capacity": "max_capacity",
        "status": "status",
    }
    touch_updated_at = False


class InventoryRepository(BaseRepository):
    table = "inventory"
    updatable = {
        "quantity": "quantity",
        "reserved_quantity": "reserved_quantity",
        "min_quantity": "min_quantity",
        "max_quantity": "max_quantity",
        "last_restocked": "last_restocked",
        "last_checked": "last_checked",
    }


class WarehouseRepository(BaseRepository):
    """Repository for warehouses, warehouse_locations and inventory."""

    table = "warehouses"
    updatable = {
        "code": "code",
        "name": "name",
        "location": "location",
        "manager_name": "manager_name",
        "phone": "phone",
        "email": "email",
        "capacity": "capacity",
        "status": "status",
    }

    def __init__(self, db):
        super().__init__(db)
        self.locations = LocationRepository(db)
        self.inventory = InventoryRepository(db)

    # ── WAREHOUSES ────────────────────────────────────────

    def create(self, data: WarehouseCreate) -> WarehouseRead:
        now = utcnow()
        warehouse = WarehouseRead(id=new_id(), **data.model_dump(), status="active", created_at=now, updated_at=now)
        self.db.execute(
            f"INSERT INTO warehouses ({_WAREHOUSE_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                warehouse.id, warehouse.code, warehouse.name, warehouse.location,
                warehouse.manager_name, warehouse.phone, warehouse.email, warehouse.capacity,
                warehouse.status, warehouse.created_at, warehouse.updated_at,
            ),
        )
        logger.info(f"Created warehouse {warehouse.id} ({warehouse.code})")
        return warehouse

    def get_by_id(self, warehouse_id: str) -> Optional[WarehouseRead]:
        row = self.db.fetch_one(f"SELECT {_WAREHOUSE_COLUMNS} FROM warehouses WHERE id = ?", (warehouse_id,))
        return WarehouseRead.model_validate(row) if row else None

    def list_all(self) -> list[WarehouseRead]:
        rows = self.db.fetch_all(f"SELECT {_WAREHOUSE_COLUMNS} FROM warehouses ORDER BY name")
        return [WarehouseRead.model_validate(r) for r in rows]

    def update(self, warehouse_id: str, changes: dict) -> bool:
        return self._update(warehouse_id, changes)

    def delete(self, warehouse_id: str) -> bool:
        return self._delete(warehouse_id)

    # ── LOCATIONS ─────────────────────────────────────────

    def create_location(self, warehouse_id: str, data: LocationCreate) -> LocationRead:
        location = LocationRead(
            id=new_id(),
            warehouse_id=warehouse_id,
            **data.model_dump(),
            current_quantity=0,
            status="available",
            created_at=utcnow(),
        )
        self.db.execute(
            "INSERT INTO warehouse_locations (id, warehouse_id, location_code, location_name, zone, "
            "row_no, shelf_no, max_capacity, current_quantity, status, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                location.id, location.warehouse_id, location.location_code, location.location_name,
                location.zone, location.row_number, location.shelf_number, location.max_capacity,
                location.current_quantity, location.status, location.created_at,
            ),
        )
        return location

    def get_location(self, warehouse_id: str, location_id: str) -> Optional[LocationRead]:
        row = self.db.fetch_one(
            f"{_LOCATION_SELECT} WHERE wl.id = ? AND wl.warehouse_id = ?",
            (location_id, warehouse_id),
        )
        return _row_to_location(row) if row else None

    def get_locations(self, warehouse_id: str) -> list[LocationRead]:
        rows = self.db.fetch_all(f"{_LOCATION_SELECT} WHERE wl.warehouse_id = ? {_LOCATION_ORDER}", (warehouse_id,))
        return [_row_to_location(r) for r in rows]

    def get_available_locations(self, warehouse_id: str) -> list[LocationRead]:
        """Locations marked available that still have room."""
        rows = self.db.fetch_all(
            f"{_LOCATION_SELECT} WHERE wl.warehouse_id = ? AND wl.status = 'available' "
            f"AND (wl.max_capacity IS NULL OR wl.current_quantity < wl.max_capacity) {_LOCATION_ORDER}",
            (warehouse_id,),
        )
        return [_row_to_location(r) for r in rows]

    def update_location(self, location_id: str, changes: dict) -> bool:
        return self.locations._update(location_id, changes)

    # ── INVENTORY ─────────────────────────────────────────

    def create_inventory(self, warehouse_id: str, data: InventoryCreate) -> InventoryRead:
        """Insert an inventory row.

        Raises DuplicateRecordError when the product already has stock at this
        location, including a second warehouse-level row (no location) which
        a unique index cannot catch because NULLs never compare equal.
        """
        now = utcnow()
        min_quantity = data.min_quantity if data.min_quantity is not None else DEFAULT_MIN_QUANTITY
        inventory_id = new_id()

        with self.db.transaction() as cur:
            if data.location_id is None:
                existing = cur.execute(
                    "SELECT id FROM inventory WHERE product_id = ? AND warehouse_id = ? AND location_id IS NULL",
                    (data.product_id, warehouse_id),
                ).fetchone()
                if existing:
                    raise DuplicateRecordError("inventory already exists at warehouse level")

            cur.execute(
                "INSERT INTO inventory (id, product_id, warehouse_id, location_id, quantity, "
                "reserved_quantity, min_quantity, max_quantity, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    inventory_id, data.product_id, warehouse_id, data.location_id, data.quantity,
                    data.reserved_quantity, min_quantity, data.max_quantity, now, now,
                ),
            )

        logger.info(f"Created inventory {inventory_id} for product {data.product_id} in warehouse {warehouse_id}")
        return self.get_inventory(inventory_id)

    def get_inventory(self, inventory_id: str) -> Optional[InventoryRead]:
        row = self.db.fetch_one(f"{_INVENTORY_SELECT} WHERE i.id = ?", (inventory_id,))
        return _row_to_inventory(row) if row else None

    def get_inventory_by_warehouse(self, warehouse_id: str) -> list[InventoryRead]:
        rows = self.db.fetch_all(f"{_INVENTORY_SELECT} WHERE i.warehouse_id = ? ORDER BY p.name", (warehouse_id,))
        return [_row_to_inventory(r) for r in rows]

    def get_inventory_by_product(self, product_id: str) -> list[InventoryRead]:
        rows = self.db.fetch_all(f"{_INVENTORY_SELECT} WHERE i.product_id = ? ORDER BY w.name", (product_id,))
        return [_row_to_inventory(r) for r in rows]

    def update_inventory(self, inventory_id: str, changes: dict) -> bool:
        return self.inventory._update(inventory_id, changes)
