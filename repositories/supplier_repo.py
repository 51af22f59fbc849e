"""
repositories/supplier_repo.py
-----------------------------
Data access layer for suppliers and product-supplier links.
"""

from typing import Optional

from db import new_id, utcnow
from models.supplier import ProductSupplierCreate, ProductSupplierRead, SupplierCreate, SupplierRead
from repositories.base import BaseRepository
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = (
    "id, name, code, contact_person, email, phone, address, tax_id, payment_terms, "
    "status, created_at, updated_at"
)

_LINK_SELECT = """
    SELECT ps.id, ps.product_id, ps.supplier_id, ps.supplier_sku, ps.cost_price,
           ps.lead_time_days, ps.is_primary, ps.created_at, ps.updated_at,
           p.name AS product_name, s.name AS supplier_name
    FROM product_suppliers ps
    JOIN products p ON p.id = ps.product_id
    JOIN suppliers s ON s.id = ps.supplier_id
"""


def _row_to_link(row: dict) -> ProductSupplierRead:
    row["is_primary"] = bool(row.get("is_primary"))
    return ProductSupplierRead.model_validate(row)


class SupplierRepository(BaseRepository):
    """Repository for the suppliers and product_suppliers tables."""

    table = "suppliers"
    updatable = {
        "name": "name",
        "code": "code",
        "contact_person": "contact_person",
        "email": "email",
        "phone": "phone",
        "address": "address",
        "tax_id": "tax_id",
        "payment_terms": "payment_terms",
        "status": "status",
    }

    # ── SUPPLIERS ─────────────────────────────────────────

    def create(self, data: SupplierCreate) -> SupplierRead:
        now = utcnow()
        supplier = SupplierRead(id=new_id(), **data.model_dump(), status="active", created_at=now, updated_at=now)
        self.db.execute(
            f"INSERT INTO suppliers ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                supplier.id, supplier.name, supplier.code, supplier.contact_person,
                supplier.email, supplier.phone, supplier.address, supplier.tax_id,
                supplier.payment_terms, supplier.status, supplier.created_at, supplier.updated_at,
            ),
        )
        logger.info(f"Created supplier {supplier.id} ({supplier.code})")
        return supplier

    def get_by_id(self, supplier_id: str) -> Optional[SupplierRead]:
        row = self.db.fetch_one(f"SELECT {_COLUMNS} FROM suppliers WHERE id = ?", (supplier_id,))
        return SupplierRead.model_validate(row) if row else None

    def list_all(self) -> list[SupplierRead]:
        rows = self.db.fetch_all(f"SELECT {_COLUMNS} FROM suppliers ORDER BY name")
        return [SupplierRead.model_validate(r) for r in rows]

    def update(self, supplier_id: str, changes: dict) -> bool:
        return self._update(supplier_id, changes)

    def delete(self, supplier_id: str) -> bool:
        return self._delete(supplier_id)

    # ── PRODUCT LINKS ─────────────────────────────────────

    def add_product(self, supplier_id: str, data: ProductSupplierCreate) -> ProductSupplierRead:
        now = utcnow()
        link = ProductSupplierRead(
            id=new_id(),
            supplier_id=supplier_id,
            **data.model_dump(),
            created_at=now,
            updated_at=now,
        )
        self.db.execute(
            "INSERT INTO product_suppliers (id, product_id, supplier_id, supplier_sku, cost_price, "
            "lead_time_days, is_primary, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                link.id, link.product_id, link.supplier_id, link.supplier_sku, link.cost_price,
                link.lead_time_days, link.is_primary, link.created_at, link.updated_at,
            ),
        )
        return link

    def get_supplier_products(self, supplier_id: str) -> list[ProductSupplierRead]:
        rows = self.db.fetch_all(f"{_LINK_SELECT} WHERE ps.supplier_id = ? ORDER BY p.name", (supplier_id,))
        return [_row_to_link(r) for r in rows]

    def get_product_suppliers(self, product_id: str) -> list[ProductSupplierRead]:
        """Suppliers of one product, primary supplier first."""
        rows = self.db.fetch_all(
            f"{_LINK_SELECT} WHERE ps.product_id = ? ORDER BY ps.is_primary DESC, s.name",
            (product_id,),
        )
        return [_row_to_link(r) for r in rows]

    def remove_product(self, supplier_id: str, product_supplier_id: str) -> bool:
        return self.db.execute(
            "DELETE FROM product_suppliers WHERE id = ? AND supplier_id = ?",
            (product_supplier_id, supplier_id),
        ) > 0
