from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from db import Database, DuplicateRecordError, ReferencedRecordError, get_database
from models.customer import CustomerCreate, CustomerPage, CustomerRead, CustomerUpdate, CustomerUpdateResult
from models.gen_response import ApiResponse
from repositories.base import diff_changes
from repositories.customer_repo import CustomerRepository
from utils.errors import bad_request, duplicate, internal_on_failure, not_found
from utils.pagination import PageParams, build_pagination
from utils.response import created_response, success_response

router = APIRouter(prefix="/api/customers", tags=["customers"])


def get_customer_repo(db: Database = Depends(get_database)) -> CustomerRepository:
    return CustomerRepository(db)


def _get_customer_or_404(repo: CustomerRepository, customer_id: str) -> CustomerRead:
    with internal_on_failure("Failed to retrieve customer"):
        customer = repo.get_by_id(customer_id)
    if customer is None:
        raise not_found("Customer not found")
    return customer


@router.post("", response_model=ApiResponse[CustomerRead], status_code=201)
def create_customer(payload: CustomerCreate, request: Request, repo: CustomerRepository = Depends(get_customer_repo)):
    with internal_on_failure("Failed to create customer"):
        try:
            customer = repo.create(payload)
        except DuplicateRecordError:
            raise duplicate("Duplicate email", "A customer with this email already exists")

    response = created_response("Customer created successfully", customer)
    response.headers["Location"] = str(request.url_for("get_customer", customer_id=customer.id))
    return response


@router.get("", response_model=ApiResponse[CustomerPage])
def list_customers(
    params: PageParams = Depends(),
    search: Optional[str] = Query(None, description="Matches name, email or phone (contains)"),
    email: Optional[str] = Query(None, description="Exact email"),
    repo: CustomerRepository = Depends(get_customer_repo),
):
    raw = params.to_raw_params()
    with internal_on_failure("Failed to retrieve customers"):
        customers, total = repo.list_page(raw.limit, raw.offset, search=search, email=email)

    return success_response(
        "Customers retrieved successfully",
        CustomerPage(customers=customers, pagination=build_pagination(params, total)),
    )


@router.get("/list", response_model=ApiResponse[list[CustomerRead]])
def list_all_customers(repo: CustomerRepository = Depends(get_customer_repo)):
    with internal_on_failure("Failed to fetch customers"):
        customers = repo.list_all()
    return success_response("Customers retrieved successfully", customers)


@router.get("/{customer_id}", response_model=ApiResponse[CustomerRead], name="get_customer")
def get_customer(customer_id: str, repo: CustomerRepository = Depends(get_customer_repo)):
    customer = _get_customer_or_404(repo, customer_id)
    return success_response("Customer retrieved successfully", customer)


@router.put("/{customer_id}", response_model=ApiResponse[CustomerUpdateResult])
def update_customer(customer_id: str, payload: CustomerUpdate, repo: CustomerRepository = Depends(get_customer_repo)):
    """Update only the provided fields; the response lists what changed."""
    customer = _get_customer_or_404(repo, customer_id)

    changes = diff_changes(customer, payload)
    if not changes:
        return success_response("No changes detected", customer)

    with internal_on_failure("Failed to update customer"):
        try:
            repo.update(customer_id, changes)
        except DuplicateRecordError:
            raise duplicate("Duplicate email", "A customer with this email already exists")

    # re-read so the response carries the stored timestamps
    with internal_on_failure("Failed to retrieve updated customer"):
        updated = repo.get_by_id(customer_id)

    return success_response(
        "Customer updated successfully",
        CustomerUpdateResult(customer=updated, updated_fields=list(changes)),
    )


@router.delete("/{customer_id}", response_model=ApiResponse[dict])
def delete_customer(customer_id: str, repo: CustomerRepository = Depends(get_customer_repo)):
    _get_customer_or_404(repo, customer_id)

    with internal_on_failure("Failed to delete customer"):
        try:
            repo.delete(customer_id)
        except ReferencedRecordError:
            raise bad_request("Customer has orders", "Customers with existing orders cannot be deleted")

    return success_response("Customer deleted successfully")
