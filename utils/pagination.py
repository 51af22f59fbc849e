"""Page-number pagination for list endpoints backed by raw SQL."""

from __future__ import annotations

import math

from fastapi import Query
from fastapi_pagination.bases import AbstractParams, RawParams
from pydantic import BaseModel

from models.gen_response import Pagination

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class PageParams(BaseModel, AbstractParams):
    page: int = Query(1, ge=1, description="Page number (1-based)")
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Records per page")

    def to_raw_params(self) -> RawParams:
        return RawParams(limit=self.page_size, offset=calculate_offset(self.page, self.page_size))


def calculate_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size


def calculate_total_pages(total: int, page_size: int) -> int:
    if total == 0:
        return 1
    return math.ceil(total / page_size)


def build_pagination(params: PageParams, total: int) -> Pagination:
    return Pagination(
        page=params.page,
        page_size=params.page_size,
        total=total,
        pages=calculate_total_pages(total, params.page_size),
    )
