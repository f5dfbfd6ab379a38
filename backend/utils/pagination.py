"""
Paginação de listagens da API.
"""
from typing import Any, Type

from fastapi import Query
from sqlalchemy.orm import Query as SQLQuery

from config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


class PaginationParams:
    """
    Dependência FastAPI com page/page_size.

        @router.get("/")
        def listar(pagination: PaginationParams = Depends()):
            ...
    """

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Número da página"),
        page_size: int = Query(
            DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Itens por página",
        ),
    ):
        self.page = page
        self.page_size = page_size

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def paginate_query(query: SQLQuery, pagination: PaginationParams, response_class: Type[Any]) -> Any:
    """Executa a query paginada e monta `response_class.create(...)`."""
    total = query.count()
    items = query.offset(pagination.offset).limit(pagination.page_size).all()
    return response_class.create(
        items=items,
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )
