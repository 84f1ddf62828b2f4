"""Invoice list queries — filter, sort and paginate the full record set."""

from collections.abc import Callable
from typing import Any

from invoice_intake.application.interfaces import InvoiceRepository
from invoice_intake.domain.entities import (
    Invoice,
    InvoicePage,
    InvoiceQuery,
    InvoiceStatus,
    SortField,
    SortOrder,
)
from invoice_intake.domain.exceptions import EntityNotFoundError, InvalidQueryError


# Sort key per sortable field. Datetimes compare by instant, the rest by
# their natural ordering. A key of None means "no value" and sorts last.
_SORT_KEYS: dict[SortField, Callable[[Invoice], Any]] = {
    SortField.UPLOAD_DATE: lambda inv: inv.upload_date,
    SortField.FILE_NAME: lambda inv: inv.file_name,
    SortField.FILE_SIZE: lambda inv: inv.file_size,
    SortField.CLIENT_NAME: lambda inv: inv.client_name,
    SortField.AMOUNT: lambda inv: inv.amount,
    SortField.STATUS: lambda inv: inv.status.value,
    SortField.PROCESSING_START_TIME: lambda inv: inv.processing_start_time,
    SortField.PROCESSING_END_TIME: lambda inv: inv.processing_end_time,
}


def query_invoices(invoices: list[Invoice], query: InvoiceQuery) -> InvoicePage:
    """Run one list query over ``invoices``.

    Steps, in order: status filter, case-insensitive search on file name
    and client name, sort with an ID tie-break, then page slicing. ``page``
    below 1 is treated as 1; ``limit`` below 1 is rejected.
    """
    if query.limit < 1:
        raise InvalidQueryError("limit must be at least 1")
    page = max(query.page, 1)

    matched = list(invoices)

    if query.status is not None:
        matched = [inv for inv in matched if inv.status == query.status]

    # Blank means no search; otherwise the text is matched as given.
    if query.search and query.search.strip():
        needle = query.search.casefold()
        matched = [
            inv for inv in matched
            if needle in inv.file_name.casefold() or needle in inv.client_name.casefold()
        ]

    ordered = _sort(matched, query.sort_by, query.sort_order)

    start = (page - 1) * query.limit
    return InvoicePage(
        data=ordered[start : start + query.limit],
        total=len(ordered),
        page=page,
        limit=query.limit,
    )


def _sort(invoices: list[Invoice], sort_by: SortField, sort_order: SortOrder) -> list[Invoice]:
    key = _SORT_KEYS[sort_by]
    valued = [inv for inv in invoices if key(inv) is not None]
    missing = [inv for inv in invoices if key(inv) is None]

    # list.sort is stable, including with reverse=True, so pre-sorting by id
    # leaves equal keys in id order for both directions.
    valued.sort(key=lambda inv: inv.id)
    valued.sort(key=key, reverse=sort_order is SortOrder.DESC)
    missing.sort(key=lambda inv: inv.id)
    return valued + missing


class InvoiceQueryService:
    """Read-side use cases for invoices. Depends on the repository port (DI)."""

    def __init__(self, repository: InvoiceRepository, default_limit: int = 10):
        self._repository = repository
        self._default_limit = default_limit

    async def get_invoice(self, invoice_id: str) -> Invoice:
        invoice = await self._repository.get_by_id(invoice_id)
        if invoice is None:
            raise EntityNotFoundError("Invoice", invoice_id)
        return invoice

    async def list_invoices(
        self,
        *,
        status: InvoiceStatus | None = None,
        search: str | None = None,
        sort_by: SortField = SortField.UPLOAD_DATE,
        sort_order: SortOrder = SortOrder.DESC,
        page: int = 1,
        limit: int | None = None,
    ) -> InvoicePage:
        query = InvoiceQuery(
            status=status,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=self._default_limit if limit is None else limit,
        )
        return query_invoices(await self._repository.get_all(), query)
