"""Resource classes mapping API operations to transport calls.

Resources work with either transport. Each method returns what the
transport returns: the decoded body for SpirisClient, an awaitable of it
for AsyncSpirisClient.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO, Union

from spirispy.client_base import prepare_attachment
from spirispy.models import PaginationParams

if TYPE_CHECKING:
    from spirispy.client_async import AsyncSpirisClient
    from spirispy.client_sync import SpirisClient

    Transport = Union[SpirisClient, AsyncSpirisClient]


def _map_result(result: Any, func: Callable[[Any], Any]) -> Any:
    """Apply func to a transport result, awaiting it first if needed."""
    if inspect.isawaitable(result):

        async def mapped() -> Any:
            return func(await result)

        return mapped()
    return func(result)


def _compact(**fields: Any) -> dict[str, Any]:
    """Request body with unset fields left out."""
    return {key: value for key, value in fields.items() if value is not None}


class BaseResource:
    """Base class holding the transport and the collection path."""

    path: str = ""

    def __init__(self, client: Transport) -> None:
        self._client = client

    def _item_path(self, item_id: str) -> str:
        return f"{self.path}/{item_id}"

    def _list(
        self, page: int | None = None, page_size: int | None = None, **filters: Any
    ) -> Any:
        params = PaginationParams(page=page, page_size=page_size)
        return self._client.fetch(self.path, params.to_query(**filters))


class ReadOnlyResource(BaseResource):
    """Resource that can be listed and read."""

    def get_all(self, page: int | None = None, page_size: int | None = None) -> Any:
        """Get all items with optional pagination.

        Args:
            page: Page number
            page_size: Items per page

        Returns:
            Paginated response with ``meta`` and ``data``
        """
        return self._list(page, page_size)

    def get(self, item_id: str) -> Any:
        """Get a single item by ID."""
        return self._client.fetch(self._item_path(item_id))


class CrudResource(ReadOnlyResource):
    """Resource supporting create, read, update and delete."""

    def create(self, data: dict[str, Any]) -> Any:
        """Create a new item."""
        return self._client.create(self.path, data)

    def update(self, item_id: str, data: dict[str, Any]) -> Any:
        """Update an existing item."""
        return self._client.replace(self._item_path(item_id), data)

    def delete(self, item_id: str) -> Any:
        """Delete an item."""
        return self._client.remove(self._item_path(item_id))


class SearchByNameMixin(BaseResource):
    def search(
        self, query: str, page: int | None = None, page_size: int | None = None
    ) -> Any:
        """Search items by name."""
        return self._list(page, page_size, name=query)


class PaymentMixin(BaseResource):
    def mark_as_paid(self, item_id: str, payment_date: str, amount: float) -> Any:
        """Register a payment on an invoice.

        Args:
            item_id: Invoice ID
            payment_date: Payment date (YYYY-MM-DD)
            amount: Paid amount
        """
        return self._client.create(
            f"{self._item_path(item_id)}/payment",
            {"paymentDate": payment_date, "amount": amount},
        )


# Core resources


class CustomersResource(SearchByNameMixin, CrudResource):
    path = "/v2/customers"


class ArticlesResource(SearchByNameMixin, CrudResource):
    path = "/v2/articles"


class InvoicesResource(PaymentMixin, CrudResource):
    """Customer invoices."""

    path = "/v2/customerinvoices"

    def get_pdf(self, invoice_id: str) -> Any:
        """Download the invoice PDF as bytes."""
        return self._client.fetch(f"{self._item_path(invoice_id)}/pdf")

    def send_email(self, invoice_id: str, email_address: str | None = None) -> Any:
        """Send the invoice by email.

        Args:
            invoice_id: Invoice ID
            email_address: Recipient, defaults to the customer's address
        """
        return self._client.create(
            f"{self._item_path(invoice_id)}/send", _compact(emailAddress=email_address)
        )

    def create_credit(self, invoice_id: str) -> Any:
        """Create a credit invoice for an invoice."""
        return self._client.create(f"{self._item_path(invoice_id)}/credit", {})


class InvoiceDraftsResource(CrudResource):
    path = "/v2/customerinvoicedrafts"

    def convert_to_invoice(self, draft_id: str) -> Any:
        """Convert a draft into a customer invoice."""
        return self._client.create(f"{self._item_path(draft_id)}/convert", {})


class SuppliersResource(SearchByNameMixin, CrudResource):
    path = "/v2/suppliers"


class SupplierInvoicesResource(PaymentMixin, CrudResource):
    path = "/v2/supplierinvoices"


# Accounting resources


class PaymentTermsResource(CrudResource):
    path = "/v2/paymentterms"


class VatRatesResource(ReadOnlyResource):
    path = "/v2/vatrates"


class FiscalYearsResource(ReadOnlyResource):
    path = "/v2/fiscalyears"

    def get_current(self) -> Any:
        """Get the fiscal year containing today's date."""
        return self._client.fetch(f"{self.path}/current")


class AccountsResource(CrudResource):
    path = "/v2/accounts"


class VouchersResource(CrudResource):
    path = "/v2/vouchers"


class AccountBalancesResource(BaseResource):
    path = "/v2/accountbalances"

    def get_all(
        self,
        page: int | None = None,
        page_size: int | None = None,
        fiscal_year_id: str | None = None,
        from_date: str | None = None,
        to_date: str | None = None,
    ) -> Any:
        """Get account balances.

        Args:
            page: Page number
            page_size: Items per page
            fiscal_year_id: Limit to a fiscal year
            from_date: Period start (YYYY-MM-DD)
            to_date: Period end (YYYY-MM-DD)
        """
        return self._list(
            page,
            page_size,
            fiscalYearId=fiscal_year_id,
            fromDate=from_date,
            toDate=to_date,
        )

    def get_by_account_number(
        self, account_number: str, fiscal_year_id: str | None = None
    ) -> Any:
        """Get the balance of one account."""
        return self._client.fetch(
            self._item_path(account_number), {"fiscalYearId": fiscal_year_id}
        )


class AccountTypesResource(ReadOnlyResource):
    path = "/v2/accounttypes"


class AllocationPeriodsResource(CrudResource):
    path = "/v2/allocationperiods"


# Reference data resources


class CompanySettingsResource(BaseResource):
    path = "/v2/companysettings"

    def get(self) -> Any:
        """Get the company settings."""
        return self._client.fetch(self.path)

    def update(self, data: dict[str, Any]) -> Any:
        """Update the company settings."""
        return self._client.replace(self.path, data)


class CountriesResource(ReadOnlyResource):
    path = "/v2/countries"


class CurrenciesResource(ReadOnlyResource):
    path = "/v2/currencies"

    def get_exchange_rate(self, currency_code: str, date: str | None = None) -> Any:
        """Get the exchange rate for a currency, optionally on a date."""
        return self._client.fetch(
            f"{self._item_path(currency_code)}/exchangerate", {"date": date}
        )

    def get_exchange_rates(self, date: str | None = None) -> Any:
        """Get exchange rates for all currencies as a list."""
        result = self._client.fetch(f"{self.path}/exchangerates", {"date": date})
        return _map_result(result, lambda body: body["data"])


# Banking resources


class BankAccountsResource(CrudResource):
    path = "/v2/bankaccounts"


class BankTransactionsResource(CrudResource):
    path = "/v2/banktransactions"

    def get_by_bank_account(
        self,
        bank_account_id: str,
        page: int | None = None,
        page_size: int | None = None,
    ) -> Any:
        """Get transactions for one bank account."""
        return self._list(page, page_size, bankAccountId=bank_account_id)

    def mark_as_reconciled(self, transaction_id: str) -> Any:
        """Mark a bank transaction as reconciled."""
        return self._client.create(f"{self._item_path(transaction_id)}/reconcile", {})


class BanksResource(ReadOnlyResource):
    path = "/v2/banks"


# Organization resources


class CostCentersResource(CrudResource):
    path = "/v2/costcenters"


class CostCenterItemsResource(CrudResource):
    path = "/v2/costcenteritems"

    def get_by_cost_center(
        self,
        cost_center_id: str,
        page: int | None = None,
        page_size: int | None = None,
    ) -> Any:
        """Get the items of one cost center."""
        return self._list(page, page_size, costCenterId=cost_center_id)


class CustomerLabelsResource(CrudResource):
    path = "/v2/customerlabels"


class ArticleLabelsResource(CrudResource):
    path = "/v2/articlelabels"


class CustomerLedgerItemsResource(ReadOnlyResource):
    path = "/v2/customerledgeritems"

    def get_by_customer(
        self,
        customer_id: str,
        page: int | None = None,
        page_size: int | None = None,
    ) -> Any:
        """Get ledger items for one customer."""
        return self._list(page, page_size, customerId=customer_id)


class ArticleAccountCodingsResource(BaseResource):
    path = "/v2/articleaccountcodings"

    def get_all(self, page: int | None = None, page_size: int | None = None) -> Any:
        """Get all article account codings."""
        return self._list(page, page_size)

    def get_by_article(self, article_id: str) -> Any:
        """Get the account coding of an article."""
        return self._client.fetch(self._item_path(article_id))

    def upsert(self, data: dict[str, Any]) -> Any:
        """Create or replace an article account coding."""
        return self._client.create(self.path, data)

    def delete(self, article_id: str) -> Any:
        """Delete the account coding of an article."""
        return self._client.remove(self._item_path(article_id))


# Attachment resources


class AttachmentsResource(ReadOnlyResource):
    path = "/v2/attachments"

    def download(self, attachment_id: str) -> Any:
        """Download attachment content as bytes."""
        return self._client.fetch(f"{self._item_path(attachment_id)}/content")

    def upload(
        self,
        file: Path | str | bytes | BinaryIO,
        filename: str | None = None,
    ) -> Any:
        """Upload a new attachment.

        Args:
            file: File path, raw bytes or binary file object
            filename: Filename sent to the API, defaults to the path's name

        Returns:
            Created attachment
        """
        fname, file_bytes, content_type = prepare_attachment(file, filename)
        files = {"file": (fname, file_bytes, content_type)}
        return self._client.create(self.path, files=files)

    def delete(self, attachment_id: str) -> Any:
        """Delete an attachment."""
        return self._client.remove(self._item_path(attachment_id))


class AttachmentLinksResource(BaseResource):
    path = "/v2/attachmentlinks"

    def get_all(self, page: int | None = None, page_size: int | None = None) -> Any:
        """Get all attachment links."""
        return self._list(page, page_size)

    def get_by_entity(self, entity_type: str, entity_id: str) -> Any:
        """Get links to one entity, e.g. ("CustomerInvoice", invoice_id)."""
        return self._client.fetch(
            self.path, {"entityType": entity_type, "entityId": entity_id}
        )

    def create(self, data: dict[str, Any]) -> Any:
        """Link an attachment to an entity."""
        return self._client.create(self.path, data)

    def delete(self, link_id: str) -> Any:
        """Delete an attachment link."""
        return self._client.remove(self._item_path(link_id))


# Approval workflow resources


class VatReportApprovalResource(ReadOnlyResource):
    path = "/v2/approval/vatreport"

    def approve(self, approval_id: str) -> Any:
        """Approve a VAT report."""
        return self._client.create(f"{self._item_path(approval_id)}/approve", {})

    def reject(self, approval_id: str, reason: str | None = None) -> Any:
        """Reject a VAT report."""
        return self._client.create(
            f"{self._item_path(approval_id)}/reject", _compact(reason=reason)
        )


class SupplierInvoiceApprovalResource(ReadOnlyResource):
    path = "/v2/approval/supplierinvoice"

    def get_pending(
        self, page: int | None = None, page_size: int | None = None
    ) -> Any:
        """Get supplier invoices waiting for approval."""
        return self._list(page, page_size, status="pending")

    def approve(self, approval_id: str, comment: str | None = None) -> Any:
        """Approve a supplier invoice."""
        return self._client.create(
            f"{self._item_path(approval_id)}/approve", _compact(comment=comment)
        )

    def reject(self, approval_id: str, comment: str | None = None) -> Any:
        """Reject a supplier invoice."""
        return self._client.create(
            f"{self._item_path(approval_id)}/reject", _compact(comment=comment)
        )

    def request_changes(self, approval_id: str, comment: str) -> Any:
        """Send a supplier invoice back with a change request."""
        return self._client.create(
            f"{self._item_path(approval_id)}/requestchanges", _compact(comment=comment)
        )
