"""Spiris Bokföring SDK entry points.

``Spiris`` and ``AsyncSpiris`` own one transport and expose every API
resource as an attribute::

    with Spiris(access_token=token) as spiris:
        customers = spiris.customers.get_all(page_size=50)

    async with AsyncSpiris(access_token=token) as spiris:
        invoice = await spiris.invoices.get(invoice_id)
"""

from __future__ import annotations

from typing import Any

from spirispy import auth
from spirispy.client_async import AsyncSpirisClient
from spirispy.client_sync import SpirisClient
from spirispy.models import TokenResponse
from spirispy.resources import (
    AccountBalancesResource,
    AccountsResource,
    AccountTypesResource,
    AllocationPeriodsResource,
    ArticleAccountCodingsResource,
    ArticleLabelsResource,
    ArticlesResource,
    AttachmentLinksResource,
    AttachmentsResource,
    BankAccountsResource,
    BanksResource,
    BankTransactionsResource,
    CompanySettingsResource,
    CostCenterItemsResource,
    CostCentersResource,
    CountriesResource,
    CurrenciesResource,
    CustomerLabelsResource,
    CustomerLedgerItemsResource,
    CustomersResource,
    FiscalYearsResource,
    InvoiceDraftsResource,
    InvoicesResource,
    PaymentTermsResource,
    SupplierInvoiceApprovalResource,
    SupplierInvoicesResource,
    SuppliersResource,
    VatRatesResource,
    VatReportApprovalResource,
    VouchersResource,
)


class _SpirisResources:
    """Resource attributes shared by both SDK flavours."""

    def __init__(self, client: SpirisClient | AsyncSpirisClient) -> None:
        self.client = client

        # Core
        self.customers = CustomersResource(client)
        self.articles = ArticlesResource(client)
        self.invoices = InvoicesResource(client)
        self.invoice_drafts = InvoiceDraftsResource(client)
        self.suppliers = SuppliersResource(client)
        self.supplier_invoices = SupplierInvoicesResource(client)

        # Accounting
        self.payment_terms = PaymentTermsResource(client)
        self.vat_rates = VatRatesResource(client)
        self.fiscal_years = FiscalYearsResource(client)
        self.accounts = AccountsResource(client)
        self.vouchers = VouchersResource(client)
        self.account_balances = AccountBalancesResource(client)
        self.account_types = AccountTypesResource(client)

        # Banking
        self.bank_accounts = BankAccountsResource(client)
        self.bank_transactions = BankTransactionsResource(client)
        self.banks = BanksResource(client)

        # Organization
        self.company_settings = CompanySettingsResource(client)
        self.cost_centers = CostCentersResource(client)
        self.cost_center_items = CostCenterItemsResource(client)
        self.customer_labels = CustomerLabelsResource(client)
        self.article_labels = ArticleLabelsResource(client)
        self.customer_ledger_items = CustomerLedgerItemsResource(client)
        self.article_account_codings = ArticleAccountCodingsResource(client)

        # Reference data
        self.countries = CountriesResource(client)
        self.currencies = CurrenciesResource(client)
        self.allocation_periods = AllocationPeriodsResource(client)

        # Attachments
        self.attachments = AttachmentsResource(client)
        self.attachment_links = AttachmentLinksResource(client)

        # Approval workflows
        self.vat_report_approval = VatReportApprovalResource(client)
        self.supplier_invoice_approval = SupplierInvoiceApprovalResource(client)

    def set_access_token(self, token: str) -> None:
        """Set or update the access token."""
        self.client.set_access_token(token)

    def get_access_token(self) -> str | None:
        """Get the current access token."""
        return self.client.get_access_token()

    @staticmethod
    def build_authorization_url(
        client_id: str,
        redirect_uri: str,
        scope: str | None = None,
        state: str | None = None,
    ) -> str:
        """Get the OAuth2 authorization URL."""
        return auth.build_authorization_url(client_id, redirect_uri, scope, state)


class Spiris(_SpirisResources):
    """Synchronous SDK for the Spiris Bokföring API."""

    client: SpirisClient

    def __init__(self, **options: Any) -> None:
        """Initialize the SDK.

        Args:
            **options: Passed to SpirisClient (api_url, access_token,
                on_token_refresh, timeout)
        """
        super().__init__(SpirisClient(**options))

    def __enter__(self) -> Spiris:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.client.close()

    @staticmethod
    def exchange_code_for_tokens(
        client_id: str, client_secret: str, redirect_uri: str, code: str
    ) -> TokenResponse:
        """Exchange an authorization code for tokens."""
        return auth.exchange_code_for_tokens(
            client_id, client_secret, redirect_uri, code
        )

    @staticmethod
    def refresh_tokens(
        client_id: str, client_secret: str, refresh_token: str
    ) -> TokenResponse:
        """Exchange a refresh token for new tokens."""
        return auth.refresh_tokens(client_id, client_secret, refresh_token)


class AsyncSpiris(_SpirisResources):
    """Asynchronous SDK for the Spiris Bokföring API."""

    client: AsyncSpirisClient

    def __init__(self, **options: Any) -> None:
        """Initialize the SDK.

        Args:
            **options: Passed to AsyncSpirisClient (api_url, access_token,
                on_token_refresh, timeout)
        """
        super().__init__(AsyncSpirisClient(**options))

    async def __aenter__(self) -> AsyncSpiris:
        """Context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()

    @staticmethod
    async def exchange_code_for_tokens(
        client_id: str, client_secret: str, redirect_uri: str, code: str
    ) -> TokenResponse:
        """Exchange an authorization code for tokens."""
        return await auth.async_exchange_code_for_tokens(
            client_id, client_secret, redirect_uri, code
        )

    @staticmethod
    async def refresh_tokens(
        client_id: str, client_secret: str, refresh_token: str
    ) -> TokenResponse:
        """Exchange a refresh token for new tokens."""
        return await auth.async_refresh_tokens(client_id, client_secret, refresh_token)
