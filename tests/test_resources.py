"""Tests for resources and the Spiris SDK facades."""

import json
from pathlib import Path
from typing import Any

import pytest
import respx
from httpx import Response

from spirispy import AsyncSpiris, Spiris
from spirispy.resources import BaseResource


def paginated(data: list[Any], page: int = 1, page_size: int = 10) -> dict[str, Any]:
    """Wrap items the way list endpoints return them."""
    return {
        "meta": {
            "currentPage": page,
            "pageSize": page_size,
            "totalCount": len(data),
            "totalPages": 1,
        },
        "data": data,
    }


def body_of(route: respx.Route) -> Any:
    return json.loads(route.calls.last.request.content)


class TestFacade:
    """Test SDK wiring."""

    def test_resources_share_one_client(self, spiris: Spiris):
        """Test every resource uses the SDK's transport."""
        resources = [
            value
            for value in vars(spiris).values()
            if isinstance(value, BaseResource)
        ]

        assert len(resources) > 20
        assert all(resource._client is spiris.client for resource in resources)

    def test_access_token_delegates(self):
        """Test token management goes through the transport."""
        with Spiris() as spiris:
            assert spiris.get_access_token() is None
            spiris.set_access_token("token")
            assert spiris.client.get_access_token() == "token"

    def test_options_passed_to_client(self):
        """Test constructor options reach the transport."""
        with Spiris(api_url="https://sandbox.test", access_token="t") as spiris:
            assert spiris.client.base_url == "https://sandbox.test"
            assert spiris.get_access_token() == "t"


class TestCustomers:
    """Test customer endpoints."""

    @respx.mock
    def test_get_all(self, spiris: Spiris, base_url: str, mock_customer: dict):
        """Test listing customers with pagination."""
        response = paginated([mock_customer], page=2, page_size=50)
        route = respx.get(f"{base_url}/v2/customers").mock(
            return_value=Response(200, json=response)
        )

        result = spiris.customers.get_all(page=2, page_size=50)

        assert result == response
        params = route.calls.last.request.url.params
        assert params["page"] == "2"
        assert params["pageSize"] == "50"

    @respx.mock
    def test_get_all_without_paging(self, spiris: Spiris, base_url: str):
        """Test listing without pagination sends no query."""
        route = respx.get(f"{base_url}/v2/customers").mock(
            return_value=Response(200, json=paginated([]))
        )

        spiris.customers.get_all()

        assert route.calls.last.request.url.query == b""

    @respx.mock
    def test_crud(self, spiris: Spiris, base_url: str, mock_customer: dict):
        """Test create, read, update and delete."""
        item_url = f"{base_url}/v2/customers/cust-123"
        get_route = respx.get(item_url).mock(
            return_value=Response(200, json=mock_customer)
        )
        create_route = respx.post(f"{base_url}/v2/customers").mock(
            return_value=Response(201, json=mock_customer)
        )
        update_route = respx.put(item_url).mock(
            return_value=Response(200, json={**mock_customer, "name": "Renamed"})
        )
        delete_route = respx.delete(item_url).mock(return_value=Response(204))

        assert spiris.customers.get("cust-123") == mock_customer
        assert spiris.customers.create({"name": "Test Customer AB"}) == mock_customer
        assert spiris.customers.update("cust-123", {"name": "Renamed"})["name"] == (
            "Renamed"
        )
        assert spiris.customers.delete("cust-123") is None

        assert get_route.called
        assert body_of(create_route) == {"name": "Test Customer AB"}
        assert body_of(update_route) == {"name": "Renamed"}
        assert delete_route.called

    @respx.mock
    def test_search(self, spiris: Spiris, base_url: str):
        """Test searching by name."""
        route = respx.get(f"{base_url}/v2/customers").mock(
            return_value=Response(200, json=paginated([]))
        )

        spiris.customers.search("Acme", page=1)

        params = route.calls.last.request.url.params
        assert params["name"] == "Acme"
        assert params["page"] == "1"


class TestInvoices:
    """Test invoice endpoints."""

    @respx.mock
    def test_get_pdf(self, spiris: Spiris, base_url: str):
        """Test downloading the invoice PDF."""
        respx.get(f"{base_url}/v2/customerinvoices/inv-123/pdf").mock(
            return_value=Response(
                200, content=b"%PDF", headers={"Content-Type": "application/pdf"}
            )
        )

        assert spiris.invoices.get_pdf("inv-123") == b"%PDF"

    @respx.mock
    def test_send_email(self, spiris: Spiris, base_url: str):
        """Test sending with and without an explicit address."""
        route = respx.post(f"{base_url}/v2/customerinvoices/inv-123/send").mock(
            return_value=Response(204)
        )

        spiris.invoices.send_email("inv-123", "billing@example.com")
        assert body_of(route) == {"emailAddress": "billing@example.com"}

        spiris.invoices.send_email("inv-123")
        assert body_of(route) == {}

    @respx.mock
    def test_mark_as_paid(self, spiris: Spiris, base_url: str, mock_invoice: dict):
        """Test registering a payment."""
        route = respx.post(f"{base_url}/v2/customerinvoices/inv-123/payment").mock(
            return_value=Response(200, json={**mock_invoice, "isPaid": True})
        )

        result = spiris.invoices.mark_as_paid("inv-123", "2024-01-20", 200)

        assert result["isPaid"] is True
        assert body_of(route) == {"paymentDate": "2024-01-20", "amount": 200}

    @respx.mock
    def test_create_credit_and_convert_draft(self, spiris: Spiris, base_url: str):
        """Test action endpoints posting an empty object."""
        credit = respx.post(f"{base_url}/v2/customerinvoices/inv-123/credit").mock(
            return_value=Response(200, json={"id": "inv-124"})
        )
        convert = respx.post(
            f"{base_url}/v2/customerinvoicedrafts/draft-123/convert"
        ).mock(return_value=Response(200, json={"id": "inv-125"}))

        assert spiris.invoices.create_credit("inv-123") == {"id": "inv-124"}
        assert spiris.invoice_drafts.convert_to_invoice("draft-123") == {"id": "inv-125"}
        assert body_of(credit) == {}
        assert body_of(convert) == {}


class TestAccountingAndBanking:
    """Test accounting, reference and banking endpoints."""

    @respx.mock
    def test_fiscal_year_current(self, spiris: Spiris, base_url: str):
        """Test getting the current fiscal year."""
        route = respx.get(f"{base_url}/v2/fiscalyears/current").mock(
            return_value=Response(200, json={"id": "fy-123"})
        )

        assert spiris.fiscal_years.get_current() == {"id": "fy-123"}
        assert route.called

    @respx.mock
    def test_account_balances(self, spiris: Spiris, base_url: str):
        """Test balance filters are sent and unset ones left out."""
        list_route = respx.get(f"{base_url}/v2/accountbalances").mock(
            return_value=Response(200, json=paginated([]))
        )
        item_route = respx.get(f"{base_url}/v2/accountbalances/1910").mock(
            return_value=Response(200, json={"accountNumber": "1910", "balance": 5})
        )

        spiris.account_balances.get_all(fiscal_year_id="fy-1", to_date="2024-12-31")
        spiris.account_balances.get_by_account_number("1910")

        params = list_route.calls.last.request.url.params
        assert params["fiscalYearId"] == "fy-1"
        assert params["toDate"] == "2024-12-31"
        assert "fromDate" not in params
        assert "fiscalYearId" not in item_route.calls.last.request.url.params

    @respx.mock
    def test_company_settings(self, spiris: Spiris, base_url: str):
        """Test the singleton company settings resource."""
        respx.get(f"{base_url}/v2/companysettings").mock(
            return_value=Response(200, json={"companyName": "Test AB"})
        )
        route = respx.put(f"{base_url}/v2/companysettings").mock(
            return_value=Response(200, json={"companyName": "New AB"})
        )

        assert spiris.company_settings.get() == {"companyName": "Test AB"}
        assert spiris.company_settings.update({"companyName": "New AB"}) == {
            "companyName": "New AB"
        }
        assert route.called

    @respx.mock
    def test_exchange_rates(self, spiris: Spiris, base_url: str):
        """Test exchange rates are unwrapped from the data envelope."""
        rates = [{"currencyCode": "EUR", "rate": 11.5}]
        route = respx.get(f"{base_url}/v2/currencies/exchangerates").mock(
            return_value=Response(200, json={"data": rates})
        )
        single = respx.get(f"{base_url}/v2/currencies/EUR/exchangerate").mock(
            return_value=Response(200, json=rates[0])
        )

        assert spiris.currencies.get_exchange_rates("2024-01-15") == rates
        assert spiris.currencies.get_exchange_rate("EUR") == rates[0]
        assert route.calls.last.request.url.params["date"] == "2024-01-15"
        assert "date" not in single.calls.last.request.url.params

    @respx.mock
    def test_bank_transactions(self, spiris: Spiris, base_url: str):
        """Test filtering by bank account and reconciling."""
        list_route = respx.get(f"{base_url}/v2/banktransactions").mock(
            return_value=Response(200, json=paginated([]))
        )
        reconcile = respx.post(f"{base_url}/v2/banktransactions/btx-1/reconcile").mock(
            return_value=Response(200, json={"id": "btx-1", "isReconciled": True})
        )

        spiris.bank_transactions.get_by_bank_account("bank-123", page_size=25)
        result = spiris.bank_transactions.mark_as_reconciled("btx-1")

        params = list_route.calls.last.request.url.params
        assert params["bankAccountId"] == "bank-123"
        assert params["pageSize"] == "25"
        assert result["isReconciled"] is True
        assert reconcile.called


class TestOrganization:
    """Test organization endpoints."""

    @respx.mock
    def test_filtered_lists(self, spiris: Spiris, base_url: str):
        """Test list filters for cost center items and ledger items."""
        items = respx.get(f"{base_url}/v2/costcenteritems").mock(
            return_value=Response(200, json=paginated([]))
        )
        ledger = respx.get(f"{base_url}/v2/customerledgeritems").mock(
            return_value=Response(200, json=paginated([]))
        )

        spiris.cost_center_items.get_by_cost_center("cc-123")
        spiris.customer_ledger_items.get_by_customer("cust-123")

        assert items.calls.last.request.url.params["costCenterId"] == "cc-123"
        assert ledger.calls.last.request.url.params["customerId"] == "cust-123"

    @respx.mock
    def test_article_account_codings(self, spiris: Spiris, base_url: str):
        """Test the article account coding endpoints."""
        coding = {"articleId": "art-123", "accountNumber": "3001"}
        respx.get(f"{base_url}/v2/articleaccountcodings/art-123").mock(
            return_value=Response(200, json=coding)
        )
        upsert = respx.post(f"{base_url}/v2/articleaccountcodings").mock(
            return_value=Response(200, json=coding)
        )
        delete = respx.delete(f"{base_url}/v2/articleaccountcodings/art-123").mock(
            return_value=Response(204)
        )

        assert spiris.article_account_codings.get_by_article("art-123") == coding
        assert spiris.article_account_codings.upsert(coding) == coding
        spiris.article_account_codings.delete("art-123")

        assert body_of(upsert) == coding
        assert delete.called


class TestAttachments:
    """Test attachment endpoints."""

    @respx.mock
    def test_upload_from_path(self, spiris: Spiris, base_url: str, tmp_path: Path):
        """Test uploading a file from disk."""
        file_path = tmp_path / "receipt.pdf"
        file_path.write_bytes(b"%PDF-1.4 receipt")
        route = respx.post(f"{base_url}/v2/attachments").mock(
            return_value=Response(201, json={"id": "att-123"})
        )

        result = spiris.attachments.upload(file_path)

        request = route.calls.last.request
        assert result == {"id": "att-123"}
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b'name="file"; filename="receipt.pdf"' in request.content
        assert b"Content-Type: application/pdf" in request.content
        assert b"%PDF-1.4 receipt" in request.content

    @respx.mock
    def test_upload_bytes_with_filename(self, spiris: Spiris, base_url: str):
        """Test uploading raw bytes."""
        route = respx.post(f"{base_url}/v2/attachments").mock(
            return_value=Response(201, json={"id": "att-124"})
        )

        spiris.attachments.upload(b"col1,col2", "export.csv")

        assert b'filename="export.csv"' in route.calls.last.request.content

    def test_upload_missing_file(self, spiris: Spiris, tmp_path: Path):
        """Test uploading a missing file fails before any request."""
        with pytest.raises(FileNotFoundError):
            spiris.attachments.upload(tmp_path / "missing.pdf")

    @respx.mock
    def test_download_and_links(self, spiris: Spiris, base_url: str):
        """Test downloading content and listing links for an entity."""
        respx.get(f"{base_url}/v2/attachments/att-123/content").mock(
            return_value=Response(
                200, content=b"data", headers={"Content-Type": "application/pdf"}
            )
        )
        links = respx.get(f"{base_url}/v2/attachmentlinks").mock(
            return_value=Response(200, json=paginated([]))
        )

        assert spiris.attachments.download("att-123") == b"data"
        spiris.attachment_links.get_by_entity("CustomerInvoice", "inv-123")

        params = links.calls.last.request.url.params
        assert params["entityType"] == "CustomerInvoice"
        assert params["entityId"] == "inv-123"


class TestApprovals:
    """Test approval workflow endpoints."""

    @respx.mock
    def test_supplier_invoice_approval(self, spiris: Spiris, base_url: str):
        """Test pending list and approval actions."""
        base = f"{base_url}/v2/approval/supplierinvoice"
        pending = respx.get(base).mock(return_value=Response(200, json=paginated([])))
        approve = respx.post(f"{base}/siapp-123/approve").mock(
            return_value=Response(200, json={"status": "approved"})
        )
        changes = respx.post(f"{base}/siapp-123/requestchanges").mock(
            return_value=Response(200, json={"status": "pending"})
        )

        spiris.supplier_invoice_approval.get_pending()
        spiris.supplier_invoice_approval.approve("siapp-123")
        spiris.supplier_invoice_approval.request_changes("siapp-123", "Wrong amount")

        assert pending.calls.last.request.url.params["status"] == "pending"
        assert body_of(approve) == {}
        assert body_of(changes) == {"comment": "Wrong amount"}

    @respx.mock
    def test_vat_report_reject(self, spiris: Spiris, base_url: str):
        """Test rejecting a VAT report with a reason."""
        route = respx.post(f"{base_url}/v2/approval/vatreport/vat-1/reject").mock(
            return_value=Response(200, json={"status": "rejected"})
        )

        result = spiris.vat_report_approval.reject("vat-1", "Incorrect period")

        assert result == {"status": "rejected"}
        assert body_of(route) == {"reason": "Incorrect period"}


class TestAsyncResources:
    """Test resources on the async SDK."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_customer(
        self, async_spiris: AsyncSpiris, base_url: str, mock_customer: dict
    ):
        """Test resources return awaitables on the async SDK."""
        respx.get(f"{base_url}/v2/customers/cust-123").mock(
            return_value=Response(200, json=mock_customer)
        )

        assert await async_spiris.customers.get("cust-123") == mock_customer

    @pytest.mark.asyncio
    @respx.mock
    async def test_exchange_rates(self, async_spiris: AsyncSpiris, base_url: str):
        """Test the data envelope is unwrapped after awaiting."""
        rates = [{"currencyCode": "USD", "rate": 10.2}]
        respx.get(f"{base_url}/v2/currencies/exchangerates").mock(
            return_value=Response(200, json={"data": rates})
        )

        assert await async_spiris.currencies.get_exchange_rates() == rates

    @pytest.mark.asyncio
    @respx.mock
    async def test_async_context_manager(self, base_url: str):
        """Test the async SDK as a context manager."""
        route = respx.delete(f"{base_url}/v2/vouchers/v-1").mock(
            return_value=Response(204)
        )

        async with AsyncSpiris(access_token="t") as spiris:
            assert await spiris.vouchers.delete("v-1") is None

        assert route.calls.last.request.headers["Authorization"] == "Bearer t"
