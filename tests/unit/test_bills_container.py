"""Unit tests for the employee bill list container."""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from billed.containers.bills import Bills, display_bills, validate_bills
from billed.core.exceptions import StoreError
from billed.models.enums import RoutePath
from billed.schemas.bill import Bill
from billed.ui.dom import Document, Element, click
from billed.views.bills import bills_page


def _bills_document(bills_data) -> Document:
    return Document(bills_page(data=[Bill.model_validate(b) for b in bills_data]))


def test_click_new_bill_navigates_to_form(bills_data, mock_store, navigate, storage):
    document = _bills_document(bills_data)
    Bills(document, navigate, store=mock_store, storage=storage)

    click(document.get_by_test_id("btn-new-bill"))

    navigate.assert_called_once_with(RoutePath.NEW_BILL)


def test_click_eye_icon_shows_proof(bills_data, mock_store, navigate):
    document = _bills_document(bills_data)
    preview = MagicMock()
    Bills(document, navigate, store=mock_store, preview=preview)

    click(document.query_all_by_test_id("icon-eye")[0])

    preview.show.assert_called_once_with(bills_data[0]["fileUrl"])


def test_eye_icon_opens_modal_with_image(bills_data, mock_store, navigate):
    document = _bills_document(bills_data)
    container = Bills(document, navigate, store=mock_store)
    icon = Element("div", {"data-bill-url": "https://fake-image-url.com/image.png"})

    container.handle_click_icon_eye(icon)

    modal = document.get_element_by_id("modaleFile")
    image = modal.get_by_tag("img")[0]
    assert image.get_attribute("alt") == "Bill"
    assert image.get_attribute("src") == "https://fake-image-url.com/image.png"
    assert modal.class_list.contains("show")


def test_eye_icon_without_url_is_noop(mock_store, navigate):
    document = Document(bills_page(data=[Bill(id="x", date="2020-01-01")]))
    preview = MagicMock()
    Bills(document, navigate, store=mock_store, preview=preview)

    icon = document.get_by_test_id("icon-eye")
    assert not icon.has_attribute("data-bill-url")
    click(icon)

    preview.show.assert_not_called()


def test_logout_clears_session(bills_data, mock_store, navigate, storage):
    document = _bills_document(bills_data)
    Bills(document, navigate, store=mock_store, storage=storage)

    click(document.get_element_by_id("layout-disconnect"))

    assert storage.get_item("user") is None
    navigate.assert_called_once_with(RoutePath.LOGIN)


@pytest.mark.asyncio
async def test_get_bills_fetches_once_newest_first(mock_store, navigate):
    container = Bills(Document(), navigate, store=mock_store)

    bills = await container.get_bills()

    mock_store.bills.return_value.list.assert_awaited_once()
    assert len(bills) == 4
    assert [b.id for b in bills] == [
        "47qAXb6fIm2zOKkLzMro",
        "UIUZtnPQvnbFnB0ozvJh",
        "qcCK3SzECmaZAGRrHjaC",
        "BeKy5Mo4jkmdfPGYpTxZ",
    ]
    assert bills[0].date == "4 Avr. 04"
    assert bills[0].status == "En attente"


@pytest.mark.asyncio
async def test_get_bills_does_not_touch_store_records(bills_data, mock_store, navigate):
    container = Bills(Document(), navigate, store=mock_store)
    await container.get_bills()
    assert bills_data[0]["date"] == "2004-04-04"
    assert bills_data[0]["status"] == "pending"


@pytest.mark.asyncio
async def test_get_bills_keeps_corrupted_date_and_logs(bills_data, mock_store, navigate, caplog):
    corrupted = {"id": "corrupted1", "date": "corrupted_date", "status": "pending"}
    mock_store.bills.return_value.list = AsyncMock(return_value=[corrupted] + bills_data)
    container = Bills(Document(), navigate, store=mock_store)

    with caplog.at_level(logging.WARNING, logger="billed.containers.bills"):
        bills = await container.get_bills()

    assert len(bills) == 5
    bad = next(b for b in bills if b.id == "corrupted1")
    assert bad.date == "corrupted_date"
    assert bad.status == "En attente"
    assert [b.date for b in bills if b.id != "corrupted1"] == [
        "4 Avr. 04", "3 Mar. 03", "2 Fév. 02", "1 Jan. 01",
    ]
    logged = [r for r in caplog.records if getattr(r, "bill", None)]
    assert logged and logged[0].bill["id"] == "corrupted1"


@pytest.mark.asyncio
async def test_get_bills_without_store_is_empty(navigate):
    container = Bills(Document(), navigate, store=None)
    assert await container.get_bills() == []


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [404, 500])
async def test_get_bills_propagates_store_errors(mock_store, navigate, status_code):
    mock_store.bills.return_value.list = AsyncMock(
        side_effect=StoreError(f"Erreur {status_code}", status_code=status_code)
    )
    container = Bills(Document(), navigate, store=mock_store)

    with pytest.raises(StoreError) as exc_info:
        await container.get_bills()

    assert exc_info.value.status_code == status_code
    assert exc_info.value.is_client_error == (status_code == 404)
    assert exc_info.value.is_server_error == (status_code == 500)


def test_validate_bills_keeps_odd_records_and_skips_non_records(caplog):
    bills = validate_bills([{"id": "ok", "amount": 10}, {"id": "odd", "amount": "lots"}, "garbage"])

    assert [b.id for b in bills] == ["ok", "odd"]
    assert bills[1].amount == "lots"
    assert "Keeping unvalidated bill record" in caplog.text


def test_display_bills_can_keep_raw_status():
    shown = display_bills([Bill(id="a", date="2002-02-02", status="refused")], status_labels=False)
    assert shown[0].status == "refused"
    assert shown[0].date == "2 Fév. 02"


@pytest.mark.asyncio
async def test_get_bills_keeps_records_with_unexpected_values(bills_data, mock_store, navigate):
    odd = [
        {"id": "nullstatus", "date": "2005-05-05", "status": None},
        {"id": "intdate", "date": 20060606, "status": "pending"},
        {"id": "badamount", "date": "2000-01-01", "amount": "lots", "type": ["Transports"]},
    ]
    mock_store.bills.return_value.list = AsyncMock(return_value=bills_data + odd)
    container = Bills(Document(), navigate, store=mock_store)

    bills = await container.get_bills()

    assert len(bills) == 7
    by_id = {b.id: b for b in bills}
    assert by_id["nullstatus"].date == "5 Mai. 05"
    assert by_id["nullstatus"].status is None
    assert by_id["intdate"].date == "20060606"
    assert by_id["badamount"].amount == "lots"
    assert by_id["badamount"].date == "1 Jan. 00"
    # Unparseable dates go last
    assert bills[-1].id == "intdate"


@pytest.mark.asyncio
async def test_page_renders_records_with_unexpected_values(mock_store, navigate):
    mock_store.bills.return_value.list = AsyncMock(
        return_value=[{"id": "x", "date": "2001-01-01", "name": 42, "type": ["Transports"]}]
    )
    bills = await Bills(Document(), navigate, store=mock_store).get_bills()

    document = Document(bills_page(data=bills))

    cells = [td.text_content for td in document.get_by_test_id("tbody").get_by_tag("td")]
    assert cells[1] == "42"
    assert cells[2] == "1 Jan. 01"
