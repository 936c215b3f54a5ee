"""Integration tests: store client against the local bills API, and the full UI flow."""

import pytest
from httpx import ASGITransport, AsyncClient

from billed.api.bills_api import create_app
from billed.api.repository import InMemoryRepository
from billed.containers.new_bill import FormState
from billed.core.exceptions import StoreError, error_message
from billed.models.enums import RoutePath
from billed.router import Router
from billed.schemas.bill import FilePayload, UploadedFile
from billed.services.session_storage import MemorySessionStorage, load_session
from billed.services.store import ApiStore
from billed.ui.dom import Document, change, click, submit

PASSWORD = "azerty"
JPEG = UploadedFile(name="facture.jpg", content_type="image/jpeg", content=b"\xff\xd8\xff\xe0jpeg")


@pytest.fixture
def repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
async def api_client(repository):
    client = AsyncClient(transport=ASGITransport(app=create_app(repository)), base_url="http://test")
    yield client
    await client.aclose()


@pytest.fixture
def api_storage() -> MemorySessionStorage:
    return MemorySessionStorage()


@pytest.fixture
def api_store(api_client, api_storage) -> ApiStore:
    return ApiStore("http://test", api_storage, client=api_client)


async def _register(store: ApiStore, storage: MemorySessionStorage, email: str, role: str = "Employee") -> None:
    await store.users().create(data={"type": role, "name": email.split("@")[0], "email": email, "password": PASSWORD})
    storage.set_item("jwt", await store.login(email, PASSWORD))


@pytest.mark.asyncio
async def test_health(api_client):
    resp = await api_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_register_then_login(api_store):
    created = await api_store.users().create(
        data={"type": "Employee", "name": "jane", "email": "jane@test.tld", "password": PASSWORD}
    )
    assert created == {"type": "Employee", "name": "jane", "email": "jane@test.tld"}

    token = await api_store.login("jane@test.tld", PASSWORD)
    assert token


@pytest.mark.asyncio
async def test_duplicate_registration_conflicts(api_store, api_storage):
    await _register(api_store, api_storage, "jane@test.tld")

    with pytest.raises(StoreError) as exc_info:
        await api_store.users().create(data={"email": "jane@test.tld", "password": PASSWORD})
    assert exc_info.value.status_code == 409
    assert exc_info.value.is_client_error


@pytest.mark.asyncio
async def test_login_with_wrong_password(api_store, api_storage):
    await _register(api_store, api_storage, "jane@test.tld")

    with pytest.raises(StoreError) as exc_info:
        await api_store.login("jane@test.tld", "wrong")
    assert exc_info.value.status_code == 401
    assert str(exc_info.value) == "Invalid credentials"


@pytest.mark.asyncio
async def test_list_without_token_is_unauthorized(api_store):
    with pytest.raises(StoreError) as exc_info:
        await api_store.bills().list()
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_upload_update_and_list(api_store, api_storage, repository):
    await _register(api_store, api_storage, "jane@test.tld")

    uploaded = await api_store.bills().create(
        data=FilePayload(file=JPEG, email="jane@test.tld"), headers={"noContentType": True}
    )
    key = uploaded["key"]
    assert uploaded["fileUrl"].endswith(f"/{key}/facture.jpg")
    assert repository.files[key].content == JPEG.content

    updated = await api_store.bills().update(
        data={"name": "Vol Paris Londres", "amount": 348, "date": "2022-04-08", "status": "pending"},
        selector=key,
    )
    assert updated["name"] == "Vol Paris Londres"
    assert updated["fileName"] == "facture.jpg"

    bills = await api_store.bills().list()
    assert len(bills) == 1
    assert bills[0]["id"] == key
    assert bills[0]["email"] == "jane@test.tld"


@pytest.mark.asyncio
async def test_update_without_key_creates_bill(api_store, api_storage):
    await _register(api_store, api_storage, "jane@test.tld")

    created = await api_store.bills().update(data={"name": "Taxi", "date": "2022-01-02"})

    assert created["id"]
    assert created["email"] == "jane@test.tld"


@pytest.mark.asyncio
async def test_upload_rejects_other_file_types(api_store, api_storage):
    await _register(api_store, api_storage, "jane@test.tld")
    pdf = UploadedFile(name="facture.pdf", content_type="application/pdf", content=b"%PDF")

    with pytest.raises(StoreError) as exc_info:
        await api_store.bills().create(data=FilePayload(file=pdf), headers={"noContentType": True})
    assert exc_info.value.status_code == 400
    assert str(exc_info.value) == "Invalid file type"


@pytest.mark.asyncio
async def test_update_unknown_bill_is_not_found(api_store, api_storage):
    await _register(api_store, api_storage, "jane@test.tld")

    with pytest.raises(StoreError) as exc_info:
        await api_store.bills().update(data={"name": "x"}, selector="missing")
    assert exc_info.value.status_code == 404
    assert error_message(exc_info.value) == "Erreur 404 : Bill not found"


@pytest.mark.asyncio
async def test_employees_see_only_their_bills(api_store, api_storage):
    await _register(api_store, api_storage, "jane@test.tld")
    await api_store.bills().create(data={"name": "Jane's", "date": "2022-01-01"})
    await _register(api_store, api_storage, "john@test.tld")
    await api_store.bills().create(data={"name": "John's", "date": "2022-01-02"})

    assert [b["name"] for b in await api_store.bills().list()] == ["John's"]

    await _register(api_store, api_storage, "boss@test.tld", role="Admin")
    assert {b["name"] for b in await api_store.bills().list()} == {"Jane's", "John's"}


@pytest.mark.asyncio
async def test_uploaded_proof_is_served(api_store, api_storage, api_client):
    await _register(api_store, api_storage, "jane@test.tld")
    uploaded = await api_store.bills().create(data=FilePayload(file=JPEG), headers={"noContentType": True})

    resp = await api_client.get(f"/public/{uploaded['key']}/facture.jpg")

    assert resp.status_code == 200
    assert resp.content == JPEG.content
    assert resp.headers["content-type"] == "image/jpeg"


@pytest.mark.asyncio
async def test_employee_flow_from_login_to_new_bill(api_store, api_storage):
    document = Document()
    router = Router(document, api_storage, store=api_store)
    router.start()
    assert router.current_path == RoutePath.LOGIN.value

    # Unknown user: registered on the fly, then signed in
    change(document.get_by_test_id("employee-email-input"), value="jane@test.tld")
    change(document.get_by_test_id("employee-password-input"), value=PASSWORD)
    submit(document.get_by_test_id("form-employee"))
    await document.settle()

    assert router.current_path == RoutePath.BILLS.value
    assert load_session(api_storage).email == "jane@test.tld"
    assert document.get_by_test_id("tbody").get_by_tag("tr") == []

    click(document.get_by_test_id("btn-new-bill"))
    assert router.current_path == RoutePath.NEW_BILL.value

    change(document.get_by_test_id("file"), files=[JPEG])
    await document.settle()
    change(document.get_by_test_id("expense-name"), value="Vol Paris Londres")
    change(document.get_by_test_id("datepicker"), value="2022-04-08")
    change(document.get_by_test_id("amount"), value="348")
    change(document.get_by_test_id("vat"), value="70")
    submit(document.get_by_test_id("form-new-bill"))
    await document.settle()

    assert router.current_path == RoutePath.BILLS.value
    rows = document.get_by_test_id("tbody").get_by_tag("tr")
    assert len(rows) == 1
    cells = [td.text_content for td in rows[0].get_by_tag("td")]
    assert cells[1] == "Vol Paris Londres"
    assert cells[2] == "8 Avr. 22"
    assert cells[4] == "En attente"
    assert document.get_by_test_id("icon-eye").get_attribute("data-bill-url").endswith("/facture.jpg")

    bills = await api_store.bills().list()
    assert bills[0]["pct"] == 20
    assert bills[0]["fileName"] == "facture.jpg"


@pytest.mark.asyncio
async def test_rejected_file_is_not_uploaded(api_store, api_storage, repository):
    await _register(api_store, api_storage, "jane@test.tld")
    api_storage.set_item("user", '{"type": "Employee", "email": "jane@test.tld", "status": "connected"}')
    document = Document()
    router = Router(document, api_storage, store=api_store)
    router.navigate(RoutePath.NEW_BILL)

    file_input = document.get_by_test_id("file")
    change(file_input, files=[UploadedFile(name="notes.txt", content_type="text/plain")])
    await document.settle()

    assert file_input.value == ""
    assert repository.bills == {}
    assert repository.files == {}
