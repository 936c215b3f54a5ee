"""
Remote store client.

Containers only rely on the `Store` protocol: `bills()` returns a resource
with async `list`, `create` and `update`. `ApiStore` implements it over
HTTP with httpx; tests substitute mocks with the same surface.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol, Union

import httpx

from billed.core.exceptions import StoreError
from billed.schemas.bill import Bill, FilePayload
from billed.services.session_storage import TOKEN_KEY, SessionStorage

logger = logging.getLogger(__name__)


class BillsResource(Protocol):
    async def list(self, headers: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]: ...

    async def create(self, data: Any, headers: Optional[Dict[str, Any]] = None) -> Dict[str, Any]: ...

    async def update(
        self, data: Any, selector: Optional[str] = None, headers: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]: ...


class Store(Protocol):
    def bills(self) -> BillsResource: ...


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        detail = body.get("message") or body.get("detail")
        if isinstance(detail, str) and detail:
            return detail
    return f"Erreur {response.status_code}"


class ApiResource:
    """One collection of the API (/bills, /users)"""

    def __init__(self, store: "ApiStore", key: str):
        self.store = store
        self.key = key

    async def select(self, selector: str, headers: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.store.request(
            "GET", f"/{self.key}/{selector}", headers=self.store.headers(headers)
        )

    async def list(self, headers: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        data = await self.store.request("GET", f"/{self.key}", headers=self.store.headers(headers))
        return list(data or [])

    async def create(self, data: Any, headers: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if isinstance(data, FilePayload):
            # Multipart: httpx sets the boundary content type itself
            headers = {**(headers or {}), "noContentType": True}
            files = {"file": (data.file.name, data.file.content, data.file.content_type)}
            form = {"email": data.email} if data.email else {}
            return await self.store.request(
                "POST", f"/{self.key}", files=files, data=form, headers=self.store.headers(headers)
            )
        return await self.store.request(
            "POST", f"/{self.key}", json=_as_json(data), headers=self.store.headers(headers)
        )

    async def update(
        self, data: Any, selector: Optional[str] = None, headers: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        if selector is None:
            return await self.create(data, headers=headers)
        return await self.store.request(
            "PATCH",
            f"/{self.key}/{selector}",
            json=_as_json(data),
            headers=self.store.headers(headers),
        )

    async def delete(self, selector: str, headers: Optional[Dict[str, Any]] = None) -> Any:
        return await self.store.request(
            "DELETE", f"/{self.key}/{selector}", headers=self.store.headers(headers)
        )


def _as_json(data: Union[Bill, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(data, Bill):
        return data.to_payload()
    return dict(data)


class ApiStore:
    """
    HTTP client for the bills API.

    Args:
        base_url: API root, e.g. http://localhost:5678
        storage: session storage holding the bearer token under "jwt"
        client: optional preconfigured httpx.AsyncClient (tests pass one
            bound to an ASGITransport)
        timeout: request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        storage: SessionStorage,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self.storage = storage
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    def headers(self, headers: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
        """Default headers, honouring the noContentType / noAuthorization flags"""
        extra = dict(headers or {})
        no_content_type = extra.pop("noContentType", False)
        no_authorization = extra.pop("noAuthorization", False)

        result: Dict[str, str] = {}
        if not no_content_type:
            result["Content-Type"] = "application/json"
        token = self.storage.get_item(TOKEN_KEY)
        if token and not no_authorization:
            result["Authorization"] = f"Bearer {token}"
        result.update({k: str(v) for k, v in extra.items()})
        return result

    async def request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise StoreError(f"Store unreachable: {e}") from e

        if response.is_error:
            logger.info(
                "Store rejected %s %s",
                method,
                url,
                extra={"status_code": response.status_code},
            )
            raise StoreError(_error_detail(response), status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise StoreError("Invalid response from store", status_code=response.status_code) from e

    def bills(self) -> ApiResource:
        return ApiResource(self, "bills")

    def users(self) -> ApiResource:
        return ApiResource(self, "users")

    async def login(self, email: str, password: str) -> Optional[str]:
        """Authenticate and return the bearer token"""
        data = await self.request(
            "POST",
            "/auth/login",
            json={"email": email, "password": password},
            headers=self.headers({"noAuthorization": True}),
        )
        return (data or {}).get("jwt")

    async def aclose(self) -> None:
        await self._client.aclose()
