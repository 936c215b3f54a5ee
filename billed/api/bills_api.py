"""
Local bills API.

In-memory implementation of the HTTP surface the store client talks to.
Serves previews (`billed serve`) and integration tests through
httpx.ASGITransport. Error bodies are {"message": ...}.
"""

import logging
from typing import Any, Dict, Optional
from uuid import uuid4

from fastapi import APIRouter, Body, Depends, FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from billed.api.deps import get_current_user, get_repository
from billed.api.repository import InMemoryRepository, StoredFile, UserRecord
from billed.config import settings
from billed.core.security import create_access_token, get_password_hash, verify_password
from billed.models.enums import BillStatus
from billed.schemas.auth import LoginRequest, UserCreate, UserResponse
from billed.schemas.bill import Bill

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/auth/login", tags=["Authentication"])
async def login(
    credentials: LoginRequest,
    repository: InMemoryRepository = Depends(get_repository),
) -> Dict[str, str]:
    user = repository.users.get(credentials.email)
    if user is None or not verify_password(credentials.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return {"jwt": create_access_token(user.email)}


@router.post("/users", status_code=status.HTTP_201_CREATED, response_model=UserResponse, tags=["Users"])
async def create_user(
    user_in: UserCreate,
    repository: InMemoryRepository = Depends(get_repository),
) -> Any:
    if user_in.email in repository.users:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists")
    repository.users[user_in.email] = UserRecord(
        email=user_in.email,
        name=user_in.name or user_in.email.split("@")[0],
        role=user_in.type,
        password_hash=get_password_hash(user_in.password),
    )
    logger.info("User registered", extra={"email": user_in.email, "role": user_in.type.value})
    return UserResponse(type=user_in.type, name=user_in.name, email=user_in.email)


@router.get("/bills", tags=["Bills"])
async def list_bills(
    current_user: UserRecord = Depends(get_current_user),
    repository: InMemoryRepository = Depends(get_repository),
) -> Any:
    return [bill.model_dump(by_alias=True) for bill in repository.bills_visible_to(current_user)]


@router.post("/bills", tags=["Bills"])
async def create_bill(
    request: Request,
    current_user: UserRecord = Depends(get_current_user),
    repository: InMemoryRepository = Depends(get_repository),
) -> Any:
    """
    Multipart (file, email): store the proof and create a draft, answer
    {fileUrl, key}. JSON: create a complete bill, answer the bill.
    """
    key = uuid4().hex
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("file")
        if not isinstance(upload, UploadFile):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing file")
        if (upload.content_type or "").lower() not in settings.ACCEPTED_FILE_TYPES:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid file type")

        file_name = upload.filename or "proof"
        repository.files[key] = StoredFile(
            name=file_name,
            content_type=upload.content_type,
            content=await upload.read(),
        )
        file_url = f"{settings.PUBLIC_FILES_URL.rstrip('/')}/{key}/{file_name}"
        repository.bills[key] = Bill(
            id=key,
            email=form.get("email") or current_user.email,
            file_url=file_url,
            file_name=file_name,
            status=BillStatus.PENDING.value,
        )
        return {"fileUrl": file_url, "key": key}

    try:
        payload = await request.json()
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON body")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON body")
    bill = Bill.model_validate({**payload, "id": key})
    if not bill.email:
        bill = bill.model_copy(update={"email": current_user.email})
    repository.bills[key] = bill
    return bill.model_dump(by_alias=True)


@router.get("/bills/{key}", tags=["Bills"])
async def get_bill(
    key: str,
    current_user: UserRecord = Depends(get_current_user),
    repository: InMemoryRepository = Depends(get_repository),
) -> Any:
    bill = repository.get_bill_for(current_user, key)
    if bill is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bill not found")
    return bill.model_dump(by_alias=True)


@router.patch("/bills/{key}", tags=["Bills"])
async def update_bill(
    key: str,
    changes: Dict[str, Any] = Body(...),
    current_user: UserRecord = Depends(get_current_user),
    repository: InMemoryRepository = Depends(get_repository),
) -> Any:
    bill = repository.get_bill_for(current_user, key)
    if bill is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bill not found")
    updated = Bill.model_validate({**bill.model_dump(by_alias=True), **changes, "id": key})
    repository.bills[key] = updated
    return updated.model_dump(by_alias=True)


@router.delete("/bills/{key}", tags=["Bills"])
async def delete_bill(
    key: str,
    current_user: UserRecord = Depends(get_current_user),
    repository: InMemoryRepository = Depends(get_repository),
) -> Any:
    if repository.get_bill_for(current_user, key) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bill not found")
    del repository.bills[key]
    repository.files.pop(key, None)
    return {"key": key}


@router.get("/public/{key}/{file_name}", tags=["Files"])
async def get_file(
    key: str,
    file_name: str,
    repository: InMemoryRepository = Depends(get_repository),
) -> Response:
    stored = repository.files.get(key)
    if stored is None or stored.name != file_name:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return Response(content=stored.content, media_type=stored.content_type)


@router.get("/health", tags=["Health"])
async def health_check() -> Dict[str, str]:
    return {"status": "healthy", "app_name": settings.APP_NAME, "version": settings.APP_VERSION}


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Validation error", extra={"url_path": request.url.path, "errors": str(exc.errors())})
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"message": "Invalid request", "detail": jsonable_encoder(exc.errors())},
    )


def create_app(repository: Optional[InMemoryRepository] = None) -> FastAPI:
    app = FastAPI(
        title=f"{settings.APP_NAME} local API",
        version=settings.APP_VERSION,
        description="In-memory bills API for previews and tests",
    )
    app.state.repository = repository or InMemoryRepository()
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(router)
    return app


app = create_app()
