from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from starlette.status import HTTP_201_CREATED

from sweetshop.api.deps import account_service_dep
from sweetshop.auth.deps import get_principal
from sweetshop.auth.models import Principal
from sweetshop.db.models import Account
from sweetshop.services.accounts import AccountService

router = APIRouter(prefix="/api/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    email: str = Field(min_length=1, max_length=256)
    name: str = Field(min_length=1, max_length=256)
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=256)
    password: str = Field(min_length=1)


class AccountOut(BaseModel):
    # password_hash is never part of the response model.
    id: uuid.UUID
    email: str
    name: str
    is_admin: bool

    @classmethod
    def from_account(cls, account: Account) -> AccountOut:
        return cls(
            id=account.id,
            email=account.identity,
            name=account.display_name,
            is_admin=account.is_admin,
        )


class AuthResponse(BaseModel):
    token: str
    user: AccountOut


@router.post("/register", response_model=AuthResponse, status_code=HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    accounts: AccountService = Depends(account_service_dep),
) -> AuthResponse:
    account = await accounts.register(
        identity=body.email, display_name=body.name, raw_password=body.password
    )
    return AuthResponse(token=accounts.issue_token(account), user=AccountOut.from_account(account))


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    accounts: AccountService = Depends(account_service_dep),
) -> AuthResponse:
    token, account = await accounts.login(identity=body.email, raw_password=body.password)
    return AuthResponse(token=token, user=AccountOut.from_account(account))


@router.get("/me", response_model=AccountOut)
async def me(principal: Principal = Depends(get_principal)) -> AccountOut:
    return AccountOut(
        id=principal.account_id,
        email=principal.identity,
        name=principal.display_name,
        is_admin=principal.is_admin,
    )
