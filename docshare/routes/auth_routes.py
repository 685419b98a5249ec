from typing import Literal

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, field_validator

from docshare.auth.dependencies import Identity, get_current_identity
from docshare.core.dependencies import CredentialStoreDep

router = APIRouter(tags=['auth'])

MIN_PASSWORD_LENGTH = 6


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: str
    role: Literal['teacher', 'student']

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters.')
        return value

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Full name is required.')
        return normalized


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError('Password is required.')
        return value


class UserResponse(BaseModel):
    id: int
    email: str
    full_name: str
    role: str


class AuthResponse(BaseModel):
    user: UserResponse
    token: str


@router.post('/register', response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, credential_store: CredentialStoreDep):
    return credential_store.register(
        email=data.email,
        password=data.password,
        full_name=data.full_name,
        role=data.role,
    )


@router.post('/login', response_model=AuthResponse)
def login(data: LoginRequest, credential_store: CredentialStoreDep):
    return credential_store.authenticate(data.email, data.password)


@router.get('/me')
def me(
    credential_store: CredentialStoreDep,
    identity: Identity = Depends(get_current_identity),
):
    return credential_store.get_user(identity.id)


@router.post('/logout')
def logout():
    return {'message': 'Logged out successfully.'}
