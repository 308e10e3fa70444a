from pydantic import BaseModel
from datetime import datetime


class TokenCredentials(BaseModel):
    email: str = ""
    password: str = ""


class ActivationRequest(BaseModel):
    email: str = ""


class TokenResponse(BaseModel):
    token: str
    expiry: datetime


class AuthenticationTokenResponse(BaseModel):
    authentication_token: TokenResponse
