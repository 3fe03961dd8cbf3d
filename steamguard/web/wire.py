"""
Response shapes returned by the Steam endpoints.

These models only exist to turn raw bodies into typed values; nothing outside
the linker and the time synchronizer should depend on them. Unknown fields are
ignored, missing required fields make the whole body unusable.
"""

from __future__ import annotations

from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class _Wire(BaseModel):
    model_config = ConfigDict(extra="ignore")


class AddAuthenticatorPayload(_Wire):
    status: int
    shared_secret: Optional[str] = Field(default=None, repr=False)
    serial_number: Optional[str] = None
    revocation_code: Optional[str] = Field(default=None, repr=False)
    uri: Optional[str] = Field(default=None, repr=False)
    server_time: Optional[int] = None
    account_name: Optional[str] = None
    token_gid: Optional[str] = None
    identity_secret: Optional[str] = Field(default=None, repr=False)
    secret_1: Optional[str] = Field(default=None, repr=False)


class AddAuthenticatorResponse(_Wire):
    response: AddAuthenticatorPayload


class FinalizePayload(_Wire):
    # Steam omits status on plain success
    status: int = 0
    server_time: int = 0
    want_more: bool = False
    # absent on some rejections; status decides those
    success: bool = False


class FinalizeResponse(_Wire):
    response: FinalizePayload


class QueryTimePayload(_Wire):
    server_time: int


class QueryTimeResponse(_Wire):
    response: QueryTimePayload


class PhoneAjaxResponse(_Wire):
    success: bool


class HasPhoneResponse(_Wire):
    has_phone: bool


W = TypeVar("W", bound=BaseModel)


def parse_response(model: Type[W], body: Optional[str]) -> Optional[W]:
    """
    Map a raw body onto `model`; `None` for absent, non-JSON or incomplete bodies.
    """
    if body is None:
        return None
    try:
        return model.model_validate_json(body)
    except ValidationError:
        return None
