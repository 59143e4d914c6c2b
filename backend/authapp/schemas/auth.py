"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import (
    EXCLUDE,
    Schema,
    ValidationError,
    fields,
    post_load,
    validate,
    validates_schema,
)

from authapp.services.auth.dto import Provider, SignInIn, SignUpIn

PROVIDERS = [p.value for p in Provider]


def _dotted_domain(value: str) -> None:
    # users.email only accepts addresses whose domain has a dot
    if "." not in value.rsplit("@", 1)[-1]:
        raise ValidationError("Not a valid email address.")


def _not_blank(value: str) -> None:
    if not value.strip():
        raise ValidationError("Field may not be blank.")


class _ProviderSchema(Schema):
    """Shared fields for payloads discriminated by ``provider``."""

    class Meta:
        unknown = EXCLUDE

    provider = fields.String(load_default=Provider.CREDENTIAL.value, validate=validate.OneOf(PROVIDERS))
    email = fields.Email(load_default=None, validate=[validate.Length(max=64), _dotted_domain])
    password = fields.String(load_default=None, validate=validate.Length(min=6, max=128))
    token = fields.String(load_default=None, validate=validate.Length(min=1))

    @validates_schema
    def _require_provider_fields(self, data: dict[str, Any], **kwargs: Any) -> None:
        if data.get("provider") == Provider.GOOGLE.value:
            if not data.get("token"):
                raise ValidationError("Missing data for required field.", "token")
            return
        errors: dict[str, list[str]] = {}
        for name in ("email", "password"):
            if not data.get(name):
                errors[name] = ["Missing data for required field."]
        if errors:
            raise ValidationError(errors)


class SignUpSchema(_ProviderSchema):
    """Input payload for ``POST /auth/signup``."""

    name = fields.String(load_default=None, validate=[validate.Length(min=1, max=64), _not_blank])

    @post_load
    def _to_dto(self, data: dict[str, Any], **kwargs: Any) -> SignUpIn:
        provider = Provider(data["provider"])
        email = data.get("email")
        name = data["name"].strip() if data.get("name") else None
        if provider is Provider.CREDENTIAL and not name:
            # display name falls back to the email local part
            name = email.split("@")[0]
        return SignUpIn(
            provider=provider,
            email=email,
            name=name,
            password=data.get("password"),
            token=data.get("token"),
        )


class SignInSchema(_ProviderSchema):
    """Input payload for ``POST /auth/signin``."""

    @post_load
    def _to_dto(self, data: dict[str, Any], **kwargs: Any) -> SignInIn:
        return SignInIn(
            provider=Provider(data["provider"]),
            email=data.get("email"),
            password=data.get("password"),
            token=data.get("token"),
        )


class TokenResponseSchema(Schema):
    """Response payload containing an access token."""

    accessToken = fields.String(required=True, attribute="access_token")


class PrincipalSchema(Schema):
    """Response payload exposing the request principal."""

    id = fields.Integer(required=True)
    name = fields.String(required=True)
    email = fields.Email(required=True)
    image = fields.String(allow_none=True)
