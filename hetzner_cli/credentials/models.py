"""Schemas for credentials and the documents that persist them.

Persisted documents are parsed leniently: anything that does not match its
schema (missing fields, wrong types, invalid JSON upstream) is treated as
"no data" by :func:`parse_document`, never as a hard failure.

Document layouts::

    config.json           {"user": "alice", "password": "..."}
    cloud-contexts.json   {"active": "prod",
                           "profiles": {"prod": {"name": "prod"},
                                        "lab": {"name": "lab", "token": "..."}}}
"""

from __future__ import annotations

from typing import Any, TypeVar

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, model_validator

from hetzner_cli.enums import CredentialSource

log = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_document(model: type[ModelT], data: Any) -> ModelT | None:
    """Validate ``data`` against ``model``, returning None when it does not fit."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        log.debug("document_rejected", schema=model.__name__, errors=e.error_count())
        return None


class CredentialSet(BaseModel):
    """Robot web-service username and password."""

    model_config = ConfigDict(frozen=True)

    user: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1, repr=False)


class ResolvedCredentials(CredentialSet):
    """A credential set tagged with the backend it came from."""

    source: CredentialSource = CredentialSource.NONE

    def credentials(self) -> CredentialSet:
        """Drop the source tag."""
        return CredentialSet(user=self.user, password=self.password)


class StoredCredentials(BaseModel):
    """Contents of ``config.json``; both fields are optional on disk."""

    user: str | None = None
    password: str | None = Field(default=None, repr=False)

    def to_credentials(self) -> CredentialSet | None:
        """Return a credential set only if both fields are non-empty."""
        if self.user and self.password:
            return CredentialSet(user=self.user, password=self.password)
        return None


class ContextEntry(BaseModel):
    """One named cloud context.

    Inside a registry document the map key is authoritative: ``name`` is
    filled in from it on load. ``token`` is only present when the keychain
    could not store the token at creation time.
    """

    name: str = Field(..., min_length=1)
    token: str | None = Field(default=None, repr=False)

    @property
    def has_inline_token(self) -> bool:
        return self.token is not None


class ContextsDocument(BaseModel):
    """Contents of ``cloud-contexts.json``.

    Older releases stored the map under ``contexts``; it is accepted on read
    and always written back as ``profiles``.
    """

    model_config = ConfigDict(populate_by_name=True)

    active: str | None = None
    profiles: dict[str, ContextEntry] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("profiles", "contexts"),
    )

    @model_validator(mode="before")
    @classmethod
    def salvage_profiles(cls, data: Any) -> Any:
        """Key every entry by its map key; drop only the entries that do not validate.

        A malformed entry never hides the valid ones, so a later save keeps
        their inline tokens.
        """
        if not isinstance(data, dict):
            return data

        data = dict(data)
        if not isinstance(data.get("active"), str):
            data["active"] = None

        key = next((k for k in ("profiles", "contexts") if k in data), None)
        if key is None or not isinstance(data[key], dict):
            return data

        profiles: dict[str, ContextEntry] = {}
        for name, raw in data[key].items():
            entry = parse_document(ContextEntry, {**raw, "name": name} if isinstance(raw, dict) else raw)
            if entry is None:
                log.warning("context_entry_dropped", context=name)
                continue
            profiles[name] = entry
        data[key] = profiles
        return data

    @model_validator(mode="after")
    def repair_active(self) -> ContextsDocument:
        """Point ``active`` at an existing profile, or clear it."""
        if self.active is not None and self.active not in self.profiles:
            self.active = self.first_name()
        return self

    def first_name(self) -> str | None:
        return next(iter(self.profiles), None)

    def to_document(self) -> dict[str, Any]:
        """Serialize for the file store, omitting absent inline tokens."""
        return {
            "active": self.active,
            "profiles": {name: entry.model_dump(exclude_none=True) for name, entry in self.profiles.items()},
        }


class ContextSummary(BaseModel):
    """Projection of a context for listings."""

    model_config = ConfigDict(frozen=True)

    name: str
    active: bool
