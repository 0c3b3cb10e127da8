# -*- coding: utf-8 -*-
"""Remote profile store: identity-bound profile documents in an external store."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from copy import deepcopy
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..errors import RemoteUnavailable
from .models import RemoteProfile

logger = logging.getLogger(__name__)


class RemoteProfileStore(ABC):
    """Contract for the external profile record.

    ``fetch`` returns None for a missing profile or an unauthenticated caller.
    Network and auth failures surface as ``RemoteUnavailable``.
    """

    @abstractmethod
    async def fetch(self, user_id: str) -> Optional[RemoteProfile]:
        raise NotImplementedError

    @abstractmethod
    async def update(self, user_id: str, partial: Dict[str, Any]) -> bool:
        raise NotImplementedError


class InMemoryProfileStore(RemoteProfileStore):
    """Dict-backed store for local development when no document store is configured."""

    def __init__(self, documents: Optional[Dict[str, Dict[str, Any]]] = None, *, authenticated: bool = True) -> None:
        self.documents: Dict[str, Dict[str, Any]] = deepcopy(documents) if documents else {}
        self.authenticated = authenticated

    async def fetch(self, user_id: str) -> Optional[RemoteProfile]:
        if not self.authenticated:
            logger.info("No authenticated user; skipping profile fetch")
            return None
        document = self.documents.get(user_id)
        if document is None:
            return None
        try:
            return RemoteProfile.from_document(document)
        except PydanticValidationError as exc:
            raise RemoteUnavailable(f"Unusable profile document: {exc.error_count()} error(s)") from exc

    async def update(self, user_id: str, partial: Dict[str, Any]) -> bool:
        if not self.authenticated:
            raise RemoteUnavailable("No authenticated user")
        document = self.documents.get(user_id)
        if document is None:
            return False
        document.update(partial)
        return True


class HttpProfileStore(RemoteProfileStore):
    """Profile documents served over REST: ``{base_url}/{collection}/{user_id}``.

    GET returns the document (bare or wrapped in ``{"data": ...}``), PATCH
    merges a partial document. Requests carry a bearer token; without one
    the caller counts as unauthenticated.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        collection: str = "users",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.collection = collection.strip("/")
        self.timeout = timeout
        self._transport = transport

    def _url(self, user_id: str) -> str:
        return f"{self.base_url}/{self.collection}/{quote(user_id, safe='')}"

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}", "Accept": "application/json"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, follow_redirects=True, transport=self._transport)

    async def fetch(self, user_id: str) -> Optional[RemoteProfile]:
        if not self.token:
            logger.info("No profile store credentials; skipping profile fetch")
            return None
        url = self._url(user_id)
        try:
            async with self._client() as client:
                resp = await client.get(url, headers=self._headers())
        except httpx.HTTPError as exc:
            raise RemoteUnavailable(f"Profile fetch failed: {exc}") from exc

        if resp.status_code == 404:
            return None
        if resp.status_code in (401, 403):
            logger.warning("Profile store rejected credentials (HTTP %s)", resp.status_code)
            return None
        if resp.status_code >= 400:
            raise RemoteUnavailable(f"Profile fetch failed: HTTP {resp.status_code}")

        try:
            body = resp.json()
        except ValueError as exc:
            raise RemoteUnavailable(f"Profile store returned invalid JSON: {exc}") from exc
        document = body.get("data") if isinstance(body, dict) and isinstance(body.get("data"), dict) else body
        if not isinstance(document, dict):
            raise RemoteUnavailable(f"Unexpected profile payload: {type(document).__name__}")
        try:
            return RemoteProfile.from_document(document)
        except PydanticValidationError as exc:
            raise RemoteUnavailable(f"Unusable profile document: {exc.error_count()} error(s)") from exc

    async def update(self, user_id: str, partial: Dict[str, Any]) -> bool:
        if not self.token:
            raise RemoteUnavailable("No authenticated user")
        url = self._url(user_id)
        try:
            async with self._client() as client:
                resp = await client.patch(url, json=partial, headers=self._headers())
        except httpx.HTTPError as exc:
            raise RemoteUnavailable(f"Profile update failed: {exc}") from exc

        if resp.status_code == 404:
            return False
        if resp.status_code in (401, 403):
            raise RemoteUnavailable(f"Profile store rejected credentials (HTTP {resp.status_code})")
        if resp.status_code >= 400:
            raise RemoteUnavailable(f"Profile update failed: HTTP {resp.status_code}")
        return True
