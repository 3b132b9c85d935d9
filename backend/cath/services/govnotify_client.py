from __future__ import annotations

import base64
import time
from typing import Any, Dict, Optional

import httpx
import jwt

from cath.core.config import settings
from cath.core.logger import logger
from cath.utils.exceptions import NotifyError


class GovNotifyClient:
    """Minimal GOV.UK Notify REST client (email only)."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_key = (api_key if api_key is not None else settings.notify_api_key).strip()
        self.base_url = (base_url or settings.GOVUK_NOTIFY_BASE_URL).rstrip("/")
        self.transport = transport

    @property
    def service_id(self) -> str:
        # key layout: <name>-<service id (36)>-<secret (36)>
        return self.api_key[-73:-37]

    @property
    def secret_key(self) -> str:
        return self.api_key[-36:]

    def _auth_header(self) -> str:
        if len(self.api_key) < 74:
            raise NotifyError("GOV.UK Notify API key is not configured")
        token = jwt.encode(
            {"iss": self.service_id, "iat": int(time.time())},
            self.secret_key,
            algorithm="HS256",
        )
        return f"Bearer {token}"

    @staticmethod
    def prepare_upload(data: bytes, filename: Optional[str] = None, confirm_email_before_download: bool = False,
                       retention_period: str = "78 weeks") -> Dict[str, Any]:
        """link_to_file personalisation value for an attached document"""
        upload: Dict[str, Any] = {
            "file": base64.b64encode(data).decode("ascii"),
            "confirm_email_before_download": confirm_email_before_download,
            "retention_period": retention_period,
        }
        if filename:
            upload["filename"] = filename
        return upload

    def send_email(
        self,
        template_id: str,
        email_address: str,
        personalisation: Dict[str, Any],
        reference: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not template_id:
            raise NotifyError("GOV.UK Notify template id is not configured")

        payload: Dict[str, Any] = {
            "email_address": email_address,
            "template_id": template_id,
            "personalisation": personalisation,
        }
        if reference:
            payload["reference"] = reference

        headers = {
            "Authorization": self._auth_header(),
            "Content-Type": "application/json",
        }
        url = f"{self.base_url}/v2/notifications/email"
        try:
            with httpx.Client(timeout=settings.GOVUK_NOTIFY_TIMEOUT_SECONDS, transport=self.transport) as client:
                resp = client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise NotifyError(f"GOV.UK Notify request failed: {e}") from e

        if resp.status_code >= 400:
            raise NotifyError(
                f"GOV.UK Notify rejected email: {resp.status_code} {resp.text[:200]}",
                status_code=resp.status_code,
            )

        body = resp.json()
        logger.info("GOV.UK Notify accepted notification %s", body.get("id"))
        return body
