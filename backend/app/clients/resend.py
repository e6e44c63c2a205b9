"""
LoveStack Backend — Resend Email Client
=========================================

What:  Async wrapper around the `resend` SDK's Emails.send().
Why:   Transactional email is delegated to Resend; delivery, queuing and
       retries are theirs, not ours.
How:   The SDK is synchronous, so each send runs in a worker thread. A
       rejection (ResendError) comes back as an EmailResult error carrying
       Resend's own fields ({statusCode, name, message}). Anything else
       (DNS, timeout) propagates and is handled by the caller.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import anyio
import resend
from resend.exceptions import ResendError

logger = logging.getLogger(__name__)


@dataclass
class EmailResult:
    """Either Resend's acknowledgement (`data`, e.g. {"id": ...}) or its error payload."""

    data: Optional[Dict[str, Any]] = None
    error: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def provider_error(e: ResendError) -> Dict[str, Any]:
    return {
        "statusCode": e.code,
        "name": e.error_type,
        "message": e.message,
    }


class ResendClient:

    def __init__(self, api_key: str):
        self.api_key = api_key

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def _send(self, params: Dict[str, Any]) -> Dict[str, Any]:
        # The SDK reads its key from module state
        resend.api_key = self.api_key
        return dict(resend.Emails.send(params))

    async def send(
        self,
        *,
        sender: str,
        to: Union[str, List[str]],
        subject: str,
        html: Optional[str] = None,
        text: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> EmailResult:
        """Send one message. Exactly one provider call is made, success or not."""
        params: Dict[str, Any] = {
            "from": sender,
            "to": [to] if isinstance(to, str) else list(to),
            "subject": subject,
        }
        if html is not None:
            params["html"] = html
        if text is not None:
            params["text"] = text
        if reply_to:
            params["reply_to"] = reply_to

        try:
            data = await anyio.to_thread.run_sync(self._send, params)
        except ResendError as e:
            error = provider_error(e)
            logger.error("Resend rejected message subject=%r: %s", subject, error)
            return EmailResult(error=error)

        logger.info("Resend accepted message id=%s subject=%r", data.get("id"), subject)
        return EmailResult(data=data)
