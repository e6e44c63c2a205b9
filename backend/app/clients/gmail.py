"""
LoveStack Backend — Gmail API Client
======================================

What:  Sends contact-form notifications through the Gmail API.
How:   google-auth credentials built from the stored OAuth refresh token;
       google-api-python-client's users.messages.send with a base64url
       RFC 822 message. The client library is synchronous, so the send runs
       in a worker thread. Every failure, including a failed token refresh
       and a message that cannot be built, raises ExternalServiceError.
"""

import base64
import logging
from email.message import EmailMessage
from email.utils import formataddr
from typing import Any, Callable, Optional

import anyio
import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from app.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"
SEND_SCOPE = "https://www.googleapis.com/auth/gmail.send"


def encode_message(message: EmailMessage) -> str:
    """base64url, as the Gmail API expects in `raw`."""
    return base64.urlsafe_b64encode(message.as_bytes()).decode("ascii")


class GmailClient:

    def __init__(
        self,
        user_email: str,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        service_factory: Optional[Callable[[Credentials], Any]] = None,
    ):
        self.user_email = user_email
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self._service_factory = service_factory or self._build_service

    @property
    def configured(self) -> bool:
        return all((self.user_email, self.client_id, self.client_secret, self.refresh_token))

    def credentials(self) -> Credentials:
        # No access token yet: the first request triggers a refresh
        return Credentials(
            token=None,
            refresh_token=self.refresh_token,
            token_uri=TOKEN_URI,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=[SEND_SCOPE],
        )

    @staticmethod
    def _build_service(credentials: Credentials) -> Any:
        return build("gmail", "v1", credentials=credentials, cache_discovery=False)

    def build_message(
        self,
        subject: str,
        html: str,
        from_name: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> EmailMessage:
        """
        A message from the mailbox owner to itself.

        Raises:
            ExternalServiceError: a header value was rejected (e.g. contains
                a line break).
        """
        message = EmailMessage()
        try:
            message["From"] = formataddr((from_name, self.user_email)) if from_name else self.user_email
            message["To"] = self.user_email
            if reply_to:
                message["Reply-To"] = reply_to
            message["Subject"] = subject
        except ValueError as e:
            raise ExternalServiceError(message="Failed to build email", details=str(e))
        message.set_content(html, subtype="html")
        return message

    def _send(self, raw: str) -> Any:
        service = self._service_factory(self.credentials())
        return service.users().messages().send(userId="me", body={"raw": raw}).execute()

    async def send(self, message: EmailMessage) -> None:
        raw = encode_message(message)
        try:
            await anyio.to_thread.run_sync(self._send, raw)
        except GoogleAuthError as e:
            raise ExternalServiceError(message="Failed to refresh access token", details=str(e))
        except HttpError as e:
            raise ExternalServiceError(
                message="Failed to send email",
                details=str(e),
                context={"status": e.resp.status},
            )
        except (httplib2.HttpLib2Error, OSError) as e:
            raise ExternalServiceError(message="Failed to reach Gmail", details=str(e))
        logger.info("Gmail notification sent: %s", message["Subject"])
