import logging

import httpx

import config

logger = logging.getLogger(__name__)


class TwilioClient:
    """Minimal client for the Twilio Messages REST endpoint."""

    def __init__(
        self,
        account_sid: str = None,
        auth_token: str = None,
        from_number: str = None,
        base_url: str = None,
        timeout: float = None,
        transport: httpx.AsyncBaseTransport = None,
    ):
        self.account_sid = account_sid or config.TWILIO_ACCOUNT_SID
        self.auth_token = auth_token or config.TWILIO_AUTH_TOKEN
        self.from_number = from_number or config.TWILIO_PHONE_NUMBER
        self.base_url = base_url or config.TWILIO_API_URL
        self.timeout = timeout or config.NOTIFICATION_TIMEOUT_SECONDS
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    async def send_sms(self, to: str, body: str) -> dict:
        if not self.is_configured:
            raise RuntimeError("Twilio client not configured")

        payload = {"To": to, "From": self.from_number, "Body": body}

        async with httpx.AsyncClient(
            base_url=self.base_url,
            auth=(self.account_sid, self.auth_token),
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            response = await client.post(
                f"/Accounts/{self.account_sid}/Messages.json", data=payload
            )
            response.raise_for_status()
            result = response.json()

        logger.info("SMS sent to %s (sid=%s)", to, result.get("sid"))
        return result
