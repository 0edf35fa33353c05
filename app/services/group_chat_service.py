import logging

import httpx

import config

logger = logging.getLogger(__name__)


class GroupChatClient:
    """
    Client for the group chat bridge.

    The bridge owns the paired chat session; this service only posts text to a
    group through its HTTP API.
    """

    def __init__(
        self,
        base_url: str = None,
        api_token: str = None,
        timeout: float = None,
        transport: httpx.AsyncBaseTransport = None,
    ):
        self.base_url = (base_url or config.GROUP_CHAT_API_URL).rstrip("/")
        self.api_token = api_token if api_token is not None else config.GROUP_CHAT_API_TOKEN
        self.timeout = timeout or config.NOTIFICATION_TIMEOUT_SECONDS
        self.transport = transport

    def _headers(self) -> dict:
        if not self.api_token:
            return {}
        return {"Authorization": f"Bearer {self.api_token}"}

    async def send_to_group(self, group_id: str, text: str) -> dict:
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        ) as client:
            response = await client.post(
                f"/api/groups/{group_id}/messages",
                json={"message": text},
                headers=self._headers(),
            )
            response.raise_for_status()
            result = response.json() if response.content else {}

        logger.info("Group message sent to %s (%d chars)", group_id, len(text))
        return result
