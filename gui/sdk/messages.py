"""Messages Client — publish through the HTTP adapter, read from the reader.

Invariants:
    - A channel name is "<channel_id>[.<subtopic.parts>]"; the subtopic becomes
      URL path segments on publish and a ?subtopic= query on read
    - Publishing always authenticates with "Thing <key>"
    - Both calls are data-plane: a 403 maps to PERMISSION_DENIED
"""

from urllib.parse import quote

from gui.core.domain_types import THING_PREFIX, ContentType
from gui.core.errors import SDKError, SDKErrorKind
from gui.sdk.models import Message, Page
from gui.sdk.transport import ResourceClient, path_segment

CHANNELS_ENDPOINT = "channels"


def split_channel_name(channel_name: str) -> tuple[str, str]:
    """Return (channel_id, dotted subtopic) for a channel name."""
    channel_id, _, subtopic = channel_name.partition(".")
    return channel_id, subtopic


class MessagesClient(ResourceClient):
    """Implements MessageClient; base URL is the HTTP adapter."""

    def __init__(
        self, transport, http_adapter_url: str, reader_url: str,
        content_type: str = ContentType.SENML_JSON.value,
    ):
        super().__init__(transport, http_adapter_url)
        self._reader_url = reader_url
        self.content_type = content_type

    async def send_message(self, channel_name: str, msg: str, key: str) -> None:
        channel_id, subtopic = split_channel_name(channel_name)
        url = self._url(CHANNELS_ENDPOINT, channel_id, "messages")
        if subtopic:
            url = "/".join([url, *(path_segment(s) for s in subtopic.split("."))])
        await self._call(
            "POST", url, THING_PREFIX + key, SDKErrorKind.CREATION_FAILED,
            body=msg.encode(), headers={"Content-Type": self.content_type},
            expected=(202,), data_plane=True,
        )

    async def read_messages(self, channel_name: str, token: str) -> Page[Message]:
        channel_id, subtopic = split_channel_name(channel_name)
        url = f"{self._reader_url}/{CHANNELS_ENDPOINT}/{path_segment(channel_id)}/messages"
        if subtopic:
            url = f"{url}?subtopic={quote(subtopic, safe='')}"
        _, body = await self._call(
            "GET", url, token, SDKErrorKind.LIST_FAILED,
            headers={"Content-Type": self.content_type}, data_plane=True,
        )
        return Page[Message].from_body(body, "messages")

    def set_content_type(self, content_type: str) -> None:
        if content_type not in {ct.value for ct in ContentType}:
            raise SDKError(
                SDKErrorKind.UPDATE_FAILED, 415,
                f"unsupported content type: {content_type}",
            )
        self.content_type = content_type
