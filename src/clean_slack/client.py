"""Funções para interação com a API Web do Slack."""

import logging
from typing import Any, Iterable, Mapping

from slack_sdk.web.async_client import AsyncWebClient

from .models import Channel, ChannelKind, FileRecord, Identity, Message, Page

logger = logging.getLogger(__name__)

CONVERSATION_KINDS = (
    ChannelKind.PRIVATE_CHANNEL,
    ChannelKind.GROUP_DM,
    ChannelKind.DIRECT_MESSAGE,
)


def classify_conversation(raw: Mapping[str, Any]) -> ChannelKind | None:
    """Traduz as flags is_im/is_mpim/is_private do Slack em ChannelKind.

    Returns:
        O tipo da conversa, ou None se não for nenhum dos tipos tratados.
    """
    if raw.get("is_im"):
        return ChannelKind.DIRECT_MESSAGE
    if raw.get("is_mpim"):
        return ChannelKind.GROUP_DM
    if raw.get("is_private"):
        return ChannelKind.PRIVATE_CHANNEL
    return None


def _next_cursor(response: Mapping[str, Any]) -> str | None:
    metadata = response.get("response_metadata") or {}
    return metadata.get("next_cursor") or None


class SlackWorkspace:
    """Cliente do workspace com operações tipadas de listagem e remoção.

    Converte as respostas cruas do ``AsyncWebClient`` nos modelos do projeto.
    Erros da API (inclusive rate limit) sobem como ``SlackApiError``.
    """

    def __init__(self, client: AsyncWebClient) -> None:
        self.client = client

    @classmethod
    def from_token(cls, token: str) -> "SlackWorkspace":
        return cls(AsyncWebClient(token=token))

    async def list_members(self) -> list[Identity]:
        """Lista os membros do workspace (chamada única, sem paginação)."""
        response = await self.client.users_list()
        return [
            Identity(id=m["id"], display_name=m.get("name") or "")
            for m in response.get("members") or []
        ]

    async def list_conversations(
        self, kinds: Iterable[ChannelKind], cursor: str | None = None
    ) -> Page[Channel]:
        """Lista uma página de conversas dos tipos informados."""
        response = await self.client.conversations_list(
            types=",".join(k.value for k in kinds),
            cursor=cursor,
        )

        channels = []
        for raw in response.get("channels") or []:
            kind = classify_conversation(raw)
            if kind is None:
                logger.debug("Conversa de tipo não tratado ignorada: %s", raw.get("id"))
                continue
            channels.append(
                Channel(
                    id=raw["id"],
                    name=raw.get("name") or "",
                    kind=kind,
                    peer_user_id=raw.get("user") if kind is ChannelKind.DIRECT_MESSAGE else None,
                )
            )
        return Page(channels, _next_cursor(response))

    async def list_history(self, channel_id: str, cursor: str | None = None) -> Page[Message]:
        """Lista uma página do histórico de uma conversa."""
        response = await self.client.conversations_history(channel=channel_id, cursor=cursor)

        messages = [
            Message(
                channel_id=channel_id,
                timestamp=raw["ts"],
                author_id=raw.get("user") or "",
                text=raw.get("text") or "",
            )
            for raw in response.get("messages") or []
        ]
        next_cursor = _next_cursor(response) if response.get("has_more") else None
        return Page(messages, next_cursor)

    async def list_files(self, owner_id: str, cursor: str | None = None) -> Page[FileRecord]:
        """Lista uma página de arquivos do usuário.

        O files.list do Slack pagina por número de página; o cursor aqui é o
        número da próxima página em forma de string.
        """
        page = int(cursor) if cursor else 1
        response = await self.client.files_list(user=owner_id, page=page)

        files = [
            FileRecord(
                id=raw["id"],
                name=raw.get("name") or raw.get("title") or "",
                owner_id=raw.get("user") or owner_id,
                created=int(raw.get("created") or 0),
            )
            for raw in response.get("files") or []
        ]

        paging = response.get("paging") or {}
        pages = int(paging.get("pages") or 1)
        next_cursor = str(page + 1) if page < pages else None
        return Page(files, next_cursor)

    async def delete_message(self, channel_id: str, timestamp: str) -> tuple[str, str]:
        """Apaga uma mensagem e retorna (canal, ts) confirmados pelo Slack."""
        response = await self.client.chat_delete(channel=channel_id, ts=timestamp)
        return response.get("channel") or channel_id, response.get("ts") or timestamp

    async def delete_file(self, file_id: str) -> None:
        """Apaga um arquivo."""
        await self.client.files_delete(file=file_id)
