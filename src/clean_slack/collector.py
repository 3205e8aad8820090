"""Varredura do workspace: seleção de conversas, mensagens e arquivos.

Nada aqui altera o workspace; o resultado é usado tanto no dry-run quanto
na remoção de fato.
"""

import logging
import re
from dataclasses import replace

from .client import CONVERSATION_KINDS, SlackWorkspace
from .models import Channel, ChannelKind, Cutoff, FileRecord, Identity, Message
from .retry import RETRY_DELAY, RateLimitCallback, SleepFunc, collect_pages
from .timestamps import from_slack_timestamp
from .utils import safe_sleep

logger = logging.getLogger(__name__)


def compile_filter_pattern(terms: str | None) -> re.Pattern[str] | None:
    """Compila o filtro de nomes: ``"ace,base"`` vira ``(?i)(ace|base)``.

    Args:
        terms: Termos separados por vírgula; vazio ou None = sem filtro.

    Returns:
        Padrão compilado, ou None se não houver filtro.

    Raises:
        re.error: Se a expressão resultante for inválida.
    """
    if not terms:
        return None
    return re.compile("(" + terms.replace(",", "|") + ")", re.IGNORECASE)


def channel_matches_filter(
    channel: Channel, users: dict[str, str], pattern: re.Pattern[str] | None
) -> bool:
    """Retorna True se a conversa deve entrar na varredura.

    Sem filtro, DMs e grupos de DM entram e canais privados ficam de fora.
    Com filtro, canais e grupos de DM são comparados pelo nome e DMs pelo
    nome do outro usuário.
    """
    if channel.kind is ChannelKind.DIRECT_MESSAGE:
        if pattern is None:
            return True
        peer_name = users.get(channel.peer_user_id or "", "")
        return bool(pattern.search(peer_name))

    if pattern is None:
        return channel.kind is ChannelKind.GROUP_DM

    return bool(pattern.search(channel.name))


def message_before_cutoff(message: Message, cutoff: Cutoff | None) -> bool:
    # Inclusivo: a mensagem exatamente no corte entra
    return cutoff is None or message.timestamp <= cutoff.timestamp


def file_before_cutoff(slack_file: FileRecord, cutoff: Cutoff | None) -> bool:
    # Estrito, e sem corte nenhum arquivo entra (limite zero)
    limit = cutoff.epoch_seconds if cutoff is not None else 0
    return slack_file.created < limit


async def select_channels(
    client: SlackWorkspace,
    users: dict[str, str],
    pattern: re.Pattern[str] | None,
    *,
    sleep: SleepFunc = safe_sleep,
    retry_delay: float = RETRY_DELAY,
    max_retries: int | None = None,
    on_ratelimit: RateLimitCallback | None = None,
) -> list[Channel]:
    """Lista canais privados, grupos de DM e DMs e aplica o filtro.

    Args:
        client: Cliente do workspace.
        users: Mapa ID -> nome (para resolver o nome do outro lado das DMs).
        pattern: Filtro de nomes compilado, ou None.

    Returns:
        Conversas selecionadas, na ordem da listagem.
    """
    logger.info("Buscando conversas...")
    conversations = await collect_pages(
        lambda cursor: client.list_conversations(CONVERSATION_KINDS, cursor),
        sleep=sleep,
        delay=retry_delay,
        max_retries=max_retries,
        on_ratelimit=on_ratelimit,
        description="conversations.list",
    )

    channels = []
    for channel in conversations:
        if not channel_matches_filter(channel, users, pattern):
            logger.debug("IGNORADO (filtro): %s", channel.name or channel.id)
            continue

        channels.append(channel)
        if channel.kind is ChannelKind.DIRECT_MESSAGE:
            logger.info(
                "[%03d] DM ID: %s, Nome: %s",
                len(channels),
                channel.id,
                users.get(channel.peer_user_id or "", ""),
            )
        else:
            logger.info("[%03d] CANAL ID: %s, Nome: %s", len(channels), channel.id, channel.name)

    logger.info("Conversas selecionadas: %d de %d", len(channels), len(conversations))
    return channels


async def collect_files(
    client: SlackWorkspace,
    me: Identity,
    cutoff: Cutoff | None,
    *,
    sleep: SleepFunc = safe_sleep,
    retry_delay: float = RETRY_DELAY,
    max_retries: int | None = None,
    on_ratelimit: RateLimitCallback | None = None,
) -> list[FileRecord]:
    """Lista os arquivos do usuário criados antes do corte."""
    logger.info("Buscando arquivos...")
    files = await collect_pages(
        lambda cursor: client.list_files(me.id, cursor),
        sleep=sleep,
        delay=retry_delay,
        max_retries=max_retries,
        on_ratelimit=on_ratelimit,
        description="files.list",
    )

    if cutoff is None and files:
        logger.warning(
            "Sem --before nenhum arquivo é selecionado (%d arquivo(s) encontrados).",
            len(files),
        )

    selected = []
    for slack_file in files:
        if not file_before_cutoff(slack_file, cutoff):
            continue
        selected.append(slack_file)
        logger.info(
            "[%03d] ARQUIVO ID: %s, Nome: %s, Criado: %s",
            len(selected),
            slack_file.id,
            slack_file.name,
            slack_file.created_at.isoformat(),
        )
    return selected


async def collect_messages(
    client: SlackWorkspace,
    channels: list[Channel],
    me: Identity,
    cutoff: Cutoff | None,
    *,
    sleep: SleepFunc = safe_sleep,
    retry_delay: float = RETRY_DELAY,
    max_retries: int | None = None,
    on_ratelimit: RateLimitCallback | None = None,
) -> list[Message]:
    """Percorre o histórico das conversas e junta as minhas mensagens até o corte.

    Args:
        client: Cliente do workspace.
        channels: Conversas selecionadas.
        me: Identidade do usuário.
        cutoff: Data de corte, ou None para todas as mensagens.

    Returns:
        Mensagens a apagar, na ordem das conversas e do histórico.
    """
    to_delete: list[Message] = []

    for channel in channels:
        logger.info("Buscando mensagens de %s...", channel.name or channel.id)
        history = await collect_pages(
            lambda cursor, channel_id=channel.id: client.list_history(channel_id, cursor),
            sleep=sleep,
            delay=retry_delay,
            max_retries=max_retries,
            on_ratelimit=on_ratelimit,
            description=f"conversations.history ({channel.id})",
        )

        for message in history:
            if message.author_id != me.id or not message_before_cutoff(message, cutoff):
                continue
            message = replace(message, channel_id=channel.id)
            to_delete.append(message)
            logger.info(
                "[%03d] MSG TS: %s, Texto: %s",
                len(to_delete),
                _describe_timestamp(message.timestamp),
                message.text,
            )

    return to_delete


def _describe_timestamp(ts: str) -> str:
    try:
        return from_slack_timestamp(ts).isoformat()
    except ValueError:
        return ts
