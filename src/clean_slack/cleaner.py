"""Módulo de limpeza do CleanSlack.

Contém a remoção sequencial de mensagens/arquivos e o orquestrador que
encadeia varredura, dry-run e remoção.
"""

import logging
from dataclasses import dataclass, field

from slack_sdk.errors import SlackApiError

from .client import SlackWorkspace
from .collector import collect_files, collect_messages, select_channels
from .config import DELETE_DELAY, RunConfig
from .identity import resolve_identity
from .models import FileRecord, Message, PendingSets
from .retry import RETRY_DELAY, RateLimitCallback, SleepFunc, call_with_retry, slack_error_code
from .utils import safe_sleep

logger = logging.getLogger(__name__)


async def delete_messages(
    client: SlackWorkspace,
    messages: list[Message],
    *,
    sleep: SleepFunc = safe_sleep,
    retry_delay: float = RETRY_DELAY,
    delete_delay: float = DELETE_DELAY,
    max_retries: int | None = None,
    on_ratelimit: RateLimitCallback | None = None,
) -> tuple[int, int]:
    """Apaga as mensagens uma a uma.

    Rate limit repete o mesmo item; qualquer outro erro só pula o item.

    Returns:
        Tupla (apagadas, falhas).
    """
    deleted = 0
    failed = 0

    for index, message in enumerate(messages, start=1):
        try:
            channel_id, ts = await call_with_retry(
                lambda: client.delete_message(message.channel_id, message.timestamp),
                sleep=sleep,
                delay=retry_delay,
                max_retries=max_retries,
                on_ratelimit=on_ratelimit,
                description=f"chat.delete ({message.channel_id} {message.timestamp})",
            )
        except SlackApiError as e:
            failed += 1
            logger.error(
                "Falha ao apagar: %s (mensagem: ID: %s, Texto: %s)",
                slack_error_code(e) or str(e),
                message.timestamp,
                message.text,
            )
            continue
        except Exception:
            failed += 1
            logger.exception("Erro inesperado ao apagar mensagem %s", message.timestamp)
            continue

        deleted += 1
        logger.info("[%03d] Mensagem apagada: %s %s", index, channel_id, ts)
        await sleep(delete_delay)

    return deleted, failed


async def delete_files(
    client: SlackWorkspace,
    files: list[FileRecord],
    *,
    sleep: SleepFunc = safe_sleep,
    retry_delay: float = RETRY_DELAY,
    delete_delay: float = DELETE_DELAY,
    max_retries: int | None = None,
    on_ratelimit: RateLimitCallback | None = None,
) -> tuple[int, int]:
    """Apaga os arquivos um a um (mesma política de delete_messages).

    Returns:
        Tupla (apagados, falhas).
    """
    deleted = 0
    failed = 0

    for index, slack_file in enumerate(files, start=1):
        try:
            await call_with_retry(
                lambda: client.delete_file(slack_file.id),
                sleep=sleep,
                delay=retry_delay,
                max_retries=max_retries,
                on_ratelimit=on_ratelimit,
                description=f"files.delete ({slack_file.id})",
            )
        except SlackApiError as e:
            failed += 1
            logger.error(
                "Falha ao apagar: %s (arquivo: ID: %s, Nome: %s)",
                slack_error_code(e) or str(e),
                slack_file.id,
                slack_file.name,
            )
            continue
        except Exception:
            failed += 1
            logger.exception("Erro inesperado ao apagar arquivo %s", slack_file.id)
            continue

        deleted += 1
        logger.info("[%03d] Arquivo apagado: %s %s", index, slack_file.id, slack_file.name)
        await sleep(delete_delay)

    return deleted, failed


@dataclass
class CleanResult:
    """Resumo de uma execução."""

    pending: PendingSets = field(default_factory=PendingSets)
    committed: bool = False
    messages_deleted: int = 0
    messages_failed: int = 0
    files_deleted: int = 0
    files_failed: int = 0

    def as_stats(self) -> dict[str, int | bool]:
        """Dados para a tabela de resumo."""
        stats: dict[str, int | bool] = {
            "Conversas selecionadas": len(self.pending.channels),
            "Mensagens encontradas": len(self.pending.messages),
            "Arquivos encontrados": len(self.pending.files),
            "Commit": self.committed,
        }
        if self.committed:
            stats["Mensagens apagadas"] = self.messages_deleted
            stats["Mensagens com falha"] = self.messages_failed
            stats["Arquivos apagados"] = self.files_deleted
            stats["Arquivos com falha"] = self.files_failed
        return stats


class SlackCleaner:
    """Orquestra varredura, dry-run e remoção.

    Args:
        client: Cliente do workspace (substituível por um dublê nos testes).
        config: Parâmetros da execução.
        sleep: Função de espera usada nos retries e nas pausas.
        on_ratelimit: Callback chamado ao encontrar rate limit.
                      Assinatura: (descrição, espera_em_segundos, tentativa)
    """

    def __init__(
        self,
        client: SlackWorkspace,
        config: RunConfig,
        *,
        sleep: SleepFunc = safe_sleep,
        on_ratelimit: RateLimitCallback | None = None,
    ) -> None:
        self.client = client
        self.config = config
        self.sleep = sleep
        self.on_ratelimit = on_ratelimit

    def _retry_options(self) -> dict:
        return {
            "sleep": self.sleep,
            "retry_delay": self.config.retry_delay,
            "max_retries": self.config.max_retries,
            "on_ratelimit": self.on_ratelimit,
        }

    async def scan(self) -> PendingSets:
        """Varre o workspace sem alterar nada.

        Raises:
            IdentityNotFound: Se --me não corresponder a nenhum membro.
            SlackApiError: Se alguma listagem falhar (exceto rate limit).
        """
        options = self._retry_options()

        me, users = await resolve_identity(self.client, self.config.me, **options)
        channels = await select_channels(self.client, users, self.config.pattern, **options)
        files = await collect_files(self.client, me, self.config.cutoff, **options)
        messages = await collect_messages(
            self.client, channels, me, self.config.cutoff, **options
        )

        logger.info(
            "Encontrado(s) %d mensagem(ns) e %d arquivo(s) para apagar.",
            len(messages),
            len(files),
        )
        return PendingSets(channels=channels, messages=messages, files=files)

    async def delete(self, pending: PendingSets) -> CleanResult:
        """Apaga mensagens e depois arquivos."""
        options = self._retry_options()
        options["delete_delay"] = self.config.delete_delay

        result = CleanResult(pending=pending, committed=True)
        result.messages_deleted, result.messages_failed = await delete_messages(
            self.client, pending.messages, **options
        )
        result.files_deleted, result.files_failed = await delete_files(
            self.client, pending.files, **options
        )

        logger.info(
            "Concluído. Mensagens apagadas: %d (falhas: %d), arquivos apagados: %d (falhas: %d)",
            result.messages_deleted,
            result.messages_failed,
            result.files_deleted,
            result.files_failed,
        )
        return result

    async def run(self) -> CleanResult:
        """Executa a varredura e, só com commit, a remoção."""
        pending = await self.scan()

        if not self.config.commit:
            logger.info("Dry-run: nada foi apagado. Rode novamente com --commit para apagar.")
            return CleanResult(pending=pending, committed=False)

        return await self.delete(pending)
