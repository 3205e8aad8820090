"""Política de retry e paginação por cursor da API do Slack.

Todas as chamadas são sequenciais: quando o Slack responde com rate limit,
espera-se um intervalo fixo e a MESMA chamada é repetida (mesmo cursor, mesmo
item), sem perder progresso nem duplicar resultados.
"""

import logging
from typing import Awaitable, Callable, TypeVar

from slack_sdk.errors import SlackApiError

from .models import Page
from .utils import safe_sleep

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRY_DELAY = 1.0

SleepFunc = Callable[[float], Awaitable[None]]
RateLimitCallback = Callable[[str, float, int], None]


def slack_error_code(error: SlackApiError) -> str | None:
    """Código de erro da resposta do Slack (ex.: ``"ratelimited"``), se houver."""
    response = error.response
    return response.get("error") if response is not None else None


def is_rate_limited(error: BaseException) -> bool:
    """Retorna True se o erro indica rate limit do Slack."""
    if isinstance(error, SlackApiError) and slack_error_code(error) == "ratelimited":
        return True
    text = str(error).lower()
    return "rate limit" in text or "ratelimited" in text


async def call_with_retry(
    call: Callable[[], Awaitable[T]],
    *,
    sleep: SleepFunc = safe_sleep,
    delay: float = RETRY_DELAY,
    max_retries: int | None = None,
    on_ratelimit: RateLimitCallback | None = None,
    description: str = "",
) -> T:
    """Executa uma chamada à API repetindo enquanto houver rate limit.

    Args:
        call: Função sem argumentos que retorna a coroutine da chamada.
        sleep: Função de espera (injetável para testes).
        delay: Espera fixa entre tentativas, em segundos.
        max_retries: Limite de novas tentativas; None = sem limite.
        on_ratelimit: Callback chamado a cada rate limit.
                      Assinatura: (descrição, espera_em_segundos, tentativa)
        description: Texto usado nos logs.

    Returns:
        O resultado da chamada.

    Raises:
        Exception: Qualquer erro que não seja rate limit, ou o próprio erro de
            rate limit quando max_retries é atingido.
    """
    attempt = 0
    while True:
        try:
            return await call()
        except Exception as e:
            if not is_rate_limited(e):
                raise
            attempt += 1
            if max_retries is not None and attempt > max_retries:
                logger.error("Max retries atingido em '%s'.", description)
                raise
            logger.warning(
                "Rate limit em '%s'. Aguardando %ss (tentativa %s)...",
                description,
                delay,
                attempt,
            )
            if on_ratelimit is not None:
                on_ratelimit(description, delay, attempt)
            await sleep(delay)


async def collect_pages(
    fetch_page: Callable[[str | None], Awaitable[Page[T]]],
    *,
    sleep: SleepFunc = safe_sleep,
    delay: float = RETRY_DELAY,
    max_retries: int | None = None,
    on_ratelimit: RateLimitCallback | None = None,
    description: str = "",
) -> list[T]:
    """Percorre todas as páginas de uma listagem e junta os itens em ordem.

    Args:
        fetch_page: Recebe o cursor (None na primeira página) e retorna a página.
        sleep, delay, max_retries, on_ratelimit: Repassados a call_with_retry.
        description: Nome da listagem para os logs.

    Returns:
        Lista com os itens de todas as páginas.
    """
    items: list[T] = []
    cursor: str | None = None

    while True:
        page = await call_with_retry(
            lambda: fetch_page(cursor),
            sleep=sleep,
            delay=delay,
            max_retries=max_retries,
            on_ratelimit=on_ratelimit,
            description=description,
        )
        items.extend(page.items)

        if not page.next_cursor:
            return items

        cursor = page.next_cursor
        logger.debug("Próximo cursor em '%s': %s (itens: %d)", description, cursor, len(items))
