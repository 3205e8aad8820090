"""Funções utilitárias para CleanSlack."""

import asyncio
import logging
import os
from datetime import date, datetime

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "MY_SLACK_TOKEN"

BEFORE_DATE_FORMAT = "%Y%m%d"


def env_str(name: str) -> str:
    """Lê uma variável de ambiente obrigatória.

    Args:
        name: Nome da variável de ambiente.

    Returns:
        Valor da variável, sem espaços nas pontas.

    Raises:
        SystemExit: Se a variável não estiver definida ou estiver vazia.
    """
    v = os.getenv(name)
    if not v or not v.strip():
        logger.error("Variável de ambiente %s não definida", name)
        raise SystemExit(f"Faltou {name} no .env")
    if v.strip() != v:
        logger.warning("Variável de ambiente %s contém espaços em branco", name)
        v = v.strip()
    return v


def resolve_token(flag_value: str | None) -> str:
    """Retorna o token do flag --token ou, na falta dele, de MY_SLACK_TOKEN.

    Raises:
        SystemExit: Se nenhum dos dois estiver definido.
    """
    if flag_value and flag_value.strip():
        return flag_value.strip()
    try:
        return env_str(TOKEN_ENV_VAR)
    except SystemExit:
        raise SystemExit(f"Variável {TOKEN_ENV_VAR} não definida e flag --token vazio")


def parse_before_date(value: str) -> date:
    """Converte o valor de --before (formato YYYYMMDD) em data.

    Raises:
        SystemExit: Se a data for inválida.
    """
    try:
        return datetime.strptime(value.strip(), BEFORE_DATE_FORMAT).date()
    except ValueError:
        logger.error("Data inválida para --before: %s", value)
        raise SystemExit(f"Data inválida para --before: '{value}' (formato: YYYYMMDD)")


async def safe_sleep(seconds: float) -> None:
    """Sleep curto para reduzir risco de rate limit.

    Args:
        seconds: Tempo de espera em segundos. Deve ser um número não negativo.

    Raises:
        ValueError: Se seconds não for um número ou for negativo.
    """
    if not isinstance(seconds, (int, float)):
        raise ValueError("safe_sleep: seconds deve ser um número (int ou float)")
    if seconds < 0:
        raise ValueError("safe_sleep: seconds deve ser não negativo")

    if seconds > 0:
        logger.debug("Aguardando %.2fs antes da próxima operação", seconds)
    await asyncio.sleep(seconds)
