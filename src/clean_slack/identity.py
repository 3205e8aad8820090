"""Resolução da identidade do usuário ("me") no workspace."""

import logging

from .client import SlackWorkspace
from .models import Identity
from .retry import RETRY_DELAY, RateLimitCallback, SleepFunc, call_with_retry
from .utils import safe_sleep

logger = logging.getLogger(__name__)


class IdentityNotFound(LookupError):
    """Nenhum membro do workspace tem o nome informado em --me."""


async def resolve_identity(
    client: SlackWorkspace,
    me: str,
    *,
    sleep: SleepFunc = safe_sleep,
    retry_delay: float = RETRY_DELAY,
    max_retries: int | None = None,
    on_ratelimit: RateLimitCallback | None = None,
) -> tuple[Identity, dict[str, str]]:
    """Busca os membros e identifica o usuário pelo nome.

    Args:
        client: Cliente do workspace.
        me: Nome de usuário exato (case-sensitive).

    Returns:
        Tupla (minha identidade, mapa ID -> nome de todos os membros).

    Raises:
        IdentityNotFound: Se nenhum membro tiver esse nome.
    """
    logger.info("Buscando usuários...")
    members = await call_with_retry(
        client.list_members,
        sleep=sleep,
        delay=retry_delay,
        max_retries=max_retries,
        on_ratelimit=on_ratelimit,
        description="users.list",
    )

    users: dict[str, str] = {}
    myself: Identity | None = None
    for member in members:
        users[member.id] = member.display_name
        if member.display_name == me:
            myself = member

    if myself is None:
        raise IdentityNotFound(f"Usuário não encontrado: {me}")

    logger.info("Usuário encontrado: ID: %s, Nome: %s", myself.id, myself.display_name)
    return myself, users
