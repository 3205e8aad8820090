"""Modo interativo para o CLI do CleanSlack usando Questionary.

Pergunta usuário, filtro e data de corte, sempre roda a varredura (dry-run)
primeiro e só apaga depois de dupla confirmação.
"""

import argparse
import logging

import questionary
from slack_sdk.errors import SlackApiError

from .cleaner import CleanResult, SlackCleaner
from .client import SlackWorkspace
from .config import CleanSlackConfig, build_run_config, load_config, save_config
from .identity import IdentityNotFound
from .retry import slack_error_code
from .ui import (
    CUSTOM_STYLE,
    console,
    print_error,
    print_info,
    print_ratelimit,
    print_stats_table,
    print_success,
    print_warning,
    spinner,
    suppress_slack_logs,
)
from .utils import parse_before_date

logger = logging.getLogger(__name__)


def _validate_before(value: str) -> bool | str:
    """Validador do Questionary para o campo de data."""
    if not value.strip():
        return True
    try:
        parse_before_date(value)
    except SystemExit:
        return "Use o formato YYYYMMDD (ex.: 20240131)"
    return True


async def _ask_run_options(
    args: argparse.Namespace | None, cfg: CleanSlackConfig
) -> tuple[str, str, str] | None:
    """Pergunta me, filtro e data de corte. Retorna None se cancelado."""
    with suppress_slack_logs():
        me = await questionary.text(
            "Seu nome de usuário no Slack:",
            default=getattr(args, "me", None) or cfg.default_me,
            style=CUSTOM_STYLE,
        ).ask_async()
        if not me or not me.strip():
            return None

        filter_terms = await questionary.text(
            "Filtrar conversas (termos separados por vírgula, vazio = sem filtro):",
            default=getattr(args, "filter", None) or cfg.default_filter,
            style=CUSTOM_STYLE,
        ).ask_async()
        if filter_terms is None:
            return None

        before = await questionary.text(
            "Apagar antes de (YYYYMMDD, vazio = sem data):",
            default=getattr(args, "before", None) or "",
            validate=_validate_before,
            style=CUSTOM_STYLE,
        ).ask_async()
        if before is None:
            return None

    return me.strip(), filter_terms.strip(), before.strip()


async def _confirm_delete(result: CleanResult) -> bool:
    messages = len(result.pending.messages)
    files = len(result.pending.files)

    with suppress_slack_logs():
        confirm = await questionary.confirm(
            "⚠️  ATENÇÃO: Esta ação é DESTRUTIVA e IRREVERSÍVEL!\n"
            f"   • Apagará {messages} mensagem(ns)\n"
            f"   • Apagará {files} arquivo(s)\n\n"
            "Deseja continuar?",
            default=False,
            style=CUSTOM_STYLE,
        ).ask_async()
        if not confirm:
            return False

        confirm_real = await questionary.confirm(
            "🔴 Confirma que deseja APAGAR de verdade?",
            default=False,
            style=CUSTOM_STYLE,
        ).ask_async()
    return bool(confirm_real)


async def _offer_save_defaults(cfg: CleanSlackConfig, me: str, filter_terms: str) -> None:
    if me == cfg.default_me and filter_terms == cfg.default_filter:
        return

    with suppress_slack_logs():
        save = await questionary.confirm(
            "Salvar usuário e filtro como padrão?",
            default=False,
            style=CUSTOM_STYLE,
        ).ask_async()
    if save:
        cfg.default_me = me
        cfg.default_filter = filter_terms
        save_config(cfg)
        print_success("Preferências salvas.")


async def interactive_main(
    client: SlackWorkspace,
    token: str,
    *,
    args: argparse.Namespace | None = None,
    cfg: CleanSlackConfig | None = None,
) -> str:
    """Fluxo interativo de limpeza.

    Args:
        client: Cliente do workspace.
        token: Token já resolvido.
        args: Argumentos CLI opcionais para pré-preencher as perguntas.
        cfg: Preferências persistentes (carregadas do disco se None).

    Returns:
        String descrevendo o resultado ("concluído", "cancelado", "nada a apagar", "erro").
    """
    cfg = cfg or load_config()

    options = await _ask_run_options(args, cfg)
    if options is None:
        console.print("\n❌ Operação cancelada.")
        return "cancelado"
    me, filter_terms, before = options

    try:
        config = build_run_config(
            token=token,
            me=me,
            filter_terms=filter_terms,
            before=before or None,
            commit=False,
            cfg=cfg,
            max_retries=getattr(args, "max_retries", None),
        )
    except SystemExit as e:
        print_error(str(e))
        return "erro"

    cleaner = SlackCleaner(client, config, on_ratelimit=print_ratelimit)

    try:
        with spinner("Procurando mensagens e arquivos..."):
            pending = await cleaner.scan()
    except IdentityNotFound as e:
        print_error(str(e), hint="Use o nome de usuário (handle), não o nome de exibição.")
        return "erro"
    except SlackApiError as e:
        print_error(
            f"Erro da API do Slack: {slack_error_code(e) or e}",
            hint="Verifique o token e os escopos do app.",
        )
        logger.exception("Erro na varredura interativa")
        return "erro"

    preview = CleanResult(pending=pending)
    print_stats_table("Resultado da varredura", preview.as_stats())

    if not pending.messages and not pending.files:
        print_info("Nada a apagar.")
        await _offer_save_defaults(cfg, me, filter_terms)
        return "nada a apagar"

    if not await _confirm_delete(preview):
        console.print("\n❌ Operação cancelada.")
        return "cancelado"

    console.print("\n🚀 Apagando...")
    result = await cleaner.delete(pending)
    print_stats_table("Resumo", result.as_stats())
    print_success(
        f"Limpeza concluída! {result.messages_deleted} mensagem(ns) e "
        f"{result.files_deleted} arquivo(s) apagados."
    )
    if result.messages_failed or result.files_failed:
        print_warning(
            f"{result.messages_failed} mensagem(ns) e {result.files_failed} arquivo(s) "
            "não puderam ser apagados (veja o log)."
        )

    await _offer_save_defaults(cfg, me, filter_terms)
    return "concluído"
