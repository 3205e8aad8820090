"""CLI module for CleanSlack."""

import argparse
import asyncio
import logging

from dotenv import load_dotenv
from slack_sdk.errors import SlackApiError

from .cleaner import CleanResult, SlackCleaner
from .client import SlackWorkspace
from .config import RunConfig, build_run_config, load_config
from .identity import IdentityNotFound
from .interactive import interactive_main
from .retry import slack_error_code
from .timestamps import from_slack_timestamp
from .ui import print_stats_table, print_tip
from .utils import resolve_token

logger = logging.getLogger(__name__)

# Escopos de usuário necessários para o token
REQUIRED_SCOPES = (
    "chat:write",
    "files:read",
    "files:write",
    "groups:history",
    "groups:read",
    "im:history",
    "im:read",
    "mpim:history",
    "mpim:read",
    "users:read",
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse argumentos da linha de comando."""
    parser = argparse.ArgumentParser(
        description=(
            "Apaga suas mensagens e arquivos em canais privados, grupos de DM e DMs do Slack. "
            "Sem --commit, só mostra o que seria apagado."
        )
    )
    parser.add_argument(
        "--token",
        type=str,
        default=None,
        help="Token OAuth de usuário do Slack (padrão: variável MY_SLACK_TOKEN).",
    )
    parser.add_argument(
        "--me",
        type=str,
        default=None,
        help="Seu nome de usuário no Slack (obrigatório).",
    )
    parser.add_argument(
        "--filter",
        type=str,
        default=None,
        help="Filtra canais, grupos de DM e DMs, ex.: 'ace,base' vira a regexp /(ace|base)/i.",
    )
    parser.add_argument(
        "--before",
        type=str,
        default=None,
        metavar="YYYYMMDD",
        help="Apaga mensagens anteriores a esta data.",
    )
    parser.add_argument(
        "--commit",
        action="store_true",
        help="Executa a remoção de verdade.",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=None,
        help="Máximo de tentativas por chamada em rate limit (0 = sem limite).",
    )
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="Modo interativo com perguntas e confirmação.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Mostra logs de depuração (cursores, esperas).",
    )
    return parser.parse_args(argv)


def mask_token(token: str) -> str:
    """Mostra só o prefixo e os 4 últimos caracteres do token."""
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:5]}…{token[-4:]}"


def format_api_error(error: SlackApiError) -> str:
    """Converte SlackApiError para mensagem amigável ao usuário."""
    code = slack_error_code(error)

    if code == "missing_scope":
        needed = error.response.get("needed") or ", ".join(REQUIRED_SCOPES)
        return f"Token sem permissão suficiente. Escopos necessários: {needed}"
    if code in ("invalid_auth", "not_authed", "token_revoked", "account_inactive"):
        return f"Token inválido ou revogado ({code}). Verifique --token ou MY_SLACK_TOKEN."

    return f"Erro da API do Slack: {code or error}"


def log_run_config(config: RunConfig) -> None:
    logger.info("Me: %s", config.me)
    if config.pattern is not None:
        logger.info("Filtro: %s", config.pattern.pattern)
    if config.cutoff is not None:
        logger.info(
            "Antes de: %s Slack TS: %s",
            from_slack_timestamp(config.cutoff.timestamp).isoformat(),
            config.cutoff.timestamp,
        )
    logger.info("Usando token: %s", mask_token(config.token))


async def run_clean(config: RunConfig, client: SlackWorkspace) -> CleanResult:
    """Executa a varredura (e a remoção, com commit) e mostra o resumo."""
    result = await SlackCleaner(client, config).run()

    print_stats_table("Resumo", result.as_stats())
    if not result.committed:
        print_tip("Rode o comando novamente com --commit para apagar de verdade.")
    return result


async def main(argv: list[str] | None = None) -> None:
    """Entry-point assíncrono."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    load_dotenv()
    args = parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    cfg = load_config()
    token = resolve_token(args.token)

    # Modo interativo tem precedência
    if args.interactive:
        await interactive_main(SlackWorkspace.from_token(token), token, args=args, cfg=cfg)
        return

    config = build_run_config(
        token=token,
        me=args.me,
        filter_terms=args.filter,
        before=args.before,
        commit=args.commit,
        cfg=cfg,
        max_retries=args.max_retries,
    )
    log_run_config(config)

    client = SlackWorkspace.from_token(token)
    try:
        await run_clean(config, client)
    except IdentityNotFound as error:
        logger.error("%s", error)
        raise SystemExit(str(error))
    except SlackApiError as error:
        logger.error(format_api_error(error))
        raise SystemExit(1)


def run() -> None:
    """Entry-point do script de console."""
    asyncio.run(main())
