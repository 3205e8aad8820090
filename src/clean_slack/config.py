"""Configuração do CleanSlack.

- ``RunConfig``: parâmetros de uma execução (montados a partir da CLI).
- ``CleanSlackConfig``: preferências persistentes do usuário em JSON.
"""

import json
import logging
import re
from dataclasses import asdict, dataclass
from pathlib import Path

from .collector import compile_filter_pattern
from .models import Cutoff
from .retry import RETRY_DELAY
from .utils import parse_before_date

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".cleanslack" / "config.json"

DELETE_DELAY = 0.2


@dataclass
class CleanSlackConfig:
    """Configurações persistentes do CleanSlack."""

    # Valores padrão para --me e --filter
    default_me: str = ""
    default_filter: str = ""

    # Ritmo das chamadas à API
    retry_delay: float = RETRY_DELAY
    delete_delay: float = DELETE_DELAY
    max_retries: int = 0  # 0 = sem limite


@dataclass(frozen=True)
class RunConfig:
    """Parâmetros de uma execução da limpeza.

    Attributes:
        token: Token OAuth de usuário do Slack.
        me: Nome de usuário do dono das mensagens.
        pattern: Filtro de conversas compilado (None = sem filtro).
        cutoff: Data de corte (None = sem corte).
        commit: Se False, só lista o que seria apagado.
        retry_delay: Espera após rate limit, em segundos.
        delete_delay: Pausa após cada remoção, em segundos.
        max_retries: Limite de tentativas por chamada (None = sem limite).
    """

    token: str
    me: str
    pattern: re.Pattern[str] | None = None
    cutoff: Cutoff | None = None
    commit: bool = False
    retry_delay: float = RETRY_DELAY
    delete_delay: float = DELETE_DELAY
    max_retries: int | None = None


def build_run_config(
    *,
    token: str,
    me: str | None,
    filter_terms: str | None = None,
    before: str | None = None,
    commit: bool = False,
    cfg: CleanSlackConfig | None = None,
    max_retries: int | None = None,
) -> RunConfig:
    """Valida as entradas e monta o RunConfig.

    Args:
        token: Token já resolvido.
        me: Valor de --me (cai para ``cfg.default_me``).
        filter_terms: Valor de --filter (cai para ``cfg.default_filter``).
        before: Data no formato YYYYMMDD, ou None.
        commit: Valor de --commit.
        cfg: Preferências persistentes.
        max_retries: Valor de --max-retries (0 = sem limite; None = usar cfg).

    Raises:
        SystemExit: Em erro de configuração (me ausente, data ou filtro inválidos).
    """
    cfg = cfg or CleanSlackConfig()

    me = (me or cfg.default_me or "").strip()
    if not me:
        raise SystemExit("Faltou o flag --me")

    filter_terms = filter_terms if filter_terms is not None else cfg.default_filter
    try:
        pattern = compile_filter_pattern(filter_terms)
    except re.error as e:
        raise SystemExit(f"Filtro inválido '{filter_terms}': {e}")

    cutoff = Cutoff.from_date(parse_before_date(before)) if before else None

    retries = cfg.max_retries if max_retries is None else max_retries

    return RunConfig(
        token=token,
        me=me,
        pattern=pattern,
        cutoff=cutoff,
        commit=commit,
        retry_delay=cfg.retry_delay,
        delete_delay=cfg.delete_delay,
        max_retries=retries if retries and retries > 0 else None,
    )


_NUMERIC_FIELDS = {"retry_delay": float, "delete_delay": float, "max_retries": int}


def _coerce_numbers(cfg: CleanSlackConfig, path: Path) -> CleanSlackConfig:
    """Converte os campos numéricos lidos do JSON; valores inválidos voltam ao padrão."""
    defaults = CleanSlackConfig()
    for name, kind in _NUMERIC_FIELDS.items():
        value = getattr(cfg, name)
        try:
            number = kind(value)
        except (TypeError, ValueError):
            number = -1
        if number < 0:
            logger.warning(
                "Valor inválido para %s em %s: %r; usando %s", name, path, value, getattr(defaults, name)
            )
            number = getattr(defaults, name)
        setattr(cfg, name, number)
    return cfg


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> CleanSlackConfig:
    """Carrega configuração do arquivo JSON, criando defaults se não existir.

    Args:
        path: Caminho do arquivo de configuração.

    Returns:
        Configuração carregada ou padrão se arquivo não existir.
    """
    if not path.exists():
        return CleanSlackConfig()
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        valid_fields = CleanSlackConfig.__dataclass_fields__
        cfg = CleanSlackConfig(**{k: v for k, v in data.items() if k in valid_fields})
    except (json.JSONDecodeError, TypeError, AttributeError):
        logger.warning("Configuração inválida em %s; usando valores padrão", path)
        return CleanSlackConfig()
    return _coerce_numbers(cfg, path)


def save_config(config: CleanSlackConfig, path: Path = DEFAULT_CONFIG_PATH) -> None:
    """Salva configuração no arquivo JSON.

    Args:
        config: Configuração a salvar.
        path: Caminho do arquivo de configuração.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(asdict(config), f, ensure_ascii=False, indent=2)
