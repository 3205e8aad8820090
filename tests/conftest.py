"""Configuração de testes para CleanSlack."""

import sys
from pathlib import Path
from unittest import mock

import pytest

# Adicionar src/ ao path ANTES de qualquer outra coisa para importar o módulo correto
src_path = Path(__file__).parent.parent / "src"
if src_path.exists() and src_path.is_dir():
    sys.path.insert(0, str(src_path))
else:
    raise RuntimeError(f"Diretório src/ não encontrado em {src_path}. Verifique a estrutura do projeto.")

from slack_sdk.errors import SlackApiError  # noqa: E402

from clean_slack.client import SlackWorkspace  # noqa: E402
from clean_slack.models import Identity  # noqa: E402

# =============================================================================
# Sleep injetável
# =============================================================================


class RecordingSleep:
    """Substituto de safe_sleep que só registra as esperas pedidas."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


# =============================================================================
# Erros da API do Slack
# =============================================================================


@pytest.fixture
def api_error():
    """Factory de SlackApiError com o código de erro informado."""

    def _make(code: str) -> SlackApiError:
        return SlackApiError(f"The request failed: {code}", {"ok": False, "error": code})

    return _make


@pytest.fixture
def rate_limit_error(api_error):
    """Factory de erro de rate limit."""
    return lambda: api_error("ratelimited")


# =============================================================================
# Cliente do workspace (dublê)
# =============================================================================


@pytest.fixture
def mock_workspace():
    """Dublê de SlackWorkspace com métodos assíncronos mockados."""
    client = mock.AsyncMock(spec=SlackWorkspace)
    client.list_members.return_value = [
        Identity("U1", "alice"),
        Identity("U2", "bob"),
    ]
    client.delete_message.side_effect = lambda channel_id, ts: (channel_id, ts)
    client.delete_file.return_value = None
    return client


# =============================================================================
# Rich Console Mock
# =============================================================================


@pytest.fixture
def mock_console(mocker):
    """Mock do console global Rich para testes de UI."""
    return mocker.patch("clean_slack.ui.console", autospec=True)


@pytest.fixture
def slack_logger():
    """Fixture para logger do slack_sdk com limpeza garantida."""
    import logging

    logger = logging.getLogger("slack_sdk")
    original_level = logger.level
    yield logger
    logger.setLevel(original_level)
