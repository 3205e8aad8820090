"""CleanSlack: script para apagar suas mensagens e arquivos no Slack.

Este pacote fornece funcionalidades para:
- Listar suas mensagens em canais privados, grupos de DM e DMs
- Listar seus arquivos enviados
- Apagar tudo isso (só com --commit), respeitando o rate limit da API
"""

__version__ = "0.1.0"

from .cleaner import CleanResult, SlackCleaner
from .client import SlackWorkspace
from .timestamps import from_slack_timestamp, to_slack_timestamp

__all__ = [
    "CleanResult",
    "SlackCleaner",
    "SlackWorkspace",
    "from_slack_timestamp",
    "to_slack_timestamp",
]
