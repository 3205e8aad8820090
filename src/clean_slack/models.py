"""Modelos de dados do CleanSlack."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Generic, TypeVar

from .timestamps import to_epoch_seconds, to_slack_timestamp

T = TypeVar("T")


@dataclass(frozen=True)
class Identity:
    """Membro do workspace."""

    id: str
    display_name: str


class ChannelKind(Enum):
    """Tipo de conversa, atribuído uma única vez na leitura da API."""

    PRIVATE_CHANNEL = "private_channel"
    GROUP_DM = "mpim"
    DIRECT_MESSAGE = "im"


@dataclass(frozen=True)
class Channel:
    """Conversa listada pelo Slack.

    Attributes:
        id: ID da conversa (ex.: ``"G123"``, ``"D456"``).
        name: Nome do canal; vazio para DMs.
        kind: Tipo da conversa.
        peer_user_id: Usuário do outro lado da DM (só para ``DIRECT_MESSAGE``).
    """

    id: str
    name: str
    kind: ChannelKind
    peer_user_id: str | None = None


@dataclass(frozen=True)
class Message:
    """Mensagem do histórico, anotada com o canal de origem."""

    channel_id: str
    timestamp: str
    author_id: str
    text: str = ""


@dataclass(frozen=True)
class FileRecord:
    """Arquivo enviado ao workspace."""

    id: str
    name: str
    owner_id: str
    created: int

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.created, tz=timezone.utc)


@dataclass(frozen=True)
class Cutoff:
    """Data de corte nas duas representações usadas pela API.

    Attributes:
        timestamp: Formato de timestamp do Slack (comparado com mensagens).
        epoch_seconds: Segundos desde a epoch (comparado com arquivos).
    """

    timestamp: str
    epoch_seconds: int

    @classmethod
    def from_datetime(cls, dt: datetime) -> "Cutoff":
        return cls(timestamp=to_slack_timestamp(dt), epoch_seconds=to_epoch_seconds(dt))

    @classmethod
    def from_date(cls, day: date) -> "Cutoff":
        """Cria o corte a partir da meia-noite UTC do dia informado."""
        return cls.from_datetime(datetime(day.year, day.month, day.day, tzinfo=timezone.utc))


@dataclass
class Page(Generic[T]):
    """Página de uma listagem paginada por cursor."""

    items: list[T]
    next_cursor: str | None = None


@dataclass
class PendingSets:
    """Resultado da varredura: o que seria (ou será) apagado."""

    channels: list[Channel] = field(default_factory=list)
    messages: list[Message] = field(default_factory=list)
    files: list[FileRecord] = field(default_factory=list)
