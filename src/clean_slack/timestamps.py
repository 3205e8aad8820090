"""Conversão entre timestamps do Slack e datas.

O Slack representa o instante de uma mensagem como string
``"<segundos>.<microssegundos>"`` (ex.: ``"1700000123.456789"``). O mesmo
valor serve de ID da mensagem dentro do canal, por isso a conversão precisa
ser exata nos dois sentidos.
"""

from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_MICROS_PER_SECOND = 1_000_000


class MalformedTimestamp(ValueError):
    """Timestamp do Slack em formato inválido."""


def _as_utc(dt: datetime) -> datetime:
    # Datas sem timezone são tratadas como UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def _micros_since_epoch(dt: datetime) -> int:
    delta = _as_utc(dt) - EPOCH
    return (delta.days * 86_400 + delta.seconds) * _MICROS_PER_SECOND + delta.microseconds


def from_slack_timestamp(ts: str) -> datetime:
    """Converte um timestamp do Slack em datetime UTC.

    Args:
        ts: Timestamp no formato ``"1700000123.456789"``.

    Returns:
        Instante correspondente (timezone-aware, UTC).

    Raises:
        MalformedTimestamp: Se não houver exatamente um ponto decimal ou se
            alguma das partes não for numérica.
    """
    parts = ts.split(".")
    if len(parts) != 2:
        raise MalformedTimestamp(f"Timestamp inválido (esperado um ponto decimal): {ts!r}")

    seconds, micros = parts
    # Instantes anteriores a 1970 levam o sinal na parte inteira
    negative = seconds.startswith("-")
    if negative:
        seconds = seconds[1:]
    if not (seconds.isdecimal() and micros.isdecimal()):
        raise MalformedTimestamp(f"Timestamp inválido (parte não numérica): {ts!r}")

    total = int(seconds) * _MICROS_PER_SECOND + int(micros)
    return EPOCH + timedelta(microseconds=-total if negative else total)


def to_slack_timestamp(dt: datetime) -> str:
    """Converte um datetime para o formato de timestamp do Slack.

    Os últimos 6 dígitos dos microssegundos desde a epoch viram a parte
    fracionária; o restante, a parte inteira.

    Args:
        dt: Instante a converter (naive = UTC).

    Returns:
        String como ``"1700000123.456789"``; antes de 1970 o sinal
        vai na frente (``"-0.000001"``).
    """
    micros = _micros_since_epoch(dt)
    sign = "-" if micros < 0 else ""
    seconds, fraction = divmod(abs(micros), _MICROS_PER_SECOND)
    return f"{sign}{seconds}.{fraction:06d}"


def to_epoch_seconds(dt: datetime) -> int:
    """Retorna os segundos inteiros desde a epoch (usado no filtro de arquivos)."""
    return _micros_since_epoch(dt) // _MICROS_PER_SECOND
