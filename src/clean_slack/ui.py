"""Módulo de UI rica para o CleanSlack.

Centraliza elementos visuais usando Rich para spinners, tabelas e formatação.
"""

import logging
from contextlib import contextmanager
from typing import Any, ContextManager, Generator

import questionary
from rich.console import Console
from rich.table import Table

# Console global para uso em todo o projeto
console = Console()

# Estilo padrão para Questionary (compartilhado por todos os prompts)
CUSTOM_STYLE = questionary.Style(
    [
        ("qmark", "fg:#67b7a1 bold"),
        ("question", "bold"),
        ("selected", "fg:#cc5454"),
        ("pointer", "fg:#67b7a1 bold"),
        ("highlighted", "fg:#67b7a1 bold"),
        ("answer", "fg:#f6b93b bold"),
        ("separator", "fg:#6e6e6e"),
    ]
)


@contextmanager
def suppress_slack_logs() -> Generator[None, None, None]:
    """Suprime logs do slack_sdk temporariamente durante interações."""
    slack_logger = logging.getLogger("slack_sdk")
    original_level = slack_logger.level
    slack_logger.setLevel(logging.CRITICAL)
    try:
        yield
    finally:
        slack_logger.setLevel(original_level)


def spinner(message: str, spinner_type: str = "dots") -> ContextManager[Any]:
    """Retorna context manager de status com spinner animado.

    Args:
        message: Texto a exibir junto ao spinner
        spinner_type: Tipo do spinner (dots, line, bouncingBall, etc.)
    """
    return console.status(message, spinner=spinner_type)


def print_stats_table(
    title: str, data: dict[str, Any], title_style: str = "bold"
) -> None:
    """Exibe tabela formatada de estatísticas.

    Args:
        title: Título da tabela
        data: Dicionário com chave-valor para exibir
        title_style: Estilo do título
    """
    table = Table(title=title, show_header=False, title_style=title_style)
    table.add_column("Campo", style="dim")
    table.add_column("Valor", justify="right")

    for key, value in data.items():
        if isinstance(value, bool):
            formatted_value = "sim" if value else "não"
        elif isinstance(value, int):
            formatted_value = f"[bold]{value:,}[/]".replace(",", ".")
        else:
            formatted_value = str(value)
        table.add_row(key, formatted_value)

    console.print(table)


def print_success(message: str) -> None:
    """Exibe mensagem de sucesso formatada."""
    console.print(f"[bold green]✅ {message}[/]")


def print_error(message: str, hint: str | None = None) -> None:
    """Exibe mensagem de erro formatada.

    Args:
        message: Mensagem de erro principal.
        hint: Dica opcional de como resolver o problema.
    """
    console.print(f"[bold red]❌ {message}[/]")
    if hint:
        console.print(f"[dim]   💡 {hint}[/]")


def print_warning(message: str) -> None:
    """Exibe mensagem de aviso formatada."""
    console.print(f"[bold yellow]⚠️  {message}[/]")


def print_info(message: str) -> None:
    """Exibe mensagem informativa formatada."""
    console.print(f"[bold blue]ℹ️  {message}[/]")


def print_tip(message: str) -> None:
    console.print(f"[dim]💡 {message}[/]")


def print_ratelimit(description: str, wait_seconds: float, attempt: int) -> None:
    """Exibe aviso de rate limit visível ao usuário durante modo interativo."""
    console.print(
        f"[bold yellow]⏳ Rate limit em '[cyan]{description}[/cyan]'. "
        f"Aguardando [bold]{wait_seconds:g}s[/bold] (tentativa {attempt})...[/]"
    )
