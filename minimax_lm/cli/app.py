"""
Main CLI application for minimax-lm.

Usage:
    mmx key set|clear
    mmx test
    mmx models
    mmx chat PROMPT [--model ID] [--max-tokens N] [--no-thinking]
    mmx config show
    mmx version
"""

from __future__ import annotations

import asyncio
import logging
import signal
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from minimax_lm import __version__
from minimax_lm.config import MiniMaxConfig, find_config_path, load_config

app = typer.Typer(name="mmx", help="MiniMax chat-completion adapter")
key_app = typer.Typer(help="API key management")
config_app = typer.Typer(help="Configuration management")

app.add_typer(key_app, name="key")
app.add_typer(config_app, name="config")

console = Console()

_state: dict = {"config_path": None}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load() -> MiniMaxConfig:
    return load_config(_state["config_path"] or find_config_path())


def _key_store(cfg: MiniMaxConfig):
    from minimax_lm.auth import ApiKeyStore

    return ApiKeyStore(cfg.credentials.store_path, env_var=cfg.api.api_key_env)


def _build_provider(cfg: MiniMaxConfig, supports_thinking: bool = True):
    """Wire up client, key store and provider from config."""
    from minimax_lm.llm.client import MiniMaxClient
    from minimax_lm.llm.transport import HttpxChatTransport
    from minimax_lm.provider import ChatProvider

    client = MiniMaxClient(
        base_url=cfg.api.base_url,
        transport=HttpxChatTransport(timeout=float(cfg.api.timeout_seconds)),
    )
    return ChatProvider(
        client,
        _key_store(cfg),
        config=cfg,
        supports_thinking=supports_thinking,
    )


@app.callback()
def main_callback(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to YAML config"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """MiniMax chat-completion adapter."""
    _state["config_path"] = config
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@key_app.command("set")
def key_set():
    """Prompt for an API key and store it."""
    store = _key_store(_load())
    if store.prompt_for_api_key():
        console.print("[green]MiniMax API key saved successfully[/green]")
    else:
        console.print("[yellow]API key cannot be empty; nothing stored.[/yellow]")
        raise typer.Exit(1)


@key_app.command("clear")
def key_clear():
    """Delete the stored API key."""
    _key_store(_load()).delete_api_key()
    console.print("MiniMax API key cleared")


@app.command()
def test():
    """Send a one-token ping to check the stored key."""
    from minimax_lm.llm.client import MiniMaxClient
    from minimax_lm.llm.errors import ProviderError
    from minimax_lm.llm.transport import HttpxChatTransport
    from minimax_lm.llm.types import ChatOptions, WireMessage

    cfg = _load()
    key = _key_store(cfg).get_api_key()
    if not key:
        console.print('[yellow]API key is not set.[/yellow] Run "mmx key set" first.')
        raise typer.Exit(1)

    client = MiniMaxClient(
        base_url=cfg.api.base_url,
        transport=HttpxChatTransport(timeout=float(cfg.api.timeout_seconds)),
    )

    async def _run():
        stream = client.stream_chat(
            cfg.chat.default_model,
            [WireMessage(role="user", content="Ping")],
            ChatOptions(api_key=key, max_tokens=1, temperature=cfg.chat.temperature),
        )
        try:
            async for _ in stream:
                break
        finally:
            await stream.aclose()

    try:
        asyncio.run(_run())
    except ProviderError as e:
        if e.status_code == 401:
            console.print("[red]Invalid API key. Please set a new key.[/red]")
        else:
            console.print(f"[red]MiniMax provider test failed:[/red] {e.message}")
        raise typer.Exit(1)

    console.print("[green]MiniMax provider test succeeded.[/green]")


@app.command()
def models():
    """List the models exposed to hosts."""
    from minimax_lm.cli.output import OutputFormatter

    cfg = _load()
    provider = _build_provider(cfg)
    key = provider.key_store.get_api_key()
    if not key:
        console.print('[yellow]API key is not set.[/yellow] Run "mmx key set" first.')
        raise typer.Exit(1)
    OutputFormatter(console).format_model_list(provider.provide_model_information(key))


@app.command()
def chat(
    prompt: str = typer.Argument(..., help="User message"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model ID"),
    max_tokens: Optional[int] = typer.Option(None, "--max-tokens", help="Max output tokens"),
    system: Optional[str] = typer.Option(None, "--system", help="System prompt"),
    thinking: bool = typer.Option(True, "--thinking/--no-thinking", help="Show reasoning"),
):
    """Send one message and stream the reply."""
    from minimax_lm.cli.output import OutputFormatter
    from minimax_lm.llm.cancellation import CancellationToken
    from minimax_lm.llm.errors import ProviderError
    from minimax_lm.provider import ResponseOptions
    from minimax_lm.types import HostMessage, TextPart

    cfg = _load()
    provider = _build_provider(cfg, supports_thinking=thinking)
    formatter = OutputFormatter(console)

    messages: list[HostMessage] = []
    if system:
        messages.append(HostMessage(role="system", content=[TextPart(system)]))
    messages.append(HostMessage(role="user", content=[TextPart(prompt)]))

    async def _run():
        token = CancellationToken()
        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, token.cancel)
        except (NotImplementedError, RuntimeError):
            pass  # Windows event loops lack add_signal_handler

        async for part in provider.provide_response(
            model or cfg.chat.default_model,
            messages,
            ResponseOptions(max_tokens=max_tokens),
            token,
        ):
            formatter.format_part(part)
        console.print()
        if token.is_cancelled:
            console.print("[dim]Cancelled.[/dim]")

    try:
        asyncio.run(_run())
    except (ProviderError, ValueError) as e:
        console.print(f"\n[red]Error:[/red] {e}")
        raise typer.Exit(1)


@config_app.command("show")
def config_show():
    """Show effective config."""
    from minimax_lm.cli.output import OutputFormatter

    OutputFormatter(console).format_config(_load().to_dict())


@app.command()
def version():
    """Show version."""
    console.print(f"minimax-lm v{__version__}")


def main():
    app()


if __name__ == "__main__":
    main()
