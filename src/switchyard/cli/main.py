"""Main CLI entry point for Switchyard.

Provides commands for inspecting and exercising provider routing:
    switchyard resolve [--model <model>] [--provider <name>]
    switchyard chat <prompt> [--model <model>] [--system <text>]

Configuration comes from --config <file> when given, otherwise from the
environment (SWITCHYARD_MODEL, ZHIPU_API_KEY, ...).
"""

import logging
import sys

import click

from .. import __version__
from ..llm import (
    ChatOptions,
    LLMConfig,
    LLMError,
    LLMResponse,
    Message,
    create_provider,
    resolve_provider_selection,
)

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def load_config(config_path: str | None, provider: str | None, model: str | None) -> LLMConfig:
    """Load configuration and apply command-line overrides."""
    config = LLMConfig.from_file(config_path) if config_path else LLMConfig.from_env()

    overrides = {}
    if provider:
        overrides["provider"] = provider
    if model:
        overrides["model"] = model
    if overrides:
        defaults = config.defaults.model_copy(update=overrides)
        config = config.model_copy(update={"defaults": defaults})
    return config


def config_options(func):
    """Shared --config/--provider/--model options."""
    func = click.option("--model", "-m", help="Model identifier (overrides config)")(func)
    func = click.option("--provider", "-p", help="Explicit provider name (overrides config)")(
        func
    )
    func = click.option(
        "--config",
        "-c",
        "config_path",
        type=click.Path(exists=True, dir_okay=False),
        help="YAML or JSON configuration file",
    )(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name="switchyard")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    help="Logging verbosity",
)
def cli(log_level: str) -> None:
    """Switchyard - Route agent chat requests to the right LLM backend.

    \b
    Commands:
        switchyard resolve            Show which backend the config selects
        switchyard chat "<prompt>"    Send one prompt through that backend
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# Resolve Command
# =============================================================================


@cli.command()
@config_options
@click.option(
    "--format", "-f", "output_format", type=click.Choice(["text", "json"]), default="text"
)
def resolve(
    config_path: str | None, provider: str | None, model: str | None, output_format: str
) -> None:
    """Show the provider selection for the configuration.

    \b
    Examples:
        switchyard resolve --model openrouter/auto
        switchyard resolve --provider claude-cli --format json
    """
    try:
        config = load_config(config_path, provider, model)
        selection = resolve_provider_selection(config)
    except (LLMError, ValueError) as e:
        click.echo(f"Error: {e}")
        sys.exit(1)

    if output_format == "json":
        click.echo(selection.model_dump_json(indent=2))
        return

    click.echo(f"Provider: {selection.kind.value}")
    if selection.vendor:
        click.echo(f"  Vendor:    {selection.vendor}")
    if selection.api_base:
        click.echo(f"  API base:  {selection.api_base}")
    if selection.model:
        click.echo(f"  Model:     {selection.model}")
    if selection.proxy:
        click.echo(f"  Proxy:     {selection.proxy}")
    if selection.workspace:
        click.echo(f"  Workspace: {selection.workspace}")
    if selection.api_key is not None:
        click.echo("  API key:   configured")


# =============================================================================
# Chat Command
# =============================================================================


@cli.command()
@click.argument("prompt")
@config_options
@click.option("--system", "-s", "system_prompt", help="System prompt")
@click.option("--max-tokens", type=int, help="Output token limit (default: config)")
@click.option("--temperature", type=float, help="Sampling temperature (default: config)")
@click.option(
    "--format", "-f", "output_format", type=click.Choice(["text", "json"]), default="text"
)
def chat(
    prompt: str,
    config_path: str | None,
    provider: str | None,
    model: str | None,
    system_prompt: str | None,
    max_tokens: int | None,
    temperature: float | None,
    output_format: str,
) -> None:
    """Send one prompt to the selected provider and print the reply.

    \b
    Examples:
        switchyard chat "Summarize RFC 9110 in one line"
        switchyard chat "Hi" --model moonshot/kimi-k2.5 --format json
    """
    try:
        config = load_config(config_path, provider, model)
        client = create_provider(config)

        messages = []
        if system_prompt:
            messages.append(Message(role="system", content=system_prompt))
        messages.append(Message(role="user", content=prompt))

        options = ChatOptions(
            max_tokens=max_tokens if max_tokens is not None else config.defaults.max_tokens,
            temperature=(
                temperature if temperature is not None else config.defaults.temperature
            ),
        )
        response = client.chat(messages, options=options)
    except (LLMError, ValueError) as e:
        click.echo(f"Error: {e}")
        sys.exit(1)

    if output_format == "json":
        click.echo(response.model_dump_json(indent=2))
    else:
        _print_response(response)


def _print_response(response: LLMResponse) -> None:
    if response.content:
        click.echo(response.content)
    for tc in response.tool_calls:
        click.echo(f"[tool call] {tc.name}({tc.arguments})")
    if response.usage:
        click.echo(
            f"[usage] prompt={response.usage.prompt_tokens} "
            f"completion={response.usage.completion_tokens} "
            f"total={response.usage.total_tokens}",
            err=True,
        )


if __name__ == "__main__":
    cli()
