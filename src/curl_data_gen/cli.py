"""CLI entry point for curl-data-gen."""

import json
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from curl_data_gen.config import apply_overrides, default_field_configs, load_field_configs
from curl_data_gen.export import FORMATTERS, outcomes_to_json, render, write_output
from curl_data_gen.generator.batch import DEFAULT_MAX_CONCURRENCY, STRATEGIES, BatchGenerator
from curl_data_gen.generator.classifier import classify
from curl_data_gen.generator.entry import EntryAssembler
from curl_data_gen.generator.random_source import RandomSource
from curl_data_gen.generator.values import ValueGenerator
from curl_data_gen.parser.base import Request, ReplayOptions
from curl_data_gen.parser.curl import parse_curl
from curl_data_gen.parser.schema import extract_fields
from curl_data_gen.replay import ReplayClient


def _read_command(command: str | None, file: Path | None) -> str:
    """Command text from the argument, a file, or stdin (in that order)."""
    if command:
        return command
    if file is not None:
        return file.read_text(encoding="utf-8")
    return click.get_text_stream("stdin").read()


def _parse_or_fail(text: str, source: RandomSource | None = None) -> Request:
    request = parse_curl(text, source)
    if request.parse_error:
        raise click.ClickException(request.parse_error)
    return request


command_argument = click.argument("command", required=False)
file_option = click.option(
    "-f", "--file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the curl command from a file.",
)


@click.group()
def main():
    """curl-data-gen: generate test data shaped like a curl request body."""
    pass


@main.command()
@command_argument
@file_option
def parse(command: str | None, file: Path | None):
    """Parse a curl command and print the request as JSON."""
    request = _parse_or_fail(_read_command(command, file))
    click.echo(request.model_dump_json(indent=2, exclude={"parse_error"}))


@main.command()
@command_argument
@file_option
def schema(command: str | None, file: Path | None):
    """List the fields found in the request body."""
    request = _parse_or_fail(_read_command(command, file))
    fields = extract_fields(request.body)
    if not fields:
        click.echo("No fields found in request body.", err=True)
        return
    for path, meta in fields.items():
        category = classify(path, meta.coarse_type).value
        click.echo(f"{path}\t{meta.coarse_type}\t{category}\t{json.dumps(meta.original_value)}")


@main.command()
@command_argument
@file_option
@click.option("-n", "--count", default=10, show_default=True, type=click.IntRange(min=0), help="Number of entries.")
@click.option("--fields", "fields_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML/JSON field config file.")
@click.option("--static", "static", multiple=True, metavar="PATH=VALUE", help="Use a static value for a field.")
@click.option("--random", "random", multiple=True, metavar="PATH[=CATEGORY]", help="Randomize a field, optionally as a category.")
@click.option("--all-random", is_flag=True, help="Randomize every field instead of keeping original values.")
@click.option("--format", "fmt", default="json", type=click.Choice(list(FORMATTERS)), help="Output format.")
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Output file path (default: stdout).")
@click.option("--replay/--no-replay", default=False, help="Send each entry to the original endpoint.")
@click.option("--expected-status", default=200, show_default=True, type=int, help="Status counted as a match.")
@click.option("--strategy", default="sequential", type=click.Choice(STRATEGIES), help="Replay strategy.")
@click.option("--concurrency", default=DEFAULT_MAX_CONCURRENCY, show_default=True, type=click.IntRange(min=1), help="Max in-flight replays.")
@click.option("--timeout", default=None, type=float, help="Replay timeout in seconds.")
@click.option("--seed", default=None, type=int, help="Random seed for reproducible output.")
def generate(
    command: str | None,
    file: Path | None,
    count: int,
    fields_path: Path | None,
    static: tuple[str, ...],
    random: tuple[str, ...],
    all_random: bool,
    fmt: str,
    output: Path | None,
    replay: bool,
    expected_status: int,
    strategy: str,
    concurrency: int,
    timeout: float | None,
    seed: int | None,
):
    """Generate entries from a curl command, optionally replaying them."""
    source = RandomSource(seed)
    request = _parse_or_fail(_read_command(command, file), source)
    fields = extract_fields(request.body)
    if output:
        click.echo(f"Parsed {request.method} {request.url} ({len(fields)} fields).", err=True)

    configs = default_field_configs(fields, randomize=all_random)
    if fields_path is not None:
        try:
            configs.update(load_field_configs(fields_path))
        except (yaml.YAMLError, ValidationError, ValueError) as exc:
            raise click.BadParameter(str(exc), param_hint="--fields")
    try:
        configs = apply_overrides(configs, fields, static, random)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--static/--random")

    generator = BatchGenerator(
        assembler=EntryAssembler(ValueGenerator(source)),
        replay_client=ReplayClient(timeout=timeout),
        max_concurrency=concurrency,
    )
    result = generator.generate(
        request,
        count,
        configs,
        replay=ReplayOptions(enabled=replay, expected_status=expected_status),
        strategy=strategy,
    )

    content = render(result.entries, fmt)
    if output is None:
        click.echo(content)
    else:
        write_output(content, output)
        click.echo(f"Generated {len(result.entries)} entries in {output}", err=True)

    if result.outcomes is not None:
        matched = sum(1 for o in result.outcomes if o.matched_expected)
        click.echo(f"Replay: matched {matched}/{len(result.outcomes)} (expected {expected_status})", err=True)
        if output is not None:
            replay_path = output.with_name(f"{output.stem}.replay.json")
            write_output(outcomes_to_json(result.outcomes), replay_path)
            click.echo(f"  Replay outcomes saved to {replay_path}", err=True)
