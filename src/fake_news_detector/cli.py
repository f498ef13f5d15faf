"""Command-line interface for the fake news detector.

Provides ``classify``, ``preprocess``, ``health`` and ``evaluate`` commands
with rich terminal output using the ``click`` and ``rich`` libraries.

Usage::

    fake-news-detector classify "Scientists SHOCKED by miracle cure!"
    fake-news-detector classify --file article.txt --output json
    fake-news-detector --data-dir ml_data/fake_news/processed health
    fake-news-detector evaluate holdout.jsonl
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import Settings
from .errors import FakeNewsDetectorError
from .metrics import evaluate as evaluate_service
from .metrics import load_labeled_jsonl
from .models import ClassificationResult
from .preprocessing import TextPreprocessor
from .service import InferenceService

console = Console()
err_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _fail(message: str) -> NoReturn:
    err_console.print(f"[bold red]Error:[/] {message}")
    sys.exit(1)


def _load_service(settings: Settings) -> InferenceService:
    service = InferenceService(settings)
    with err_console.status("[bold blue]Loading model assets...", spinner="dots"):
        try:
            service.load()
        except FakeNewsDetectorError as e:
            _fail(str(e))
    return service


def _verdict_style(result: ClassificationResult) -> str:
    return "bold red" if result.is_fake else "bold green"


@click.group()
@click.version_option(package_name="fake-news-detector")
@click.option("--data-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Directory holding the model, tfidf state and vocabulary JSON files.")
@click.option("--log-level", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Logging verbosity (default: FAKE_NEWS_LOG_LEVEL or WARNING).")
@click.pass_context
def main(ctx: click.Context, data_dir: Path | None, log_level: str | None) -> None:
    """📰 Fake News Detector — TF-IDF + logistic regression classifier.

    Scores article text with an offline-trained model and reports whether
    it looks like fake news.
    """
    try:
        settings = Settings.from_env()
    except ValueError as e:
        _fail(str(e))
    if data_dir is not None:
        located = Settings.for_data_dir(data_dir)
        settings = replace(
            settings,
            model_path=located.model_path,
            tfidf_state_path=located.tfidf_state_path,
            vocabulary_path=located.vocabulary_path,
        )
    if log_level:
        settings = replace(settings, log_level=log_level.upper())
    _configure_logging(settings.log_level)
    ctx.obj = settings


@main.command()
@click.argument("text", required=False)
@click.option("--file", "-f", "file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help="Read the article text from a file.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def classify(settings: Settings, text: str | None, file: Path | None, output: str) -> None:
    """Classify article text as fake or real.

    TEXT may be given as an argument, read from --file, or piped on stdin.

    Example: fake-news-detector classify "Miracle cure hidden by doctors"
    """
    if text is not None and file is not None:
        _fail("give either TEXT or --file, not both")
    if file is not None:
        try:
            text = file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            _fail(f"cannot read {file}: {e}")
    elif text is None:
        text = click.get_text_stream("stdin").read()

    service = _load_service(settings)
    try:
        result = service.classify(text)
    except FakeNewsDetectorError as e:
        _fail(str(e))

    if output == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    style = _verdict_style(result)
    console.print(Panel(
        f"[{style}]{result.verdict.upper()}[/]\n"
        f"Probability of fake news: [{style}]{result.probability:.2%}[/]",
        title="📰 Verdict",
        border_style="red" if result.is_fake else "green",
    ))


@main.command()
@click.argument("text")
@click.pass_obj
def preprocess(settings: Settings, text: str) -> None:
    """Print the normalized token string the model sees for TEXT.

    Example: fake-news-detector preprocess "The senators LIED!"
    """
    preprocessor = TextPreprocessor(
        min_token_length=settings.min_token_length,
        max_tokens=settings.max_tokens,
    )
    click.echo(preprocessor.process(text))


@main.command()
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def health(settings: Settings, output: str) -> None:
    """Load the model assets and report readiness.

    Exits with status 1 when the assets cannot be loaded.
    """
    service = InferenceService(settings)
    try:
        service.load()
    except FakeNewsDetectorError:
        pass  # reported through the health payload below

    report = service.health()
    if output == "json":
        click.echo(json.dumps(report, indent=2))
    else:
        table = Table(title="Model Assets", show_header=False)
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        status_style = "bold green" if service.is_ready else "bold red"
        table.add_row("Status", f"[{status_style}]{report['status']}[/]")
        table.add_row("Model", str(settings.model_path))
        table.add_row("TF-IDF state", str(settings.tfidf_state_path))
        table.add_row("Vocabulary", str(settings.vocabulary_path))
        if service.assets is not None:
            for key, value in service.assets.summary().items():
                table.add_row(key.replace("_", " ").capitalize(), str(value))
        if report["error"]:
            table.add_row("Error", f"[red]{report['error']}[/]")
        console.print(table)

    if not service.is_ready:
        sys.exit(1)


@main.command()
@click.argument("dataset", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def evaluate(settings: Settings, dataset: Path, output: str) -> None:
    """Score a labeled JSONL file and print accuracy, precision, recall and F1.

    Each line of DATASET is {"text": "...", "label": 0 or 1}.

    Example: fake-news-detector evaluate holdout.jsonl
    """
    try:
        texts, labels = load_labeled_jsonl(dataset)
    except ValueError as e:
        _fail(f"{dataset}: {e}")
    if not texts:
        _fail(f"{dataset}: no labeled examples")

    service = _load_service(settings)
    with err_console.status(f"[bold blue]Classifying {len(texts):,} examples...", spinner="dots"):
        try:
            metrics = evaluate_service(service, texts, labels)
        except FakeNewsDetectorError as e:
            _fail(str(e))

    if output == "json":
        click.echo(json.dumps(metrics.to_dict(), indent=2))
    else:
        console.print(Panel(metrics.summary(), title=f"📊 Evaluation: {dataset.name}",
                            border_style="blue"))


if __name__ == "__main__":
    main()
