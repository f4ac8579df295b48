from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Dict, List, TypedDict

import typer
import yaml

from .config import RepeatLintConfig, apply_overrides, load_config
from .models import Document, LintResult
from .pipeline import analyze, lint_corpus
from .rendering import render_page
from .rules import RULES
from .tokenization import InvalidInputError

app = typer.Typer(help="Repetition linter for prose.", no_args_is_help=True)

# File types the CLI knows how to expand into Document instances.
SUPPORTED_INPUT_EXTENSIONS = {".txt", ".md"}

EXCERPT_CHARS = 40


@app.callback()
def configure(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log pipeline progress to stderr."
    ),
) -> None:
    """Repetition linter for prose."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


@app.command("lint")
def lint_command(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, file_okay=True
    ),
    output_path: Path | None = typer.Option(
        None, "--output-path", "-o", help="Write HTML here instead of stdout."
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    window: int | None = typer.Option(
        None, "--window", help="Max words between two nearby repeats."
    ),
    min_phrase_length: int | None = typer.Option(
        None, "--min-phrase-length", help="Shortest phrase (in words) to compare."
    ),
    max_phrase_length: int | None = typer.Option(
        None, "--max-phrase-length", help="Longest phrase (in words) to compare."
    ),
    disable_rule: List[str] | None = typer.Option(
        None, "--disable-rule", help="Rule to switch off (repeatable)."
    ),
    page: bool = typer.Option(
        True, "--page/--fragment", help="Emit a standalone page or a bare fragment."
    ),
) -> None:
    """Lint a text file and emit highlighted HTML."""
    cfg = _apply_cli_overrides(
        load_config(config), window, min_phrase_length, max_phrase_length, disable_rule
    )
    document = _document_from_file(input_path, input_path.name)
    result = _analyze_document(document, cfg)
    html = (
        render_page(result.markup, title=document.doc_id, highlight_class=cfg.highlight_class)
        if page
        else result.markup
    )
    if output_path is None:
        typer.echo(html, nl=False)
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")
    typer.echo(f"Wrote {len(result.spans)} highlight(s) to {output_path}")


@app.command()
def report(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=True, file_okay=True
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    window: int | None = typer.Option(
        None, "--window", help="Max words between two nearby repeats."
    ),
    min_phrase_length: int | None = typer.Option(
        None, "--min-phrase-length", help="Shortest phrase (in words) to compare."
    ),
    max_phrase_length: int | None = typer.Option(
        None, "--max-phrase-length", help="Longest phrase (in words) to compare."
    ),
    disable_rule: List[str] | None = typer.Option(
        None, "--disable-rule", help="Rule to switch off (repeatable)."
    ),
) -> None:
    """Lint a file or directory and emit a JSON summary of the findings."""
    cfg = _apply_cli_overrides(
        load_config(config), window, min_phrase_length, max_phrase_length, disable_rule
    )
    documents = _load_documents(input_path)
    try:
        results = lint_corpus(documents, cfg)
    except InvalidInputError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(json.dumps({"documents": _build_summary(results)}, indent=2, ensure_ascii=False))


@app.command("print-config")
def print_config() -> None:
    """Print the default configuration as YAML."""
    cfg = RepeatLintConfig()
    typer.echo(yaml.safe_dump(cfg.to_dict(), sort_keys=False, allow_unicode=True))


def main() -> None:
    app()


def _apply_cli_overrides(
    config: RepeatLintConfig,
    window: int | None,
    min_phrase_length: int | None,
    max_phrase_length: int | None,
    disable_rule: List[str] | None,
) -> RepeatLintConfig:
    """Apply CLI overrides to the loaded configuration when provided."""
    overrides: Dict[str, object] = {}
    if window is not None:
        overrides["window"] = window
    if min_phrase_length is not None:
        overrides["min_phrase_length"] = min_phrase_length
    if max_phrase_length is not None:
        overrides["max_phrase_length"] = max_phrase_length
    if disable_rule:
        names = [name.lower().strip().replace("-", "_") for name in disable_rule]
        unknown = [name for name in names if name not in RULES]
        if unknown:
            raise typer.BadParameter(f"Unknown rule(s): {', '.join(unknown)}")
        overrides["rules"] = {name: False for name in names}
    try:
        return apply_overrides(config, **overrides)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


class SpanPayload(TypedDict):
    start_char: int
    end_char: int
    categories: List[str]
    severity: str
    excerpt: str


class DocumentSummary(TypedDict):
    doc_id: str
    characters: int
    flag_counts: Dict[str, int]
    spans: List[SpanPayload]


def _load_documents(input_path: Path) -> List[Document]:
    """Expand the input path into documents keyed by their relative path."""
    if input_path.is_file():
        return [_document_from_file(input_path, input_path.name)]

    files = sorted(
        p
        for p in input_path.rglob("*")
        if p.is_file() and p.suffix.lower() in SUPPORTED_INPUT_EXTENSIONS
    )
    return [
        _document_from_file(file, file.relative_to(input_path).as_posix())
        for file in files
    ]


def _document_from_file(path: Path, doc_id: str) -> Document:
    """Read a UTF-8 text file and wrap it in a Document."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise typer.BadParameter(f"{path} is not valid UTF-8 text.") from exc
    return Document(doc_id=doc_id, text=text)


def _analyze_document(document: Document, config: RepeatLintConfig) -> LintResult:
    try:
        return analyze(document.text, config)
    except InvalidInputError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _build_summary(results: Dict[str, LintResult]) -> List[DocumentSummary]:
    """Create a JSON-serializable summary for each linted document."""
    summary: List[DocumentSummary] = []
    for doc_id, result in sorted(results.items()):
        counts = Counter(flag.category.value for flag in result.flags)
        summary.append(
            {
                "doc_id": doc_id,
                "characters": len(result.text),
                "flag_counts": dict(sorted(counts.items())),
                "spans": [
                    {
                        "start_char": span.start_char,
                        "end_char": span.end_char,
                        "categories": [c.value for c in span.sorted_categories()],
                        "severity": span.severity.label,
                        "excerpt": result.text[span.start_char : span.end_char][
                            :EXCERPT_CHARS
                        ],
                    }
                    for span in result.spans
                ],
            }
        )
    return summary


if __name__ == "__main__":
    main()
