from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Mapping, Sequence

from .config import RepeatLintConfig, apply_overrides
from .merging import merge
from .models import Document, Flag, LintResult, Token
from .rendering import render, wrap_body
from .rules import RepetitionRule, build_rules_from_config
from .tokenization import InvalidInputError, ensure_text, tokenize

logger = logging.getLogger(__name__)


def lint(
    text: str | bytes, config: RepeatLintConfig | None = None, **overrides: Any
) -> str:
    """Return ``text`` as escaped HTML with repetitions highlighted."""
    return analyze(text, config, **overrides).markup


def analyze(
    text: str | bytes, config: RepeatLintConfig | None = None, **overrides: Any
) -> LintResult:
    """Run tokenize -> detect -> merge -> render and keep every intermediate."""
    cfg = apply_overrides(config, **overrides)
    text = ensure_text(text)
    if cfg.max_input_chars and len(text) > cfg.max_input_chars:
        raise InvalidInputError(
            f"Input has {len(text)} characters; the limit is {cfg.max_input_chars}."
        )

    tokens = tokenize(text, cfg.proper_nouns)
    flags = detect(tokens, cfg)
    spans = merge(flags, tokens)
    markup = render(text, spans, cfg.highlight_class)
    if cfg.wrap_body and text:
        markup = wrap_body(markup)

    logger.info(
        "Linted %d char(s): %d token(s), %d flag(s), %d span(s)",
        len(text),
        len(tokens),
        len(flags),
        len(spans),
    )
    return LintResult(text=text, tokens=tokens, flags=flags, spans=spans, markup=markup)


def detect(tokens: Sequence[Token], config: RepeatLintConfig) -> List[Flag]:
    """Run every enabled rule over ``tokens`` and concatenate their flags."""
    rules = build_rules_from_config(config)

    def _run(rule: RepetitionRule) -> List[Flag]:
        return rule.detect(tokens, config)

    if config.parallel_rules > 1 and len(rules) > 1:
        workers = min(config.parallel_rules, len(rules))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(_run, rules))
    else:
        results = [_run(rule) for rule in rules]

    return [flag for result in results for flag in result]


def lint_corpus(
    documents: List[Document], config: RepeatLintConfig | None = None
) -> Dict[str, LintResult]:
    """Lint all documents and return the per-document results."""
    cfg = config if config is not None else RepeatLintConfig()
    results: Dict[str, LintResult] = {}
    for document in documents:
        results[document.doc_id] = analyze(document.text, cfg)
    return results


def lint_request(
    payload: Mapping[str, Any], config: RepeatLintConfig | None = None
) -> Dict[str, str]:
    """
    Serve one ``{"text": ..., "config": {...}}`` request.

    Returns ``{"markup": ...}`` on success and ``{"error": ...}`` when the
    text or the configuration overrides are invalid.
    """
    if "text" not in payload:
        return {"error": "Request must include 'text'."}
    overrides = payload.get("config") or {}
    if not isinstance(overrides, Mapping):
        return {"error": "'config' must be a mapping of option names to values."}
    try:
        markup = lint(payload["text"], config, **dict(overrides))
    except (ValueError, TypeError) as exc:
        logger.warning("Rejected lint request: %s", exc)
        return {"error": str(exc)}
    return {"markup": markup}
