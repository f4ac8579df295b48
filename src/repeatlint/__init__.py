"""
repeatlint package exports convenience helpers for library consumers.
"""

from __future__ import annotations

from .config import (
    RepeatLintConfig,
    RuleSettings,
    apply_overrides,
    config_from_dict,
    config_from_yaml,
    load_config,
)
from .merging import merge
from .models import Category, Flag, LintResult, Severity, Span, Token, TokenKind
from .pipeline import analyze, detect, lint, lint_corpus, lint_request
from .rendering import render, render_page, strip_markers
from .rules import build_rules_from_config, create_rule
from .tokenization import InvalidInputError, tokenize

__all__ = [
    "RepeatLintConfig",
    "RuleSettings",
    "apply_overrides",
    "config_from_dict",
    "config_from_yaml",
    "load_config",
    "Category",
    "Flag",
    "LintResult",
    "Severity",
    "Span",
    "Token",
    "TokenKind",
    "InvalidInputError",
    "tokenize",
    "create_rule",
    "build_rules_from_config",
    "detect",
    "merge",
    "render",
    "render_page",
    "strip_markers",
    "analyze",
    "lint",
    "lint_corpus",
    "lint_request",
]

__version__ = "0.1.0"
