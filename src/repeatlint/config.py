from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

from .textutils import NORMALIZATION_MODES


@dataclass(frozen=True, slots=True)
class RuleSettings:
    """Per-rule enable switches."""

    word_repeat: bool = True
    phrase_repeat: bool = True
    ending_repeat: bool = True

    def enabled(self) -> list[str]:
        return [item.name for item in fields(self) if getattr(self, item.name)]


@dataclass(frozen=True, slots=True)
class RepeatLintConfig:
    """Configuration options for the repetition linter."""

    window: int = 10
    min_phrase_length: int = 3
    max_phrase_length: int = 8
    min_repeat_count: int = 2
    min_word_length: int = 1
    ending_length: int = 1
    ending_kana_chars: int = 1
    min_ending_run: int = 3
    sentence_terminators: str = "。！？!?．."
    normalization: str = "nfkc_casefold"
    ignore_words: tuple[str, ...] = ()
    ignore_scripts: tuple[str, ...] = ("hiragana",)
    proper_nouns: tuple[str, ...] = ()
    rules: RuleSettings = field(default_factory=RuleSettings)
    parallel_rules: int = 1
    highlight_class: str = "alert"
    wrap_body: bool = False
    max_input_chars: int = 0

    def __post_init__(self) -> None:
        # YAML hands us lists; keep the instance hashable and immutable.
        for name in ("ignore_words", "ignore_scripts", "proper_nouns"):
            value = getattr(self, name)
            if isinstance(value, str):
                value = (value,)
            object.__setattr__(self, name, tuple(value))
        _validate(self)

    def to_dict(self) -> dict[str, Any]:
        """Return a plain dictionary representation of the configuration."""
        data = dict(asdict(self))
        for name in ("ignore_words", "ignore_scripts", "proper_nouns"):
            data[name] = list(data[name])
        return data


def _validate(config: RepeatLintConfig) -> None:
    if config.window < 0:
        raise ValueError("window must be >= 0.")
    if config.min_phrase_length < 1:
        raise ValueError("min_phrase_length must be >= 1.")
    if config.max_phrase_length < config.min_phrase_length:
        raise ValueError("max_phrase_length must be >= min_phrase_length.")
    if config.min_repeat_count < 2:
        raise ValueError("min_repeat_count must be >= 2.")
    if config.min_word_length < 1:
        raise ValueError("min_word_length must be >= 1.")
    if config.ending_length not in (1, 2):
        raise ValueError("ending_length must be 1 or 2.")
    if config.ending_kana_chars < 1:
        raise ValueError("ending_kana_chars must be >= 1.")
    if config.min_ending_run < 2:
        raise ValueError("min_ending_run must be >= 2.")
    if config.normalization not in NORMALIZATION_MODES:
        raise ValueError(
            f"normalization must be one of {', '.join(NORMALIZATION_MODES)}."
        )
    if config.parallel_rules < 1:
        raise ValueError("parallel_rules must be >= 1.")
    if config.max_input_chars < 0:
        raise ValueError("max_input_chars must be >= 0.")
    spaced = [noun for noun in config.proper_nouns if any(c.isspace() for c in noun)]
    if spaced:
        raise ValueError(
            f"proper_nouns entries may not contain whitespace: {', '.join(spaced)}."
        )
    if not isinstance(config.rules, RuleSettings):
        raise ValueError("rules must be a RuleSettings instance or mapping.")


def _build_kwargs(data: Mapping[str, Any]) -> dict[str, Any]:
    allowed = {field.name for field in fields(RepeatLintConfig)}
    kwargs = {key: data[key] for key in data if key in allowed}
    if "rules" in data:
        rules_value = data["rules"]
        if isinstance(rules_value, RuleSettings):
            kwargs["rules"] = rules_value
        elif isinstance(rules_value, Mapping):
            kwargs["rules"] = _build_rule_settings(rules_value)
    return kwargs


def _build_rule_settings(data: Mapping[str, Any]) -> RuleSettings:
    rules_allowed = {field.name for field in fields(RuleSettings)}
    filtered = {key: bool(data[key]) for key in data if key in rules_allowed}
    return RuleSettings(**filtered)


def config_from_dict(data: Mapping[str, Any] | None) -> RepeatLintConfig:
    """Build a RepeatLintConfig from a dictionary-like input."""
    if data is None:
        return RepeatLintConfig()
    return RepeatLintConfig(**_build_kwargs(data))


def config_from_yaml(path: str | Path) -> RepeatLintConfig:
    """Load configuration from a YAML file."""
    contents = Path(path).read_text(encoding="utf-8")
    parsed = yaml.safe_load(contents) or {}
    if not isinstance(parsed, MutableMapping):
        raise ValueError("Configuration YAML must define a mapping.")
    return config_from_dict(parsed)


def load_config(path: str | Path | None = None) -> RepeatLintConfig:
    """Load configuration from YAML when provided, otherwise return defaults."""
    if path is None:
        return RepeatLintConfig()
    return config_from_yaml(path)


def apply_overrides(
    config: RepeatLintConfig | None = None, **overrides: Any
) -> RepeatLintConfig:
    """
    Return a copy of ``config`` with per-call overrides applied.

    Unlike file loading, unknown keys are rejected so a typo in a call site
    does not silently fall back to a default. ``rules`` may be a partial
    mapping; switches it omits keep their current value.
    """
    base = config if config is not None else RepeatLintConfig()
    if not overrides:
        return base
    allowed = {field.name for field in fields(RepeatLintConfig)}
    unknown = sorted(set(overrides) - allowed)
    if unknown:
        raise ValueError(f"Unknown configuration option(s): {', '.join(unknown)}.")
    rules_value = overrides.get("rules")
    if isinstance(rules_value, Mapping):
        merged = {**asdict(base.rules), **rules_value}
        overrides["rules"] = _build_rule_settings(merged)
    return replace(base, **overrides)
