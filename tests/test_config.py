from pathlib import Path

import pytest

from repeatlint.config import (
    RepeatLintConfig,
    RuleSettings,
    apply_overrides,
    config_from_dict,
    config_from_yaml,
    load_config,
)


def test_defaults_and_dict_round_trip():
    config = load_config()

    assert config == RepeatLintConfig()
    assert config.rules.enabled() == ["word_repeat", "phrase_repeat", "ending_repeat"]
    assert config_from_dict(config.to_dict()) == config
    assert config_from_dict(None) == config


def test_config_from_yaml_reads_lists_and_rules(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "window: 4\n"
        "ignore_words: [こと, もの]\n"
        "proper_nouns:\n  - 東京タワー\n"
        "rules:\n  ending_repeat: false\n"
        "unused_key: 1\n",
        encoding="utf-8",
    )
    config = config_from_yaml(path)

    assert config.window == 4
    assert config.ignore_words == ("こと", "もの")
    assert config.proper_nouns == ("東京タワー",)
    assert config.rules == RuleSettings(ending_repeat=False)


def test_config_yaml_must_be_mapping(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        config_from_yaml(path)


@pytest.mark.parametrize(
    "overrides",
    [
        {"window": -1},
        {"min_phrase_length": 0},
        {"min_phrase_length": 5, "max_phrase_length": 4},
        {"min_repeat_count": 1},
        {"ending_length": 3},
        {"ending_kana_chars": 0},
        {"proper_nouns": ["New York"]},
        {"min_ending_run": 1},
        {"normalization": "lowercase"},
        {"parallel_rules": 0},
        {"max_input_chars": -5},
        {"rules": ["word_repeat"]},
    ],
)
def test_invalid_values_are_rejected(overrides: dict):
    with pytest.raises(ValueError):
        config_from_dict(overrides)


def test_config_is_immutable():
    config = RepeatLintConfig()

    with pytest.raises(AttributeError):
        config.window = 3  # type: ignore[misc]


def test_apply_overrides_merges_partial_rules():
    base = RepeatLintConfig(rules=RuleSettings(word_repeat=False))
    updated = apply_overrides(base, window=2, rules={"ending_repeat": False})

    assert updated.window == 2
    assert updated.rules == RuleSettings(word_repeat=False, ending_repeat=False)
    assert base.window == 10
    assert apply_overrides(base) is base


def test_apply_overrides_rejects_unknown_keys():
    with pytest.raises(ValueError):
        apply_overrides(RepeatLintConfig(), windw=2)


def test_example_config_loads():
    path = Path(__file__).resolve().parents[1] / "config.example.yaml"
    config = load_config(path)

    assert config.ignore_words == ("こと", "もの")
    assert config.rules == RuleSettings()
