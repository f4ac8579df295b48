import pytest

from repeatlint.config import RepeatLintConfig, RuleSettings
from repeatlint.models import Category, Document
from repeatlint.pipeline import analyze, lint, lint_corpus, lint_request
from repeatlint.rendering import strip_markers
from repeatlint.textutils import normalize_text
from repeatlint.tokenization import InvalidInputError, tokenize

SAMPLES = [
    "",
    "猫が好き。猫が好き。",
    "これは猫だ。あれは犬だ。それは鳥だ。",
    "彼は走った。彼は走った。\n\n彼女も走った。彼女も走った。",
    "The cat saw the cat & the dog <sat>.\n\n  The end.",
    "「行くぞ！」と言った。「行くぞ！」と言った。「行くぞ！」と言った。",
    "ああああああああ",
    "\n\n\n",
]


def test_empty_text_returns_empty_string():
    assert lint("") == ""
    assert lint("", RepeatLintConfig(wrap_body=True)) == ""


def test_repeated_sentence_highlights_both_phrases():
    text = "猫が好き。猫が好き。"
    result = analyze(text, window=4, min_phrase_length=4)

    assert [text[s.start_char : s.end_char] for s in result.spans] == ["猫が好き", "猫が好き"]
    assert all(Category.PHRASE_REPEAT in s.categories for s in result.spans)
    assert result.markup.count("phrase-repeat") == 4  # class + title, per span


def test_three_equal_endings_are_flagged():
    text = "これは猫だ。あれは犬だ。それは鳥だ。"
    result = analyze(text)

    assert [text[s.start_char : s.end_char] for s in result.spans] == [
        "これは猫だ。",
        "あれは犬だ。",
        "それは鳥だ。",
    ]
    assert all(s.categories == frozenset({Category.ENDING_REPEAT}) for s in result.spans)


def test_equal_endings_after_okurigana_are_flagged():
    text = "今日は晴れだ。明日は雨だ。昨日は曇りだ。"
    result = analyze(text)

    assert [text[s.start_char : s.end_char] for s in result.spans] == [
        "今日は晴れだ。",
        "明日は雨だ。",
        "昨日は曇りだ。",
    ]
    assert all(s.categories == frozenset({Category.ENDING_REPEAT}) for s in result.spans)


def test_two_equal_endings_are_not_flagged():
    assert analyze("これは猫だ。あれは犬だ。").spans == []


def test_markup_characters_are_escaped_without_highlights():
    markup = lint("A < B & C")

    assert markup == "A &lt; B &amp; C"
    assert "<span" not in markup


@pytest.mark.parametrize("text", SAMPLES)
def test_markup_round_trips_to_input(text: str):
    config = RepeatLintConfig(window=6, min_phrase_length=2, ignore_scripts=())
    assert strip_markers(lint(text, config)) == text


@pytest.mark.parametrize("text", SAMPLES)
def test_pipeline_is_deterministic(text: str):
    serial = RepeatLintConfig(window=6, min_phrase_length=2)
    parallel = RepeatLintConfig(window=6, min_phrase_length=2, parallel_rules=3)

    first = lint(text, serial)
    assert lint(text, serial) == first
    assert lint(text, parallel) == first


@pytest.mark.parametrize("window", [0, 1, 3])
@pytest.mark.parametrize("text", SAMPLES)
def test_isolated_words_are_never_highlighted(text: str, window: int):
    config = RepeatLintConfig(
        window=window,
        ignore_scripts=(),
        rules=RuleSettings(phrase_repeat=False, ending_repeat=False),
    )
    result = analyze(text, config)
    words = [t for t in tokenize(text) if t.is_word]
    keys = [normalize_text(t.text) for t in words]

    for idx, token in enumerate(words):
        highlighted = any(
            s.start_char <= token.start_char and token.end_char <= s.end_char
            for s in result.spans
        )
        nearby = keys[max(0, idx - window - 1) : idx] + keys[idx + 1 : idx + window + 2]
        if keys[idx] not in nearby:
            assert not highlighted, token


def test_spans_are_sorted_disjoint_and_token_aligned():
    text = SAMPLES[5]
    result = analyze(text, window=8, min_phrase_length=2, ignore_scripts=())
    boundaries = {0, len(text)} | {t.start_char for t in result.tokens}

    assert result.spans
    for left, right in zip(result.spans, result.spans[1:]):
        assert left.end_char <= right.start_char
    for span in result.spans:
        assert span.start_char in boundaries
        assert span.end_char in boundaries


def test_wrap_body_option():
    assert lint("abc", wrap_body=True) == '<div class="novel-body">abc</div>'


def test_proper_nouns_are_compared_whole():
    text = "東京タワーと東京の駅"
    plain = analyze(text, min_phrase_length=5)
    named = analyze(text, min_phrase_length=5, proper_nouns=["東京タワー"])

    assert [text[s.start_char : s.end_char] for s in plain.spans] == ["東京", "東京"]
    assert named.spans == []


def test_invalid_input_raises():
    with pytest.raises(InvalidInputError):
        lint(b"\xff\xfe")
    with pytest.raises(InvalidInputError):
        lint("bad \udc80 text")
    with pytest.raises(InvalidInputError):
        lint("x" * 11, max_input_chars=10)


def test_unknown_override_is_rejected():
    with pytest.raises(ValueError):
        lint("abc", windw=3)


def test_lint_corpus_returns_result_per_document():
    docs = [Document("a", "猫が好き。猫が好き。"), Document("b", "静かな夜。")]
    results = lint_corpus(docs, RepeatLintConfig(window=4, min_phrase_length=4))

    assert sorted(results) == ["a", "b"]
    assert len(results["a"].spans) == 2
    assert results["b"].spans == []
    assert results["b"].markup == "静かな夜。"


def test_lint_request_success_and_errors():
    ok = lint_request({"text": "A < B", "config": {"rules": {"ending_repeat": False}}})
    assert ok == {"markup": "A &lt; B"}

    assert "error" in lint_request({"config": {}})
    assert "error" in lint_request({"text": b"\xff"})
    assert "error" in lint_request({"text": "abc", "config": {"nope": 1}})
    assert "error" in lint_request({"text": "abc", "config": {"min_phrase_length": 9}})
    assert "error" in lint_request({"text": "abc", "config": ["window"]})
