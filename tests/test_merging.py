import random

from repeatlint.merging import merge
from repeatlint.models import Category, Flag, Severity, Span
from repeatlint.tokenization import tokenize

WORD, PHRASE, ENDING = Category.WORD_REPEAT, Category.PHRASE_REPEAT, Category.ENDING_REPEAT


def _assert_disjoint(spans: list[Span]) -> None:
    for left, right in zip(spans, spans[1:]):
        assert left.end_char <= right.start_char
    assert all(span.start_char < span.end_char for span in spans)


def test_overlapping_flags_merge_into_one_span():
    flags = [
        Flag(0, 4, PHRASE, Severity.WARNING),
        Flag(2, 3, WORD, Severity.ERROR),
        Flag(3, 8, ENDING, Severity.INFO),
    ]
    spans = merge(flags)

    assert spans == [Span(0, 8, frozenset({WORD, PHRASE, ENDING}), Severity.ERROR)]


def test_touching_flags_stay_separate():
    spans = merge([Flag(0, 3, ENDING, Severity.INFO), Flag(3, 6, ENDING, Severity.INFO)])

    assert [(s.start_char, s.end_char) for s in spans] == [(0, 3), (3, 6)]


def test_zero_length_flags_are_dropped():
    assert merge([Flag(5, 5, WORD), Flag(7, 6, WORD)]) == []


def test_merge_is_independent_of_input_order():
    rng = random.Random(1234)
    flags = [
        Flag(start, start + rng.randint(1, 6), rng.choice([WORD, PHRASE, ENDING]), rng.choice(list(Severity)))
        for start in (rng.randint(0, 60) for _ in range(40))
    ]
    expected = merge(flags)
    for _ in range(10):
        shuffled = flags[:]
        rng.shuffle(shuffled)
        assert merge(shuffled) == expected
    _assert_disjoint(expected)


def test_adversarial_nesting_yields_disjoint_spans():
    flags = [Flag(0, 100, WORD)]
    flags += [Flag(i, i + 2, PHRASE, Severity.ERROR) for i in range(0, 98, 3)]
    flags += [Flag(150, 160, ENDING, Severity.INFO), Flag(150, 160, ENDING, Severity.INFO)]
    flags += [Flag(155, 170, WORD), Flag(200, 201, WORD)]
    spans = merge(flags)

    _assert_disjoint(spans)
    assert [(s.start_char, s.end_char) for s in spans] == [(0, 100), (150, 170), (200, 201)]
    assert spans[0].severity is Severity.ERROR
    assert spans[1].categories == frozenset({ENDING, WORD})


def test_spans_snap_outward_to_token_boundaries():
    tokens = tokenize("hello world again")
    spans = merge([Flag(2, 8, WORD)], tokens)

    assert [(s.start_char, s.end_char) for s in spans] == [(0, 11)]


def test_snapping_can_join_flags_that_share_a_token():
    tokens = tokenize("abcdef ghi")
    spans = merge([Flag(0, 2, WORD), Flag(4, 6, PHRASE)], tokens)

    assert spans == [Span(0, 6, frozenset({WORD, PHRASE}), Severity.WARNING)]
