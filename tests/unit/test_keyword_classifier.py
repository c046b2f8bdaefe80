"""Tests for the keyword tier classifier."""

import pytest

from emotriage.config import Priority
from emotriage.triage.domain import KeywordClassifier, KeywordMatch

SAMPLES = [
    "Checkout is broken",
    "payment failed twice",
    "I can't login",
    "cant login since yesterday",
    "Getting a 500 on the dashboard",
    "site is DOWN",
    "possible incident in eu-west",
    "found a bug in the export",
    "page is really slow",
    "Error when saving",
    "how to reset password",
    "quick question about invoices",
    "cosmetic issue with the logo",
    "thanks for the help",
    "",
]


def test_checkout_is_p0_and_high_impact():
    assert KeywordClassifier.classify("Checkout is broken") == KeywordMatch(Priority.P0, True)


def test_how_to_is_p2_not_high_impact():
    assert KeywordClassifier.classify("how to reset password") == KeywordMatch(Priority.P2, False)


@pytest.mark.parametrize("text,tier", [
    ("payment failed twice", Priority.P0),
    ("I can't login", Priority.P0),
    ("cant login since yesterday", Priority.P0),
    ("Getting a 500 on the dashboard", Priority.P0),
    ("site is down", Priority.P0),
    ("possible incident in eu-west", Priority.P0),
    ("found a bug in the export", Priority.P1),
    ("page is really slow", Priority.P1),
    ("Error when saving", Priority.P1),
    ("broken image on the profile", Priority.P1),
    ("quick question about invoices", Priority.P2),
    ("cosmetic issue with the logo", Priority.P2),
    ("thanks for the help", Priority.P2),
])
def test_base_tiers(text, tier):
    assert KeywordClassifier.classify(text).base_tier == tier


def test_tier_zero_wins_over_lower_tiers():
    assert KeywordClassifier.classify("question: is the outage incident a bug?").base_tier == Priority.P0


def test_tier_one_wins_over_tier_two():
    assert KeywordClassifier.classify("question about a slow page").base_tier == Priority.P1


@pytest.mark.parametrize("text,expected", [
    ("payment page shows an error", True),
    ("login form bug", True),
    ("slow checkout", True),
    ("error 500", True),
    ("the export is broken", False),
])
def test_high_impact_is_independent_of_tier(text, expected):
    assert KeywordClassifier.classify(text).high_impact is expected


def test_payment_error_is_p1_with_high_impact():
    assert KeywordClassifier.classify("payment error on renewal") == KeywordMatch(Priority.P1, True)


@pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
def test_blank_text_defaults(text):
    assert KeywordClassifier.classify(text) == KeywordMatch(Priority.P2, False)


@pytest.mark.parametrize("text", SAMPLES)
def test_case_insensitive_and_idempotent(text):
    first = KeywordClassifier.classify(text)
    assert KeywordClassifier.classify(text) == first
    assert KeywordClassifier.classify(text.upper()) == first
    assert KeywordClassifier.classify(text.lower()) == first


def test_substring_matching():
    # "download" contains "down"
    assert KeywordClassifier.classify("download the report").base_tier == Priority.P0


@pytest.mark.parametrize("text,tier", [
    ("ſlow page", Priority.P1),
    ("ſupport queſtion", Priority.P2),
    ("CHECKOUT IS BROKEN", Priority.P0),
])
def test_case_folding_matches_upper_case(text, tier):
    assert KeywordClassifier.classify(text).base_tier == tier
    assert KeywordClassifier.classify(text) == KeywordClassifier.classify(text.upper())
