from datetime import date
from decimal import Decimal

import pytest

from bank_book_recon.analysis.suggestions import SuggestionGenerator, total_impact
from bank_book_recon.models.results import SuggestionKind


@pytest.fixture
def generator(config):
    return SuggestionGenerator(config)


def test_missing_transactions_above_threshold(generator, make_bank, make_book):
    book = make_book("-250.00", description="Insurance premium")
    small_bank = make_bank("80.00", description="Parking")
    large_bank = make_bank("300.00", description="Wire in")

    suggestions = generator.generate([small_bank, large_bank], [book])

    assert [s.kind for s in suggestions] == [SuggestionKind.MISSING_TRANSACTION] * 2
    first, second = suggestions
    assert first.related_bank == large_bank
    assert first.confidence == 0.7
    assert first.impact_amount == Decimal("300.00")
    assert first.action.startswith("Create matching book entry")
    assert second.related_book == book
    assert second.confidence == 0.8
    assert second.impact_amount == Decimal("250.00")
    assert second.action == (
        "Verify transaction was processed by bank or add to bank statement"
    )


def test_amount_exactly_at_threshold_is_ignored(generator, make_bank):
    assert generator.generate([make_bank("100.00")], []) == []


def test_duplicate_within_one_day(generator, make_bank):
    first = make_bank("500.00", on=date(2024, 1, 10), description="Office Supplies")
    second = make_bank("500.00", on=date(2024, 1, 11), description="Office Supplies")

    suggestions = generator.generate([first, second], [])

    duplicates = [s for s in suggestions if s.kind == SuggestionKind.DUPLICATE_TRANSACTION]
    assert len(duplicates) == 1
    duplicate = duplicates[0]
    assert duplicate.confidence == pytest.approx(0.9)
    assert duplicate.related_bank == first
    assert duplicate.duplicate_of == second
    assert duplicate.impact_amount == Decimal("500.00")
    # both halves are also reported as missing from the books
    assert len(suggestions) == 3


def test_same_day_duplicate_confidence_is_capped(generator, make_bank):
    first = make_bank("45.00", description="Uber trip")
    second = make_bank("45.00", description="UBER TRIP")

    [duplicate] = generator.generate([first, second], [])

    assert duplicate.confidence == pytest.approx(0.95)


def test_duplicate_up_to_three_days_needs_high_similarity(generator, make_bank):
    first = make_bank("45.00", on=date(2024, 1, 1), description="Uber trip")
    three_days = make_bank("45.00", on=date(2024, 1, 4), description="Uber trip")
    four_days = make_bank("45.00", on=date(2024, 1, 5), description="Uber trip")

    pairs = generator.find_potential_duplicates([first, three_days])
    assert [(a.id, b.id) for a, b, _ in pairs] == [(first.id, three_days.id)]
    assert generator.find_potential_duplicates([first, four_days]) == []


def test_different_amounts_are_not_duplicates(generator, make_bank):
    first = make_bank("45.00", description="Uber trip")
    second = make_bank("45.50", description="Uber trip")

    assert generator.find_potential_duplicates([first, second]) == []


def test_each_duplicate_pair_reported_once(generator, make_bank):
    txns = [make_bank("20.00", description="Coffee order") for _ in range(3)]

    pairs = generator.find_potential_duplicates(txns)

    keys = [(a.id, b.id) for a, b, _ in pairs]
    assert len(keys) == 3
    assert all((b, a) not in keys for a, b in keys)


def test_sorted_by_descending_impact(generator, make_bank, make_book):
    suggestions = generator.generate(
        [make_bank("150.00"), make_bank("9000.00", description="Equipment")],
        [make_book("700.00", description="Consulting")],
    )

    impacts = [s.impact_amount for s in suggestions]
    assert impacts == sorted(impacts, reverse=True)
    assert total_impact(suggestions) == Decimal("9850.00")


def test_no_input_no_suggestions(generator):
    assert generator.generate([], []) == []
