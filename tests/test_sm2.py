from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from vocab_review.srs.errors import InvalidQualityError
from vocab_review.srs.sm2 import (
    MIN_EASE_FACTOR,
    SchedulingState,
    calculate_next_schedule,
    days_until_due,
    initialize_state,
    is_passing,
    is_due,
    quality_from_response,
    response_button_to_quality,
)


NOW = datetime(2026, 10, 17, 9, 30, tzinfo=timezone.utc)


def _state(**overrides) -> SchedulingState:
    values = {
        "card_id": "card-1",
        "ease_factor": 2.5,
        "interval": 10,
        "repetitions": 5,
        "next_review_at": NOW,
    }
    values.update(overrides)
    return SchedulingState(**values)


@pytest.mark.parametrize("quality", [0, 1, 2])
def test_failed_review_resets_progress(quality: int) -> None:
    schedule = calculate_next_schedule(_state(), quality, now=NOW)

    assert schedule.repetitions == 0
    assert schedule.interval == 1
    assert schedule.next_review_at == NOW + timedelta(days=1)


def test_successful_reviews_follow_interval_ladder() -> None:
    state = initialize_state("card-1", now=NOW)

    first = calculate_next_schedule(state, 4, now=NOW)
    assert (first.repetitions, first.interval) == (1, 1)

    second = calculate_next_schedule(first, 4, now=NOW)
    assert (second.repetitions, second.interval) == (2, 6)
    assert second.ease_factor == pytest.approx(2.5)

    third = calculate_next_schedule(second, 4, now=NOW)
    assert (third.repetitions, third.interval) == (3, 15)
    assert third.next_review_at == NOW + timedelta(days=15)


def test_interval_growth_uses_ease_factor_before_update() -> None:
    state = _state(ease_factor=1.3, interval=6, repetitions=2)

    schedule = calculate_next_schedule(state, 3, now=NOW)

    assert schedule.interval == 8  # round(6 * 1.3)
    assert schedule.ease_factor == pytest.approx(MIN_EASE_FACTOR)


def test_interval_rounds_half_up() -> None:
    schedule = calculate_next_schedule(_state(interval=5, repetitions=3), 4, now=NOW)

    assert schedule.interval == 13  # 5 * 2.5 = 12.5


@pytest.mark.parametrize("quality", range(6))
@pytest.mark.parametrize("ease_factor", [1.3, 1.5, 2.5, 3.1])
def test_ease_factor_never_drops_below_floor(quality: int, ease_factor: float) -> None:
    schedule = calculate_next_schedule(_state(ease_factor=ease_factor), quality, now=NOW)

    assert schedule.ease_factor >= MIN_EASE_FACTOR


def test_ease_factor_is_updated_on_failure() -> None:
    schedule = calculate_next_schedule(_state(), 0, now=NOW)

    assert schedule.ease_factor == pytest.approx(1.7)


def test_perfect_answers_keep_raising_ease_factor() -> None:
    state = initialize_state("card-1", now=NOW)
    previous = state.ease_factor

    for _ in range(10):
        state = calculate_next_schedule(state, 5, now=NOW)
        assert state.ease_factor > previous
        previous = state.ease_factor

    assert state.ease_factor == pytest.approx(3.5)


def test_schedule_carries_card_and_review_time() -> None:
    schedule = calculate_next_schedule(_state(card_id="abc"), 5, now=NOW)

    assert schedule.card_id == "abc"
    assert schedule.last_review_at == NOW


def test_same_inputs_produce_same_schedule() -> None:
    state = _state()

    assert calculate_next_schedule(state, 3, now=NOW) == calculate_next_schedule(state, 3, now=NOW)


@pytest.mark.parametrize("quality", [-1, 6, 2.5, "4", None, True])
def test_invalid_quality_is_rejected(quality: object) -> None:
    with pytest.raises(InvalidQualityError):
        calculate_next_schedule(_state(), quality, now=NOW)


def test_invalid_quality_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        calculate_next_schedule(_state(), 9, now=NOW)


def test_initialized_card_is_due_immediately() -> None:
    state = initialize_state("new-card", now=NOW)

    assert state.ease_factor == 2.5
    assert state.interval == 0
    assert state.repetitions == 0
    assert state.last_review_at is None
    assert is_due(state, NOW)
    assert not is_due(state, NOW - timedelta(seconds=1))


def test_days_until_due_rounds_up_and_floors_at_zero() -> None:
    assert days_until_due(_state(next_review_at=NOW + timedelta(hours=36)), NOW) == 2
    assert days_until_due(_state(next_review_at=NOW + timedelta(days=3)), NOW) == 3
    assert days_until_due(_state(next_review_at=NOW), NOW) == 0
    assert days_until_due(_state(next_review_at=NOW - timedelta(days=4)), NOW) == 0


def test_response_buttons_map_to_quality() -> None:
    assert response_button_to_quality("again") == 0
    assert response_button_to_quality("hard") == 2
    assert response_button_to_quality("Good") == 4
    assert response_button_to_quality("easy") == 5

    with pytest.raises(InvalidQualityError):
        response_button_to_quality("maybe")


def test_quality_from_response_time() -> None:
    assert quality_from_response(False, 500) == 1
    assert quality_from_response(True, 1200) == 5
    assert quality_from_response(True, 5000) == 4
    assert quality_from_response(True, 15000) == 3


def test_passing_threshold_is_three() -> None:
    assert [quality for quality in range(6) if is_passing(quality)] == [3, 4, 5]
