# mypy: ignore-errors
# tests/services/test_engagement.py
"""Tests for the shared like/dislike toggle."""

from __future__ import annotations

import pytest

from loopfeed.models.reaction import REACTION_TARGET_POST
from loopfeed.services.engagement import reaction_states, toggle_reaction
from loopfeed.services.errors import InvalidInputError


def test_like_then_like_again_removes_it(db_session, post, bob) -> None:
    state = toggle_reaction(db_session, post, bob.id, "like")
    assert (state.likes, state.dislikes, state.is_liked, state.is_disliked) == (1, 0, True, False)

    state = toggle_reaction(db_session, post, bob.id, "like")
    assert (state.likes, state.dislikes, state.is_liked, state.is_disliked) == (0, 0, False, False)


def test_switching_sides_never_leaves_user_in_both_sets(db_session, post, bob) -> None:
    """Disliked, then liked: the user ends in the like set only."""
    toggle_reaction(db_session, post, bob.id, "dislike")
    state = toggle_reaction(db_session, post, bob.id, "like")

    assert state.is_liked is True
    assert state.is_disliked is False
    assert state.likes == 1
    assert state.dislikes == 0

    state = toggle_reaction(db_session, post, bob.id, "dislike")
    assert (state.likes, state.dislikes, state.is_liked, state.is_disliked) == (0, 1, False, True)


def test_counts_aggregate_across_users(db_session, post, bob, carol, dave) -> None:
    toggle_reaction(db_session, post, bob.id, "like")
    toggle_reaction(db_session, post, carol.id, "like")
    state = toggle_reaction(db_session, post, dave.id, "dislike")

    assert state.likes == 2
    assert state.dislikes == 1
    assert state.is_disliked is True
    assert state.is_liked is False


def test_reaction_states_batches_and_fills_missing(db_session, make_post, alice, bob) -> None:
    first = make_post(alice, title="first")
    second = make_post(alice, title="second")
    toggle_reaction(db_session, first, bob.id, "like")

    states = reaction_states(db_session, REACTION_TARGET_POST, [first.id, second.id], bob.id)

    assert states[first.id].is_liked is True
    assert states[first.id].likes == 1
    assert states[second.id].likes == 0
    assert states[second.id].is_liked is False

    anonymous = reaction_states(db_session, REACTION_TARGET_POST, [first.id])
    assert anonymous[first.id].likes == 1
    assert anonymous[first.id].is_liked is False


def test_unknown_reaction_is_rejected(db_session, post, bob) -> None:
    with pytest.raises(InvalidInputError):
        toggle_reaction(db_session, post, bob.id, "love")
