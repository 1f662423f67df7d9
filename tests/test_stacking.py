"""Tests for keeper round stacking."""

import pytest

from keeper_cap.config import ConfigurationError
from keeper_cap.models import Decision, RosterEntry
from keeper_cap.stacking import (
    find_keeper_round_collisions,
    find_round_conflicts,
    group_keepers,
    move_priority,
    stack_keeper_rounds,
)

ROUNDS = 14


def keep(player_id: str, base_round: int | None, priority: int | None = None):
    return RosterEntry(
        player_id=player_id,
        decision=Decision.KEEP,
        base_round=base_round,
        priority=priority,
    )


def rounds_by_player(entries: list[RosterEntry]) -> dict[str, int | None]:
    return {e.player_id: e.keeper_round for e in entries}


class TestStackKeeperRounds:
    """Tests for stack_keeper_rounds."""

    def test_round_one_conflict_becomes_franchise_tag(self) -> None:
        """Test the second round-1 keeper is carried by a franchise tag."""
        result = stack_keeper_rounds([keep("a", 1, 0), keep("b", 1, 1)], ROUNDS)

        a, b = result.entries
        assert a.keeper_round == 1 and not a.franchise_tag
        assert b.keeper_round == 1 and b.franchise_tag
        assert result.franchise_tags == 1

    def test_bottom_of_draft_stacking(self) -> None:
        """Test contested keepers slide to the next open rounds."""
        entries = [keep("a", 5, 0), keep("b", 5, 1), keep("c", 5, 2)]

        result = stack_keeper_rounds(entries, ROUNDS)

        assert rounds_by_player(result.entries) == {"a": 5, "b": 6, "c": 7}
        assert result.franchise_tags == 0

    def test_stacking_skips_claimed_rounds(self) -> None:
        """Test a displaced keeper skips rounds already held."""
        entries = [keep("a", 5, 0), keep("b", 5, 1), keep("c", 6), keep("d", 7)]

        result = stack_keeper_rounds(entries, ROUNDS)

        # c and d resolve after the round-5 group has claimed 5 and 6
        assert rounds_by_player(result.entries) == {"a": 5, "b": 6, "c": 7, "d": 8}

    def test_priority_decides_winner_not_input_order(self) -> None:
        """Test the lower priority wins regardless of list position."""
        result = stack_keeper_rounds([keep("a", 5, 1), keep("b", 5, 0)], ROUNDS)
        assert rounds_by_player(result.entries) == {"a": 6, "b": 5}

    def test_unprioritized_entries_after_prioritized(self) -> None:
        """Test entries without priority resolve last, in input order."""
        entries = [keep("a", 5), keep("b", 5, 3), keep("c", 5)]

        result = stack_keeper_rounds(entries, ROUNDS)

        assert rounds_by_player(result.entries) == {"a": 6, "b": 5, "c": 7}

    def test_missing_base_round_uses_last_round(self) -> None:
        """Test a keeper with no base round lands in round R."""
        result = stack_keeper_rounds([keep("a", None)], 13)
        assert result.entries[0].keeper_round == 13

    def test_out_of_range_base_round_is_clamped(self) -> None:
        """Test base rounds below 1 or above R are clamped into range."""
        result = stack_keeper_rounds([keep("a", 0), keep("b", 20)], ROUNDS)
        assert rounds_by_player(result.entries) == {"a": 1, "b": 14}

    def test_overflow_is_flagged_and_clamped(self) -> None:
        """Test running out of rounds flags the keeper instead of raising."""
        entries = [keep("a", 13, 0), keep("b", 13, 1), keep("c", 13, 2)]

        result = stack_keeper_rounds(entries, ROUNDS)

        a, b, c = result.entries
        assert (a.keeper_round, b.keeper_round) == (13, 14)
        assert c.keeper_round == 14
        assert c.overflow is True
        assert not a.overflow and not b.overflow
        assert result.overflow == ["c"]

    def test_non_keepers_get_no_round(self) -> None:
        """Test DROP, REDSHIRT and INT_STASH entries are not stacked."""
        entries = [
            RosterEntry("d", Decision.DROP, base_round=3),
            RosterEntry("r", Decision.REDSHIRT, base_round=3),
            RosterEntry("i", Decision.INT_STASH, base_round=3),
            keep("k", 3),
        ]

        result = stack_keeper_rounds(entries, ROUNDS)

        assert rounds_by_player(result.entries) == {
            "d": None,
            "r": None,
            "i": None,
            "k": 3,
        }

    def test_keeper_rounds_are_unique(self) -> None:
        """Test no two non-tagged keepers share a round."""
        entries = [
            keep("a", 1, 0),
            keep("b", 1, 1),
            keep("c", 1, 2),
            keep("d", 3),
            keep("e", 3),
            keep("f", 4),
            keep("g", None),
            keep("h", 10),
        ]

        result = stack_keeper_rounds(entries, ROUNDS)

        held = [
            e.keeper_round
            for e in result.entries
            if not e.franchise_tag and not e.overflow
        ]
        assert len(held) == len(set(held))
        assert result.franchise_tags == 2
        assert find_keeper_round_collisions(result.entries) == {}

    def test_does_not_mutate_inputs(self) -> None:
        """Test the caller's entries are left untouched."""
        entries = [keep("a", 1, 0), keep("b", 1, 1)]

        stack_keeper_rounds(entries, ROUNDS)

        assert all(e.keeper_round is None for e in entries)
        assert not any(e.franchise_tag for e in entries)

    def test_idempotent(self) -> None:
        """Test re-stacking resolved entries gives the same result."""
        entries = [
            keep("a", 1, 0),
            keep("b", 1, 1),
            keep("c", 5),
            keep("d", 5),
            keep("e", 13),
            keep("f", 13),
            keep("g", 13),
        ]

        first = stack_keeper_rounds(entries, ROUNDS)
        second = stack_keeper_rounds(first.entries, ROUNDS)

        assert second.entries == first.entries
        assert second.franchise_tags == first.franchise_tags
        assert second.overflow == first.overflow

    def test_later_groups_do_not_move_earlier_groups(self) -> None:
        """Test adding a deep keeper leaves earlier rounds unchanged."""
        entries = [keep("a", 2, 0), keep("b", 2, 1), keep("c", 4)]

        before = stack_keeper_rounds(entries, ROUNDS)
        after = stack_keeper_rounds([*entries, keep("z", 9)], ROUNDS)

        assert rounds_by_player(after.entries[:3]) == rounds_by_player(
            before.entries
        )

    def test_rejects_empty_round_space(self) -> None:
        """Test a league must have at least one round."""
        with pytest.raises(ConfigurationError):
            stack_keeper_rounds([keep("a", 1)], 0)


def test_group_keepers_orders_groups_and_members() -> None:
    """Test groups come out by base round with the winner first."""
    entries = [
        keep("a", 7, 1),
        RosterEntry("x", Decision.DROP, base_round=2),
        keep("b", 2),
        keep("c", 7, 0),
        keep("d", None),
    ]

    groups = group_keepers(entries, ROUNDS)

    assert list(groups) == [2, 7, 14]
    assert groups[7] == [3, 0]
    assert groups[2] == [2]


def test_find_round_conflicts() -> None:
    """Test only base rounds with several keepers are reported."""
    entries = [keep("a", 1, 0), keep("b", 1, 1), keep("c", 4)]

    conflicts = find_round_conflicts(entries, ROUNDS)

    assert list(conflicts) == [1]
    assert [e.player_id for e in conflicts[1]] == ["a", "b"]


def test_find_keeper_round_collisions() -> None:
    """Test shared keeper rounds are found; tags and overflow ignored."""
    entries = [
        RosterEntry("a", Decision.KEEP, keeper_round=1),
        RosterEntry("b", Decision.KEEP, keeper_round=1, franchise_tag=True),
        RosterEntry("c", Decision.KEEP, keeper_round=6),
        RosterEntry("d", Decision.KEEP, keeper_round=6),
        RosterEntry("e", Decision.KEEP),
        RosterEntry("f", Decision.KEEP, keeper_round=6, overflow=True),
    ]

    assert find_keeper_round_collisions(entries) == {6: ["c", "d"]}


class TestMovePriority:
    """Tests for move_priority."""

    def test_move_up_swaps_with_neighbour(self) -> None:
        """Test moving up wins the contested round."""
        entries = [keep("a", 5, 0), keep("b", 5, 1), keep("c", 8)]

        moved = move_priority(entries, "b", -1, ROUNDS)

        assert [e.priority for e in moved] == [1, 0, None]
        result = stack_keeper_rounds(moved, ROUNDS)
        assert rounds_by_player(result.entries) == {"a": 6, "b": 5, "c": 8}

    def test_move_down_renumbers_group(self) -> None:
        """Test the whole group gets dense priorities after a move."""
        entries = [keep("a", 5), keep("b", 5), keep("c", 5)]

        moved = move_priority(entries, "a", 1, ROUNDS)

        assert [e.priority for e in moved] == [1, 0, 2]

    def test_move_past_end_is_noop(self) -> None:
        """Test the first keeper cannot move further up."""
        entries = [keep("a", 5, 0), keep("b", 5, 1)]

        moved = move_priority(entries, "a", -1, ROUNDS)

        assert moved == entries
        assert moved is not entries

    def test_does_not_mutate_inputs(self) -> None:
        """Test the caller's entries keep their priorities."""
        entries = [keep("a", 5, 0), keep("b", 5, 1)]

        move_priority(entries, "b", -1, ROUNDS)

        assert [e.priority for e in entries] == [0, 1]

    def test_invalid_direction(self) -> None:
        """Test only single steps are allowed."""
        with pytest.raises(ValueError, match="direction"):
            move_priority([keep("a", 5)], "a", 2, ROUNDS)

    def test_unknown_keeper(self) -> None:
        """Test moving a non-keeper is rejected."""
        entries = [keep("a", 5), RosterEntry("b", Decision.DROP, base_round=5)]
        with pytest.raises(ValueError, match="not a keeper"):
            move_priority(entries, "b", 1, ROUNDS)

    def test_move_keeps_other_groups_in_place(self) -> None:
        """Test reordering one group leaves every other keeper's round alone."""
        entries = [
            keep("a", 1, 0),
            keep("b", 1, 1),
            keep("c", 5, 0),
            keep("d", 5, 1),
            keep("e", 6),
            keep("f", 6),
            keep("g", 9),
            RosterEntry("x", Decision.DROP, base_round=5),
        ]
        before = stack_keeper_rounds(entries, ROUNDS)

        moved = move_priority(entries, "d", -1, ROUNDS)
        after = stack_keeper_rounds(moved, ROUNDS)

        # e and f slide past the rounds group 5 claims either way
        group = {"c", "d"}
        for old, new in zip(before.entries, after.entries):
            if old.player_id in group:
                continue
            assert new.keeper_round == old.keeper_round, old.player_id
            assert new.franchise_tag == old.franchise_tag, old.player_id
            assert new.priority == old.priority, old.player_id
        assert rounds_by_player(after.entries)["d"] == 5
        assert rounds_by_player(after.entries)["c"] == 6
        assert after.franchise_tags == before.franchise_tags
