"""
Dealer keeps the seat only on its own win; a set ends after the dealer
position has come back around to the first dealer the configured number of
times.
"""

from colorjong.logic.game import advance_dealer, is_new_set, rank_seats
from colorjong.logic.rules import normalize_rule
from colorjong.tests.conftest import create_game_state


class TestAdvanceDealer:
    def test_dealer_win_keeps_dealer(self):
        state = create_game_state(dealer=2)
        assert advance_dealer(state, winner=2).dealer == 2

    def test_non_dealer_win_rotates(self):
        state = create_game_state(dealer=2)
        assert advance_dealer(state, winner=0).dealer == 3

    def test_draw_rotates(self):
        state = create_game_state(dealer=3)
        assert advance_dealer(state, winner=None).dealer == 0

    def test_dealer_win_does_not_count_a_cycle(self):
        state = create_game_state(dealer=3, set_start_dealer=0, dealer_cycles=1)
        after = advance_dealer(state, winner=3)
        assert after.dealer_cycles == 1
        assert not after.set_over

    def test_set_over_after_two_full_rotations(self):
        state = create_game_state(dealer=1)
        rotations = []
        for _ in range(8):
            assert not state.set_over
            state = advance_dealer(state, winner=None)
            rotations.append(state.dealer)
        assert rotations == [2, 3, 0, 1, 2, 3, 0, 1]
        assert state.dealer_cycles == 2
        assert state.set_over

    def test_first_wrap_does_not_end_set(self):
        state = create_game_state(dealer=0)
        for _ in range(4):
            state = advance_dealer(state, winner=None)
        assert state.dealer == 0
        assert state.dealer_cycles == 1
        assert not state.set_over

    def test_rule_can_shorten_the_set(self):
        state = create_game_state(rule=normalize_rule({"dealerCyclesPerSet": 1}), dealer=0)
        for _ in range(4):
            state = advance_dealer(state, winner=None)
        assert state.set_over


class TestSetBoundaries:
    def test_first_hand_starts_a_set(self):
        assert is_new_set(create_game_state(hand_number=0))

    def test_finished_set_starts_a_new_one(self):
        assert is_new_set(create_game_state(hand_number=8, set_over=True))

    def test_mid_set(self):
        assert not is_new_set(create_game_state(hand_number=3))


class TestRanking:
    def test_higher_score_ranks_first(self):
        assert rank_seats((5, 9, 1, 7)) == (1, 3, 0, 2)

    def test_ties_broken_by_seat_order(self):
        assert rank_seats((4, 6, 6, 4)) == (1, 2, 0, 3)
