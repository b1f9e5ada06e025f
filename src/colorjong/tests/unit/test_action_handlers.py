"""
The reducer applies legal actions and returns the very same state object
for illegal ones.
"""

from pydantic import TypeAdapter

from colorjong.logic.action_handlers import transition
from colorjong.logic.actions import Action, DeclareReachAction, DiscardAction, DrawAction, StartGameAction
from colorjong.logic.enums import Phase
from colorjong.logic.rng import SEED_BYTES
from colorjong.logic.rules import DEFAULT_RULE
from colorjong.logic.state import initial_state
from colorjong.tests.conftest import create_deal_wall, even_color_hands, make_hand, tile

SEED = "5a" * SEED_BYTES


class TestStartGame:
    def test_initial_state_is_idle(self):
        state = initial_state()
        assert state.phase == Phase.IDLE
        assert state.scores == (5, 5, 5, 5)
        assert state.log == ("Press start to begin.",)

    def test_start_deals_and_sets_draw_phase(self):
        state = transition(initial_state(), StartGameAction(seed=SEED))
        assert state.phase == Phase.DRAW
        assert state.turn == state.dealer
        assert state.set_start_dealer == state.dealer
        assert all(len(hand) == DEFAULT_RULE.hand_size for hand in state.hands)
        assert len(state.wall.tiles) == 48 - 32
        assert state.hand_number == 1
        assert state.win_info is None
        assert state.log[0].startswith("New set.")

    def test_same_seed_same_deal(self):
        first = transition(initial_state(), StartGameAction(seed=SEED))
        second = transition(initial_state(), StartGameAction(seed=SEED))
        assert first.hands == second.hands
        assert first.wall == second.wall
        assert first.dealer == second.dealer

    def test_explicit_wall_and_dealer(self):
        wall = create_deal_wall(even_color_hands())
        state = transition(initial_state(), StartGameAction(wall=wall, dealer=2))
        assert state.hands == even_color_hands()
        assert state.dealer == 2
        assert state.turn == 2

    def test_start_rejected_mid_hand(self):
        state = transition(initial_state(), StartGameAction(seed=SEED))
        assert transition(state, StartGameAction()) is state

    def test_invalid_dealer_rejected(self):
        state = initial_state()
        assert transition(state, StartGameAction(dealer=4)) is state

    def test_next_hand_keeps_scores_and_dealer(self):
        wall = create_deal_wall(even_color_hands())
        state = transition(initial_state(), StartGameAction(wall=wall, dealer=1))
        state = state.model_copy(update={"phase": Phase.END, "scores": (9, 1, 5, 5), "dealer": 2})
        after = transition(state, StartGameAction(wall=wall))
        assert after.hand_number == 2
        assert after.scores == (9, 1, 5, 5)
        assert after.dealer == 2
        assert after.set_start_dealer == 1
        assert after.log == ("Hand 2. Dealer is P2.", "P2 draws first.")


class TestIllegalActionsAreNoOps:
    def test_draw_while_idle(self):
        state = initial_state()
        assert transition(state, DrawAction()) is state

    def test_discard_in_draw_phase(self):
        state = transition(initial_state(), StartGameAction(wall=create_deal_wall(even_color_hands()), dealer=0))
        assert transition(state, DiscardAction(tile_id="red-1")) is state

    def test_discard_for_wrong_seat(self):
        state = transition(initial_state(), StartGameAction(wall=create_deal_wall(even_color_hands()), dealer=0))
        state = transition(state, DrawAction())
        assert transition(state, DiscardAction(tile_id="red-3", seat=1)) is state

    def test_discard_missing_tile(self):
        state = transition(initial_state(), StartGameAction(wall=create_deal_wall(even_color_hands()), dealer=0))
        state = transition(state, DrawAction())
        assert transition(state, DiscardAction(tile_id="nope-1")) is state

    def test_reach_without_ready_hand(self):
        state = transition(initial_state(), StartGameAction(wall=create_deal_wall(even_color_hands()), dealer=0))
        state = transition(state, DrawAction())
        assert transition(state, DeclareReachAction()) is state

    def test_start_with_malformed_seed(self):
        state = initial_state()
        assert transition(state, StartGameAction(seed="not-hex")) is state

    def test_start_with_malformed_table_seed(self):
        state = initial_state(seed="zz")
        assert transition(state, StartGameAction()) is state

    def test_start_with_duplicate_wall_ids(self):
        state = initial_state()
        assert transition(state, StartGameAction(wall=(tile("red", 1),) * 48)) is state

    def test_start_with_short_wall(self):
        state = initial_state()
        assert transition(state, StartGameAction(wall=make_hand(red=12))) is state


class TestActionParsing:
    def test_discriminated_union(self):
        adapter = TypeAdapter(Action)
        action = adapter.validate_python({"type": "discard", "tile_id": "red-1"})
        assert isinstance(action, DiscardAction)
        assert isinstance(adapter.validate_python({"type": "draw"}), DrawAction)
