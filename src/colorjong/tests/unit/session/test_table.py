from colorjong.logic.enums import Phase, StrategyId
from colorjong.logic.settings import EngineSettings
from colorjong.session.table import TableDriver
from colorjong.tests.conftest import create_deal_wall, even_color_hands, make_hand, tile


def _driver(**kwargs):
    kwargs.setdefault("settings", EngineSettings())
    return TableDriver(**kwargs)


class TestTableDriver:
    async def test_ai_seats_play_until_human_turn(self):
        updates = []
        driver = _driver(on_update=updates.append)
        assert driver.start_hand(wall=create_deal_wall(even_color_hands()), dealer=1)
        await driver.wait_idle()

        assert driver.state.phase == Phase.DISCARD
        assert driver.state.turn == 0
        assert not driver.pending
        # seats 1, 2 and 3 each drew and discarded once
        assert [len(d) for d in driver.state.discards] == [0, 1, 1, 1]
        assert updates[-1] is driver.state

    async def test_human_discard_passes_turn(self):
        driver = _driver()
        driver.start_hand(wall=create_deal_wall(even_color_hands()), dealer=1)
        await driver.wait_idle()

        drawn = driver.state.last_drawn[0]
        assert drawn in driver.view().legal_discards
        assert driver.discard(drawn)
        assert driver.state.turn == 1
        assert driver.state.discards[0][-1].id == drawn
        driver.stop()

    async def test_rejects_discards_for_ai_seats_and_out_of_turn(self):
        driver = _driver()
        driver.start_hand(wall=create_deal_wall(even_color_hands()), dealer=1)
        await driver.wait_idle()
        before = driver.state

        seat1_tile = before.hands[1][0].id
        assert not driver.discard(seat1_tile, seat=1)
        assert not driver.discard("red-999")
        assert driver.state is before

    async def test_rejects_restart_mid_hand(self):
        driver = _driver()
        driver.start_hand(wall=create_deal_wall(even_color_hands()), dealer=1)
        await driver.wait_idle()
        before = driver.state
        assert not driver.start_hand()
        assert driver.state is before

    async def test_stop_cancels_pending_draw(self):
        driver = _driver(settings=EngineSettings(draw_delay_seconds=10))
        driver.start_hand(wall=create_deal_wall(even_color_hands()), dealer=1)
        assert driver.pending
        driver.stop()
        assert not driver.pending
        await driver.wait_idle()
        assert driver.state.phase == Phase.DRAW
        assert len(driver.state.wall.tiles) == 16

    async def test_human_reach(self):
        hands = (
            make_hand(red=3, blue=3, green=2),
            *(make_hand(start=start, red=2, blue=2, green=2, yellow=2) for start in (4, 6, 8)),
        )
        driver = _driver()
        driver.start_hand(wall=create_deal_wall(hands, draws=(tile("yellow", 1),)), dealer=0)
        await driver.wait_idle()

        view = driver.view()
        assert view.can_declare_reach
        assert view.reach_discards == ("yellow-1",)
        assert driver.declare_reach()
        assert driver.state.reach_pending[0]

        assert not driver.discard("red-1")
        assert driver.discard("yellow-1")
        driver.stop()
        assert driver.state.reached[0]
        assert driver.state.reach_discard_id[0] == "yellow-1"

    async def test_declare_reach_refused_for_ai_seat(self):
        driver = _driver()
        driver.start_hand(wall=create_deal_wall(even_color_hands()), dealer=1)
        await driver.wait_idle()
        assert not driver.declare_reach(seat=2)

    def test_default_controller_seats_human_at_zero(self):
        driver = _driver(seed="")
        assert driver.controller.strategy_of(0) == StrategyId.HUMAN
        assert driver.controller.ai_player_seats == {1, 2, 3}
