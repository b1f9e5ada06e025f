import asyncio

import pytest

from colorjong.logic.ai_player_controller import AIPlayerController
from colorjong.logic.enums import BatchMode, Phase, StrategyId, WinType
from colorjong.logic.rng import SEED_BYTES
from colorjong.logic.rules import normalize_rule
from colorjong.logic.settings import EngineSettings
from colorjong.logic.types import DrawInfo, WinInfo
from colorjong.session.batch import BatchRunner, BatchSession, BatchStalledError, record_hand
from colorjong.tests.conftest import create_game_state

SEED = "7e" * SEED_BYTES
SHORT_WALL_RULE = normalize_rule({"tiles": [{"id": "red", "copies": 2}]})


def _finished(*, win_info=None, draw_info=None, scores=(5, 5, 5, 5), set_over=False):
    state = create_game_state(phase=Phase.END, scores=scores, set_over=set_over)
    return state.model_copy(update={"win_info": win_info, "draw_info": draw_info})


def _runner(strategy=StrategyId.YAKU_PROGRESS, seed=SEED):
    controller = AIPlayerController.from_strategies(dict.fromkeys(range(4), strategy), seed)
    return BatchRunner(controller=controller, seed=seed, settings=EngineSettings())


class TestRecordHand:
    def test_win_counts_winner_and_deltas(self):
        win = WinInfo(
            winner=2,
            win_type=WinType.RON,
            from_seat=0,
            tile_id="red-1",
            points=3,
            score_deltas=(-3, 0, 3, 0),
        )
        session = record_hand(BatchSession(), _finished(win_info=win))
        assert session.games_played == 1
        assert session.wins == (0, 0, 1, 0)
        assert session.cumulative_scores == (-3, 0, 3, 0)
        assert session.draws == 0
        assert session.sets_played == 0

    def test_draw_counts_draw(self):
        session = record_hand(BatchSession(), _finished(draw_info=DrawInfo()))
        assert session.draws == 1
        assert session.wins == (0, 0, 0, 0)

    def test_set_end_snapshots_ranking(self):
        session = BatchSession(mode=BatchMode.RANKING, target=2)
        session = record_hand(session, _finished(draw_info=DrawInfo(), scores=(3, 9, 9, 1), set_over=True))
        assert session.sets_played == 1
        # seat 1 ties seat 2 on score and ranks first by seat order
        assert session.rank_counts == ((0, 0, 1, 0), (1, 0, 0, 0), (0, 1, 0, 0), (0, 0, 0, 1))
        assert session.average_ranks() == (3.0, 1.0, 2.0, 4.0)
        assert not session.is_complete

    def test_wins_mode_does_not_rank(self):
        session = record_hand(BatchSession(), _finished(draw_info=DrawInfo(), set_over=True))
        assert session.sets_played == 1
        assert session.rank_counts == ((0, 0, 0, 0),) * 4

    def test_win_rates(self):
        session = BatchSession(games_played=4, wins=(2, 1, 0, 0))
        assert session.win_rates() == (0.5, 0.25, 0.0, 0.0)
        assert BatchSession().win_rates() == (0.0, 0.0, 0.0, 0.0)


class TestBatchRunnerSync:
    def test_wins_mode_plays_target_hands(self):
        session = _runner().run(BatchMode.WINS, 12)
        assert session.games_played == 12
        assert sum(session.wins) + session.draws == 12
        assert sum(session.cumulative_scores) == 0
        assert not session.running

    def test_ranking_mode_plays_whole_sets(self):
        runner = _runner(StrategyId.RANDOM)
        session = runner.run(BatchMode.RANKING, 2)
        assert session.sets_played == 2
        assert runner.state.set_over
        for seat_counts in session.rank_counts:
            assert sum(seat_counts) == 2
        for place in range(4):
            assert sum(counts[place] for counts in session.rank_counts) == 2

    def test_same_seed_same_totals(self):
        first = _runner().run(BatchMode.WINS, 8)
        second = _runner().run(BatchMode.WINS, 8)
        assert first == second

    def test_new_run_resets_totals(self):
        runner = _runner()
        runner.run(BatchMode.WINS, 3)
        session = runner.run(BatchMode.WINS, 2)
        assert session.games_played == 2

    def test_defaults_come_from_settings(self):
        runner = BatchRunner(settings=EngineSettings(default_target=3))
        session = runner.run()
        assert session.mode == BatchMode.WINS
        assert session.games_played == 3

    def test_unplayable_rule_raises_stalled(self):
        with pytest.raises(BatchStalledError, match="cannot start"):
            BatchRunner(rule=SHORT_WALL_RULE, settings=EngineSettings()).run(BatchMode.WINS, 1)

    @pytest.mark.parametrize("strategy", list(StrategyId))
    def test_every_strategy_finishes_hands(self, strategy):
        session = _runner(strategy).run(BatchMode.WINS, 4)
        assert session.games_played == 4


class TestBatchRunnerAsync:
    async def test_start_runs_to_target(self):
        runner = _runner()
        runner.start(BatchMode.WINS, 5)
        assert runner.session.running
        session = await runner.wait()
        assert session.games_played == 5
        assert not session.running
        assert not runner.pending

    async def test_cancel_stops_run(self):
        runner = _runner()
        runner.start(BatchMode.WINS, 1000)
        await asyncio.sleep(0)
        runner.cancel()
        await asyncio.sleep(0.01)
        assert not runner.session.running
        assert runner.session.games_played < 1000
        assert not runner.pending

    async def test_stalled_run_stops(self):
        runner = BatchRunner(rule=SHORT_WALL_RULE, settings=EngineSettings())
        runner.start(BatchMode.WINS, 3)
        session = await runner.wait()
        assert not session.running
        assert session.games_played == 0
        assert not runner.pending

    async def test_restart_invalidates_outstanding_step(self):
        runner = _runner()
        runner.start(BatchMode.WINS, 1000)
        runner.start(BatchMode.WINS, 2)
        session = await runner.wait()
        assert session.target == 2
        assert session.games_played == 2
