from __future__ import annotations

import random
import typing

import pytest

from connectron import (
    Board,
    Evaluator,
    HeuristicStrategy,
    MinimaxStrategy,
    MoveStrategy,
    NoLegalMove,
    PlayerType,
    RandomStrategy,
    RuleConfig,
    strategy_for,
)

RULES = RuleConfig(win_length=4)


def place(board: Board, cells, player: int) -> None:
    for row, column in cells:
        board.cells[row][column] = player


def board_with_one_open_column(open_column: int) -> Board:
    board = Board(7, 6)
    for column in range(7):
        if column == open_column:
            continue
        for i in range(6):
            board.drop(column, (column // 2 + i) % 3)
    return board


def test_random_finds_the_only_open_column():
    board = board_with_one_open_column(4)
    before = board.snapshot()
    assert RandomStrategy().select_move(board, 0, RULES, random.Random(3)) == (4, 5)
    assert board == before


def test_random_is_reproducible_with_a_seed():
    board = Board(7, 6)
    first = RandomStrategy().select_move(board, 0, RULES, random.Random(42))
    second = RandomStrategy().select_move(board, 0, RULES, random.Random(42))
    assert first == second


@pytest.mark.parametrize(
    "strategy", [RandomStrategy(), HeuristicStrategy(), MinimaxStrategy(), MinimaxStrategy.enhanced(depth=2)]
)
def test_full_board_has_no_move(strategy):
    board = Board.from_rows([[(r // 2 + c) % 2 for c in range(6)] for r in range(6)])
    with pytest.raises(NoLegalMove):
        strategy.select_move(board, 0, RULES, random.Random(0))


def test_heuristic_takes_a_win():
    board = Board(7, 6)
    place(board, [(5, 2), (4, 2), (3, 2)], 0)
    before = board.snapshot()
    assert HeuristicStrategy().select_move(board, 0, RULES, random.Random(0)) == (2, 2)
    assert board == before


def test_heuristic_blocks_the_next_player():
    board = Board(7, 6)
    place(board, [(5, 4), (4, 4), (3, 4)], 1)
    assert HeuristicStrategy().select_move(board, 0, RULES, random.Random(0)) == (4, 2)


def test_heuristic_blocks_real_opponents_in_larger_games():
    board = Board(7, 6)
    place(board, [(5, 5), (4, 5), (3, 5)], 0)
    move = HeuristicStrategy().select_move(board, 2, RULES, random.Random(0), player_count=3)
    assert move == (5, 2)


def test_heuristic_falls_back_to_random():
    board = Board(7, 6)
    heuristic = HeuristicStrategy().select_move(board, 0, RULES, random.Random(7))
    plain = RandomStrategy().select_move(board, 0, RULES, random.Random(7))
    assert heuristic == plain


def test_minimax_baseline_plays_leftmost_open_column():
    board = Board(7, 6)
    assert MinimaxStrategy().select_move(board, 0, RULES, random.Random(0)) == (0, 5)

    for column in (0, 1):
        for i in range(6):
            board.drop(column, (column + i) % 2)
    before = board.snapshot()
    assert MinimaxStrategy().select_move(board, 1, RULES, random.Random(0)) == (2, 5)
    assert board == before


def test_enhanced_minimax_takes_a_win():
    board = Board(7, 6)
    place(board, [(5, 6), (4, 6), (3, 6)], 0)
    place(board, [(5, 0), (5, 1)], 1)
    assert MinimaxStrategy.enhanced(depth=2).select_move(board, 0, RULES, random.Random(0)) == (6, 2)


def test_positional_minimax_blocks():
    board = Board(7, 6)
    place(board, [(5, 2), (4, 2), (3, 2)], 1)
    place(board, [(5, 5), (5, 6)], 0)
    strategy = MinimaxStrategy(depth=2, evaluate=Evaluator.positional, detect_wins=True, window=(-10**9, 10**9))
    assert strategy.select_move(board, 0, RULES, random.Random(0)) == (2, 2)


def test_positional_evaluator_prefers_own_lines():
    board = Board(7, 6)
    place(board, [(5, 2), (5, 3), (5, 4)], 0)
    assert Evaluator.positional(board, 0, RULES, None, True) > 0
    assert Evaluator.positional(board, 1, RULES, None, True) < 0


def test_strategy_for_player_types():
    assert isinstance(strategy_for(PlayerType.EASY_AI), RandomStrategy)
    assert isinstance(strategy_for(PlayerType.MEDIUM_AI), HeuristicStrategy)
    hard = strategy_for(PlayerType.HARD_AI)
    assert isinstance(hard, MinimaxStrategy) and hard.depth == 4
    with pytest.raises(ValueError):
        strategy_for(PlayerType.HUMAN)


def test_random_plays_under_floating_counters():
    board = Board(6, 6)
    for column in range(6):
        board.cells[0][column] = 1
    column, row = RandomStrategy().select_move(board, 0, RULES, random.Random(5))
    assert 0 <= column < 6
    assert row == 5


def scrambled_position(seed: int, moves: int = 10) -> Board:
    rng = random.Random(seed)
    board = Board(7, 6)
    for ply in range(moves):
        board.drop(rng.choice(board.legal_columns()), ply % 2)
    return board


@pytest.mark.parametrize("seed", range(6))
def test_transposition_table_does_not_change_the_result(seed):
    board = scrambled_position(seed)
    with_table = MinimaxStrategy.enhanced(depth=4)
    without_table = MinimaxStrategy(
        depth=4,
        evaluate=Evaluator.positional,
        detect_wins=True,
        use_table=False,
        window=(-10**9, 10**9),
    )
    rng = random.Random(0)
    assert with_table.select_move(board, 0, RULES, rng) == without_table.select_move(board, 0, RULES, rng)
    assert with_table.last_result.score == without_table.last_result.score
    assert with_table.transposition_table


@pytest.mark.parametrize("strategy_cls", [RandomStrategy, HeuristicStrategy, MinimaxStrategy])
def test_select_move_overrides_keep_the_signature(strategy_cls):
    expected = typing.get_type_hints(MoveStrategy.select_move)
    assert typing.get_type_hints(strategy_cls.select_move) == expected
