import random

import pytest

from neonsweeper.engine import Board, GameState, MinePhase


def brute_force_count(board, row, col):
    count = 0
    for drow in (-1, 0, 1):
        for dcol in (-1, 0, 1):
            if drow == 0 and dcol == 0:
                continue
            r, c = row + drow, col + dcol
            if 0 <= r < board.size and 0 <= c < board.size and board.grid[r][c].is_mine:
                count += 1
    return count


def assert_no_hidden_zero_frontier(board):
    for row, col in board.revealed_cells:
        cell = board.grid[row][col]
        if cell.is_mine or cell.neighbor_mine_count != 0:
            continue
        for nrow, ncol in board.neighbors(row, col):
            neighbor = board.grid[nrow][ncol]
            assert neighbor.is_revealed or neighbor.is_flagged


@pytest.mark.parametrize(
    "size, mines",
    [(0, 0), (-3, 1), (3, -1), (3, 9), (4, 20)],
)
def test_invalid_dimensions_rejected(size, mines):
    with pytest.raises(ValueError):
        Board(size, mines)


def test_new_board_is_blank_standby():
    board = Board(10, 15, random.Random(1))
    assert board.state is GameState.STANDBY
    assert board.phase is MinePhase.UNINITIALIZED
    assert board.mine_positions() == frozenset()
    assert not board.revealed_cells and not board.flagged_cells
    assert board.remaining_mine_estimate() == 15


@pytest.mark.parametrize("seed", range(20))
def test_first_reveal_is_safe_and_places_exact_mine_count(seed):
    rng = random.Random(seed)
    board = Board(10, 15, rng)
    row, col = rng.randrange(10), rng.randrange(10)

    result = board.reveal(row, col)

    assert result.effective
    assert board.phase is MinePhase.PLACED
    assert not board.grid[row][col].is_mine
    assert len(board.mine_positions()) == 15
    assert board.state in (GameState.ACTIVE, GameState.VICTORY)
    assert result.cells[0] == (row, col)


def test_dense_board_first_click_still_safe():
    board = Board(3, 8, random.Random(7))
    result = board.reveal(1, 1)
    assert not board.grid[1][1].is_mine
    assert board.mine_positions() == frozenset(
        (r, c) for r in range(3) for c in range(3) if (r, c) != (1, 1)
    )
    assert result.state is GameState.VICTORY


@pytest.mark.parametrize("seed", range(10))
def test_neighbor_counts_match_brute_force(seed):
    board = Board(8, 12, random.Random(seed))
    board.reveal(0, 0)

    total = 0
    for row in range(8):
        for col in range(8):
            cell = board.grid[row][col]
            if cell.is_mine:
                continue
            assert cell.neighbor_mine_count == brute_force_count(board, row, col)
            total += cell.neighbor_mine_count

    # Every mine is counted once by each of its non-mine neighbors.
    expected = sum(
        1
        for mrow, mcol in board.mine_positions()
        for nrow, ncol in board.neighbors(mrow, mcol)
        if not board.grid[nrow][ncol].is_mine
    )
    assert total == expected


def test_place_mines_only_once():
    board = Board(5, 3, random.Random(0))
    board.place_mines(2, 2)
    with pytest.raises(ValueError):
        board.place_mines(0, 0)


def test_place_mines_is_reproducible_with_seed():
    a = Board(10, 15, random.Random(42))
    b = Board(10, 15, random.Random(42))
    a.place_mines(5, 5)
    b.place_mines(5, 5)
    assert a.mine_positions() == b.mine_positions()


def test_out_of_range_coordinates_rejected():
    board = Board(5, 3)
    for row, col in [(-1, 0), (0, -1), (5, 0), (0, 5)]:
        with pytest.raises(ValueError):
            board.reveal(row, col)
        with pytest.raises(ValueError):
            board.toggle_flag(row, col)
        with pytest.raises(ValueError):
            board.neighbors(row, col)
    assert board.state is GameState.STANDBY


def test_flood_fill_from_center_reveals_region():
    # 15 mines packed in the top rows leave a large empty area around (5, 5).
    mines = [(0, col) for col in range(10)] + [(1, col) for col in range(5)]
    board = Board.from_mines(10, mines)

    result = board.reveal(5, 5)

    assert board.grid[5][5].neighbor_mine_count == 0
    assert len(result.cells) > 1
    assert set(result.cells) == board.revealed_cells
    assert all(not board.grid[r][c].is_mine for r, c in result.cells)
    assert_no_hidden_zero_frontier(board)

    # Every numbered cell revealed by the flood borders a revealed zero cell.
    for row, col in result.cells:
        if board.grid[row][col].neighbor_mine_count > 0:
            assert any(
                board.grid[r][c].is_revealed and board.grid[r][c].neighbor_mine_count == 0
                for r, c in board.neighbors(row, col)
            )


@pytest.mark.parametrize("seed", range(15))
def test_flood_fill_never_leaves_zero_frontier_open(seed):
    rng = random.Random(seed)
    board = Board(10, 15, rng)
    board.reveal(5, 5)
    moves = 0
    while board.state is GameState.ACTIVE and moves < 30:
        row, col = rng.randrange(10), rng.randrange(10)
        if not board.grid[row][col].is_mine:
            board.reveal(row, col)
        moves += 1
    assert_no_hidden_zero_frontier(board)
    assert all(not board.grid[r][c].is_mine for r, c in board.revealed_cells)


def test_flood_fill_skips_flagged_cells():
    board = Board.from_mines(5, [(0, 0)])
    board.toggle_flag(4, 4)

    result = board.reveal(2, 2)

    assert (4, 4) not in result.cells
    assert not board.grid[4][4].is_revealed
    assert board.grid[4][4].is_flagged
    assert board.state is GameState.ACTIVE


def test_reveal_mine_is_game_over_and_terminal():
    board = Board.from_mines(3, [(0, 0), (2, 2)])
    board.reveal(0, 2)

    result = board.reveal(0, 0)

    assert result.effective
    assert result.state is GameState.GAME_OVER
    assert result.cells == ((0, 0),)
    assert result.mines == frozenset({(0, 0), (2, 2)})
    revealed_before = set(board.revealed_cells)

    assert not board.reveal(2, 0).effective
    assert not board.toggle_flag(2, 0).effective
    assert board.revealed_cells == revealed_before
    assert board.state is GameState.GAME_OVER


def test_victory_when_all_safe_cells_revealed():
    board = Board.from_mines(3, [(0, 0)])

    result = board.reveal(2, 2)

    assert len(board.revealed_cells) == 8
    assert result.state is GameState.VICTORY
    assert not board.toggle_flag(0, 0).effective
    assert not board.reveal(0, 0).effective
    assert board.state is GameState.VICTORY


def test_victory_only_at_exact_safe_count():
    board = Board.from_mines(3, [(0, 0), (2, 2)])
    board.reveal(0, 2)
    assert board.state is GameState.ACTIVE
    board.reveal(1, 0)
    board.reveal(2, 1)
    assert len(board.revealed_cells) == 6
    assert board.state is GameState.ACTIVE
    board.reveal(2, 0)
    assert len(board.revealed_cells) == 7
    assert board.state is GameState.VICTORY


def test_zero_mine_board_wins_on_first_click():
    board = Board(4, 0, random.Random(3))
    result = board.reveal(0, 0)
    assert result.state is GameState.VICTORY
    assert len(result.cells) == 16


def test_reveal_already_revealed_is_noop():
    board = Board.from_mines(3, [(0, 0), (2, 2)])
    board.reveal(0, 2)
    version = board.version
    result = board.reveal(0, 2)
    assert not result.effective
    assert result.state is GameState.ACTIVE
    assert board.version == version


def test_flag_toggle_semantics():
    board = Board.from_mines(3, [(0, 0), (2, 2)])
    board.reveal(0, 2)

    assert not board.toggle_flag(0, 2).effective
    assert not board.grid[0][2].is_flagged

    first = board.toggle_flag(0, 0)
    assert first.effective and first.cells == ((0, 0),)
    assert board.flagged_cells == {(0, 0)}
    assert not board.reveal(0, 0).effective

    board.toggle_flag(0, 0)
    assert not board.grid[0][0].is_flagged
    assert board.flagged_cells == set()


def test_flagging_allowed_before_first_reveal():
    board = Board(5, 3, random.Random(0))
    assert board.toggle_flag(1, 1).effective
    assert board.state is GameState.STANDBY
    assert board.phase is MinePhase.UNINITIALIZED


def test_remaining_mine_estimate_floors_at_zero():
    board = Board.from_mines(3, [(0, 0)])
    board.toggle_flag(0, 0)
    assert board.remaining_mine_estimate() == 0
    board.toggle_flag(1, 1)
    assert board.remaining_mine_estimate() == 0
    assert len(board.flagged_cells) == 2


def test_preset_layout_first_reveal_on_mine_loses():
    board = Board.from_mines(4, [(1, 1)])
    assert board.phase is MinePhase.PLACED
    result = board.reveal(1, 1)
    assert result.state is GameState.GAME_OVER


def test_from_mines_rejects_bad_layout():
    with pytest.raises(ValueError):
        Board.from_mines(2, [(0, 0), (0, 1), (1, 0), (1, 1)])
    with pytest.raises(ValueError):
        Board.from_mines(3, [(3, 0)])


def test_reset_clears_layout_for_a_fresh_placement():
    board = Board(6, 5, random.Random(9))
    board.reveal(3, 3)
    hidden = [pos for pos in board.neighbors(0, 0) + ((0, 0),) if pos not in board.revealed_cells]
    if board.state is GameState.ACTIVE and hidden:
        board.toggle_flag(*hidden[0])
    version = board.version

    board.reset()

    assert board.state is GameState.STANDBY
    assert board.phase is MinePhase.UNINITIALIZED
    assert board.version > version
    assert not board.revealed_cells and not board.flagged_cells
    assert board.mine_positions() == set()
    assert all(cell.neighbor_mine_count == 0 for row in board.grid for cell in row)
    board.reveal(3, 3)
    assert board.phase is MinePhase.PLACED
    assert len(board.mine_positions()) == 5


def test_reset_board_first_click_on_old_mine_is_safe():
    for seed in range(20):
        board = Board(5, 8, random.Random(seed))
        board.reveal(0, 0)
        old_mine = sorted(board.mine_positions())[0]

        board.reset()
        result = board.reveal(*old_mine)

        assert result.state is not GameState.GAME_OVER
        assert old_mine not in board.mine_positions()
        assert len(board.mine_positions()) == 8


def test_accuracy():
    board = Board.from_mines(3, [(0, 0), (2, 2)])
    assert board.accuracy() == 100
    board.reveal(0, 2)
    board.toggle_flag(0, 0)
    # 4 revealed, 1 flagged
    assert board.accuracy() == 80


def test_format_board_plain():
    board = Board.from_mines(3, [(0, 0), (2, 2)])
    board.reveal(0, 2)
    board.toggle_flag(0, 0)

    text = board.format_board(color=False)
    assert "\033" not in text
    assert "F" in text
    assert "M" not in text

    full = board.format_board(reveal_all=True, color=False)
    assert full.count("M") == 2

    overlay = board.format_board(probabilities={(2, 0): 33}, color=False)
    assert "33" in overlay
