import random

import pytest

from checkerboard import (
    Board,
    Color,
    EventKind,
    InvalidDirectionError,
    MoveCandidate,
    Piece,
    RemovedPiece,
    Rules,
    Square,
)

# Helpers

def make_rules(size=8, seed=0):
    board = Board(size, check_rep=True)
    return board, Rules(board, rng=random.Random(seed))


def place(board, color, row, col, king=False):
    piece = Piece(color, is_king=king)
    assert board.add(piece, row, col)
    return piece


def destinations(moves):
    return {(m.to_row, m.to_col) for m in moves}


def record_events(board):
    seen = []
    for kind in EventKind:
        board.subscribe(kind, seen.append)
    return seen


def test_simple_jump_scenario():
    board, rules = make_rules()
    dark = place(board, Color.DARK, 2, 3)
    place(board, Color.LIGHT, 3, 4)

    moves = rules.legal_moves_for(dark, 1)
    assert moves == [
        MoveCandidate(3, 2),
        MoveCandidate(4, 5, (Square(3, 4),)),
    ]


def test_attempt_jump_removes_captured_piece():
    board, rules = make_rules()
    dark = place(board, Color.DARK, 2, 3)
    light = place(board, Color.LIGHT, 3, 4, king=True)
    events = record_events(board)

    result = rules.attempt_move(dark, 1, 1, 4, 5)
    assert result is not None
    assert board.is_empty(3, 4)
    assert board.piece_at(4, 5) is dark
    assert (result.from_row, result.from_col, result.to_row, result.to_col) == (2, 3, 4, 5)
    assert result.removed == (RemovedPiece(row=3, col=4, color=Color.LIGHT, is_king=True),)
    assert not result.made_king
    assert not light.is_placed
    assert [e.kind for e in events] == [EventKind.MOVE, EventKind.REMOVE]


def test_men_never_step_backward_but_kings_do():
    board, rules = make_rules()
    man = place(board, Color.DARK, 4, 3)
    king = place(board, Color.LIGHT, 4, 5, king=True)

    assert destinations(rules.legal_moves_for(man, 1)) == {(5, 2), (5, 4)}
    assert destinations(rules.legal_moves_for(king, -1)) == {(3, 4), (3, 6), (5, 4), (5, 6)}


def test_men_do_not_jump_backward():
    board, rules = make_rules()
    dark = place(board, Color.DARK, 4, 3)
    place(board, Color.LIGHT, 3, 2)
    assert all(not m.is_capture for m in rules.legal_moves_for(dark, 1))

    dark.is_king = True
    jumps = [m for m in rules.legal_moves_for(dark, 1) if m.is_capture]
    assert jumps == [MoveCandidate(2, 1, (Square(3, 2),))]


def test_cannot_jump_own_color_or_empty_square():
    board, rules = make_rules()
    dark = place(board, Color.DARK, 2, 3)
    place(board, Color.DARK, 3, 4)
    assert rules.jump_sequences(dark, 1) == []
    assert not rules.is_valid_jump(dark, 2, 3, 4, 5, 1)
    assert not rules.is_valid_jump(dark, 2, 3, 4, 1, 1)


def test_multi_jump_lists_every_stopping_point():
    board, rules = make_rules()
    dark = place(board, Color.DARK, 0, 1)
    place(board, Color.LIGHT, 1, 2)
    place(board, Color.LIGHT, 3, 4)

    moves = rules.legal_moves_for(dark, 1)
    assert moves == [
        MoveCandidate(1, 0),
        MoveCandidate(4, 5, (Square(1, 2), Square(3, 4))),
        MoveCandidate(2, 3, (Square(1, 2),)),
    ]


def test_branching_jumps_follow_offset_order():
    board, rules = make_rules()
    dark = place(board, Color.DARK, 0, 3)
    place(board, Color.LIGHT, 1, 2)
    place(board, Color.LIGHT, 1, 4)

    chains = rules.jump_sequences(dark, 1)
    assert [(c[-1].row, c[-1].col) for c in chains] == [(2, 5), (2, 1)]


def test_king_chain_never_recaptures_a_square():
    board, rules = make_rules()
    king = place(board, Color.DARK, 0, 2, king=True)
    for sq in [(1, 3), (3, 3), (3, 1)]:
        place(board, Color.LIGHT, *sq)

    chains = rules.jump_sequences(king, 1)
    assert [len(c) for c in chains] == [3, 2, 1]
    for chain in chains:
        captured = [step.captured for step in chain]
        assert len(captured) == len(set(captured))

    moves = rules.legal_moves_for(king, 1)
    longest = [m for m in moves if len(m.captures) == 3]
    assert longest == [MoveCandidate(2, 0, (Square(1, 3), Square(3, 3), Square(3, 1)))]
    assert destinations(moves) == {(1, 1), (2, 0), (4, 2), (2, 4)}


def test_jump_sequences_respects_already_captured():
    board, rules = make_rules()
    dark = place(board, Color.DARK, 2, 3)
    place(board, Color.LIGHT, 3, 4)
    assert rules.jump_sequences(dark, 1, already_captured=[(3, 4)]) == []


def test_legal_moves_stay_on_board_and_on_empty_squares():
    board, rules = make_rules()
    board.prepare_new_game(rows=3)
    for piece in board.all_pieces():
        piece.is_king = True
        for move in rules.legal_moves_for(piece, piece.color.direction):
            assert board.is_valid_location(move.to_row, move.to_col)
            assert board.is_empty(move.to_row, move.to_col)


def test_invalid_direction_raises():
    board, rules = make_rules()
    dark = place(board, Color.DARK, 2, 3)
    for bad in (0, 2, -2, True, "1"):
        with pytest.raises(InvalidDirectionError):
            rules.legal_moves_for(dark, bad)
    with pytest.raises(ValueError):
        rules.attempt_move(dark, 1, 0, 3, 2)


def test_wrong_turn_is_rejected_without_mutation():
    board, rules = make_rules()
    dark = place(board, Color.DARK, 2, 3)
    place(board, Color.LIGHT, 3, 4)
    before = board.render()
    events = record_events(board)

    assert rules.attempt_move(dark, -1, 1, 4, 5) is None
    assert board.render() == before
    assert events == []


def test_illegal_destination_is_rejected_without_mutation():
    board, rules = make_rules()
    dark = place(board, Color.DARK, 2, 3)
    events = record_events(board)

    assert rules.attempt_move(dark, 1, 1, 1, 2) is None  # backward for a man
    assert rules.attempt_move(dark, 1, 1, 4, 5) is None  # nothing to jump
    assert rules.attempt_move(Piece(Color.DARK), 1, 1, 3, 2) is None  # not on the board
    assert board.piece_at(2, 3) is dark
    assert events == []


def test_promotion_on_capture_fires_once():
    board, rules = make_rules()
    dark = place(board, Color.DARK, 5, 2)
    place(board, Color.LIGHT, 6, 3)
    events = record_events(board)

    result = rules.attempt_move(dark, 1, 1, 7, 4)
    assert result.made_king
    assert dark.is_king
    assert [e.kind for e in events] == [EventKind.MOVE, EventKind.PROMOTE, EventKind.REMOVE]
    assert len(result.removed) == 1


def test_light_promotes_on_row_zero():
    board, rules = make_rules()
    light = place(board, Color.LIGHT, 1, 2)
    result = rules.attempt_move(light, -1, -1, 0, 1)
    assert result.made_king and light.is_king

    # Already a king: no second promotion
    result = rules.attempt_move(light, -1, -1, 1, 0)
    result = rules.attempt_move(light, -1, -1, 0, 1)
    assert not result.made_king


def test_attempt_move_with_explicit_capture_chain():
    board, rules = make_rules()
    dark = place(board, Color.DARK, 0, 1)
    place(board, Color.LIGHT, 1, 2)
    place(board, Color.LIGHT, 3, 4)

    assert rules.attempt_move(dark, 1, 1, 4, 5, captures=[(1, 2)]) is None
    result = rules.attempt_move(dark, 1, 1, 4, 5, captures=[(1, 2), (3, 4)])
    assert [(r.row, r.col) for r in result.removed] == [(1, 2), (3, 4)]
    assert board.all_pieces() == [dark]


def test_stopping_a_chain_early():
    board, rules = make_rules()
    dark = place(board, Color.DARK, 0, 1)
    place(board, Color.LIGHT, 1, 2)
    far = place(board, Color.LIGHT, 3, 4)

    result = rules.attempt_move(dark, 1, 1, 2, 3)
    assert result.captured_count == 1
    assert board.piece_at(3, 4) is far


def test_random_move_without_pieces_returns_none():
    board, rules = make_rules()
    place(board, Color.LIGHT, 5, 2)
    events = record_events(board)
    assert rules.attempt_random_move(Color.DARK, 1) is None
    assert events == []


def test_random_move_when_blocked_returns_none():
    board, rules = make_rules(size=2)
    place(board, Color.DARK, 1, 0)  # on its last row, not a king
    assert rules.attempt_random_move("dark", 1) is None
    assert not rules.has_any_move(Color.DARK, 1)


def test_random_move_plays_a_legal_move():
    board, rules = make_rules(seed=42)
    board.prepare_new_game()
    legal = {
        (p.row, p.col, m.to_row, m.to_col)
        for p in board.pieces_of(Color.DARK)
        for m in rules.legal_moves_for(p, 1)
    }
    result = rules.attempt_random_move(Color.DARK, 1)
    assert (result.from_row, result.from_col, result.to_row, result.to_col) in legal
    assert board.piece_at(result.to_row, result.to_col).color is Color.DARK


def test_random_move_is_reproducible_with_seeded_source():
    outcomes = []
    for _ in range(2):
        board, rules = make_rules(seed=5)
        board.prepare_new_game()
        outcomes.append([rules.attempt_random_move(c, c.direction) for c in (Color.DARK, Color.LIGHT) * 3])
    assert outcomes[0] == outcomes[1]


def test_rules_instances_share_no_state():
    board, first = make_rules()
    second = Rules(board, rng=random.Random(1))
    dark = place(board, Color.DARK, 2, 3)
    assert first.legal_moves_for(dark, 1) == second.legal_moves_for(dark, 1)
