"""
Draw resolution tests
"""

import pytest

from chain.header import decode
from errors import (EmptyParticipantSet, IndexOutOfRange, InvalidBlockchain, MalformedHeader,
                    NotWinner, WrongBlockCount)
from services.resolve import determine_winner, resolve
from services.state import Participant
from conftest import START_HASH, START_HEIGHT, expected_beacon, expected_score, make_state, mine_chain


def _expected_winner(state, blocks):
    beacon = expected_beacon(decode(blocks[state.draw_block_index]).hash, state.hash_rounds)
    return max(state.participants, key=lambda p: expected_score(p.ticket_id, beacon)), beacon


class TestWinner:

    def test_winner_has_max_score(self, state, chain_blocks):
        winner, ranking = determine_winner(state, chain_blocks)
        expected, beacon = _expected_winner(state, chain_blocks)
        assert winner.participant == expected
        assert winner.beacon == beacon
        assert winner.score == ranking[-1].score == max(s.score for s in ranking)
        assert winner.draw_block_hash == decode(chain_blocks[3]).hash

    def test_winner_claims(self, state, chain_blocks):
        winner, _ = determine_winner(state, chain_blocks)
        verdict = resolve(state, chain_blocks, winner.participant.identity)
        assert verdict.ok
        assert verdict.winner == winner
        assert len(verdict.ranking) == 3

    def test_others_are_not_winners(self, state, chain_blocks):
        winner, _ = determine_winner(state, chain_blocks)
        for p in state.participants:
            if p == winner.participant:
                continue
            verdict = resolve(state, chain_blocks, p.identity)
            assert not verdict.ok
            assert isinstance(verdict.error, NotWinner)

    def test_outsider_is_not_winner(self, state, chain_blocks):
        assert isinstance(resolve(state, chain_blocks, "mallory").error, NotWinner)

    def test_replay_gives_same_verdict(self, state, chain_blocks):
        first = resolve(state, chain_blocks, "alice")
        second = resolve(state, chain_blocks, "alice")
        assert first.ok == second.ok
        assert first.winner == second.winner
        assert type(first.error) is type(second.error)

    def test_hash_rounds_affect_beacon(self, chain_blocks):
        w0, _ = determine_winner(make_state(hash_rounds=0), chain_blocks)
        w1, _ = determine_winner(make_state(hash_rounds=1), chain_blocks)
        assert w0.beacon != w1.beacon

    def test_non_contiguous_tickets(self, chain_blocks):
        state = make_state(participants=[Participant("a", 40), Participant("b", 7)])
        winner, _ = determine_winner(state, chain_blocks)
        expected, _ = _expected_winner(state, chain_blocks)
        assert winner.participant == expected


class TestRejections:

    @pytest.mark.parametrize("count", [0, 8, 10])
    def test_wrong_block_count(self, state, count):
        blocks = mine_chain(START_HASH, count)
        verdict = resolve(state, blocks, "alice")
        assert isinstance(verdict.error, WrongBlockCount)
        assert verdict.winner is None

    def test_count_checked_before_decoding(self, state):
        assert isinstance(resolve(state, [b"junk"], "alice").error, WrongBlockCount)

    def test_malformed_header(self, state, chain_blocks):
        blocks = list(chain_blocks)
        blocks[5] = blocks[5][:79]
        assert isinstance(resolve(state, blocks, "alice").error, MalformedHeader)

    def test_invalid_chain(self, state, chain_blocks):
        blocks = list(chain_blocks)
        blocks[1], blocks[2] = blocks[2], blocks[1]
        assert isinstance(resolve(state, blocks, "alice").error, InvalidBlockchain)

    def test_chain_from_other_start(self, state):
        blocks = mine_chain("aa" * 32, state.blocks_expected)
        assert isinstance(resolve(state, blocks, "alice").error, InvalidBlockchain)

    def test_draw_block_not_ahead(self):
        # такое состояние setup не пропустит, но resolve не должен падать
        state = make_state(draw_block_height=START_HEIGHT, blocks_for_verification=2)
        blocks = mine_chain(START_HASH, state.blocks_expected)
        assert isinstance(resolve(state, blocks, "alice").error, IndexOutOfRange)

    def test_no_participants(self, chain_blocks):
        state = make_state(participants=())
        assert isinstance(resolve(state, chain_blocks, "alice").error, EmptyParticipantSet)

    def test_errors_do_not_escape(self, state):
        verdict = resolve(state, [b""] * state.blocks_expected, "alice")
        assert isinstance(verdict.error, MalformedHeader)
