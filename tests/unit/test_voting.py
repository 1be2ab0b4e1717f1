from __future__ import annotations

import pytest

from recordstore.config import Settings
from recordstore.errors import AlreadyVoted, CapacityExceeded, NotFound
from recordstore.ledgers.bank import BankLedger
from recordstore.ledgers.voting import VotingLedger

CANDIDATE_A = 1
CANDIDATE_B = 2
VOTER_1 = 101


def _sum_of_votes(ledger: VotingLedger) -> int:
    return sum(c.vote_count for c in ledger.candidates)


def test_second_vote_is_rejected(voting: VotingLedger) -> None:
    voting.register_candidate(CANDIDATE_A, "A")
    voting.register_candidate(CANDIDATE_B, "B")
    voting.register_voter(VOTER_1, "V1")

    voting.cast_vote(VOTER_1, CANDIDATE_A)
    with pytest.raises(AlreadyVoted) as excinfo:
        voting.cast_vote(VOTER_1, CANDIDATE_B)

    assert excinfo.value.kind == "AlreadyVoted"
    counts = {r.candidate.name: r.candidate.vote_count for r in voting.results()}
    assert counts == {"A": 1, "B": 0}
    assert voting.total_votes == 1
    assert voting.voters.get(VOTER_1).has_voted


def test_ballot_guards_run_in_order(voting: VotingLedger) -> None:
    voting.register_candidate(CANDIDATE_A, "A")
    voting.register_voter(VOTER_1)

    # Unknown voter wins over unknown candidate.
    with pytest.raises(NotFound) as excinfo:
        voting.cast_vote(999, 888)
    assert excinfo.value.entity == "voter"

    with pytest.raises(NotFound) as excinfo:
        voting.cast_vote(VOTER_1, 888)
    assert excinfo.value.entity == "candidate"

    # The failed ballot did not consume the vote.
    assert not voting.voters.get(VOTER_1).has_voted
    voting.cast_vote(VOTER_1, CANDIDATE_A)

    # Already voted wins over unknown candidate.
    with pytest.raises(AlreadyVoted):
        voting.cast_vote(VOTER_1, 888)


def test_total_votes_matches_candidate_counts(voting: VotingLedger) -> None:
    voting.register_candidate(CANDIDATE_A, "A")
    voting.register_candidate(CANDIDATE_B, "B")
    for voter in range(1, 8):
        voting.register_voter(voter)

    for voter in range(1, 8):
        voting.cast_vote(voter, CANDIDATE_A if voter % 3 else CANDIDATE_B)
        with pytest.raises(AlreadyVoted):
            voting.cast_vote(voter, CANDIDATE_A)
        assert _sum_of_votes(voting) == voting.total_votes

    assert voting.total_votes == 7


def test_results_percentages(voting: VotingLedger) -> None:
    voting.register_candidate(CANDIDATE_A, "A")
    voting.register_candidate(CANDIDATE_B, "B")
    for voter in (1, 2, 3, 4):
        voting.register_voter(voter)
    for voter in (1, 2, 3):
        voting.cast_vote(voter, CANDIDATE_A)
    voting.cast_vote(4, CANDIDATE_B)

    percentages = {r.candidate.key: r.percentage for r in voting.results()}

    assert percentages == {CANDIDATE_A: pytest.approx(75.0), CANDIDATE_B: pytest.approx(25.0)}


def test_results_without_votes(voting: VotingLedger) -> None:
    voting.register_candidate(CANDIDATE_A, "A")

    assert [r.percentage for r in voting.results()] == [0.0]
    outcome = voting.outcome()
    assert outcome.leaders == []
    assert outcome.winner is None
    assert not outcome.is_tie


def test_outcome_winner(voting: VotingLedger) -> None:
    voting.register_candidate(CANDIDATE_A, "A")
    voting.register_candidate(CANDIDATE_B, "B")
    voting.register_voter(1)
    voting.cast_vote(1, CANDIDATE_B)

    outcome = voting.outcome()

    assert outcome.winner is not None and outcome.winner.name == "B"
    assert outcome.votes == 1


def test_outcome_tie(voting: VotingLedger) -> None:
    voting.register_candidate(CANDIDATE_A, "A")
    voting.register_candidate(CANDIDATE_B, "B")
    voting.register_voter(1)
    voting.register_voter(2)
    voting.cast_vote(1, CANDIDATE_A)
    voting.cast_vote(2, CANDIDATE_B)

    outcome = voting.outcome()

    assert outcome.is_tie
    assert outcome.winner is None
    assert [c.name for c in outcome.leaders] == ["A", "B"]


def test_capacities_come_from_settings(voting: VotingLedger) -> None:
    for key in range(voting.settings.voting_max_candidates):
        voting.register_candidate(key, f"c{key}")
    with pytest.raises(CapacityExceeded):
        voting.register_candidate(99, "extra")

    for key in range(voting.settings.voting_max_voters):
        voting.register_voter(key)
    with pytest.raises(CapacityExceeded):
        voting.register_voter(99)


def test_reset_clears_everything(voting: VotingLedger) -> None:
    voting.register_candidate(CANDIDATE_A, "A")
    voting.register_voter(VOTER_1)
    voting.cast_vote(VOTER_1, CANDIDATE_A)

    voting.reset()

    assert voting.is_empty()
    assert voting.total_votes == 0
    voting.register_voter(VOTER_1)
    assert not voting.voters.get(VOTER_1).has_voted


def test_cast_vote_returns_the_stored_candidate(voting: VotingLedger) -> None:
    voting.register_candidate(CANDIDATE_A, "A")
    voting.register_voter(VOTER_1)

    chosen = voting.cast_vote(VOTER_1, CANDIDATE_A)

    assert chosen is voting.candidates.get(CANDIDATE_A)
    assert chosen.vote_count == 1


def test_ledgers_compare_by_type_and_content(voting: VotingLedger, test_settings: Settings) -> None:
    assert voting == VotingLedger(test_settings)
    assert voting != BankLedger(test_settings)
    assert voting != "voting"
    assert voting.__eq__(object()) is NotImplemented

    voting.register_candidate(CANDIDATE_A, "A")
    assert voting != VotingLedger(test_settings)
