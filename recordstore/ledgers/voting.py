"""
Voting ledger: candidates, registered voters and one vote per voter.

The vote total always equals the sum of candidate vote counts: both change
together inside `cast_vote` and nowhere else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, cast

from recordstore.config import Settings
from recordstore.domain.models import Candidate, Voter, vote_percentage
from recordstore.errors import AlreadyVoted, NotFound, RecordStoreError
from recordstore.ledgers.abstract import AbstractLedger
from recordstore.rules import Guard, enforce
from recordstore.store import RecordStore
from recordstore.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class _Ballot:
    voter_key: int
    voter: Optional[Voter]
    candidate_key: int
    candidate: Optional[Candidate]


BALLOT_GUARDS = (
    Guard(
        "voter_exists",
        lambda b: b.voter is not None,
        lambda b: NotFound("voter", b.voter_key),
    ),
    Guard(
        "not_voted",
        lambda b: not b.voter.has_voted,
        lambda b: AlreadyVoted(b.voter_key),
    ),
    Guard(
        "candidate_exists",
        lambda b: b.candidate is not None,
        lambda b: NotFound("candidate", b.candidate_key),
    ),
)


@dataclass(frozen=True)
class CandidateResult:
    candidate: Candidate
    percentage: float


@dataclass(frozen=True)
class ElectionOutcome:
    """Leading candidates; more than one leader means a tie, none means no votes."""

    leaders: List[Candidate] = field(default_factory=list)
    votes: int = 0

    @property
    def is_tie(self) -> bool:
        return len(self.leaders) > 1

    @property
    def winner(self) -> Optional[Candidate]:
        return self.leaders[0] if len(self.leaders) == 1 else None


class VotingLedger(AbstractLedger):
    name: str = "voting"
    description: str = "Candidate and voter registers with single-vote enforcement."
    filename: str = "voting_data.txt"

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__(settings)
        self.candidates: RecordStore[Candidate] = RecordStore(
            Candidate, "candidate", capacity=self.settings.voting_max_candidates
        )
        self.voters: RecordStore[Voter] = RecordStore(
            Voter, "voter", capacity=self.settings.voting_max_voters
        )
        self._total_votes = 0

    @property
    def counter(self) -> int:
        return self._total_votes

    @counter.setter
    def counter(self, value: int) -> None:
        self._total_votes = int(value)

    @property
    def total_votes(self) -> int:
        return self._total_votes

    def stores(self) -> Dict[str, RecordStore[Any]]:
        return {"candidates": self.candidates, "voters": self.voters}

    def register_candidate(self, key: int, name: str) -> Candidate:
        candidate = self.candidates.insert(key, name=name, vote_count=0)
        log.info(f"[CANDIDATE REGISTERED] {key}", extra={"key": key})
        return candidate

    def register_voter(self, key: int, name: str = "") -> Voter:
        voter = self.voters.insert(key, name=name, has_voted=False)
        log.info(f"[VOTER REGISTERED] {key}", extra={"key": key})
        return voter

    def cast_vote(self, voter_key: int, candidate_key: int) -> Candidate:
        ballot = _Ballot(
            voter_key=voter_key,
            voter=self.voters.find(voter_key),
            candidate_key=candidate_key,
            candidate=self.candidates.find(candidate_key),
        )
        try:
            enforce(BALLOT_GUARDS, ballot)
        except RecordStoreError as exc:
            log.warning(
                f"[VOTE REJECTED] voter {voter_key}: {exc}",
                extra={"voter": voter_key, "candidate": candidate_key, "kind": exc.kind},
            )
            raise

        # The guards above rule out a missing voter or candidate.
        candidate = cast(Candidate, ballot.candidate)
        voter = cast(Voter, ballot.voter)
        candidate.vote_count += 1
        voter.has_voted = True
        self._total_votes += 1
        log.info(
            f"[VOTE CAST] voter {voter_key}",
            extra={"voter": voter_key, "candidate": candidate_key, "total_votes": self._total_votes},
        )
        return candidate

    def results(self) -> List[CandidateResult]:
        return [
            CandidateResult(c, vote_percentage(c.vote_count, self._total_votes))
            for c in self.candidates
        ]

    def outcome(self) -> ElectionOutcome:
        top = max((c.vote_count for c in self.candidates), default=0)
        if top == 0:
            return ElectionOutcome()
        return ElectionOutcome(
            leaders=[c for c in self.candidates if c.vote_count == top], votes=top
        )

    def reset(self) -> None:
        """Clear every candidate, voter and vote."""
        self.candidates.clear()
        self.voters.clear()
        self._total_votes = 0
        log.info("[ELECTION RESET] all data cleared")


__all__ = ["BALLOT_GUARDS", "CandidateResult", "ElectionOutcome", "VotingLedger"]
