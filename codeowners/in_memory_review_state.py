"""Reviewers and votes kept in memory."""

from collections import defaultdict


class InMemoryReviewState:
    def __init__(self) -> None:
        self.reviewers: dict[int, list[int]] = defaultdict(list)
        self.votes: dict[tuple[int, str], dict[int, int]] = defaultdict(dict)

    def add_reviewer(self, change_number: int, account_id: int) -> None:
        if account_id not in self.reviewers[change_number]:
            self.reviewers[change_number].append(account_id)

    def vote(self, change_number: int, label: str, account_id: int, value: int) -> None:
        """Record a vote; voting also makes the account a reviewer."""
        self.add_reviewer(change_number, account_id)
        self.votes[(change_number, label)][account_id] = value

    def list_reviewers(self, change_number: int) -> list[int]:
        return list(self.reviewers.get(change_number, []))

    def list_votes(self, change_number: int, label: str) -> dict[int, int]:
        return dict(self.votes.get((change_number, label), {}))
