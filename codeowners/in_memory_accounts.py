"""Account directory kept in memory."""

from collections import defaultdict

from codeowners.account import Account, AccountMatch, ActingUser
from codeowners.errors import AccountLookupError


class InMemoryAccountDirectory:
    """Accounts, groups and visibility rules held in plain collections.

    Accounts listed in ``hidden_accounts`` are visible only to themselves and
    to users in ``global_viewers``.
    """

    def __init__(self) -> None:
        self.accounts: dict[int, Account] = {}
        self.groups: dict[str, set[int]] = defaultdict(set)
        self.hidden_accounts: set[int] = set()
        self.global_viewers: set[int] = set()
        self.secondary_email_viewers: set[int] = set()
        self.owners_by_project: dict[str, list[int]] = defaultdict(list)
        self.unavailable = False

    def add_account(self, account: Account) -> Account:
        self.accounts[account.account_id] = account
        return account

    def add_to_group(self, group: str, account_id: int) -> None:
        self.groups[group].add(account_id)

    def lookup_by_email(self, email: str) -> list[AccountMatch]:
        if self.unavailable:
            raise AccountLookupError("account directory is unavailable")
        matches = []
        for account in self.accounts.values():
            if account.preferred_email == email:
                matches.append(AccountMatch(account, secondary=False))
            elif email in account.secondary_emails:
                matches.append(AccountMatch(account, secondary=True))
        return matches

    def can_see(self, user: ActingUser, account: Account) -> bool:
        if account.account_id not in self.hidden_accounts:
            return True
        return user.is_account(account) or user.account_id in self.global_viewers

    def can_view_secondary_emails(self, user: ActingUser) -> bool:
        return user.account_id in self.secondary_email_viewers

    def is_member(self, account_id: int, group: str) -> bool:
        return account_id in self.groups.get(group, set())

    def project_owners(self, project: str) -> list[Account]:
        return [self.accounts[i] for i in self.owners_by_project.get(project, []) if i in self.accounts]
