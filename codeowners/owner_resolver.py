"""Resolves owner emails to accounts on behalf of an acting user."""

import logging
from dataclasses import dataclass

from codeowners.account import Account, ActingUser
from codeowners.collaborators import AccountDirectory
from codeowners.debug_trace import DebugTrace
from codeowners.declaration import ALL_USERS_WILDCARD
from codeowners.errors import AccountLookupError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailResolution:
    """Outcome of resolving one owner email."""

    email: str
    account: Account | None = None
    owned_by_all_users: bool = False
    reason: str = ""

    @property
    def resolvable(self) -> bool:
        return self.account is not None or self.owned_by_all_users


class OwnerResolver:
    """Maps owner emails to visible, active accounts.

    Visibility is evaluated for ``acting_user``: the uploader when validating a
    change, the caller for plain lookups. With no acting user, visibility is
    not checked. Results are cached per instance, so one instance must only
    serve one acting user.
    """

    def __init__(
        self,
        directory: AccountDirectory,
        acting_user: ActingUser | None,
        allowed_email_domains: list[str] | tuple[str, ...] = (),
        trace: DebugTrace | None = None,
    ) -> None:
        self.directory = directory
        self.acting_user = acting_user
        self.allowed_email_domains = {d.lower() for d in allowed_email_domains}
        self.trace = trace if trace is not None else DebugTrace(enabled=False)
        self._cache: dict[str, EmailResolution] = {}

    def resolve(self, email: str) -> EmailResolution:
        if email not in self._cache:
            self._cache[email] = self._resolve(email)
        return self._cache[email]

    def _unresolved(self, email: str, reason: str) -> EmailResolution:
        self.trace.add("cannot resolve code owner email %s: %s", email, reason)
        return EmailResolution(email, reason=reason)

    def _resolve(self, email: str) -> EmailResolution:
        if email == ALL_USERS_WILDCARD:
            self.trace.add("resolved %s to all users", email)
            return EmailResolution(
                email, owned_by_all_users=True, reason="all users wildcard is always resolvable"
            )

        try:
            matches = list(self.directory.lookup_by_email(email))
        except AccountLookupError as e:
            logger.warning("Account lookup for %s failed: %s", email, e)
            return self._unresolved(email, f"account lookup failed: {e}")
        if not matches:
            return self._unresolved(email, "no account with this email exists")
        if len(matches) > 1:
            return self._unresolved(email, "email is ambiguous")

        match = matches[0]
        account = match.account
        if not account.active:
            self.trace.add("ignoring inactive account %s for email %s", account.account_id, email)
            return self._unresolved(email, f"account {account.account_id} is inactive")

        reason = self._check_domain(email)
        if reason:
            return self._unresolved(email, reason)

        user = self.acting_user
        if user is None:
            self.trace.add("code owner visibility is not checked")
        elif not user.is_account(account):
            if not self.directory.can_see(user, account):
                return self._unresolved(
                    email, f"account {account.account_id} is not visible to user {user}"
                )
            if match.secondary and not self.directory.can_view_secondary_emails(user):
                return self._unresolved(
                    email,
                    f"account {account.account_id} is referenced by secondary email"
                    f" but user {user} cannot see secondary emails",
                )

        self.trace.add("resolved email %s to account %s", email, account.account_id)
        return EmailResolution(email, account=account, reason="resolved")

    def _check_domain(self, email: str) -> str | None:
        if not self.allowed_email_domains:
            self.trace.add("all domains are allowed")
            return None
        if "@" not in email:
            return f"email {email} has no domain"
        domain = email.rsplit("@", 1)[1]
        if domain.lower() not in self.allowed_email_domains:
            return f"domain {domain} of email {email} is not allowed"
        self.trace.add("domain %s of email %s is allowed", domain, email)
        return None
