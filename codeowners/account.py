"""Account identities as seen by the engine."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Account:
    """An account known to the account directory."""

    account_id: int
    preferred_email: str
    display_name: str = ""
    secondary_emails: tuple[str, ...] = ()
    active: bool = True

    def __str__(self) -> str:
        return self.display_name or self.preferred_email


@dataclass(frozen=True)
class AccountMatch:
    """One account found for an email; ``secondary`` marks a secondary-email hit."""

    account: Account
    secondary: bool = False


@dataclass(frozen=True)
class ActingUser:
    """The identity on whose behalf visibility is evaluated."""

    account_id: int | None
    name: str = field(default="anonymous")

    def is_account(self, account: Account) -> bool:
        return self.account_id is not None and self.account_id == account.account_id

    def __str__(self) -> str:
        return self.name

    @classmethod
    def of(cls, account: Account) -> "ActingUser":
        return cls(account.account_id, str(account))
