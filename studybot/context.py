from dataclasses import dataclass


@dataclass(frozen=True)
class UserContext:
    """Identity of the user a call acts for.

    Issued by the external auth provider and passed explicitly into every
    orchestrator and repository call.
    """

    user_id: str
    email: str | None = None
