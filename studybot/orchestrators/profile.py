from studybot.context import UserContext
from studybot.database.models import ProfileRecord
from studybot.database.repositories.profiles_repository import ProfilesRepository


class ProfileOrchestrator:
    def __init__(self, profiles_repo: ProfilesRepository) -> None:
        self._profiles_repo = profiles_repo

    def get_profile(self, user: UserContext) -> ProfileRecord:
        return self._profiles_repo.find_own(user)

    def update_profile(self, user: UserContext, full_name: str | None) -> ProfileRecord:
        """Set the display name; a blank name clears it."""
        name = full_name.strip() if full_name else None
        return self._profiles_repo.update(user, user.user_id, {"full_name": name or None})
