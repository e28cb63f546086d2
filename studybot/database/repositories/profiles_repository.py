from typing import ClassVar

from studybot.context import UserContext
from studybot.database.models import ProfileRecord
from studybot.database.repositories.base_repository import BaseRepository


class ProfilesRepository(BaseRepository[ProfileRecord]):
    """Database operations for the profiles table.

    Rows are created by the auth provider's sign-up hook and keyed by the
    user id itself.
    """

    table: ClassVar[str] = "profiles"
    record_type: ClassVar[type] = ProfileRecord
    columns: ClassVar[tuple[str, ...]] = ("id", "email", "full_name", "created_at", "updated_at")
    owner_column: ClassVar[str] = "id"
    touches_updated_at: ClassVar[bool] = True

    def find_own(self, user: UserContext) -> ProfileRecord:
        """Profile of *user*.

        Raises:
            ArtifactNotFoundError: if the sign-up hook has not created it.
        """
        return self.find_by_id(user, user.user_id)
