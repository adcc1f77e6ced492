"""User lookups."""

from bookstore.models import User
from bookstore.repositories.base import Repository


class UserRepository(Repository[User]):
    model = User

    def get_by_email(self, email: str) -> User | None:
        return self.find_by(User.email == email)
