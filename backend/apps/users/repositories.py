from apps.common.repository import ReadRepository
from .models import User


class UserRepository(ReadRepository[User]):
    def __init__(self):
        super().__init__(User)
