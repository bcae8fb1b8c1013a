from __future__ import annotations


class MusicLibraryError(Exception):
    pass


class UserNotFoundError(MusicLibraryError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"user {user_id} not found")
        self.user_id = user_id

