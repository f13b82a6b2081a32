"""Credential storage in a dotenv file."""
import logging
import os
from pathlib import Path
from typing import Optional, Union
from dotenv import dotenv_values, set_key, unset_key
from repo_manager.domain.credentials_interface import ICredentialStore
from repo_manager.domain.models import Credentials


logger = logging.getLogger(__name__)


class DotenvCredentialStore(ICredentialStore):
    """Keeps the token and username as GITHUB_TOKEN / GITHUB_USERNAME entries.

    Other keys in the same file are left alone, so the store can share a
    project's ``.env``.
    """

    TOKEN_KEY = "GITHUB_TOKEN"
    USERNAME_KEY = "GITHUB_USERNAME"

    def __init__(self, path: Union[str, Path]):
        """Initialize credential store.

        Args:
            path: dotenv file to read and write; created on first save
        """
        self._path = Path(path).expanduser()

    def load(self) -> Optional[Credentials]:
        if not self._path.exists():
            return None
        values = dotenv_values(self._path)
        token = values.get(self.TOKEN_KEY)
        username = values.get(self.USERNAME_KEY)
        if not token or not username:
            return None
        return Credentials(token=token, username=username)

    def save(self, credentials: Credentials) -> None:
        if not self._path.exists():
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.touch(mode=0o600)
        set_key(str(self._path), self.TOKEN_KEY, credentials.token)
        set_key(str(self._path), self.USERNAME_KEY, credentials.username)
        os.chmod(self._path, 0o600)
        logger.debug(f"Saved credentials to {self._path}")

    def clear(self) -> None:
        if not self._path.exists():
            return
        values = dotenv_values(self._path)
        for key in (self.TOKEN_KEY, self.USERNAME_KEY):
            if key in values:
                unset_key(str(self._path), key)
        logger.debug(f"Cleared credentials from {self._path}")
