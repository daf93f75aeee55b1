"""
Local user registration, sign-in and profile management.

Users are kept as a JSON list under :data:`~PocketLedger.core.storage.USERS_KEY`; the
signed-in user is mirrored under :data:`~PocketLedger.core.storage.CURRENT_USER_KEY` so
that it survives restarts.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from . import storage
from ..status import status

DEFAULT_MIN_PASSWORD_LENGTH = 6

#: Fields that :meth:`AuthService.update_profile` never overwrites
PROTECTED_FIELDS = ('id', 'password', 'createdAt')

AuthCallback = Callable[[Optional[Dict[str, Any]]], None]


class AuthService:
    """Manages local user accounts and the signed-in user.

    Args:
        store: Key-value store holding the user records.
        min_password_length (int): Minimum accepted length of a new password.
    """

    def __init__(self, store: storage.KeyValueStore,
                 min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH) -> None:
        self.store = store
        self.min_password_length = min_password_length
        self._callbacks: List[AuthCallback] = []

    def _users(self) -> List[Dict[str, Any]]:
        return storage.load_json(self.store, storage.USERS_KEY, [])

    def _save_users(self, users: List[Dict[str, Any]]) -> None:
        storage.dump_json(self.store, storage.USERS_KEY, users)

    def _set_current_user(self, user: Optional[Dict[str, Any]]) -> None:
        if user:
            storage.dump_json(self.store, storage.CURRENT_USER_KEY, user)
        elif not self.store.remove(storage.CURRENT_USER_KEY):
            raise status.StorageUnavailableException('Could not clear the signed-in user.')

        for callback in list(self._callbacks):
            callback(user)

    def register(self, email: str, password: str, display_name: str) -> Dict[str, Any]:
        """Create a new user and sign them in.

        Raises:
            status.UserExistsException: If the email address is already registered.
        """
        users = self._users()
        if any(u.get('email') == email for u in users):
            raise status.UserExistsException(email)

        user = {
            'id': storage.make_id(),
            'email': email,
            'password': password,
            'displayName': display_name,
            'createdAt': storage.now_str(),
        }
        users.append(user)
        self._save_users(users)
        logging.info(f'Registered user {user["id"]}')

        self._set_current_user(user)
        return user

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """Sign in with an email and password.

        Raises:
            status.InvalidCredentialsException: If no user matches.
        """
        user = next(
            (u for u in self._users() if u.get('email') == email and u.get('password') == password),
            None
        )
        if user is None:
            raise status.InvalidCredentialsException

        logging.info(f'User {user["id"]} signed in')
        self._set_current_user(user)
        return user

    def logout(self) -> None:
        logging.info('Signing out')
        self._set_current_user(None)

    def current_user(self) -> Optional[Dict[str, Any]]:
        return storage.load_json(self.store, storage.CURRENT_USER_KEY, None)

    def require_user(self) -> Dict[str, Any]:
        """Return the signed-in user.

        Raises:
            status.NotAuthenticatedException: If nobody is signed in.
        """
        user = self.current_user()
        if not user:
            raise status.NotAuthenticatedException
        return user

    def on_auth_state_changed(self, callback: AuthCallback) -> Callable[[], None]:
        """Subscribe to sign-in state changes.

        The callback is called right away with the current user, then after every
        register, login and logout.

        Returns:
            A function that cancels the subscription.
        """
        self._callbacks.append(callback)
        callback(self.current_user())

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def _user_index(self, users: List[Dict[str, Any]], user_id: str) -> int:
        for idx, user in enumerate(users):
            if user.get('id') == user_id:
                return idx
        raise status.UserNotFoundException(user_id)

    def _refresh_current_user(self, user: Dict[str, Any]) -> None:
        current = self.current_user()
        if current and current.get('id') == user['id']:
            storage.dump_json(self.store, storage.CURRENT_USER_KEY, user)

    def update_profile(self, user_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """Merge `updates` into a user's record.

        Raises:
            status.UserNotFoundException: If the user does not exist.
        """
        users = self._users()
        idx = self._user_index(users, user_id)

        updates = {k: v for k, v in updates.items() if k not in PROTECTED_FIELDS}
        users[idx] = {**users[idx], **updates, 'updatedAt': storage.now_str()}
        self._save_users(users)
        self._refresh_current_user(users[idx])
        return users[idx]

    def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        """Replace a user's password.

        Raises:
            status.UserNotFoundException: If the user does not exist.
            status.InvalidCredentialsException: If `current_password` does not match.
            status.PasswordInvalidException: If `new_password` is too short.
        """
        users = self._users()
        idx = self._user_index(users, user_id)

        if users[idx].get('password') != current_password:
            raise status.InvalidCredentialsException('Current password is incorrect.')
        if not new_password or len(new_password) < self.min_password_length:
            raise status.PasswordInvalidException(
                f'New password must be at least {self.min_password_length} characters.'
            )

        users[idx] = {**users[idx], 'password': new_password, 'updatedAt': storage.now_str()}
        self._save_users(users)
        self._refresh_current_user(users[idx])
