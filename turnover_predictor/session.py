# session.py
from typing import Any, Dict, List, MutableMapping, Optional

from turnover_predictor.config import TOKEN_KEY

EMPLOYEES_KEY = "employees"


class SessionStore:
    """Single owner of the bearer token and the cached employee list.

    Wraps a mutable mapping (``st.session_state`` in the app) so views never
    read these keys directly. Authentication is just "is a token stored";
    nothing is verified client-side.
    """

    def __init__(self, state: MutableMapping[str, Any], key: str = TOKEN_KEY):
        self._state = state
        self._key = key

    def get_token(self) -> Optional[str]:
        token = self._state.get(self._key)
        return token or None

    def set_token(self, token: str) -> None:
        self._state[self._key] = token

    def clear_token(self) -> None:
        if self._key in self._state:
            del self._state[self._key]

    @property
    def is_authenticated(self) -> bool:
        return self.get_token() is not None

    # ---------------------- EMPLOYEE CACHE ----------------------
    def cached_employees(self) -> Optional[List[Dict[str, Any]]]:
        """The list fetched for this session, or None when it must be (re)fetched."""
        return self._state.get(EMPLOYEES_KEY)

    def cache_employees(self, employees: List[Dict[str, Any]]) -> None:
        self._state[EMPLOYEES_KEY] = employees

    def clear_employees(self) -> None:
        self._state.pop(EMPLOYEES_KEY, None)

    def reset_client_state(self) -> None:
        # everything but the token goes; the next run re-fetches
        for key in [k for k in list(self._state.keys()) if k != self._key]:
            del self._state[key]
