"""Twitch Helix authentication manager."""

from __future__ import annotations

import logging

import requests

from stream_archiver.domain.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

TOKEN_URL = "https://id.twitch.tv/oauth2/token"


class TwitchAuthManager:
    """
    Manages Twitch API authentication using the client credentials flow.

    An app access token is requested once and attached, together with the
    client id, to a shared :class:`requests.Session`.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize the Twitch authentication manager.

        Args:
            client_id: Twitch application client id
            client_secret: Twitch application client secret
            session: HTTP session to authenticate, a new one by default
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self._session = session if session is not None else requests.Session()
        self._token: str | None = None

    def get_authenticated_session(self) -> requests.Session:
        """
        Get a session carrying the Helix authentication headers.

        Returns:
            Authenticated HTTP session

        Raises:
            AuthenticationError: If credentials are missing or rejected
        """
        if self._token is None:
            self._token = self._request_token()
            self._session.headers.update(
                {
                    "Client-ID": self.client_id,
                    "Authorization": f"Bearer {self._token}",
                }
            )
        return self._session

    def _request_token(self) -> str:
        """
        Exchange the client credentials for an app access token.

        Returns:
            The access token

        Raises:
            AuthenticationError: If the exchange fails
        """
        if not self.client_id or not self.client_secret:
            raise AuthenticationError(
                "Twitch client_id and client_secret must be set in the configuration file"
            )

        logger.debug("Requesting Twitch app access token")
        try:
            response = self._session.post(
                TOKEN_URL,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "grant_type": "client_credentials",
                },
            )
        except requests.RequestException as e:
            raise AuthenticationError(f"Failed to request Twitch token: {e}", e) from e

        if not response.ok:
            raise AuthenticationError(
                f"Twitch rejected the client credentials (HTTP {response.status_code})"
            )

        try:
            token = response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise AuthenticationError(f"Invalid Twitch token response: {e}", e) from e

        if not token:
            raise AuthenticationError("Twitch returned an empty access token")
        return str(token)

    @property
    def is_configured(self) -> bool:
        """Whether both credentials are present."""
        return bool(self.client_id and self.client_secret)
