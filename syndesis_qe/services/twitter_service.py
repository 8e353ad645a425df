"""
Twitter API Service

Posts, lists and deletes tweets of one account through the v2 API using
OAuth 1.0a user-context credentials.
"""

from typing import Any, Dict, List, Optional

import httpx
from authlib.integrations.httpx_client import OAuth1Auth

from syndesis_qe.models.accounts import Account
from syndesis_qe.utils.exceptions import TwitterException
from syndesis_qe.utils.logging_config import get_logger

logger = get_logger(__name__)

TIMELINE_PAGE_SIZE = 100


def build_auth(account: Account) -> OAuth1Auth:
    """Build OAuth 1.0a request signing from a twitter account's credentials"""
    return OAuth1Auth(
        client_id=account.get_property("consumerKey"),
        client_secret=account.get_property("consumerSecret"),
        token=account.get_property("accessToken"),
        token_secret=account.get_property("accessTokenSecret"),
        # JSON bodies are dropped from signed requests unless forced
        force_include_body=True,
    )


class TwitterService:
    """Service for acting as one twitter account."""

    def __init__(
        self,
        account: Account,
        api_url: str = "https://api.twitter.com",
        http_client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.account = account
        self.http_client = http_client or httpx.Client(
            base_url=api_url, auth=build_auth(account), timeout=timeout, transport=transport
        )
        self._user: Optional[Dict[str, Any]] = None

    def _request(
        self,
        method: str,
        path: str,
        json_data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        try:
            response = self.http_client.request(method, path, json=json_data, params=params)
        except httpx.RequestError as e:
            logger.error(f"Network error calling Twitter API: {e}")
            raise TwitterException(f"Network error: {e}", details={"path": path}) from e

        if response.status_code >= 400:
            logger.error(
                f"Twitter API error: {response.status_code}",
                extra={"status_code": response.status_code, "path": path},
            )
            raise TwitterException(
                f"Twitter API error on {method} {path}: {response.text}",
                status_code=response.status_code,
                details={"path": path},
            )

        return response.json()

    def _me(self) -> Dict[str, Any]:
        if self._user is None:
            self._user = self._request("GET", "/2/users/me")["data"]
        return self._user

    def get_screen_name(self) -> str:
        return self._me()["username"]

    def update_status(self, text: str) -> str:
        """
        Post a tweet.

        Args:
            text: Tweet text

        Returns:
            ID of the new tweet
        """
        data = self._request("POST", "/2/tweets", json_data={"text": text})
        tweet_id = data["data"]["id"]
        logger.info("Posted tweet", extra={"tweet_id": tweet_id})
        return tweet_id

    def get_user_timeline(self) -> List[Dict[str, Any]]:
        """Recent tweets of the account, newest first, across all pages."""
        user_id = self._me()["id"]
        params: Dict[str, Any] = {"max_results": TIMELINE_PAGE_SIZE}
        tweets: List[Dict[str, Any]] = []
        while True:
            data = self._request("GET", f"/2/users/{user_id}/tweets", params=params)
            tweets.extend(data.get("data", []))
            next_token = data.get("meta", {}).get("next_token")
            if not next_token:
                return tweets
            params = {"max_results": TIMELINE_PAGE_SIZE, "pagination_token": next_token}

    def destroy_status(self, tweet_id: str) -> None:
        self._request("DELETE", f"/2/tweets/{tweet_id}")

    def delete_all_tweets(self) -> int:
        """
        Delete every tweet on the account's recent timeline.

        A tweet that cannot be deleted is logged and skipped.

        Returns:
            Number of tweets deleted
        """
        timeline = self.get_user_timeline()
        logger.info(
            f"Deleting all tweets of: {self.get_screen_name()}",
            extra={"count": len(timeline)},
        )

        deleted = 0
        for tweet in timeline:
            try:
                self.destroy_status(tweet["id"])
                deleted += 1
            except TwitterException as e:
                logger.warning(
                    f"Cannot destroy status: {tweet['id']}",
                    extra={"tweet_id": tweet["id"], "error": e.message},
                )
        return deleted

    def close(self) -> None:
        """Close HTTP client"""
        self.http_client.close()
