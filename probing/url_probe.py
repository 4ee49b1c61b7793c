"""
HTTP probe for `url` sources.

Issues exactly one request per call; no retries. Every failure mode is
folded into a ProbeOutcome so the caller always has something to
persist:

- any response          -> "<code> <reason>", error None
- non-2xx response      -> same status/data, error "HTTP <code>: <reason>"
- no response at all    -> "Network Error"
- anything else         -> "Error" with the exception message
"""

import httpx
from typing import Dict, Any
from probing.base import ProbeOutcome, NETWORK_ERROR, GENERIC_ERROR
import logging

logger = logging.getLogger(__name__)

DEFAULT_METHOD = "GET"


class UrlProbe:
    """
    Send the request described by a UrlConfig.

    Attributes:
        default_timeout_ms: Timeout used when the config has none (default: 10000)
    """

    def __init__(self, default_timeout_ms: int = 10000):
        self.default_timeout_ms = default_timeout_ms

    def timeout_seconds(self, config: Dict[str, Any]) -> float:
        return (config.get("timeout") or self.default_timeout_ms) / 1000

    def build_request(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Translate a stored config into httpx request arguments.

        Non-empty params go in the query string for GET and in a JSON
        body for every other method.
        """
        method = (config.get("method") or DEFAULT_METHOD).upper()
        headers = {
            str(name): str(value)
            for name, value in (config.get("headers") or {}).items()
        }

        request = {
            "method": method,
            "url": config["url"],
            "headers": headers,
        }

        params = config.get("params") or {}
        if params:
            if method == "GET":
                request["params"] = params
            else:
                request["json"] = params

        auth = config.get("auth") or {}
        if auth.get("username") is not None and auth.get("password") is not None:
            request["auth"] = (str(auth["username"]), str(auth["password"]))
        elif auth.get("token"):
            has_authorization = any(name.lower() == "authorization" for name in headers)
            if not has_authorization:
                headers["Authorization"] = f"Bearer {auth['token']}"

        return request

    @staticmethod
    def describe_response(response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            body = response.text

        return {
            "status": response.status_code,
            "statusText": response.reason_phrase,
            "headers": dict(response.headers),
            "body": body,
        }

    async def run(self, config: Dict[str, Any]) -> ProbeOutcome:
        try:
            request = self.build_request(config)
            logger.info(f"Probing {request['method']} {request['url']}")

            async with httpx.AsyncClient(
                timeout=self.timeout_seconds(config),
                follow_redirects=True
            ) as client:
                response = await client.request(**request)

            status = f"{response.status_code} {response.reason_phrase}"
            data = self.describe_response(response)

            try:
                response.raise_for_status()
            except httpx.HTTPStatusError:
                logger.warning(f"Probe got {status} from {request['url']}")
                return ProbeOutcome(
                    status=status,
                    data=data,
                    error=f"HTTP {response.status_code}: {response.reason_phrase}"
                )

            return ProbeOutcome(status=status, data=data, error=None)

        except (httpx.TimeoutException, httpx.NetworkError) as e:
            logger.warning(f"Probe could not reach {config.get('url')}: {type(e).__name__}: {e}")
            return ProbeOutcome(
                status=NETWORK_ERROR,
                data={"error": "network timeout or connection refused"},
                error="could not connect to server"
            )

        except Exception as e:
            message = str(e) or type(e).__name__
            logger.warning(f"Probe failed before a response for {config.get('url')}: {message}")
            return ProbeOutcome(
                status=GENERIC_ERROR,
                data={"error": message},
                error=message
            )
