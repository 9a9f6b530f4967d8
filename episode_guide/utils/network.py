"""
HTTP transport used by the document fetcher.
"""
from __future__ import annotations

import time
from typing import Optional, Dict

from curl_cffi import requests

from episode_guide.errors import FetchError
from episode_guide.utils.config import AppConfig
from episode_guide.utils.logger import logger

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


def build_proxies(proxy_url: str | None) -> Dict[str, str] | None:
    pu = str(proxy_url or "").strip()
    if not pu:
        return None
    return {"http": pu, "https": pu}


class NetworkHandler:
    """Single-shot GET requests; failures raise FetchError, nothing is retried."""

    def __init__(self, cfg: AppConfig | None = None, headers: Optional[Dict[str, str]] = None):
        self.cfg = cfg or AppConfig()
        self.proxies = build_proxies(self.cfg.proxy_url)
        self.headers = {
            "User-Agent": DEFAULT_USER_AGENT,
            "Accept-Language": "en-US,en;q=0.9",
        }
        if headers:
            self.headers.update(headers)

    def _apply_delay(self) -> None:
        if self.cfg.request_delay_sec > 0:
            time.sleep(self.cfg.request_delay_sec)

    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> str:
        merged_headers = dict(self.headers)
        if headers:
            merged_headers.update(headers)

        self._apply_delay()
        logger.debug(f"GET {url}")
        try:
            response = requests.get(
                url=url,
                headers=merged_headers,
                timeout=self.cfg.request_timeout_sec,
                verify=self.cfg.verify_ssl,
                proxies=self.proxies,
                impersonate=self.cfg.impersonate,
            )
        except Exception as e:
            raise FetchError(f"Request failed: {url}: {e}", url=url) from e

        logger.debug(f"<- {response.status_code} {url}")
        if response.status_code != 200:
            raise FetchError(f"HTTP {response.status_code}: {url}", url=url, status_code=response.status_code)
        return response.text
