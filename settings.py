# settings.py — crawl configuration
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from errors import ConfigurationError

# ─────────────────────────── defaults ────────────────────────────
DEFAULT_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_0) "
    "AppleWebKit/605.1.15 (KHTML, like Gecko) Safari/605.1.15"
)
DEFAULT_SESSION       = "SitemapCache"
DEFAULT_RESTART_DELAY = 5       # seconds before a checkpointed crawl resumes
DEFAULT_SAFETY_MARGIN = 5       # seconds kept in reserve before the deadline
DEFAULT_TIMEOUT       = 10
# ──────────────────────────────────────────────────────────────────


@dataclass
class CrawlSettings:
    url: str
    limit: int = 0                          # 0 → unlimited
    user: str | None = None
    password: str | None = None
    disabled: Tuple[str, ...] = ()
    primary: Tuple[str, ...] = ()
    normal: Tuple[str, ...] = ()
    secondary: Tuple[str, ...] = ()
    query_urls: bool = False                # False → skip addresses with "?"
    additional: Dict[str, float] = field(default_factory=dict)
    session: str = DEFAULT_SESSION
    delay: int = DEFAULT_RESTART_DELAY
    time_budget: float = 0                  # 0 → no deadline
    safety_margin: float = DEFAULT_SAFETY_MARGIN
    timeout: float = DEFAULT_TIMEOUT
    throttle: float = 0                     # pause between page fetches
    user_agent: str = DEFAULT_UA

    def __post_init__(self) -> None:
        self.url = (self.url or "").strip()
        if self.url and not self.url.endswith("/"):
            self.url += "/"
        for name in ("disabled", "primary", "normal", "secondary"):
            setattr(self, name, tuple(getattr(self, name) or ()))

    @property
    def credentials(self) -> Tuple[str, str] | None:
        if self.user and self.password:
            return (self.user, self.password)
        return None

    def validate(self) -> "CrawlSettings":
        if not self.url:
            raise ConfigurationError("Url not set")
        if self.limit < 0:
            raise ConfigurationError(f"limit must be >= 0, got {self.limit}")
        if min(self.time_budget, self.safety_margin, self.delay, self.throttle) < 0:
            raise ConfigurationError("time budgets, delays and margins must be >= 0")
        for url, priority in self.additional.items():
            if not 0 <= priority <= 1:
                raise ConfigurationError(f"priority for {url} must be within [0, 1], got {priority}")
        return self
