"""App-level options read from the ``DONATIONS`` settings dict."""

from dataclasses import dataclass

from django.conf import settings

DEFAULTS = {
    "DEFAULT_CURRENCY": "USD",
    "RECENT_DONATIONS_LIMIT": 10,
    "TOP_DONORS_LIMIT": 10,
}


@dataclass(frozen=True)
class DonationsConfig:
    default_currency: str = DEFAULTS["DEFAULT_CURRENCY"]
    recent_donations_limit: int = DEFAULTS["RECENT_DONATIONS_LIMIT"]
    top_donors_limit: int = DEFAULTS["TOP_DONORS_LIMIT"]

    def __post_init__(self) -> None:
        if len(self.default_currency) != 3:
            raise ValueError("DEFAULT_CURRENCY must be a 3-letter currency code")
        if self.recent_donations_limit <= 0 or self.top_donors_limit <= 0:
            raise ValueError("Donation list limits must be positive")


def get_config() -> DonationsConfig:
    """Build the config from ``settings.DONATIONS``, falling back to defaults."""
    options = {**DEFAULTS, **getattr(settings, "DONATIONS", {})}
    return DonationsConfig(
        default_currency=str(options["DEFAULT_CURRENCY"]).upper(),
        recent_donations_limit=int(options["RECENT_DONATIONS_LIMIT"]),
        top_donors_limit=int(options["TOP_DONORS_LIMIT"]),
    )
