"""
Client Classifier

Maps a raw User-Agent string to coarse (browser, os, device) labels.

This is a substring heuristic, not a user agent grammar. Checks are ordered
and the first match wins, which gives known misreadings, e.g.:
- Edge and Opera report "Chrome" and are labelled Chrome
- Android agents contain "Linux" and are labelled Linux
- iPhone agents contain "Mac OS X" and are labelled MacOS
- Tablets without "Mobile" are labelled Desktop
Swap classify_user_agent for a real parser to fix these; nothing else in
the recorder depends on how the labels are derived.
"""

from typing import NamedTuple, Optional

BROWSER_RULES = (
    ("Chrome", "Chrome"),
    ("Firefox", "Firefox"),
    ("Safari", "Safari"),
)

OS_RULES = (
    ("Windows", "Windows"),
    ("Mac", "MacOS"),
    ("Linux", "Linux"),
    ("Android", "Android"),
    ("iOS", "iOS"),
)

OTHER = "Other"
MOBILE = "Mobile"
DESKTOP = "Desktop"


class ClientClassification(NamedTuple):
    browser: str
    os: str
    device: str


def _first_match(user_agent: str, rules) -> str:
    for needle, label in rules:
        if needle in user_agent:
            return label
    return OTHER


def classify_user_agent(user_agent: Optional[str]) -> ClientClassification:
    """
    Classify a raw client agent string.

    Args:
        user_agent: Value of the User-Agent header, may be missing

    Returns:
        ClientClassification with browser, os and device labels

    Example:
        classify_user_agent("Mozilla/5.0 (Windows NT 10.0) Chrome/99 Mobile")
        -> ClientClassification(browser="Chrome", os="Windows", device="Mobile")
    """
    user_agent = user_agent or ""
    return ClientClassification(
        browser=_first_match(user_agent, BROWSER_RULES),
        os=_first_match(user_agent, OS_RULES),
        device=MOBILE if MOBILE in user_agent else DESKTOP,
    )
