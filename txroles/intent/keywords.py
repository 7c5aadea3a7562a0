# Keyword routing of free text to a pipeline stage. Sits in front of the core;
# the stages themselves never see raw text.

import re
from typing import Optional

from txroles.core.ids import AUTHORIZATION_PREFIX, PROPOSAL_PREFIX

STAGE_KEYWORDS = {
    "pay": ["pay", "execute", "submit", "finalize"],
    "authorize": ["authorize", "approve", "sign", "reject"],
    "propose": ["propose", "suggest", "create"],
}

REJECT_KEYWORDS = ["reject", "decline", "deny"]


def extract_identifier(text: str, prefix: str) -> Optional[str]:
    m = re.search(rf"\b{re.escape(prefix)}-\d+-\d+\b", text or "")
    return m.group(0) if m else None


def detect_stage(text: str) -> Optional[str]:
    """
    Most specific match wins: an ``auth-`` id means pay, a ``proposal-`` id
    means authorize, otherwise the first stage whose keywords appear.
    """
    t = (text or "").lower()
    if not t.strip():
        return None
    if extract_identifier(t, AUTHORIZATION_PREFIX):
        return "pay"
    if extract_identifier(t, PROPOSAL_PREFIX):
        return "authorize"
    for stage, words in STAGE_KEYWORDS.items():
        if any(w in t for w in words):
            return stage
    return None


def wants_rejection(text: str) -> bool:
    t = (text or "").lower()
    return any(w in t for w in REJECT_KEYWORDS)
