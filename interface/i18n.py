"""Message lookup for CLI output.

Keys live in :data:`interface.constants.LANG_PACK`. Engine errors reuse
their ``code`` as the key and their ``details`` as placeholders, so every
placeholder name must stay clear of ``translate``'s own parameters.
"""

import os
from typing import Dict, Optional

from config import get_user_lang
from interface.constants import LANG_PACK

BASE_LANG = "en"


def _backfill(base_lang: str = BASE_LANG) -> None:
    base = LANG_PACK.get(base_lang, {})
    for lang, messages in LANG_PACK.items():
        if lang != base_lang:
            for key, text in base.items():
                messages.setdefault(key, text)


_backfill()


def effective_lang(preferred: Optional[str] = None) -> str:
    # pytest output is asserted in English regardless of the user's config
    if os.getenv("PYTEST_CURRENT_TEST"):
        return BASE_LANG
    candidate = (preferred or get_user_lang() or BASE_LANG).strip().lower()
    return candidate if candidate in LANG_PACK else BASE_LANG


def messages_for(lang: Optional[str] = None) -> Dict[str, str]:
    return LANG_PACK.get(effective_lang(lang), LANG_PACK[BASE_LANG])


def translate(key: str, /, lang: Optional[str] = None, **params) -> str:
    """Render ``key`` in the active language.

    Unknown keys come back unchanged; a template whose placeholders are not
    all supplied is returned unformatted.
    """
    template = messages_for(lang).get(key) or LANG_PACK[BASE_LANG].get(key, key)
    try:
        return template.format(**params)
    except (KeyError, IndexError, ValueError):
        return template


__all__ = ["effective_lang", "messages_for", "translate"]
