"""Machine translation through the free Google Translate endpoint."""

import logging

import requests

from marketpulse.render.format import safe_text

logger = logging.getLogger(__name__)

TRANSLATE_URL = "https://translate.googleapis.com/translate_a/single"
MAX_INPUT_LENGTH = 800


def translate_text(
    session: requests.Session,
    text: str,
    target_language: str = "vi",
    timeout: float = 15.0,
) -> str:
    """Translate text, falling back to the (cleaned) source text on failure.

    Args:
        session: HTTP session.
        text: Text to translate; truncated to 800 characters.
        target_language: ISO language code.
        timeout: Request timeout in seconds.

    Returns:
        Translated text, or the cleaned input when translation is unavailable.
    """
    cleaned = safe_text(text, MAX_INPUT_LENGTH)
    if not cleaned:
        return ""

    params = {"client": "gtx", "sl": "auto", "tl": target_language, "dt": "t", "q": cleaned}
    try:
        response = session.get(TRANSLATE_URL, params=params, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Translation failed, keeping source text: %s", e)
        return cleaned

    try:
        segments = data[0] or []
        translated = "".join(seg[0] for seg in segments if seg and seg[0])
    except (IndexError, KeyError, TypeError):
        logger.warning("Unexpected translation payload, keeping source text")
        return cleaned

    return translated or cleaned
