"""
Parsing and evaluation of the ``Accept-Encoding`` request header.

The header is read into an ordered list of ``(token, quality)`` preferences.
Acceptability of one coding is decided by the most specific entry: an exact
token entry always governs, the ``*`` wildcard only applies when no exact
entry exists, and a quality of ``0`` rejects.
"""
import math
from typing import List, NamedTuple, Optional

WILDCARD = "*"
DEFAULT_QUALITY = 1.0


class Preference(NamedTuple):
    token: str
    quality: float = DEFAULT_QUALITY

    @property
    def acceptable(self) -> bool:
        return self.quality > 0


def parse_quality(value: str) -> float:
    """Parse a ``q`` parameter value.

    Malformed values degrade to the default quality instead of failing the
    request; out of range values are clamped into ``[0, 1]``.
    """
    try:
        quality = float(value.strip())
    except ValueError:
        return DEFAULT_QUALITY

    if not math.isfinite(quality):
        return DEFAULT_QUALITY

    return min(max(quality, 0.0), 1.0)


def parse_accept_encoding(value: str) -> List[Preference]:
    preferences: List[Preference] = []

    for part in value.split(","):
        components = part.strip().split(";")
        token = components[0].strip().lower()
        if not token:
            continue

        quality = DEFAULT_QUALITY
        for param in components[1:]:
            key, sep, param_value = param.partition("=")
            if sep and key.strip().lower() == "q":
                quality = parse_quality(param_value)

        preferences.append(Preference(token, quality))

    return preferences


class AcceptEncoding:
    """The preferences a client stated in one ``Accept-Encoding`` header.

    An empty or absent header means any coding is acceptable.
    """

    def __init__(self, value: str = "") -> None:
        self.value = value
        self.preferences = parse_accept_encoding(value) or [
            Preference(WILDCARD, DEFAULT_QUALITY)
        ]

    def _last(self, token: str) -> Optional[Preference]:
        # the last entry given for a token wins
        for preference in reversed(self.preferences):
            if preference.token == token:
                return preference
        return None

    def preference_for(self, token: str) -> Optional[Preference]:
        """Return the entry governing ``token``, exact match first."""
        exact = self._last(token.strip().lower())
        if exact is not None:
            return exact
        return self._last(WILDCARD)

    def accepts(self, token: str) -> bool:
        preference = self.preference_for(token)
        return preference is not None and preference.acceptable

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and self.accepts(token)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.value!r})"
