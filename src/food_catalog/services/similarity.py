"""Jamo-aware Jaro-Winkler similarity for Korean food names.

Precomposed Hangul syllables are split into their lead, vowel and trailing
jamo before comparison, so names that differ by a single consonant or a near
vowel still share most of their characters. Plain character comparison of
composed syllables would treat such names as entirely different.
"""

_SYLLABLE_BASE = 0xAC00
_LEAD_COUNT = 19
_VOWEL_COUNT = 21
_TRAIL_COUNT = 28
_BLOCK_COUNT = _VOWEL_COUNT * _TRAIL_COUNT
_SYLLABLE_COUNT = _LEAD_COUNT * _BLOCK_COUNT

_LEADS = "ㄱㄲㄴㄷㄸㄹㅁㅂㅃㅅㅆㅇㅈㅉㅊㅋㅌㅍㅎ"
_VOWELS = "ㅏㅐㅑㅒㅓㅔㅕㅖㅗㅘㅙㅚㅛㅜㅝㅞㅟㅠㅡㅢㅣ"
_TRAILS = ("",) + tuple("ㄱㄲㄳㄴㄵㄶㄷㄹㄺㄻㄼㄽㄾㄿㅀㅁㅂㅄㅅㅆㅇㅈㅊㅋㅌㅍㅎ")

WINKLER_SCALE = 0.1
WINKLER_MAX_PREFIX = 4


def normalize(text: str) -> str:
    """Lowercase text and remove all whitespace."""
    return "".join(text.lower().split())


def to_jamo(text: str) -> str:
    """Normalize text and decompose Hangul syllables into jamo."""
    out: list[str] = []
    for char in normalize(text):
        index = ord(char) - _SYLLABLE_BASE
        if 0 <= index < _SYLLABLE_COUNT:
            out.append(_LEADS[index // _BLOCK_COUNT])
            out.append(_VOWELS[(index % _BLOCK_COUNT) // _TRAIL_COUNT])
            out.append(_TRAILS[index % _TRAIL_COUNT])
        else:
            out.append(char)
    return "".join(out)


def jaro(first: str, second: str) -> float:
    """Return the Jaro similarity of two strings."""
    if not first or not second:
        return 0.0
    if first == second:
        return 1.0

    first_len, second_len = len(first), len(second)
    window = max(max(first_len, second_len) // 2 - 1, 0)
    first_matched = [False] * first_len
    second_matched = [False] * second_len

    matches = 0
    for i, char in enumerate(first):
        start = max(0, i - window)
        end = min(i + window + 1, second_len)
        for j in range(start, end):
            if second_matched[j] or second[j] != char:
                continue
            first_matched[i] = second_matched[j] = True
            matches += 1
            break

    if matches == 0:
        return 0.0

    half_transpositions = 0
    k = 0
    for i, char in enumerate(first):
        if not first_matched[i]:
            continue
        while not second_matched[k]:
            k += 1
        if char != second[k]:
            half_transpositions += 1
        k += 1
    transpositions = half_transpositions / 2

    return (
        matches / first_len
        + matches / second_len
        + (matches - transpositions) / matches
    ) / 3


def jaro_winkler(first: str, second: str) -> float:
    """Return the Jaro-Winkler similarity of two strings."""
    base = jaro(first, second)
    if base == 0.0:
        return 0.0
    prefix = 0
    for left, right in zip(first, second):
        if prefix >= WINKLER_MAX_PREFIX or left != right:
            break
        prefix += 1
    return base + prefix * WINKLER_SCALE * (1.0 - base)


def score(first: str, second: str) -> float:
    """Score how likely two food names denote the same dish, in [0, 1]."""
    return jaro_winkler(to_jamo(first), to_jamo(second))
