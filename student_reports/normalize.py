"""
Arabic text helpers: the name comparison key used to join marks to the roster,
and the collation key used to order classrooms.
"""
import re
import unicodedata

ALEF_FORMS = re.compile('[إأآا]')
YA_FORMS = re.compile('[ى]')
HAMZA_FORMS = re.compile('[ئءؤ]')
WHITESPACE = re.compile(r'\s+')


def normalize_arabic(text):
    """
    Folds the spelling variants that commonly differ between two typings of
    the same Arabic name. The result is only ever compared, never displayed.
    """
    if text is None:
        return ''
    text = str(text)
    if not text:
        return ''
    text = ALEF_FORMS.sub('ا', text)
    text = YA_FORMS.sub('ي', text)
    text = HAMZA_FORMS.sub('ء', text)
    text = WHITESPACE.sub(' ', text)
    return text.strip().lower()


# --- Collation ---
# Arabic letters in alphabet order. Each entry lists the base letter first and
# then the forms that only differ from it at the secondary level.
ARABIC_ALPHABET = [
    'ء',
    'اأإآٱ',
    'ب', 'تة', 'ث', 'ج', 'ح', 'خ', 'د', 'ذ', 'ر', 'ز', 'س', 'ش', 'ص', 'ض',
    'ط', 'ظ', 'ع', 'غ', 'ف', 'ق', 'ك', 'ل', 'م', 'ن', 'ه',
    'وؤ',
    'يىئ',
]

ARABIC_WEIGHTS = {
    char: (rank, variant)
    for rank, forms in enumerate(ARABIC_ALPHABET)
    for variant, char in enumerate(forms)
}

# Primary groups, lowest first. Arabic script is ordered ahead of Latin.
GROUP_SYMBOL = 1
GROUP_DIGIT = 2
GROUP_ARABIC = 3
GROUP_LATIN = 4
GROUP_OTHER = 5


def _char_weights(char):
    """Returns (group, rank, secondary) for one character, or None if ignorable."""
    if char in ARABIC_WEIGHTS:
        rank, variant = ARABIC_WEIGHTS[char]
        return GROUP_ARABIC, rank, variant * 2
    category = unicodedata.category(char)
    if category.startswith('M') or char == 'ـ':
        # harakat, tatweel
        return None
    if char.isdigit():
        return GROUP_DIGIT, unicodedata.digit(char, 0), 0
    if char.isalpha():
        if '؀' <= char <= 'ۿ':
            return GROUP_ARABIC, len(ARABIC_ALPHABET) + ord(char), 0
        base = unicodedata.normalize('NFKD', char.casefold())[0]
        secondary = 1 if char != char.lower() else 0
        if base.isascii():
            return GROUP_LATIN, ord(base), secondary
        return GROUP_OTHER, ord(base), secondary
    return GROUP_SYMBOL, ord(char), 0


def classroom_sort_key(text):
    """
    Sort key approximating Arabic locale collation for classroom labels.

    Characters compare first by primary weight (symbols, digits, Arabic
    letters, Latin letters); letter variants such as ة/ت or ى/ي and letter
    case only decide between keys that are otherwise equal.
    """
    text = '' if text is None else str(text)
    primary = []
    secondary = []
    for char in text:
        weights = _char_weights(char)
        if weights is None:
            continue
        group, rank, minor = weights
        primary.append(chr(group * 0x10000 + min(rank, 0xFFFF)))
        secondary.append(chr(0x100 + minor))
    return ''.join(primary) + '\x00' + ''.join(secondary) + '\x00' + text
