"""
Tokenizer and pacing constants for RSVP text processing.

This module contains the character classes used by the tokenizer and the
ORP/pacing calculators, plus the additive pacing bonuses.
"""

# Tokenizer version - increment when logic changes
TOKENIZER_VERSION = "2.0.0"

# -----------------------------------------------------------------------------
# Whitespace
# -----------------------------------------------------------------------------

# Whitespace variants folded to a plain space before collapsing
WHITESPACE_VARIANTS = {
    "\u00a0",   # no-break space
    "\u2009",   # thin space
    "\u202f",   # narrow no-break space
    "\ufeff",   # zero width no-break space (BOM)
}

# Characters the scanner treats as token separators
SEPARATORS = {' ', '\n', '\t', '\r'}

# -----------------------------------------------------------------------------
# Brackets and Quotes
# -----------------------------------------------------------------------------

# Attached to the front of the next token: “The, (n, [see
OPENERS = {
    "(", "[", "{", "<",
    "\"",       # ASCII double quote
    "'",        # ASCII single quote
    "\u201c",   # left double quotation mark
    "\u2018",   # left single quotation mark
}

# Attached to the end of the current token: 1,048), skip.”
CLOSERS = {
    ")", "]", "}", ">",
    "\"",       # ASCII double quote
    "'",        # ASCII single quote
    "\u201d",   # right double quotation mark
    "\u2019",   # right single quotation mark
}

# Brackets only, without quotes: used by the pacing bracket rule
OPENING_BRACKETS = {"(", "[", "{", "<"}
CLOSING_BRACKETS = {")", "]", "}", ">"}

# -----------------------------------------------------------------------------
# Joiners and dashes
# -----------------------------------------------------------------------------

EM_DASH = "\u2014"

# Hyphen, non-breaking hyphen, en dash
HYPHEN_LIKE = {"-", "\u2011", "\u2013"}

# ASCII apostrophe, right single quotation mark
APOSTROPHE_LIKE = {"'", "\u2019"}

# Kept inside a number run: 1,048 / 12.7
NUMERIC_GLUE = {',', '.'}

# Never absorbed into a token body: p < 0.05, μ = 0
COMPARATORS = {'<', '>', '='}

# Single leading sign kept with the following core: ~12.7%, -5, ±3
ATTACHABLE_PREFIXES = {"~", "+", "-", "\u00b1"}

# Superscript footnote markers ¹ ² ³ ⁴ ... ⁰
FOOTNOTE_MARKERS = {
    "\u00b9", "\u00b2", "\u00b3", "\u2074", "\u2075",
    "\u2076", "\u2077", "\u2078", "\u2079", "\u2070",
}

ELLIPSIS = "\u2026"
ELLIPSIS_STRINGS = ("...", ELLIPSIS)

# Sentence/clause punctuation greedily attached after the core
TRAILING_PUNCTUATION = {'.', '!', '?', ';', ',', ':', '%'}

TRAILING_ATTACHABLE = CLOSERS | FOOTNOTE_MARKERS | TRAILING_PUNCTUATION | {ELLIPSIS}

# -----------------------------------------------------------------------------
# ORP step table
# -----------------------------------------------------------------------------

# (max core length, ORP index); longer cores use ORP_MAX_INDEX
ORP_STEPS = (
    (2, 0),
    (5, 1),
    (9, 2),
    (13, 3),
)
ORP_MAX_INDEX = 4

# -----------------------------------------------------------------------------
# Pacing
# -----------------------------------------------------------------------------

MS_PER_MINUTE = 60_000.0

SENTENCE_PUNCTUATION = {'.', '!', '?'}
CLAUSE_PUNCTUATION = {',', ';', ':'}

# Ignored when looking for terminal punctuation
PACING_TRAILING_CLOSERS = CLOSERS | FOOTNOTE_MARKERS

# Characters that make a digit-bearing token "numeric-looking"
NUMERIC_MARKS = {'.', ',', '%'}

LONG_TOKEN_THRESHOLD = 12

# Additive bonuses in milliseconds; every matching rule contributes
SENTENCE_END_BONUS_MS = 220
CLAUSE_END_BONUS_MS = 120
ATTACHED_EM_DASH_BONUS_MS = 110
STANDALONE_EM_DASH_BONUS_MS = 140
ELLIPSIS_BONUS_MS = 160
COMPARATOR_BONUS_MS = 70
NUMERIC_BONUS_MS = 60
ALPHANUMERIC_MIX_BONUS_MS = 40
BRACKETED_BONUS_MS = 40
LONG_TOKEN_BONUS_MS = 60
