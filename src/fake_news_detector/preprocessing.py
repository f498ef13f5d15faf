"""Text normalization that reproduces the training-time token stream.

The classifier was trained on documents pushed through exactly this pipeline:

1. Lowercase
2. Replace every character outside ``a-z`` with a space
3. Split on whitespace
4. Drop stopwords
5. Porter-stem each surviving token
6. Join the stems with single spaces

Any change here (a different stopword list, a different stemmer variant, a
tokenizer that keeps digits) shifts the features the model sees without
raising an error, so the stopword list and stemmer mode are fixed constants.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional

from nltk.stem.porter import PorterStemmer

# ---------------------------------------------------------------------------
# Stopwords
# ---------------------------------------------------------------------------

# English stopword list of the NLP toolkit used by the offline trainer.
# Single letters are included, so one-character tokens never reach the model.
STOP_WORDS: frozenset[str] = frozenset(
    {
        "about",
        "above",
        "after",
        "again",
        "all",
        "also",
        "am",
        "an",
        "and",
        "another",
        "any",
        "are",
        "as",
        "at",
        "be",
        "because",
        "been",
        "before",
        "being",
        "below",
        "between",
        "both",
        "but",
        "by",
        "came",
        "can",
        "cannot",
        "come",
        "could",
        "did",
        "do",
        "does",
        "doing",
        "during",
        "each",
        "few",
        "for",
        "from",
        "further",
        "get",
        "got",
        "has",
        "had",
        "he",
        "have",
        "her",
        "here",
        "him",
        "himself",
        "his",
        "how",
        "if",
        "in",
        "into",
        "is",
        "it",
        "its",
        "itself",
        "like",
        "make",
        "many",
        "me",
        "might",
        "more",
        "most",
        "much",
        "must",
        "my",
        "myself",
        "never",
        "now",
        "of",
        "on",
        "only",
        "or",
        "other",
        "our",
        "ours",
        "ourselves",
        "out",
        "over",
        "own",
        "said",
        "same",
        "see",
        "should",
        "since",
        "so",
        "some",
        "still",
        "such",
        "take",
        "than",
        "that",
        "the",
        "their",
        "theirs",
        "them",
        "themselves",
        "then",
        "there",
        "these",
        "they",
        "this",
        "those",
        "through",
        "to",
        "too",
        "under",
        "until",
        "up",
        "very",
        "was",
        "way",
        "we",
        "well",
        "were",
        "what",
        "where",
        "when",
        "which",
        "while",
        "who",
        "whom",
        "with",
        "would",
        "why",
        "you",
        "your",
        "yours",
        "yourself",
        "a",
        "b",
        "c",
        "d",
        "e",
        "f",
        "g",
        "h",
        "i",
        "j",
        "k",
        "l",
        "m",
        "n",
        "o",
        "p",
        "q",
        "r",
        "s",
        "t",
        "u",
        "v",
        "w",
        "x",
        "y",
        "z",
    }
)

_NON_ALPHA_RE = re.compile(r"[^a-z]")

# The original Porter (1980) rules, without NLTK's extensions, match the
# stemmer the artifacts were produced with.
_STEMMER = PorterStemmer(mode=PorterStemmer.ORIGINAL_ALGORITHM)


@lru_cache(maxsize=65536)
def stem(token: str) -> str:
    """Porter-stem a single lowercase token.

    Tokens shorter than three characters are returned unchanged, as the
    trainer's stemmer did.
    """
    if len(token) < 3:
        return token
    return _STEMMER.stem(token, to_lowercase=False)


# ---------------------------------------------------------------------------
# Text Preprocessor
# ---------------------------------------------------------------------------


class TextPreprocessor:
    """Turn raw article text into the normalized token string the model expects.

    Instances hold only immutable configuration, so one instance can be shared
    by any number of concurrent callers.

    Example::

        preprocessor = TextPreprocessor()
        preprocessor.process("Scientists SHOCKED by miracle cure!")
        # 'scientist shock miracl cure'
    """

    def __init__(
        self,
        min_token_length: int = 1,
        max_tokens: Optional[int] = None,
        stop_words: frozenset[str] = STOP_WORDS,
    ) -> None:
        """Initialize the preprocessor.

        Args:
            min_token_length: Drop tokens shorter than this along with the
                stopwords. Only needed for artifacts from the optimized
                trainer, which used 3.
            max_tokens: Stem only the first ``max_tokens`` surviving tokens.
            stop_words: Stopword set; override only to match a different
                trainer.
        """
        if min_token_length < 1:
            raise ValueError("min_token_length must be at least 1")
        if max_tokens is not None and max_tokens < 1:
            raise ValueError("max_tokens must be positive or None")
        self.min_token_length = min_token_length
        self.max_tokens = max_tokens
        self.stop_words = frozenset(stop_words)

    def tokenize(self, text: str) -> list[str]:
        """Lowercase, strip non-letters and split (steps 1-3)."""
        return _NON_ALPHA_RE.sub(" ", text.lower()).split()

    def filter_tokens(self, tokens: list[str]) -> list[str]:
        """Drop stopwords and short tokens, then apply the token cap (step 4)."""
        kept = [
            t for t in tokens
            if t not in self.stop_words and len(t) >= self.min_token_length
        ]
        if self.max_tokens is not None:
            kept = kept[: self.max_tokens]
        return kept

    def stem_tokens(self, tokens: list[str]) -> list[str]:
        """Stem every token (step 5)."""
        return [stem(t) for t in tokens]

    def process(self, text: str) -> str:
        """Run the full pipeline and return space-joined stems.

        Args:
            text: Raw document text.

        Returns:
            Normalized token string; empty when nothing survives filtering.
        """
        if not text:
            return ""
        return " ".join(self.stem_tokens(self.filter_tokens(self.tokenize(text))))

    __call__ = process

    def __repr__(self) -> str:
        return (
            f"TextPreprocessor(min_token_length={self.min_token_length}, "
            f"max_tokens={self.max_tokens})"
        )


_DEFAULT_PREPROCESSOR = TextPreprocessor()


def preprocess(text: str) -> str:
    """Normalize ``text`` with the default training-time pipeline."""
    return _DEFAULT_PREPROCESSOR.process(text)
