"""Word-frequency analysis for word clouds.

Implements the TextAnalyzer contract with two tokenization modes:

- WORD: jieba segmentation, so Chinese text is split into dictionary words
  while Latin words and numbers stay whole
- CHAR: individual letters and CJK characters

Usage:
    analyzer = WordCloudAnalyzer()
    texts = analyzer.filter_text_messages(raw_texts)
    result = analyzer.analyze(texts, top_n=50)
    for item in result.words:
        print(item.word, item.count)
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from collections.abc import Iterable, Iterator, Sequence
from typing import TYPE_CHECKING

import jieba

from contracts.group_chat import RankedWord, WordCloudMode, WordCloudResult
from groupstats.errors import AnalyzerError, invalid_analyzer_param

if TYPE_CHECKING:
    from groupstats.config import WordCloudConfig

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r"(?:https?://|www\.)\S+", re.IGNORECASE)
MENTION_PATTERN = re.compile(r"@\S+")
# Short bracketed placeholders such as [Image], [图片], [Smile]
PLACEHOLDER_PATTERN = re.compile(r"\[[^\[\]\s]{1,12}\]")
XML_PAYLOAD_PATTERN = re.compile(r"^\s*<(?:\?xml|msg|appmsg)\b", re.IGNORECASE)
WHITESPACE_PATTERN = re.compile(r"\s+")

WORD_TOKEN_PATTERN = re.compile(r"[^\W_]+")

STOPWORDS: frozenset[str] = frozenset(
    {
        "a",
        "an",
        "and",
        "are",
        "as",
        "at",
        "be",
        "but",
        "by",
        "for",
        "from",
        "have",
        "i",
        "if",
        "in",
        "is",
        "it",
        "just",
        "me",
        "my",
        "no",
        "not",
        "of",
        "on",
        "or",
        "our",
        "so",
        "that",
        "the",
        "their",
        "they",
        "this",
        "to",
        "we",
        "with",
        "you",
        "your",
        "我们",
        "你们",
        "他们",
        "这个",
        "那个",
        "就是",
        "什么",
        "一个",
        "没有",
        "可以",
    }
)


def _word_tokens(text: str) -> Iterator[str]:
    for token in jieba.cut(text.lower()):
        token = token.strip()
        # jieba emits punctuation and whitespace as their own segments
        if token and WORD_TOKEN_PATTERN.fullmatch(token):
            yield token


def _char_tokens(text: str) -> Iterator[str]:
    for char in text.lower():
        if char.isalpha():
            yield char


class WordCloudAnalyzer:
    """Default TextAnalyzer implementation.

    Attributes:
        stopwords: Words excluded from every analysis.
    """

    def __init__(self, extra_stopwords: Iterable[str] = ()) -> None:
        self.stopwords = STOPWORDS | {w.lower() for w in extra_stopwords}

    @classmethod
    def from_config(cls, config: WordCloudConfig) -> WordCloudAnalyzer:
        return cls(extra_stopwords=config.extra_stopwords)

    def filter_text_messages(self, texts: Sequence[str]) -> list[str]:
        """Strip links, mentions, placeholders and structured payloads.

        Args:
            texts: Raw message bodies.

        Returns:
            Cleaned texts; bodies that end up empty are dropped.
        """
        cleaned: list[str] = []
        for text in texts:
            if not text or XML_PAYLOAD_PATTERN.match(text):
                continue
            text = URL_PATTERN.sub(" ", text)
            text = MENTION_PATTERN.sub(" ", text)
            text = PLACEHOLDER_PATTERN.sub(" ", text)
            text = WHITESPACE_PATTERN.sub(" ", text).strip()
            if text:
                cleaned.append(text)
        return cleaned

    def analyze(
        self,
        texts: Sequence[str],
        mode: WordCloudMode = WordCloudMode.WORD,
        top_n: int = 100,
        min_count: int = 1,
        min_length: int = 2,
    ) -> WordCloudResult:
        """Rank words across texts by occurrence count.

        Ties keep the order in which words were first seen.

        Args:
            texts: Texts to analyze (already filtered).
            mode: Tokenization mode.
            top_n: Maximum number of words returned.
            min_count: Minimum occurrences for a word to be returned.
            min_length: Minimum word length in characters.

        Returns:
            WordCloudResult with at most top_n words.

        Raises:
            AnalyzerError: If a numeric parameter is below 1 or tokenization fails.
        """
        params = {"top_n": top_n, "min_count": min_count, "min_length": min_length}
        for name, value in params.items():
            if value < 1:
                raise invalid_analyzer_param(name, value)

        tokenize = _char_tokens if WordCloudMode(mode) is WordCloudMode.CHAR else _word_tokens

        counts: Counter[str] = Counter()
        try:
            for text in texts:
                counts.update(
                    token
                    for token in tokenize(text)
                    if token not in self.stopwords and not token.isdigit()
                )
        except (TypeError, AttributeError) as e:
            raise AnalyzerError(f"Failed to tokenize texts: {e}", cause=e) from e

        ranked = [
            RankedWord(word, count)
            for word, count in counts.most_common()
            if count >= min_count and len(word) >= min_length
        ][:top_n]

        logger.debug(
            "Analyzed %d texts: %d tokens, %d unique, %d returned",
            len(texts),
            counts.total(),
            len(counts),
            len(ranked),
        )
        return WordCloudResult(
            words=ranked, total_words=counts.total(), unique_words=len(counts)
        )
