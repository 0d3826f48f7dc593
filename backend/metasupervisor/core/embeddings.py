"""TF-IDF embeddings for semantic code search.

Code is tokenized into normalized sub-tokens and turned into L2-normalized
TF-IDF vectors; cosine similarity of two vectors is then a plain dot product.
The vectorizer is trained incrementally: the vocabulary only grows, so
vectors computed at different times can have different lengths and are
compared over their shared prefix.
"""

from __future__ import annotations

import json
import math
import re
import threading
from collections import Counter
from typing import Dict, Iterable, List

STR_SENTINEL = " STR_LITERAL "
NUM_SENTINEL = " NUM_LITERAL "

STATE_VERSION = 1

_STRING_RE = re.compile(r"([\"'`])(?:(?!\1|\\).|\\.)*\1")
_NUMBER_RE = re.compile(r"\b\d+\.?\d*\b")
_CAMEL_RE = re.compile(r"([a-z])([A-Z])")
_ACRONYM_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")
_SPLIT_RE = re.compile(r"[^a-z0-9]+")


def tokenize(code: str) -> List[str]:
    """Tokenize a code snippet into normalized tokens.

    String and numeric literals collapse into sentinel tokens, identifiers
    are split on camelCase / PascalCase / snake_case boundaries, everything
    is lowercased and single-character tokens are dropped.
    """
    cleaned = _STRING_RE.sub(STR_SENTINEL, code)
    cleaned = _NUMBER_RE.sub(NUM_SENTINEL, cleaned)

    cleaned = _CAMEL_RE.sub(r"\1 \2", cleaned)
    cleaned = _ACRONYM_RE.sub(r"\1 \2", cleaned)

    return [t for t in _SPLIT_RE.split(cleaned.lower()) if len(t) >= 2]


def cosine_similarity(a: List[float], b: List[float]) -> float:
    """Cosine similarity of two L2-normalized vectors.

    Only the shared prefix is compared, which lets a vector built under a
    smaller vocabulary be scored against one built under a larger one.
    """
    if not a or not b:
        return 0.0
    n = min(len(a), len(b))
    dot = 0.0
    for i in range(n):
        dot += a[i] * b[i]
    return dot


class Embedder:
    """Abstract base class for embedding models."""

    def embed(self, text: str) -> List[float]:
        """Embed a single text into a vector."""
        raise NotImplementedError

    def embed_many(self, texts: Iterable[str]) -> List[List[float]]:
        """Embed multiple texts into vectors."""
        return [self.embed(t) for t in texts]


class TfIdfVectorizer(Embedder):
    """Incrementally trainable TF-IDF vectorizer.

    One instance is shared by every reader and writer of a store, so corpus
    updates and reads of the corpus are serialized on an internal lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._vocab: Dict[str, int] = {}
        self._df: Dict[str, int] = {}
        self._total_docs = 0

    @property
    def vocab_size(self) -> int:
        return len(self._vocab)

    @property
    def document_count(self) -> int:
        return self._total_docs

    def index_of(self, token: str) -> int | None:
        return self._vocab.get(token)

    def document_frequency(self, token: str) -> int:
        return self._df.get(token, 0)

    def train(self, documents: Iterable[str]) -> None:
        """Add documents to the corpus.

        Each document counts once per distinct token. Training the same
        documents twice counts them twice; callers decide when to retrain.
        """
        tokenized = [tokenize(doc) for doc in documents]
        with self._lock:
            for tokens in tokenized:
                self._total_docs += 1
                # dict keeps first-seen order, so new indices follow the text
                for token in dict.fromkeys(tokens):
                    self._df[token] = self._df.get(token, 0) + 1
                    if token not in self._vocab:
                        self._vocab[token] = len(self._vocab)

    def embed(self, text: str) -> List[float]:
        """Generate an L2-normalized TF-IDF vector for one document.

        Returns an empty vector when nothing has been trained yet and the
        all-zero vector when no token of ``text`` is in the vocabulary.
        """
        tokens = tokenize(text)
        total_terms = len(tokens) or 1

        with self._lock:
            dim = len(self._vocab)
            if dim == 0:
                return []

            vec = [0.0] * dim
            for token, count in Counter(tokens).items():
                idx = self._vocab.get(token)
                if idx is None:
                    continue
                tf = count / total_terms
                idf = math.log(1 + self._total_docs / max(1, self._df.get(token, 0)))
                vec[idx] = tf * idf

        norm = math.sqrt(sum(v * v for v in vec))
        if norm > 0:
            vec = [v / norm for v in vec]
        return vec

    @staticmethod
    def cosine_similarity(a: List[float], b: List[float]) -> float:
        return cosine_similarity(a, b)

    def reset(self) -> None:
        """Forget the whole corpus."""
        with self._lock:
            self._vocab.clear()
            self._df.clear()
            self._total_docs = 0

    def serialize(self) -> str:
        """Serialize the corpus state for persistence."""
        with self._lock:
            state = {
                "version": STATE_VERSION,
                "vocab": list(self._vocab.items()),
                "df": list(self._df.items()),
                "total_docs": self._total_docs,
            }
        return json.dumps(state)

    @classmethod
    def deserialize(cls, data: str) -> "TfIdfVectorizer":
        """Restore a vectorizer from :meth:`serialize` output.

        Raises:
            ValueError: If the state is malformed or from another version
        """
        try:
            parsed = json.loads(data)
            version = parsed.get("version")
            if version != STATE_VERSION:
                raise ValueError(f"unsupported vectorizer state version: {version!r}")
            vocab = {str(t): int(i) for t, i in parsed["vocab"]}
            df = {str(t): int(c) for t, c in parsed["df"]}
            total_docs = int(parsed["total_docs"])
        except (TypeError, KeyError, AttributeError, json.JSONDecodeError) as e:
            raise ValueError(f"corrupt vectorizer state: {e}") from e

        if sorted(vocab.values()) != list(range(len(vocab))):
            raise ValueError("corrupt vectorizer state: vocabulary indices are not contiguous")
        if any(c > total_docs for c in df.values()):
            raise ValueError("corrupt vectorizer state: document frequency exceeds document count")

        v = cls()
        v._vocab = vocab
        v._df = df
        v._total_docs = total_docs
        return v


def make_embedder(cfg: Dict) -> TfIdfVectorizer:
    """Create embedder from config.

    Args:
        cfg: Configuration dictionary

    Returns:
        A fresh, untrained vectorizer

    Raises:
        ValueError: If the configured backend is not supported
    """
    backend = str(cfg.get("embedding", {}).get("backend", "tfidf")).strip().lower()
    if backend != "tfidf":
        raise ValueError(f"Invalid embedding.backend: {backend!r}")
    return TfIdfVectorizer()
