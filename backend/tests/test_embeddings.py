"""Tests for tokenization and the TF-IDF vectorizer."""

from __future__ import annotations

import json
import math
import sys
import threading

import pytest

from metasupervisor.core import TfIdfVectorizer, cosine_similarity, make_embedder, tokenize


class TestTokenize:
    def test_splits_camel_and_pascal_case(self):
        assert tokenize("getUserName") == ["get", "user", "name"]
        assert tokenize("HTTPServer") == ["http", "server"]

    def test_splits_snake_case(self):
        assert tokenize("max_retry_count") == ["max", "retry", "count"]

    def test_literals_become_sentinels(self):
        tokens = tokenize('const greeting = "hello world"; let n = 42;')
        assert "hello" not in tokens
        assert "world" not in tokens
        assert "str" in tokens
        assert "num" in tokens
        assert tokens.count("literal") == 2

    def test_drops_single_characters(self):
        assert tokenize("a + b = c") == []

    def test_escaped_quote_stays_inside_string(self):
        tokens = tokenize(r'x = "say \"secret\" now"')
        assert "secret" not in tokens


class TestVectorizer:
    def test_empty_vocabulary_embeds_to_empty(self):
        v = TfIdfVectorizer()
        assert v.embed("function foo() {}") == []

    def test_embedding_length_matches_vocabulary(self):
        v = TfIdfVectorizer()
        v.train(["function fetchUser() {}", "class UserStore {}"])
        assert len(v.embed("anything")) == v.vocab_size

    def test_vectors_are_unit_length(self):
        v = TfIdfVectorizer()
        v.train(["function fetchUser(id) { return db.get(id); }"])
        vec = v.embed("function fetchUser(id) { return db.get(id); }")
        assert math.isclose(math.sqrt(sum(x * x for x in vec)), 1.0, rel_tol=1e-9)

    def test_unknown_tokens_give_zero_vector(self):
        v = TfIdfVectorizer()
        v.train(["function fetchUser() {}"])
        assert all(x == 0.0 for x in v.embed("zebra giraffe"))

    def test_self_similarity_is_one(self):
        v = TfIdfVectorizer()
        doc = "async function saveOrder(order) { await repo.save(order); }"
        v.train([doc, "class Unrelated {}"])
        vec = v.embed(doc)
        assert math.isclose(v.cosine_similarity(vec, vec), 1.0, rel_tol=1e-9)

    def test_idf_formula(self):
        v = TfIdfVectorizer()
        v.train(["alpha beta", "alpha gamma"])
        vec = v.embed("alpha beta")
        tf = 0.5
        alpha = tf * math.log(1 + 2 / 2)
        beta = tf * math.log(1 + 2 / 1)
        norm = math.sqrt(alpha ** 2 + beta ** 2)
        assert math.isclose(vec[v.index_of("alpha")], alpha / norm)
        assert math.isclose(vec[v.index_of("beta")], beta / norm)
        assert vec[v.index_of("gamma")] == 0.0

    def test_vocabulary_only_grows(self):
        v = TfIdfVectorizer()
        v.train(["alpha beta"])
        before = {t: v.index_of(t) for t in ("alpha", "beta")}
        v.train(["gamma alpha"])
        assert {t: v.index_of(t) for t in ("alpha", "beta")} == before
        assert v.index_of("gamma") == 2
        assert v.document_count == 2
        assert v.document_frequency("alpha") == 2

    def test_document_counts_each_token_once(self):
        v = TfIdfVectorizer()
        v.train(["retry retry retry"])
        assert v.document_frequency("retry") == 1

    def test_reset(self):
        v = TfIdfVectorizer()
        v.train(["alpha beta"])
        v.reset()
        assert v.vocab_size == 0
        assert v.document_count == 0


class TestCosineSimilarity:
    def test_compares_shared_prefix(self):
        assert cosine_similarity([1.0, 0.0], [1.0, 0.0, 5.0]) == 1.0

    def test_empty_vectors(self):
        assert cosine_similarity([], [1.0]) == 0.0
        assert cosine_similarity([1.0], []) == 0.0

    def test_old_vector_against_grown_vocabulary(self):
        v = TfIdfVectorizer()
        v.train(["function loadConfig() { return settings; }"])
        old = v.embed("function loadConfig() { return settings; }")
        v.train(["class Brand New Words {}"])
        new = v.embed("function loadConfig() { return settings; }")
        assert len(new) > len(old)
        assert cosine_similarity(old, new) > 0.5


class TestSerialization:
    def test_restored_vectorizer_embeds_identically(self):
        v = TfIdfVectorizer()
        v.train(["function parseToken(raw) { return jwt.decode(raw); }", "const limit = 10;"])
        restored = TfIdfVectorizer.deserialize(v.serialize())
        text = "parse the token"
        assert restored.embed(text) == v.embed(text)
        assert restored.document_count == v.document_count

    def test_rejects_other_versions(self):
        state = json.loads(TfIdfVectorizer().serialize())
        state["version"] = 99
        with pytest.raises(ValueError):
            TfIdfVectorizer.deserialize(json.dumps(state))

    def test_rejects_garbage(self):
        with pytest.raises(ValueError):
            TfIdfVectorizer.deserialize("not json at all")

    def test_rejects_gapped_indices(self):
        state = {"version": 1, "vocab": [["alpha", 0], ["beta", 5]], "df": [], "total_docs": 1}
        with pytest.raises(ValueError):
            TfIdfVectorizer.deserialize(json.dumps(state))

    def test_rejects_df_above_document_count(self):
        state = {"version": 1, "vocab": [["alpha", 0]], "df": [["alpha", 3]], "total_docs": 1}
        with pytest.raises(ValueError):
            TfIdfVectorizer.deserialize(json.dumps(state))


def test_make_embedder_rejects_unknown_backend():
    with pytest.raises(ValueError):
        make_embedder({"embedding": {"backend": "bert"}})


def test_embed_many_matches_embed():
    v = TfIdfVectorizer()
    docs = ["function a() {}", "class Bee {}"]
    v.train(docs)
    assert v.embed_many(docs) == [v.embed(d) for d in docs]


def test_embed_and_serialize_while_training():
    v = TfIdfVectorizer()
    v.train(["seed tokens here"])

    def trainer():
        for n in range(3000):
            v.train([f"tok{n} seed"])

    old_interval = sys.getswitchinterval()
    sys.setswitchinterval(1e-6)
    t = threading.Thread(target=trainer)
    t.start()
    try:
        rounds = 0
        while t.is_alive():
            vec = v.embed("seed tokens here")
            assert math.isclose(sum(x * x for x in vec), 1.0)
            rounds += 1
            if rounds % 50 == 0:
                state = json.loads(v.serialize())
                assert len(state["vocab"]) == len(state["df"])
    finally:
        t.join()
        sys.setswitchinterval(old_interval)

    assert v.vocab_size == 3 + 3000
    assert v.document_count == 3001
