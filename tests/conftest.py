"""Shared fixtures: an in-memory stand-in for the MongoDB collections and a
fresh citation cache for every test."""

from types import SimpleNamespace

import pytest
from bson import ObjectId

from agents.citation.citation_service import citation_cache
from common.db import MongoDB
from common.models import UserContext


class FakeCursor:
    def __init__(self, docs):
        self._docs = list(docs)

    def sort(self, field, direction=1):
        self._docs.sort(key=lambda d: (d.get(field), d["_id"]), reverse=direction < 0)
        return self

    def limit(self, n):
        if n:
            self._docs = self._docs[:n]
        return self

    def __iter__(self):
        return iter(self._docs)


class FakeCollection:
    def __init__(self):
        self.docs = []
        self.fail_inserts = False

    def _matches(self, doc, query):
        return all(doc.get(k) == v for k, v in query.items())

    def insert_one(self, document):
        if self.fail_inserts:
            raise RuntimeError("database unavailable")
        doc = dict(document)
        doc["_id"] = ObjectId()
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    def find(self, query=None):
        query = query or {}
        return FakeCursor(d for d in self.docs if self._matches(d, query))

    def count_documents(self, query):
        return sum(1 for d in self.docs if self._matches(d, query))


@pytest.fixture
def fake_db(monkeypatch):
    collections = {}

    def collection(name):
        return collections.setdefault(name, FakeCollection())

    monkeypatch.setattr(MongoDB, "collection", classmethod(lambda cls, name: collection(name)))
    return collection


@pytest.fixture(autouse=True)
def clean_citation_cache():
    citation_cache.clear()
    yield
    citation_cache.clear()


@pytest.fixture
def user():
    return UserContext(user_id="user-1", email="advocate@example.com")


@pytest.fixture
def demo_user():
    return UserContext(user_id="demo-1", is_demo=True)
