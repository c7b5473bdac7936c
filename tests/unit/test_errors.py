"""Error hierarchy and package exports.

Covers:
- Every ErrorCode member has exactly one matching error subclass
- context / cause wiring and repr
- Pickling round-trip for coded errors
- __all__ exports resolve to real module-level names
"""

from __future__ import annotations

import pickle

import pytest

import notioncache
from notioncache import errors
from notioncache.errors import (
    ErrorCode,
    NotioncacheDocumentNotFoundError,
    NotioncacheError,
    NotioncacheFileStoreError,
    NotioncacheNotFoundError,
)

CODED_CLASSES = [
    cls
    for cls in vars(errors).values()
    if isinstance(cls, type) and issubclass(cls, NotioncacheError) and hasattr(cls, "_code")
]


class TestErrorCodes:
    def test_every_code_has_one_subclass(self):
        codes = [cls._code for cls in CODED_CLASSES]
        assert sorted(codes) == sorted(ErrorCode)

    @pytest.mark.parametrize("cls", CODED_CLASSES, ids=lambda c: c.__name__)
    def test_subclass_carries_its_code(self, cls):
        exc = cls(message="boom")
        assert isinstance(exc, NotioncacheError)
        assert exc.code == cls._code
        assert str(exc) == "boom"

    def test_codes_compare_as_strings(self):
        assert NotioncacheNotFoundError(message="x").code == "NOT_FOUND"


class TestContextAndCause:
    def test_context_defaults_to_empty_dict(self):
        assert NotioncacheNotFoundError(message="x").context == {}

    def test_cause_is_chained(self):
        root = OSError("disk full")
        exc = NotioncacheFileStoreError(message="write failed", context={"url_key": "k"}, cause=root)
        assert exc.cause is root
        assert exc.__cause__ is root

    def test_repr_includes_context(self):
        exc = NotioncacheDocumentNotFoundError(message="missing", context={"document_id": "d1"})
        text = repr(exc)
        assert text.startswith("NotioncacheDocumentNotFoundError(")
        assert "DOCUMENT_NOT_FOUND" in text
        assert "'document_id': 'd1'" in text

    def test_repr_without_context(self):
        assert "context" not in repr(NotioncacheNotFoundError(message="x"))

    def test_pickle_round_trip(self):
        exc = NotioncacheNotFoundError(message="gone", context={"resource_type": "database"})
        restored = pickle.loads(pickle.dumps(exc))
        assert type(restored) is NotioncacheNotFoundError
        assert restored.code == ErrorCode.NOT_FOUND
        assert restored.message == "gone"
        assert restored.context == {"resource_type": "database"}


class TestExports:
    @pytest.mark.parametrize("name", notioncache.__all__)
    def test_all_names_resolve(self, name):
        assert getattr(notioncache, name) is not None

    def test_every_error_exported(self):
        exported = set(notioncache.__all__)
        for cls in CODED_CLASSES:
            assert cls.__name__ in exported
