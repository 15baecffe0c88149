import pytest

from codeinterview.applib.exceptions import (
    SessionAlreadyExistsError,
    SessionIdValidationError,
    SessionNotFoundError,
)
from realtime.registry import SessionRegistry


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


def test_create_uses_language_template(registry):
    session = registry.create("abc123xyz", language="python")
    assert session.code == "# Write your Python code here\n"
    assert session.language == "python"
    assert session.user_count == 0
    assert session.created_at.tzinfo is not None


def test_create_defaults_to_javascript_with_generic_starter(registry):
    session = registry.create("abc123xyz")
    assert session.language == "javascript"
    assert session.code == "// Write your code here\n"


def test_create_explicit_javascript_gets_its_template(registry):
    session = registry.create("abc123xyz", language="javascript")
    assert session.code == "// Write your JavaScript code here\n"


def test_create_lowercases_language_tag(registry):
    session = registry.create("abc123xyz", language="PYTHON")
    assert session.language == "python"
    assert session.code == "# Write your Python code here\n"


def test_create_unknown_language_keeps_tag_with_fallback_code(registry):
    session = registry.create("abc123xyz", language="cobol")
    assert session.language == "cobol"
    assert session.code == "// Write your code here\n"


def test_create_duplicate_fails(registry):
    registry.create("abc123xyz")
    with pytest.raises(SessionAlreadyExistsError):
        registry.create("abc123xyz")


def test_create_rejects_malformed_id(registry):
    with pytest.raises(SessionIdValidationError):
        registry.create("Not-An-Id")


def test_get_and_find(registry):
    created = registry.create("abc123xyz", code="x = 1\n", language="python")
    assert registry.get("abc123xyz") is created
    assert registry.find("abc123xyz") is created
    assert "abc123xyz" in registry
    assert len(registry) == 1


@pytest.mark.parametrize("session_id", ["zzzzzzzzz", "short", None, 7, "ABC123XYZ"])
def test_missing_or_malformed_ids_are_not_found(registry, session_id):
    registry.create("abc123xyz")
    assert registry.find(session_id) is None
    assert session_id not in registry
    with pytest.raises(SessionNotFoundError):
        registry.get(session_id)


def test_delete_is_idempotent(registry):
    registry.create("abc123xyz")
    assert registry.delete("abc123xyz") is True
    assert registry.delete("abc123xyz") is False
    assert registry.find("abc123xyz") is None


def test_snapshot(registry):
    session = registry.create("abc123xyz", code="print(1)", language="python")
    assert session.snapshot() == {"code": "print(1)", "language": "python"}
