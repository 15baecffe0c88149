import re
import secrets
import string

from codeinterview.applib.exceptions import SessionIdValidationError
from codeinterview.applib.types import Language

SESSION_ID_LENGTH = 9
SESSION_ID_ALPHABET = string.ascii_lowercase + string.digits
SESSION_ID_PATTERN = re.compile(r"^[a-z0-9]{9}$")

FALLBACK_CODE_TEMPLATE = "// Write your code here\n"

CODE_TEMPLATES = {
    Language.JAVASCRIPT: "// Write your JavaScript code here\n",
    Language.TYPESCRIPT: "// Write your TypeScript code here\n",
    Language.PYTHON: "# Write your Python code here\n",
    Language.JAVA: (
        "public class Solution {\n"
        "  public static void main(String[] args) {\n"
        "    // Write your code here\n"
        "  }\n"
        "}\n"
    ),
    Language.CPP: "#include <iostream>\n\nint main() {\n  // Write your code here\n  return 0;\n}\n",
    Language.GO: 'package main\n\nimport "fmt"\n\nfunc main() {\n  // Write your code here\n}\n',
}

# Null bytes and control characters other than tab, newline and carriage return
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def generate_session_id() -> str:
    return "".join(secrets.choice(SESSION_ID_ALPHABET) for _ in range(SESSION_ID_LENGTH))


def is_valid_session_id(session_id: object) -> bool:
    if not session_id or not isinstance(session_id, str):
        return False
    return SESSION_ID_PATTERN.fullmatch(session_id) is not None


def _to_language(language: str) -> Language | None:
    try:
        return Language(language.lower())
    except ValueError:
        return None


def is_supported_language(language: str) -> bool:
    return _to_language(language) is not None


def get_default_code_template(language: str) -> str:
    """Starter buffer for a language; unknown languages get the generic template."""
    lang = _to_language(language)
    if lang is None:
        return FALLBACK_CODE_TEMPLATE
    return CODE_TEMPLATES[lang]


def sanitize_code(code: object) -> str:
    if not code or not isinstance(code, str):
        return ""
    return _CONTROL_CHARS.sub("", code)


def get_code_size(code: str | None) -> int:
    """Size of the buffer in UTF-8 bytes."""
    if not code:
        return 0
    return len(code.encode("utf-8"))


def is_code_too_large(code: str | None, max_size_bytes: int = 1024 * 1024) -> bool:
    return get_code_size(code) > max_size_bytes


def generate_share_link(session_id: str, base_url: str = "http://localhost:5173") -> str:
    if not is_valid_session_id(session_id):
        raise SessionIdValidationError(f"Invalid session ID: {session_id!r}")
    return f"{base_url.rstrip('/')}/session/{session_id}"


def count_lines(code: str | None) -> int:
    if not code:
        return 0
    return len(code.split("\n"))
