from collab_client import Command, _frame, _http_url, _ws_collab_url, describe_frame, parse_command


def test_urls():
    assert _ws_collab_url("ws://localhost:8000/") == "ws://localhost:8000/ws/collab/"
    assert _http_url("http://localhost:8000/", "/api/sessions") == "http://localhost:8000/api/sessions"


def test_frame_shape():
    assert _frame("join-session", "abc123xyz") == '{"type":"join-session","data":"abc123xyz"}'


def test_parse_code_line():
    assert parse_command("print(1)\\nprint(2)", "abc123xyz") == Command(
        "code-change", {"sessionId": "abc123xyz", "code": "print(1)\nprint(2)"}
    )


def test_parse_language():
    assert parse_command("/lang python", "abc123xyz") == Command(
        "language-change", {"sessionId": "abc123xyz", "language": "python"}
    )


def test_parse_run_and_quit():
    assert parse_command("/run", "abc123xyz") == Command("run-code", {"sessionId": "abc123xyz"})
    assert parse_command("/quit", "abc123xyz") is None


def test_describe_frames():
    assert describe_frame({"type": "user-left", "data": {"userCount": 1}}) == "[user-left users=1]"
    assert describe_frame({"type": "error", "data": "Session not found"}) == "[error Session not found]"
    assert describe_frame({"type": "language-update", "data": {"language": "go"}}) == "[language=go]"
