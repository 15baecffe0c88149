"""
CLI client for the collaborative coding interview server.

Supports:
- HTTP session creation:         POST /api/sessions
- HTTP session snapshot:         GET  /api/sessions/<session_id>
- WebSocket collaboration:       /ws/collab/

WebSocket protocol (`CollabConsumer`), frames are {"type": ..., "data": ...}:
- Client sends:
  - {"type":"join-session","data":"<session_id>"}
  - {"type":"code-change","data":{"sessionId":...,"code":"..."}}
  - {"type":"language-change","data":{"sessionId":...,"language":"python"}}
  - {"type":"run-code","data":{"sessionId":...}}
- Server sends:
  - {"type":"code-sync","data":{"code":...,"language":...}}   (to the joiner)
  - {"type":"code-update","data":{"code":...}}                (others only)
  - {"type":"language-update","data":{"language":...}}
  - {"type":"user-joined","data":{"userCount":N}}
  - {"type":"user-left","data":{"userCount":N}}
  - {"type":"code-execution","data":{"message":...}}
  - {"type":"error","data":"Session not found"}

In `join --interactive` mode every stdin line replaces the shared buffer, except:
  /lang <language>   change the session language
  /run               ask everyone to run the code
  /quit              leave
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional


def _rstrip_slash(s: str) -> str:
    return s[:-1] if s.endswith("/") else s


def _ws_collab_url(ws_base: str) -> str:
    return f"{_rstrip_slash(ws_base)}/ws/collab/"


def _http_url(http_base: str, path: str) -> str:
    return f"{_rstrip_slash(http_base)}{path}"


def _frame(event_type: str, data: Any) -> str:
    return json.dumps({"type": event_type, "data": data}, separators=(",", ":"), ensure_ascii=False)


@dataclass
class Command:
    """One parsed line of interactive input."""

    type: str
    data: Any = None


def parse_command(line: str, session_id: str) -> Optional[Command]:
    """Map an interactive input line to an outbound event (None means quit)."""
    stripped = line.strip()
    if stripped == "/quit":
        return None
    if stripped == "/run":
        return Command("run-code", {"sessionId": session_id})
    if stripped.startswith("/lang "):
        language = stripped[len("/lang "):].strip()
        return Command("language-change", {"sessionId": session_id, "language": language})
    return Command("code-change", {"sessionId": session_id, "code": line.replace("\\n", "\n")})


def describe_frame(msg: Dict[str, Any]) -> str:
    t = msg.get("type")
    data = msg.get("data")
    if t == "code-sync" and isinstance(data, dict):
        return f"[synced language={data.get('language')}]\n{data.get('code', '')}"
    if t == "code-update" and isinstance(data, dict):
        return f"[code updated]\n{data.get('code', '')}"
    if t == "language-update" and isinstance(data, dict):
        return f"[language={data.get('language')}]"
    if t in ("user-joined", "user-left") and isinstance(data, dict):
        return f"[{t} users={data.get('userCount')}]"
    if t == "code-execution" and isinstance(data, dict):
        return f"[run requested: {data.get('message')}]"
    if t == "error":
        return f"[error {data}]"
    return f"[{t}] {json.dumps(data, ensure_ascii=False)}"


async def _stdin_lines() -> str:
    return await asyncio.to_thread(sys.stdin.readline)


class HttpClient:
    def __init__(self, http_base: str):
        self.http_base = http_base
        self._session = None

    async def __aenter__(self) -> "HttpClient":
        try:
            import aiohttp  # type: ignore
        except ImportError:
            print("Missing dependency: aiohttp. Install with: pip install 'codeinterview-server[client]'", file=sys.stderr)
            raise

        self._session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    async def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        assert self._session is not None
        url = _http_url(self.http_base, path)
        body = json.dumps(payload) if payload is not None else None
        headers = {"Content-Type": "application/json"}
        async with self._session.request(method, url, headers=headers, data=body) as resp:
            text = await resp.text()
            try:
                data = json.loads(text) if text else {}
            except json.JSONDecodeError:
                raise RuntimeError(f"Non-JSON response from {path}: {resp.status} {text}")
            if resp.status >= 400:
                raise RuntimeError(f"HTTP {resp.status}: {data}")
            return data

    async def create_session(self, language: Optional[str]) -> Dict[str, Any]:
        return await self._request("POST", "/api/sessions", {"language": language} if language else {})

    async def get_session(self, session_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/sessions/{session_id}")


async def ws_join(*, ws_base: str, origin: Optional[str], session_id: str, interactive: bool) -> int:
    try:
        import websockets  # type: ignore
    except ImportError:
        print("Missing dependency: websockets. Install with: pip install 'codeinterview-server[client]'", file=sys.stderr)
        return 2

    kwargs: Dict[str, Any] = {}
    if origin:
        kwargs["origin"] = origin

    async with websockets.connect(_ws_collab_url(ws_base), **kwargs) as ws:
        await ws.send(_frame("join-session", session_id))

        # The first frame is either the private snapshot or the "not found" error.
        first = json.loads(await ws.recv())
        print(describe_frame(first), flush=True)
        if first.get("type") == "error":
            return 1
        if not interactive:
            return 0

        async def _print_frames() -> None:
            async for raw in ws:
                print(describe_frame(json.loads(raw)), flush=True)

        printer = asyncio.create_task(_print_frames())
        sys.stderr.write("Interactive mode. Each line replaces the code; /lang <name>, /run, /quit.\n")
        sys.stderr.flush()
        try:
            while True:
                line = (await _stdin_lines()).rstrip("\n")
                if not line:
                    continue
                command = parse_command(line, session_id)
                if command is None:
                    return 0
                await ws.send(_frame(command.type, command.data))
        finally:
            printer.cancel()


async def main() -> int:
    parser = argparse.ArgumentParser(description="CLI client for the collaborative coding interview server")
    parser.add_argument("--http", default="http://localhost:8000", help="HTTP base, e.g. http://localhost:8000")
    parser.add_argument("--ws", default="ws://localhost:8000", help="WS base, e.g. ws://localhost:8000")
    parser.add_argument("--origin", help="Optional Origin header for WebSocket handshake")

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_create = sub.add_parser("create", help="Create a session (HTTP)")
    p_create.add_argument("--language", help="Language for the starter code (default: server default)")

    p_show = sub.add_parser("show", help="Show a session snapshot (HTTP)")
    p_show.add_argument("--session-id", required=True)

    p_join = sub.add_parser("join", help="Join a session over WebSocket")
    p_join.add_argument("--session-id", required=True)
    p_join.add_argument("--interactive", action="store_true", help="Stay connected; send edits from stdin")

    args = parser.parse_args()

    if args.cmd == "join":
        return await ws_join(
            ws_base=args.ws,
            origin=args.origin,
            session_id=args.session_id,
            interactive=bool(args.interactive),
        )

    async with HttpClient(args.http) as http:
        if args.cmd == "create":
            data = await http.create_session(args.language)
            print(json.dumps(data, indent=2, ensure_ascii=False))
            return 0
        if args.cmd == "show":
            data = await http.get_session(args.session_id)
            print(json.dumps(data, indent=2, ensure_ascii=False))
            return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
