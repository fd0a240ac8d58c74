#!/usr/bin/env python3
"""
A single-file minimal guestbook.
"""

import json
import math
import os
import re
import secrets
import tempfile
import threading
from dataclasses import dataclass, replace
from enum import Enum
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from time import time
from urllib.parse import quote, unquote, urlparse

import click
import requests
from flask import (
    Flask,
    g,
    redirect,
    render_template_string,
    request,
    url_for,
)
from werkzeug.middleware.proxy_fix import ProxyFix

################################################################################
# Imports & constants
################################################################################

ROOT = Path(__file__).parent
ENV_FILE = ROOT / ".env"

DEFAULT_NAME = "Anonymous"
COOKIE_NAME = "clientId"
MASK = "***"
SOURCE_URL_DEFAULT = "https://github.com/monster0506/express-guestbook/"

KV_KEY_DEFAULT = "guestbook_entries"
KV_TIMEOUT_DEFAULT = 3.0

_B36 = "0123456789abcdefghijklmnopqrstuvwxyz"

# Other people's languages. C++ is missing on purpose.
BANNED_TERMS = (
    "javascript", "typescript", "python", "java", "csharp",
    "go", "golang", "rust", "ruby", "php", "swift", "kotlin", "scala",
    "haskell", "elixir", "erlang", "perl", "r", "matlab", "dart",
    "objective-c", "objective c", "visual basic", "vb", "shell", "bash",
    "powershell", "lua", "clojure", "f#", "fsharp", "fortran", "cobol",
    "groovy", "julia", "solidity", "assembly", "asm", "pascal", "delphi",
    "prolog", "lisp", "scheme", "ocaml", "reasonml", "nim", "crystal",
    "smalltalk", "ada", "abap", "apex", "sas", "stata", "verilog", "vhdl",
    "tcl", "awk", "scratch", "sql",
)

try:
    __version__ = version("guestbook")
except PackageNotFoundError:
    __version__ = "0.1.0-dev"


def _read_env_file() -> dict[str, str]:
    env = {}
    if not ENV_FILE.exists():
        return env
    for ln in ENV_FILE.read_text().splitlines():
        ln = ln.strip()
        if not ln or ln.startswith("#") or "=" not in ln:
            continue
        k, v = ln.split("=", 1)
        env[k.strip()] = v.strip()
    return env


def env_value(key: str, default: str = "") -> str:
    """Process environment first, then the .env file next to this module."""
    return (os.environ.get(key) or _read_env_file().get(key) or default).strip()


def _env_flag(key: str) -> bool:
    return env_value(key) not in ("", "0", "false", "False")


################################################################################
# App
################################################################################
app = Flask(__name__)
app.url_map.strict_slashes = False
app.config.update(
    DATA_FILE=env_value("GUESTBOOK_DATA_FILE", str(ROOT / "guestbook.json")),
    KV_ENABLED=_env_flag("VERCEL"),
    KV_URL=env_value("KV_REST_API_URL"),
    KV_TOKEN=env_value("KV_REST_API_TOKEN"),
    KV_KEY=env_value("KV_KEY", KV_KEY_DEFAULT),
    KV_TIMEOUT=float(env_value("KV_TIMEOUT", str(KV_TIMEOUT_DEFAULT))),
    SOURCE_URL=env_value("GUESTBOOK_SOURCE_URL", SOURCE_URL_DEFAULT),
)
app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)


# -------------------------------------------------------------------------
# Time + id helpers
# -------------------------------------------------------------------------
def now_ms() -> int:
    """Milliseconds since the epoch."""
    return int(time() * 1000)


def _base36(n: int) -> str:
    if n <= 0:
        return "0"
    out = []
    while n:
        n, rem = divmod(n, 36)
        out.append(_B36[rem])
    return "".join(reversed(out))


def _random36(length: int) -> str:
    return "".join(secrets.choice(_B36) for _ in range(length))


def new_entry_id(timestamp: int) -> str:
    return f"{timestamp}-{_random36(6)}"


def time_ago(ms: int | float, now: int | None = None) -> str:
    """
    Largest whole unit of the time elapsed since *ms*:
    ``42s ago`` → ``5m ago`` → ``3h ago`` → ``2d ago`` → ``4mo ago`` → ``1y ago``.
    Months are 30 days, years are 12 months.
    """
    now = now_ms() if now is None else now
    seconds = max(0, int((now - ms) // 1000))
    if seconds < 60:
        return f"{seconds}s ago"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 30:
        return f"{days}d ago"
    months = days // 30
    if months < 12:
        return f"{months}mo ago"
    return f"{months // 12}y ago"


###############################################################################
# Identity
###############################################################################
def parse_cookies(header: str | None) -> dict[str, str]:
    """`a=1; b=x%20y` → {"a": "1", "b": "x y"}. Pairs without a value are skipped."""
    cookies: dict[str, str] = {}
    if not header:
        return cookies
    for part in header.split(";"):
        k, sep, v = part.partition("=")
        k, v = k.strip(), v.strip()
        if not sep or not k or not v:
            continue
        cookies[k] = unquote(v)
    return cookies


def new_client_id() -> str:
    return f"{_base36(now_ms())}-{_random36(8)}"


def resolve_client_id(cookie_header: str | None) -> tuple[str, bool]:
    """
    Return ``(client_id, is_new)``.  When *is_new* is true the caller has to
    send the id back in a ``Set-Cookie`` header.
    """
    cid = parse_cookies(cookie_header).get(COOKIE_NAME)
    if cid:
        return cid, False
    return new_client_id(), True


def client_id() -> str:
    """The visitor's opaque id for the current request (minted on first use)."""
    if "client_id" not in g:
        g.client_id, g.new_client_id = resolve_client_id(request.headers.get("Cookie"))
    return g.client_id


@app.after_request
def set_client_cookie(resp):
    if g.get("new_client_id"):
        resp.set_cookie(
            COOKIE_NAME,
            quote(g.client_id, safe=""),
            path="/",
            httponly=True,
            samesite="Lax",
        )
    return resp


###############################################################################
# Text sanitizer
###############################################################################
def _term_pattern(term: str) -> str:
    # "visual basic" also matches "visual   basic"
    return r"\s+".join(re.escape(w) for w in term.split())


BANNED_RE = re.compile(
    r"(?<!\w)(?:"
    + "|".join(_term_pattern(t) for t in sorted(BANNED_TERMS, key=len, reverse=True))
    + r")(?!\w)",
    re.IGNORECASE,
)


def sanitize(text: str | None) -> str:
    """Replace every whole-word banned term with ``***``."""
    return BANNED_RE.sub(MASK, text or "")


def is_blank(raw: str | None) -> bool:
    """True when *raw* holds nothing but banned terms and whitespace."""
    return not BANNED_RE.sub("", raw or "").strip()


###############################################################################
# Entries
###############################################################################
@dataclass(frozen=True)
class Entry:
    id: str
    name: str
    text: str
    timestamp: int | float
    likes: int = 0
    owner: str | None = None

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "name": self.name,
            "text": self.text,
            "timestamp": self.timestamp,
            "likes": self.likes,
        }
        if self.owner is not None:
            d["owner"] = self.owner
        return d


def _is_number(v) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def normalize_record(rec: dict) -> Entry:
    """
    Bring one persisted record up to date:

    • missing ``timestamp`` → now
    • missing ``id``        → synthesised from the timestamp
    • bad ``likes``         → 0
    • ``owner`` is carried through (legacy records have none)
    • ``name`` / ``text`` are coerced to strings
    """
    timestamp = rec.get("timestamp")
    if not _is_number(timestamp):
        timestamp = now_ms()
    likes = rec.get("likes")
    likes = max(0, int(likes)) if _is_number(likes) else 0
    return Entry(
        id=str(rec.get("id") or new_entry_id(int(timestamp))),
        name=str(rec.get("name") or "") or DEFAULT_NAME,
        text=str(rec.get("text") or ""),
        timestamp=timestamp,
        likes=likes,
        owner=rec.get("owner"),
    )


def normalize_records(data, *, source: str) -> list[Entry]:
    if not isinstance(data, list):
        app.logger.warning("%s does not hold a JSON array – starting empty", source)
        return []
    entries = [normalize_record(rec) for rec in data if isinstance(rec, dict)]
    kept = [e for e in entries if e.text.strip()]
    if len(kept) != len(data):
        app.logger.warning(
            "%s: skipped %d records without text",
            source,
            len(data) - len(kept),
        )
    return kept


class Outcome(Enum):
    APPLIED = "applied"
    NOT_FOUND = "not-found"
    FORBIDDEN = "forbidden"
    DISCARDED = "discarded"


###############################################################################
# Storage backends
###############################################################################
class StorageError(Exception):
    """The remote key-value store could not be read or written."""


class FileBackend:
    name = "file"

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> list[Entry]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as exc:
            app.logger.warning("Cannot read %s – %s", self.path, exc)
            return []
        try:
            data = json.loads(raw.decode("utf-8"))
        except ValueError as exc:  # bad JSON or bad UTF-8
            app.logger.warning("Error reading %s: %s", self.path, exc)
            return []
        return normalize_records(data, source=str(self.path))

    def save(self, entries: list[Entry]) -> None:
        payload = json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp, self.path)
        except OSError:
            Path(tmp).unlink(missing_ok=True)
            raise


class KVBackend:
    """
    Upstash / Vercel-KV REST dialect: the whole entry array lives as one
    JSON string under a single key.

        GET  {url}/get/{key}   → {"result": "<json>" | null}
        POST {url}/set/{key}   → {"result": "OK"}
    """

    name = "kv"

    def __init__(self, url: str, token: str, *, key: str = KV_KEY_DEFAULT,
                 timeout: float = KV_TIMEOUT_DEFAULT):
        self.url = url.rstrip("/")
        self.token = token
        self.key = key
        self.timeout = timeout

    def _endpoint(self, command: str) -> str:
        return f"{self.url}/{command}/{quote(self.key, safe='')}"

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    @staticmethod
    def _result(resp):
        try:
            resp.raise_for_status()
            body = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise StorageError(str(exc)) from exc
        if not isinstance(body, dict) or "error" in body:
            raise StorageError(f"unexpected KV reply: {body!r}")
        return body.get("result")

    def load(self) -> list[Entry]:
        try:
            resp = requests.get(
                self._endpoint("get"), headers=self._headers(), timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise StorageError(f"KV get failed – {exc}") from exc
        result = self._result(resp)
        if result is None:
            return []
        if isinstance(result, str):
            try:
                result = json.loads(result)
            except json.JSONDecodeError as exc:
                raise StorageError(f"KV value is not JSON – {exc}") from exc
        if not isinstance(result, list):
            raise StorageError("KV value is not an array")
        return normalize_records(result, source=f"kv:{self.key}")

    def save(self, entries: list[Entry]) -> None:
        payload = json.dumps([e.to_dict() for e in entries], ensure_ascii=False)
        try:
            resp = requests.post(
                self._endpoint("set"),
                data=payload.encode("utf-8"),
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise StorageError(f"KV set failed – {exc}") from exc
        self._result(resp)


class FallbackBackend:
    """Try *primary*; on any StorageError redo the call on *fallback*."""

    def __init__(self, primary, fallback):
        self.primary = primary
        self.fallback = fallback
        self.name = f"{primary.name}+{fallback.name}"

    def load(self) -> list[Entry]:
        try:
            return self.primary.load()
        except StorageError as exc:
            app.logger.warning(
                "%s load failed (%s) – falling back to %s",
                self.primary.name, exc, self.fallback.name,
            )
            return self.fallback.load()

    def save(self, entries: list[Entry]) -> None:
        try:
            self.primary.save(entries)
        except StorageError as exc:
            app.logger.warning(
                "%s save failed (%s) – falling back to %s",
                self.primary.name, exc, self.fallback.name,
            )
            self.fallback.save(entries)


def build_backend(config) -> FileBackend | FallbackBackend:
    file_backend = FileBackend(config["DATA_FILE"])
    if not config.get("KV_ENABLED"):
        return file_backend
    url, token = config.get("KV_URL"), config.get("KV_TOKEN")
    if not (url and token):
        app.logger.warning(
            "KV storage requested but KV_REST_API_URL / KV_REST_API_TOKEN "
            "are not set – using %s",
            file_backend.path,
        )
        return file_backend
    kv = KVBackend(
        url,
        token,
        key=config.get("KV_KEY") or KV_KEY_DEFAULT,
        timeout=float(config.get("KV_TIMEOUT") or KV_TIMEOUT_DEFAULT),
    )
    return FallbackBackend(kv, file_backend)


###############################################################################
# Entry store
###############################################################################
class EntryStore:
    """
    Owns the canonical list of entries.

    Readers get the currently published tuple and never wait.  Writers are
    serialised by one lock, persist a *new* tuple first and publish it only
    after the backend accepted it, so a failed write leaves memory untouched.
    """

    def __init__(self, backend):
        self.backend = backend
        self._entries: tuple[Entry, ...] = ()
        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._ready.set()

    # ── loading ─────────────────────────────────────────────────────────
    def load(self) -> list[Entry]:
        entries = self.backend.load()
        with self._lock:
            self._entries = tuple(entries)
        self._ready.set()
        return list(entries)

    def _load_worker(self) -> None:
        try:
            self.load()
        except Exception:
            app.logger.exception("Loading guestbook entries failed – starting empty")
        finally:
            self._ready.set()

    def load_in_background(self) -> threading.Thread:
        self._ready.clear()
        t = threading.Thread(target=self._load_worker, name="guestbook-load", daemon=True)
        t.start()
        return t

    def wait_loaded(self, timeout: float | None = None) -> bool:
        return self._ready.wait(timeout)

    # ── reads ───────────────────────────────────────────────────────────
    def all(self) -> list[Entry]:
        return list(self._entries)

    def get(self, entry_id: str) -> Entry | None:
        return next((e for e in self._entries if e.id == entry_id), None)

    def __len__(self) -> int:
        return len(self._entries)

    def view(self, query: str = "", *, mine_only: bool = False,
             requester: str | None = None) -> list[dict]:
        return list_entries(
            self._entries, query, mine_only=mine_only, requester=requester
        )

    # ── writes ──────────────────────────────────────────────────────────
    def _commit(self, entries: list[Entry]) -> None:
        try:
            self.backend.save(entries)
        except OSError:
            app.logger.exception("Could not persist guestbook entries")
            raise
        self._entries = tuple(entries)

    def add(self, name: str | None, raw_text: str | None,
            owner: str | None) -> tuple[Outcome, Entry | None]:
        raw_text = (raw_text or "").strip()
        if is_blank(raw_text):
            return Outcome.DISCARDED, None
        text = sanitize(raw_text)
        self._ready.wait()
        with self._lock:
            timestamp = now_ms()
            entry = Entry(
                id=new_entry_id(timestamp),
                name=(name or "").strip() or DEFAULT_NAME,
                text=text,
                timestamp=timestamp,
                likes=0,
                owner=owner,
            )
            self._commit([*self._entries, entry])
        return Outcome.APPLIED, entry

    def _bump(self, entry_id: str, delta: int) -> Outcome:
        self._ready.wait()
        with self._lock:
            entries = list(self._entries)
            for idx, e in enumerate(entries):
                if e.id == entry_id:
                    likes = max(0, e.likes + delta)
                    if likes != e.likes:
                        entries[idx] = replace(e, likes=likes)
                        self._commit(entries)
                    return Outcome.APPLIED
        return Outcome.NOT_FOUND

    def like(self, entry_id: str) -> Outcome:
        return self._bump(entry_id, +1)

    def unlike(self, entry_id: str) -> Outcome:
        return self._bump(entry_id, -1)

    def delete(self, entry_id: str, owner: str | None) -> Outcome:
        self._ready.wait()
        with self._lock:
            target = next((e for e in self._entries if e.id == entry_id), None)
            if target is None:
                outcome = Outcome.NOT_FOUND
            elif owner is None or target.owner != owner:
                outcome = Outcome.FORBIDDEN
            else:
                self._commit([e for e in self._entries if e is not target])
                return Outcome.APPLIED
        # same line for both so the log can't tell them apart
        app.logger.debug("delete %s: nothing removed", entry_id)
        return outcome


def list_entries(entries, query: str = "", *, mine_only: bool = False,
                 requester: str | None = None, now: int | None = None) -> list[dict]:
    """
    Newest first, optionally filtered by a case-insensitive substring of
    name or text and by ownership.  Each row gets ``timeAgo`` and
    ``canDelete``.
    """
    q = (query or "").strip().casefold()
    rows = sorted(entries, key=lambda e: e.timestamp, reverse=True)
    if q:
        rows = [
            e for e in rows
            if q in (e.name or "").casefold() or q in (e.text or "").casefold()
        ]
    if mine_only:
        rows = [e for e in rows if requester is not None and e.owner == requester]
    now = now_ms() if now is None else now
    return [
        {
            **e.to_dict(),
            "owner": e.owner,
            "timeAgo": time_ago(e.timestamp, now),
            "canDelete": requester is not None and e.owner == requester,
        }
        for e in rows
    ]


def get_store() -> EntryStore:
    return app.extensions["guestbook"]


def init_store(*, background: bool = True) -> EntryStore:
    """(Re)build the store from ``app.config`` and start loading it."""
    store = EntryStore(build_backend(app.config))
    app.extensions["guestbook"] = store
    if background:
        store.load_in_background()
    else:
        store.load()
    return store


###############################################################################
# CLI
###############################################################################
@app.cli.command("init")
def cli_init():
    """Create an empty data file (no-op if it already exists)."""
    path = Path(app.config["DATA_FILE"])
    if path.exists():
        click.echo(f"{path} already exists.")
        return
    FileBackend(path).save([])
    click.secho(f"\n✅  Created {path}.", fg="green")


@app.cli.command("entries")
@click.option("--query", "-q", default="", help="Case-insensitive substring filter.")
@click.option("--owner", default=None, help="Only entries created by this client id.")
def cli_entries(query: str, owner: str | None):
    """Print the guestbook, newest first."""
    store = get_store()
    store.wait_loaded()
    rows = store.view(query, mine_only=owner is not None, requester=owner)
    if not rows:
        click.echo("No entries.")
        return
    for r in rows:
        click.echo(f"{r['timeAgo']:>8}  ♥{r['likes']:<3} {r['name']}: {r['text']}  [{r['id']}]")


@app.cli.command("normalize")
def cli_normalize():
    """Fill in missing ids / timestamps / likes in the data file."""
    backend = FileBackend(app.config["DATA_FILE"])
    entries = backend.load()
    backend.save(entries)
    click.secho(f"\n🧹  Normalised {len(entries)} entries.", fg="yellow")


###############################################################################
# Request helpers
###############################################################################

def back_to_listing():
    """Redirect to the referring guestbook page, or the plain listing."""
    ref = request.headers.get("Referer", "")
    p = urlparse(ref)
    if p.path.startswith("/guestbook") and p.netloc in ("", request.host):
        return redirect(ref)
    return redirect(url_for("guestbook"))


@app.after_request
def sec_headers(resp):
    resp.headers.update(
        {
            "X-Frame-Options": "DENY",
            "X-Content-Type-Options": "nosniff",
            "Referrer-Policy": "strict-origin-when-cross-origin",
        }
    )
    return resp


###############################################################################
# Templates + Views
###############################################################################


def wrap(body: str) -> str:
    """Glue prolog + page-specific body + epilog."""
    return TEMPL_PROLOG + body + TEMPL_EPILOG


TEMPL_PROLOG = """
<!doctype html>
<html lang="en">
<title>{{ title or 'Guestbook' }}</title>
<meta name="viewport" content="width=device-width, initial-scale=1">
<meta charset="utf-8">
<style>
html{font-size:62.5%;font-family:-apple-system,BlinkMacSystemFont,"Segoe UI",Roboto,"Helvetica Neue",Arial,sans-serif}body{font-size:1.8rem;line-height:1.618;max-width:38em;margin:auto;color:#c9c9c9;background-color:#222222;padding:13px}a{color:#ffffff}a:hover{color:#c9c9c9}h1,h2{line-height:1.1;margin-top:3rem;margin-bottom:1.5rem}textarea,input{color:#c9c9c9;padding:6px 10px;margin-bottom:10px;background-color:#4a4a4a;border:1px solid #4a4a4a;border-radius:4px;box-sizing:border-box}textarea{width:100%;min-height:6rem}button{display:inline-block;padding:3px 10px;background-color:#ffffff;color:#222222;border:1px solid #ffffff;border-radius:1px;cursor:pointer}button:hover{background-color:#c9c9c9}
.entry{border-left:3px solid #95bbec;padding:.25rem 0 .25rem 1rem;margin-bottom:2rem}
.entry-meta{font-size:.75em;color:#aaa;display:flex;gap:.6rem;align-items:center;flex-wrap:wrap}
.entry-meta form{display:inline;margin:0}
.entry-text{white-space:pre-wrap;margin:.25rem 0}
nav{display:flex;gap:1.25rem;margin-bottom:1rem}
</style>
<body>
<div class="container" style="max-width: 60rem; margin: 3rem auto;">
    <h1 style="margin-top:0"><a href="{{ url_for('home') }}" style="text-decoration:none;">{{ title or 'Guestbook' }}</a></h1>
    <nav aria-label="Primary">
        <a href="{{ url_for('home') }}">Home</a>
        <a href="{{ url_for('guestbook') }}">Guestbook</a>
        <a href="{{ url_for('guestbook', mine='1') }}">Mine</a>
        <a href="{{ url_for('source') }}">Source</a>
    </nav>
    <main id="main-content" role="main">
"""

TEMPL_EPILOG = """
    </main>
    <footer style="margin-top:1.875em;padding-top:1.5em;font-size:.8em;color:#888;border-top:1px solid #444;">
        guestbook <span>v{{ version }}</span>
        {% if client_id %}· you are <code>{{ client_id }}</code>{% endif %}
    </footer>
</div>
</body>
</html>
"""

app.jinja_env.globals["version"] = __version__


@app.route("/")
def home():
    return render_template_string(
        TEMPL_HOME,
        title="Home",
        total_entries=len(get_store()),
        client_id=client_id(),
    )


TEMPL_HOME = wrap("""
<p>Welcome! Leave a note in the
   <a href="{{ url_for('guestbook') }}">guestbook</a>.</p>
<p>{{ total_entries }} {{ 'entry' if total_entries == 1 else 'entries' }} so far.</p>
""")


@app.route("/guestbook")
def guestbook():
    cid = client_id()
    q = request.args.get("q", "")
    mine_only = request.args.get("mine") == "1"
    entries = get_store().view(q, mine_only=mine_only, requester=cid)
    return render_template_string(
        TEMPL_GUESTBOOK,
        title="Guestbook",
        q=q,
        mine_only=mine_only,
        client_id=cid,
        entries=entries,
    )


TEMPL_GUESTBOOK = wrap("""
<form method="post" action="{{ url_for('add_entry') }}">
    <input name="nameText" placeholder="Your name" maxlength="80" style="width:100%">
    <textarea name="entryText" placeholder="Say something nice" required></textarea>
    <button type="submit">Sign</button>
</form>
<hr>
<form method="get" action="{{ url_for('guestbook') }}" style="display:flex;gap:.5rem;align-items:center;">
    <input type="search" name="q" value="{{ q }}" placeholder="Search" aria-label="Search entries">
    <label style="font-weight:normal;">
        <input type="checkbox" name="mine" value="1" {% if mine_only %}checked{% endif %}> mine only
    </label>
    <button type="submit">Filter</button>
</form>
{% for e in entries %}
<article class="entry" id="entry-{{ e.id }}">
    <strong>{{ e.name }}</strong>
    <p class="entry-text">{{ e.text }}</p>
    <div class="entry-meta">
        <span>{{ e.timeAgo }}</span>
        <span>♥ {{ e.likes }}</span>
        <form method="post" action="{{ url_for('like', entry_id=e.id) }}"><button>Like</button></form>
        <form method="post" action="{{ url_for('unlike', entry_id=e.id) }}"><button>Unlike</button></form>
        {% if e.canDelete %}
        <form method="post" action="{{ url_for('delete', entry_id=e.id) }}"><button>Delete</button></form>
        {% endif %}
    </div>
</article>
{% else %}
<p>No entries{% if q or mine_only %} match{% else %} yet{% endif %}.</p>
{% endfor %}
""")


@app.route("/addEntry", methods=["POST"])
def add_entry():
    get_store().add(
        request.form.get("nameText"),
        request.form.get("entryText"),
        client_id(),
    )
    return redirect(url_for("guestbook"))


@app.route("/like/<entry_id>", methods=["POST"])
def like(entry_id):
    get_store().like(entry_id)
    return back_to_listing()


@app.route("/unlike/<entry_id>", methods=["POST"])
def unlike(entry_id):
    get_store().unlike(entry_id)
    return back_to_listing()


@app.route("/delete/<entry_id>", methods=["POST"])
def delete(entry_id):
    get_store().delete(entry_id, client_id())
    return back_to_listing()


@app.route("/source")
def source():
    return redirect(app.config["SOURCE_URL"])


@app.errorhandler(404)
def not_found(exc):
    """Site-wide “Not Found” page."""
    return render_template_string(TEMPL_404, title="Guestbook"), 404


@app.errorhandler(500)
def internal_error(exc):
    """
    Generic 500 page, e.g. when the data file cannot be written.
    Flask has already logged the traceback by the time we get here.
    """
    return render_template_string(TEMPL_500, title="Guestbook"), 500


TEMPL_404 = wrap("""
  <h2 style="margin-top:0">Page not found</h2>
  <p>The URL you asked for doesn’t exist.
     <a href="{{ url_for('guestbook') }}">Back to the guestbook</a>.</p>
""")

TEMPL_500 = wrap("""
  <h2 style="margin-top:0">Internal Server Error</h2>
  <p>Our fault, not yours. Your note may not have been saved –
     please try again in a minute.</p>
""")


init_store()


###############################################################################
# main
###############################################################################
if __name__ == "__main__":
    app.run(debug=True)
