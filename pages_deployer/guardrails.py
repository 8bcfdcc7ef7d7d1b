# pages_deployer/guardrails.py
import re
from typing import Dict, List

from .errors import GenerationFailed

ENTRY_POINT = "index.html"

_STORAGE_RE = re.compile(r"\b(localStorage|sessionStorage)\b")
_COMMENT_RE = re.compile(r"<!--.*?-->|/\*.*?\*/|(?<![:\"'\\])//[^\n]*", re.S)
_QUERY_RE = re.compile(r"""(?:querySelector(?:All)?|\$)\(\s*["'`]#([A-Za-z][-\w]*)""")
_HASH_RE = re.compile(r"(?<![\w&])#([A-Za-z][-\w]*)")
_HEX_COLOR_RE = re.compile(r"^(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

def _has_selector(html: str, selector_id: str) -> bool:
    sid = selector_id.lstrip("#")
    return bool(re.search(rf'id=["\']{re.escape(sid)}["\']', html, re.I))

def strip_comments(source: str) -> str:
    return _COMMENT_RE.sub("", source)

def mentioned_ids(checks: List[str]) -> List[str]:
    """Element ids the checks refer to.

    ``#fafafa`` style tokens are colors unless they sit inside a
    querySelector call.
    """
    text = " ".join(checks)
    ids = set(_QUERY_RE.findall(text))
    ids.update(i for i in _HASH_RE.findall(text) if not _HEX_COLOR_RE.match(i))
    return sorted(ids)

def require_entry_point(files: Dict[str, str]) -> None:
    if not files.get(ENTRY_POINT, "").strip():
        raise GenerationFailed(f"{ENTRY_POINT} missing or empty")

def missing_title(files: Dict[str, str], checks: List[str]) -> List[str]:
    html = files.get(ENTRY_POINT, "")
    needs_title = any("document.title" in c for c in checks)
    if needs_title and ("<title>" not in html and "document.title" not in html):
        return ["title missing but referenced in checks"]
    return []

def missing_selectors(files: Dict[str, str], checks: List[str]) -> List[str]:
    html = files.get(ENTRY_POINT, "")
    return [f"selector #{sid} missing" for sid in mentioned_ids(checks) if not _has_selector(html, sid)]

def browser_storage_uses(files: Dict[str, str]) -> List[str]:
    out = []
    for name in (ENTRY_POINT,) + tuple(n for n in files if n.endswith(".js")):
        m = _STORAGE_RE.search(strip_comments(files.get(name, "")))
        if m:
            out.append(f"{name} uses {m.group(1)}")
    return out

def check_all(files: Dict[str, str], checks: List[str]) -> List[str]:
    """Raise when there is no page at all; return everything else as warnings."""
    require_entry_point(files)
    return missing_title(files, checks) + missing_selectors(files, checks) + browser_storage_uses(files)
