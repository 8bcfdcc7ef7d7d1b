from typing import List
import re

from openai import OpenAI

from .models import Attachment
from .settings import settings

# ---------- client ----------
def _client() -> OpenAI:
    if not settings.OPENAI_API_KEY:
        raise RuntimeError("OPENAI_API_KEY not set")
    if settings.OPENAI_BASE_URL:
        return OpenAI(api_key=settings.OPENAI_API_KEY, base_url=settings.OPENAI_BASE_URL)
    return OpenAI(api_key=settings.OPENAI_API_KEY)

# ---------- synthesis ----------
_FENCE_RE = re.compile(r"```[a-zA-Z]*\n?")

def strip_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()

def build_prompt(brief: str, checks: List[str], attachments: List[Attachment]) -> str:
    checks_text = "\n".join(f"{i}. {c}" for i, c in enumerate(checks, 1))
    attach_text = ""
    if attachments:
        attach_text = "\n\nAttachments:\n" + "\n".join(f"- {a.name}: {a.url}" for a in attachments)

    return f"""You are a code generator. Create a complete, working single-page HTML application.

TASK BRIEF:
{brief}

CHECKS (these will be evaluated):
{checks_text}{attach_text}

REQUIREMENTS:
1. Generate a SINGLE HTML file with embedded CSS and JavaScript
2. Make it fully functional and ready to deploy
3. Use CDN links for any libraries (jsdelivr, unpkg, cdnjs)
4. Handle all edge cases
5. Make it look professional with good UI/UX
6. Ensure all checks will pass

IMPORTANT:
- Attachments are published next to index.html under their own name; load them with fetch('<name>')
- Do NOT use localStorage or sessionStorage
- Make sure all IDs and elements mentioned in checks exist
- Return ONLY the HTML code, no explanations
"""

def synthesize_page(brief: str, checks: List[str], attachments: List[Attachment]) -> str:
    client = _client()
    resp = client.chat.completions.create(
        model=settings.OPENAI_MODEL,
        messages=[
            {"role": "system", "content": "Generate only the requested HTML document; no extra prose."},
            {"role": "user", "content": build_prompt(brief, checks, attachments)},
        ],
        temperature=0.2,
    )
    html = strip_fences(resp.choices[0].message.content or "")
    if not html:
        raise RuntimeError("LLM returned an empty document")
    return html
