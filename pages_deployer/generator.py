import logging
import time
from typing import Callable, List

from .data_uri import decode_text_attachment
from .errors import GenerationFailed
from .guardrails import ENTRY_POINT, check_all
from .llm import synthesize_page
from .models import ArtifactSet, Attachment

logger = logging.getLogger(__name__)

RESERVED = {ENTRY_POINT, "README.md", "LICENSE"}

MIT_LICENSE = """MIT License

Copyright (c) %YEAR% %AUTHOR%

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""

README_TEMPLATE = """# Auto-Generated Application

## Summary
%BRIEF%

## Setup
1. Clone this repository
2. Open `index.html` in a web browser
3. The application runs entirely in the browser

## Usage
The application is deployed at GitHub Pages and can be accessed directly.

## Features
This application was generated to meet the following requirements:
%CHECKS%

## Code Explanation
- **index.html**: Main application file containing HTML, CSS, and JavaScript
- All dependencies are loaded via CDN for zero-configuration deployment
- The application is fully self-contained and requires no build process

## License
MIT License - See LICENSE file for details
"""

def render_readme(brief: str, checks: List[str]) -> str:
    numbered = "\n".join(f"{i}. {c}" for i, c in enumerate(checks, 1))
    return README_TEMPLATE.replace("%BRIEF%", brief).replace("%CHECKS%", numbered)

def render_license(author: str = "") -> str:
    line = f"Copyright (c) {time.strftime('%Y')} {author}".rstrip()
    return MIT_LICENSE.replace("Copyright (c) %YEAR% %AUTHOR%", line)

def _attachment_files(attachments: List[Attachment]) -> ArtifactSet:
    out = {}
    for a in attachments:
        if a.name in RESERVED or "/" in a.name or a.name in ("", ".", ".."):
            logger.warning("skipping attachment with reserved or unsafe name: %s", a.name)
            continue
        text = decode_text_attachment(a.url)
        if text is None:
            logger.info("attachment %s is not inline text; listed in prompt only", a.name)
            continue
        out[a.name] = text
    return out

def generate_artifacts(brief: str, checks: List[str], attachments: List[Attachment],
                       author: str = "",
                       synthesize: Callable[..., str] = synthesize_page) -> ArtifactSet:
    """Brief + checks + attachments -> files to publish.

    Always contains index.html, README.md and LICENSE.
    """
    try:
        html = synthesize(brief, checks, attachments)
    except GenerationFailed:
        raise
    except Exception as e:
        raise GenerationFailed(f"code generation failed: {e}") from e

    files = _attachment_files(attachments)
    files[ENTRY_POINT] = html
    for problem in check_all(files, checks):
        logger.warning("guardrail: %s", problem)

    files["README.md"] = render_readme(brief, checks)
    files["LICENSE"] = render_license(author)
    logger.info("Generated %d files: %s", len(files), sorted(files))
    return files
