import base64, binascii, re
from typing import Optional, Tuple

DATA_URI_RE = re.compile(r"^data:([^;,]+)?;base64,(.+)$", re.IGNORECASE | re.DOTALL)

class DataUriError(Exception):
    pass

def decode_data_uri(uri: str) -> Tuple[str, bytes]:
    m = DATA_URI_RE.match(uri)
    if not m:
        raise DataUriError("Unsupported data URI")
    mime, b64 = m.groups()
    try:
        return mime or "text/plain", base64.b64decode(b64, validate=False)
    except binascii.Error as e:
        raise DataUriError(f"bad base64 payload: {e}") from e

def decode_text_attachment(uri: str) -> Optional[str]:
    """UTF-8 text of a data URI, or None for remote URLs and binary payloads."""
    try:
        _, data = decode_data_uri(uri)
        return data.decode("utf-8")
    except (DataUriError, UnicodeDecodeError):
        return None
