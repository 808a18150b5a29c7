"""
url_utils.py - Asset-URL and lazy-import indirections for generated modules

The tokens produced here are placeholders. The host bundler replaces
import.meta.ROLLUP_FILE_URL_<ref> with the final (possibly hashed) file
location at bundle assembly; the pipeline never resolves them itself.
"""

import re

FILE_URL_PREFIX = "import.meta.ROLLUP_FILE_URL_"
FILE_URL_RE = re.compile(re.escape(FILE_URL_PREFIX) + r"(?P<ref>[A-Za-z0-9_$]+)")

# Don't match Windows paths `c:\`
_WINDOWS_PATH_RE = re.compile(r"^[a-zA-Z]:\\")

# Scheme: https://tools.ietf.org/html/rfc3986#section-3.1
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z\d+\-.]*:")


def is_absolute(url: str) -> bool:
    if _WINDOWS_PATH_RE.match(url):
        return False
    return bool(_SCHEME_RE.match(url))


def meta_file(ref_id: str) -> str:
    return f"{FILE_URL_PREFIX}{ref_id}"


def meta_asset(ref_id: str) -> str:
    """Expression evaluating to the absolute URL of an emitted asset."""
    return f"new URL({meta_file(ref_id)}, import.meta.url).href"


def meta_import(ref_id: str) -> str:
    """Zero-argument loader importing an emitted chunk on demand."""
    return f"() => import({meta_file(ref_id)})"
