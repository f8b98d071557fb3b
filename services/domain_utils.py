from __future__ import annotations

from functools import lru_cache
from typing import Optional

import tldextract


@lru_cache(maxsize=1)
def _extractor() -> tldextract.TLDExtract:
    # Bundled public suffix snapshot only; lookups must not touch the network
    return tldextract.TLDExtract(suffix_list_urls=())


def normalize_domain(url_or_domain: Optional[str]) -> Optional[str]:
    """Turn what a user typed ("https://www.Acme.com/about") into "acme.com"."""
    if not url_or_domain:
        return None
    text = str(url_or_domain).strip().lower()
    if not text:
        return None
    if not text.startswith("http://") and not text.startswith("https://"):
        text = f"http://{text}"
    ext = _extractor()(text)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"
    return None
