"""
Helper Utility Module

This module provides various helper functions used throughout the moderation core.
"""

import re
from typing import Optional, Mapping, Any
from urllib.parse import urlparse, urlencode

import requests

from config import settings
from utils.logger import get_logger

logger = get_logger(__name__)

# Quoted attribute values may contain '>'; unterminated quotes and tags run to the end
_HTML_TAG = re.compile(r'<(?!\s)(?:"[^"]*(?:"|\Z)|\'[^\']*(?:\'|\Z)|[^>"\'])*(?:>|\Z)')

FILESIZE_UNITS = ['B', 'KB', 'MB', 'GB', 'TB', 'PB', 'EB', 'ZB', 'YB']


def is_valid_url(url: str) -> bool:
    """
    Check if a URL is valid.

    Args:
        url: The URL to validate

    Returns:
        bool: True if the URL is valid, False otherwise
    """
    try:
        result = urlparse(url)
        return all([result.scheme, result.netloc])
    except Exception:
        return False

def strip_html_tags(text: str) -> str:
    """
    Remove HTML tags from text.

    A '<' followed by whitespace and a stray '>' are kept as text. An
    unclosed tag is removed through to the end of the text.

    Args:
        text: The text to clean

    Returns:
        str: Text with HTML tags removed
    """
    return _HTML_TAG.sub('', text)

def human_filesize(size: int, dec: int = 2) -> str:
    """
    Turn a size in bytes into a human readable string, e.g. "1.50MB".

    The unit is picked from the number of decimal digits, so 1000-1023
    bytes are shown as "0.98KB".
    """
    factor = (len(str(size)) - 1) // 3
    unit = FILESIZE_UNITS[factor] if factor < len(FILESIZE_UNITS) else ''
    return f"{size / (1024 ** factor):.{dec}f}{unit}"

def get_client_remote_address(cloudflare: bool, server: Mapping[str, Any]) -> str:
    """
    Return the client IPv4 or IPv6 address of the current request.

    Args:
        cloudflare: Trust the address forwarded by Cloudflare.
        server: WSGI environ style mapping.
    """
    if cloudflare and server.get('HTTP_CF_CONNECTING_IP'):
        return server['HTTP_CF_CONNECTING_IP']

    return server.get('REMOTE_ADDR', '')

def mutate_query(query: Mapping[str, Any], key: str, val: str) -> str:
    """Return query with key set to val, URL-encoded. The input is not modified."""
    mutated = dict(query)
    mutated[key] = val
    return urlencode(mutated)

def url_get_contents(url: str) -> Optional[str]:
    """
    Fetch the body of url, following redirects.

    Returns:
        Optional[str]: The body on HTTP 200, None otherwise.
    """
    if not is_valid_url(url):
        logger.warning(f"Refusing to fetch invalid URL: {url}")
        return None

    try:
        response = requests.get(url, allow_redirects=True, timeout=settings.URL_FETCH_TIMEOUT)
    except requests.RequestException as e:
        logger.warning(f"Error fetching {url}: {e}")
        return None

    return response.text if response.status_code == 200 else None
