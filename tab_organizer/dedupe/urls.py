"""URL canonicalization for duplicate detection and effective-domain extraction."""

import ipaddress
import re
import urllib.parse
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from tab_organizer.tab_policy.matching import host_matches_base

from .constants import (
    AMAZON_KEEP_PARAMS,
    GOOGLE_DOC_KINDS,
    GOOGLE_SEARCH_KEEP_PARAMS,
    MULTI_LEVEL_TLDS,
    TRACKING_PARAM_PREFIXES,
    TRACKING_PARAMS,
    YOUTUBE_KEEP_PARAMS,
)

Params = List[Tuple[str, str]]

_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
_DEFAULT_PORTS = {80, 443}

_GITHUB_REPO = re.compile(r"^/([^/]+)/([^/]+)(/.*)?$")
_JIRA_ISSUE = re.compile(
    r"/(?:browse|jira/software/c/projects/[^/]+/boards/[^/]+)/([A-Z0-9]+-\d+)",
    re.IGNORECASE,
)
_LINEAR_ISSUE = re.compile(r"/issue/([A-Z]+-\d+)")
_YOUTRACK_ISSUE = re.compile(r"/issue/([A-Z0-9_]+-\d+)", re.IGNORECASE)
_AMAZON_DP = re.compile(r"/dp/([A-Z0-9]{6,})")
_AMAZON_PRODUCT = re.compile(r"/gp/product/([A-Z0-9]{6,})")
_EBAY_ITEM = re.compile(r"/itm/(\d+)")


@dataclass(frozen=True)
class _Canonical:
    host: str
    path: str
    params: Tuple[Tuple[str, str], ...] = ()


def safe_url(raw_url: object) -> Optional[urllib.parse.SplitResult]:
    """Parse a URL; None when it has no scheme, an invalid port, or http(s) without a host."""
    if not isinstance(raw_url, str):
        return None
    text = raw_url.strip()
    if not text or not _SCHEME.match(text):
        return None
    try:
        parsed = urllib.parse.urlsplit(text)
        parsed.port
    except ValueError:
        return None
    if parsed.scheme.lower() in {"http", "https"} and not parsed.hostname:
        return None
    return parsed


def normalize_host(host: str) -> str:
    host = (host or "").lower()
    if host.startswith("www."):
        host = host[4:]
    return host


def normalize_path(path: str) -> str:
    if not path:
        return "/"
    cleaned = path.rstrip("/")
    if not cleaned.startswith("/"):
        cleaned = "/" + cleaned
    return cleaned


def path_segments(path: str) -> List[str]:
    return [segment for segment in (path or "").split("/") if segment]


def _first_param(params: Params, key: str) -> Optional[str]:
    for name, value in params:
        if name == key:
            return value
    return None


def _is_tracking_param(key: str) -> bool:
    lower = key.lower()
    return lower.startswith(TRACKING_PARAM_PREFIXES) or lower in TRACKING_PARAMS


def _is_google_search(host: str, path: str) -> bool:
    return "google." in host and (path == "/" or path.startswith("/search"))


def _is_youtube(host: str) -> bool:
    return host_matches_base(host, "youtube.com") or host_matches_base(host, "youtu.be")


def sanitize_query_params(params: Params, host: str, path: str) -> Params:
    """Drop tracking and service-irrelevant keys; stable-sort the rest by key."""
    kept: Params = []
    for key, value in params:
        lower = key.lower()
        if _is_tracking_param(key):
            continue
        if _is_google_search(host, path) and lower not in GOOGLE_SEARCH_KEEP_PARAMS:
            continue
        if _is_youtube(host) and lower not in YOUTUBE_KEEP_PARAMS:
            continue
        if "amazon." in host and lower not in AMAZON_KEEP_PARAMS:
            continue
        kept.append((key, value))
    kept.sort(key=lambda kv: kv[0])
    return kept


def _youtu_be(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if not host_matches_base(host, "youtu.be"):
        return None
    video_id = path.lstrip("/")
    if not video_id:
        return None
    return _Canonical("youtube.com", "/watch", (("v", video_id),))


def _youtube(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if not host_matches_base(host, "youtube.com"):
        return None
    if path.startswith("/watch"):
        video_id = _first_param(params, "v")
        if video_id:
            keep = [("v", video_id)]
            playlist = _first_param(params, "list")
            if playlist:
                keep.append(("list", playlist))
            return _Canonical("youtube.com", "/watch", tuple(keep))
    if path.startswith("/playlist"):
        playlist = _first_param(params, "list")
        if playlist:
            return _Canonical("youtube.com", "/playlist", (("list", playlist),))
    return None


def _google_docs(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if host != "docs.google.com":
        return None
    parts = path_segments(path)
    if len(parts) >= 3 and parts[0] in GOOGLE_DOC_KINDS and parts[1] == "d":
        return _Canonical(host, f"/{parts[0]}/d/{parts[2]}")
    return None


def _google_drive(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if host != "drive.google.com":
        return None
    parts = path_segments(path)
    if len(parts) >= 3 and parts[0] == "file" and parts[1] == "d":
        return _Canonical(host, f"/file/d/{parts[2]}")
    if len(parts) >= 3 and parts[0] == "drive" and parts[1] == "folders":
        return _Canonical(host, f"/drive/folders/{parts[2]}")
    return None


def _gmail(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if host != "mail.google.com":
        return None
    keep = []
    for key in ("view", "tab"):
        value = _first_param(params, key)
        if value:
            keep.append((key, value))
    return _Canonical(host, "/mail", tuple(keep))


def _github(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if not host_matches_base(host, "github.com"):
        return None
    match = _GITHUB_REPO.match(path)
    if not match:
        return None
    owner, repo, tail = match.group(1), match.group(2), match.group(3) or ""
    tail_parts = tail.split("/")
    for kind in ("pull", "issues", "discussions", "commit"):
        if tail.startswith(f"/{kind}/") and len(tail_parts) > 2 and tail_parts[2]:
            return _Canonical("github.com", f"/{owner}/{repo}/{kind}/{tail_parts[2]}")
    if tail.startswith("/blob/") or tail.startswith("/tree/"):
        ref = tail_parts[2] if len(tail_parts) > 2 and tail_parts[2] else "main"
        return _Canonical("github.com", f"/{owner}/{repo}/{tail_parts[1]}/{ref}")
    return None


def _jira(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if "atlassian.net" not in host and not host_matches_base(host, "jira.com"):
        return None
    match = _JIRA_ISSUE.search(path)
    if not match:
        return None
    return _Canonical(host, f"/browse/{match.group(1).upper()}")


def _linear(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if not host_matches_base(host, "linear.app"):
        return None
    match = _LINEAR_ISSUE.search(path)
    if not match:
        return None
    return _Canonical(host, f"/issue/{match.group(1).upper()}")


def _youtrack(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if not (host_matches_base(host, "youtrack.cloud") or host_matches_base(host, "myjetbrains.com")):
        return None
    match = _YOUTRACK_ISSUE.search(path)
    if not match:
        return None
    return _Canonical(host, f"/issue/{match.group(1).upper()}")


def _google_search(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if not _is_google_search(host, path):
        return None
    query = _first_param(params, "q")
    if not query:
        return None
    return _Canonical("google.com", "/search", (("q", query),))


def _amazon(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if "amazon." not in host:
        return None
    match = _AMAZON_DP.search(path) or _AMAZON_PRODUCT.search(path)
    if match:
        return _Canonical(host, f"/dp/{match.group(1)}")
    if path.startswith("/s"):
        keyword = _first_param(params, "k")
        return _Canonical(host, "/s", (("k", keyword),) if keyword else ())
    return None


def _ebay(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if not host_matches_base(host, "ebay.com"):
        return None
    match = _EBAY_ITEM.search(path)
    if match:
        return _Canonical(host, f"/itm/{match.group(1)}")
    if path.startswith("/sch"):
        query = _first_param(params, "_nkw")
        return _Canonical(host, "/sch", (("_nkw", query),) if query else ())
    return None


def _airbnb(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if not host_matches_base(host, "airbnb.com") or not path.startswith("/rooms"):
        return None
    parts = path_segments(path)
    if len(parts) < 2:
        return None
    return _Canonical(host, f"/rooms/{parts[1]}")


def _booking(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if not host_matches_base(host, "booking.com") or "/hotel/" not in path:
        return None
    return _Canonical(host, path)


def _first_segments(host: str, path: str, count: int) -> _Canonical:
    return _Canonical(host, "/" + "/".join(path_segments(path)[:count]))


def _skyscanner(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if not (host_matches_base(host, "skyscanner.net") or host_matches_base(host, "skyscanner.com")):
        return None
    return _first_segments(host, path, 5)


def _spotify(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if not host_matches_base(host, "open.spotify.com"):
        return None
    return _first_segments(host, path, 2)


def _apple_music(host: str, path: str, params: Params) -> Optional[_Canonical]:
    if not host_matches_base(host, "music.apple.com"):
        return None
    return _first_segments(host, path, 4)


# Checked in order; the first service that recognizes the URL owns its identity key.
SERVICE_CANONICALIZERS: Tuple[Callable[[str, str, Params], Optional[_Canonical]], ...] = (
    _youtu_be,
    _youtube,
    _google_docs,
    _google_drive,
    _gmail,
    _github,
    _jira,
    _linear,
    _youtrack,
    _google_search,
    _amazon,
    _ebay,
    _airbnb,
    _booking,
    _skyscanner,
    _spotify,
    _apple_music,
)


def _render(canonical: _Canonical) -> str:
    path = "" if canonical.path == "/" else canonical.path
    params = sorted(canonical.params, key=lambda kv: kv[0])
    query = urllib.parse.urlencode(params)
    if query:
        return f"https://{canonical.host}{path}?{query}"
    return f"https://{canonical.host}{path}"


def _host_with_port(parsed: urllib.parse.SplitResult) -> str:
    host = normalize_host(parsed.hostname or "")
    if ":" in host:
        host = f"[{host}]"
    port = parsed.port
    if port is not None and port not in _DEFAULT_PORTS:
        return f"{host}:{port}"
    return host


def canonicalize_url(raw_url: object) -> Optional[str]:
    """Comparison key for duplicate detection.

    Returns None for unparsable input and the raw string for non-http(s)
    schemes, so opaque URLs only ever match byte-identical copies.
    """
    parsed = safe_url(raw_url)
    if parsed is None:
        return None
    if parsed.scheme.lower() not in {"http", "https"}:
        return raw_url  # type: ignore[return-value]

    host = normalize_host(parsed.hostname or "")
    path = normalize_path(parsed.path)
    params = urllib.parse.parse_qsl(parsed.query, keep_blank_values=True)

    for canonicalizer in SERVICE_CANONICALIZERS:
        special = canonicalizer(host, path, params)
        if special is not None:
            return _render(special)

    sanitized = sanitize_query_params(params, host, path)
    return _render(_Canonical(_host_with_port(parsed), path, tuple(sanitized)))


def _is_ip_address(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def effective_domain(host: str) -> Optional[str]:
    """eTLD+1 using the fixed multi-level suffix table."""
    if not host:
        return None
    if _is_ip_address(host):
        return host
    parts = host.split(".")
    if len(parts) <= 2:
        return host
    last_two = ".".join(parts[-2:])
    last_three = ".".join(parts[-3:])
    if last_two in MULTI_LEVEL_TLDS:
        return ".".join(parts[-3:])
    if last_three in MULTI_LEVEL_TLDS:
        return ".".join(parts[-4:])
    return last_two


def extract_domain(raw_url: object) -> Optional[str]:
    parsed = safe_url(raw_url)
    if parsed is None:
        return None
    return effective_domain(normalize_host(parsed.hostname or ""))
