import logging
import os
import re
import unicodedata
from typing import Dict, List, Optional, Tuple


import httpx


logger = logging.getLogger(__name__)

CATALOG_URL = os.getenv(
    "EXERCISE_CATALOG_URL",
    "https://raw.githubusercontent.com/yuhonas/free-exercise-db/main/dist/exercises.json",
)
IMAGE_BASE_URL = "https://raw.githubusercontent.com/yuhonas/free-exercise-db/main/exercises/"

_cache: Optional[List[dict]] = None


# Normalization & token helpers
_PUNCT_RE = re.compile(r"[^\w\s]+")
_WS_RE = re.compile(r"\s+")


def _strip_accents(s: str) -> str:
    s = unicodedata.normalize("NFKD", s)
    return "".join(c for c in s if not unicodedata.combining(c))


def _norm(s: str) -> str:
    """lowercase, strip accents, remove punctuation, collapse spaces."""
    if not s:
        return ""
    s = _strip_accents(s).lower()
    s = _PUNCT_RE.sub(" ", s)
    s = _WS_RE.sub(" ", s).strip()
    return s


def _singularize_token(t: str) -> str:
    """Very naive singularization so 'squats' -> 'squat', 'presses' -> 'press'."""
    if len(t) > 3 and re.search(r"[^aeiou]es$", t):
        return t[:-2]
    if len(t) > 3 and t.endswith("s"):
        return t[:-1]
    return t


def _tokens(s: str) -> List[str]:
    return [_singularize_token(t) for t in _norm(s).split() if t]


# Scoring
def _score_name(name: str, q_tokens: List[str]) -> Tuple[int, int, int, int]:
    """
    Higher is better:
      (exact_phrase, exact_word_hits, prefix_hits, -name_len)
    """
    n_norm = _norm(name)
    if not n_norm:
        return (0, 0, 0, 0)

    words = [_singularize_token(w) for w in n_norm.split()]
    exact_word_hits = sum(1 for t in q_tokens if t in words)
    prefix_hits = sum(1 for t in q_tokens if any(w.startswith(t) for w in words))
    exact_phrase = 1 if " ".join(words) == " ".join(q_tokens) else 0
    return (exact_phrase, exact_word_hits, prefix_hits, -len(n_norm))


# Loading
async def load_catalog() -> List[dict]:
    """
    Fetch the free-exercise-db dump once per process. Failures degrade to an
    empty catalog and are retried on the next call.
    """
    global _cache
    if _cache is not None:
        return _cache

    headers = {"User-Agent": "repflow/0.1"}
    try:
        async with httpx.AsyncClient(timeout=15.0, headers=headers) as client:
            r = await client.get(CATALOG_URL)
            r.raise_for_status()
            data = r.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Exercise catalog unavailable: %s", e)
        return []

    if not isinstance(data, list):
        logger.warning("Exercise catalog has unexpected shape: %s", type(data).__name__)
        return []

    _cache = [item for item in data if isinstance(item, dict) and item.get("name")]
    logger.info("Loaded %d catalog exercises", len(_cache))
    return _cache


def clear_cache() -> None:
    global _cache
    _cache = None


# Lookup
def name_key(name: str) -> str:
    return _norm(name)


def index_by_name(catalog: List[dict]) -> Dict[str, dict]:
    out: Dict[str, dict] = {}
    for item in catalog:
        key = name_key(item.get("name") or "")
        if key and key not in out:
            out[key] = item
    return out


def details_for(entry: Optional[dict]) -> dict:
    """Map a catalog entry onto ExerciseDetails fields, empty when missing."""
    if not entry:
        return {}
    primary = list(entry.get("primaryMuscles") or [])
    return {
        "instructions": list(entry.get("instructions") or []),
        "images": [IMAGE_BASE_URL + img for img in (entry.get("images") or [])],
        "primary_muscles": primary,
        "secondary_muscles": list(entry.get("secondaryMuscles") or []),
        "equipment": entry.get("equipment") or "",
        "level": entry.get("level") or "",
        "force": entry.get("force") or "",
        "mechanic": entry.get("mechanic") or "",
        "category": entry.get("category") or "",
        "muscle_group": primary[0] if primary else "",
    }


def muscles(catalog: List[dict]) -> List[str]:
    seen: set[str] = set()
    for item in catalog:
        for m in (item.get("primaryMuscles") or []) + (item.get("secondaryMuscles") or []):
            if m:
                seen.add(m)
    return sorted(seen)


def search(
    catalog: List[dict],
    q: Optional[str] = None,
    muscle: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
) -> List[dict]:
    """
    Strict token-AND name search with optional muscle filter (primary or
    secondary). Without a query the catalog order is kept.
    """
    q_tokens = _tokens(q or "")
    muscle_key = (muscle or "").strip().lower()

    matches: List[dict] = []
    for item in catalog:
        name = item.get("name") or ""
        if q_tokens:
            words = [_singularize_token(w) for w in _norm(name).split()]
            if not all(any(w.startswith(t) for w in words) for t in q_tokens):
                continue
        if muscle_key:
            hits = {m.lower() for m in (item.get("primaryMuscles") or []) + (item.get("secondaryMuscles") or [])}
            if muscle_key not in hits:
                continue
        matches.append(item)

    if q_tokens:
        matches.sort(key=lambda e: _score_name(e.get("name") or "", q_tokens), reverse=True)

    return [
        {"id": item.get("id"), "name": item.get("name"), **details_for(item)}
        for item in matches[offset : offset + limit]
    ]
