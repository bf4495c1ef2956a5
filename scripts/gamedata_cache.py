#!/usr/bin/env python3
"""Fetch-once local cache for remote game data payloads."""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from pathlib import Path

import requests


USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)


@dataclass
class FetchConfig:
    timeout_seconds: float
    retries: int
    verbose: bool


def log(msg: str, *, enabled: bool) -> None:
    if enabled:
        print(msg, file=sys.stderr, flush=True)


def fetch_bytes(session: requests.Session, url: str, cfg: FetchConfig, *, label: str) -> bytes:
    attempts = max(1, cfg.retries + 1)
    for attempt in range(1, attempts + 1):
        try:
            response = session.get(
                url,
                timeout=cfg.timeout_seconds,
                headers={"User-Agent": USER_AGENT, "Accept": "*/*"},
            )
        except (
            requests.exceptions.InvalidURL,
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
        ) as exc:
            raise RuntimeError(f"{label}: bad URL {url}: {exc}") from exc
        except requests.RequestException as exc:
            if attempt == attempts:
                raise RuntimeError(f"{label}: request failed for {url}: {exc}") from exc
            time.sleep(min(10.0, attempt * 1.5))
            continue

        if response.status_code == 429 or response.status_code >= 500:
            if attempt == attempts:
                raise RuntimeError(f"{label}: HTTP {response.status_code} for {url}")
            log(f"[{label}] HTTP {response.status_code}; retrying ({attempt}/{attempts})", enabled=cfg.verbose)
            time.sleep(min(15.0, attempt * 2.0))
            continue
        if response.status_code >= 400:
            raise RuntimeError(f"{label}: HTTP {response.status_code} for {url}")

        return response.content

    raise RuntimeError(f"{label}: unreachable failure for {url}")


def write_atomic(path: Path, data: bytes) -> None:
    """Write ``data`` to a sibling temp file, then move it over ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(".tmp")
    tmp_path.write_bytes(data)
    tmp_path.replace(path)


def load_or_fetch(path: Path, url: str, session: requests.Session, cfg: FetchConfig, *, label: str) -> bytes:
    """Return the cached payload at ``path``, downloading it first if needed.

    An empty file counts as missing. The payload is written as received.
    """
    if path.exists() and path.stat().st_size > 0:
        log(f"[{label}] using cached {path}", enabled=cfg.verbose)
        return path.read_bytes()

    log(f"[{label}] downloading {url}", enabled=cfg.verbose)
    data = fetch_bytes(session, url, cfg, label=label)
    write_atomic(path, data)
    log(f"[{label}] cached {len(data)} bytes to {path}", enabled=cfg.verbose)
    return data
