from __future__ import annotations

import time
from pathlib import Path

import requests
from requests import exceptions as req_exc
from tqdm import tqdm

from .errors import DownloadError

TRANSIENT_HTTP_STATUSES = {429, 500, 502, 503, 504}

CHUNK_SIZE = 64 * 1024


def _retry_after_seconds(headers: dict[str, str]) -> float | None:
    retry_after = headers.get("Retry-After")
    if not retry_after:
        return None
    try:
        return float(retry_after)
    except ValueError:
        return None


class HttpClient:
    def __init__(
        self,
        session: requests.Session,
        *,
        timeout_s: int = 45,
        max_retries: int = 4,
        backoff_base_s: float = 1.0,
        progress: bool = True,
    ) -> None:
        self._session = session
        self._timeout_s = timeout_s
        self._max_retries = max_retries
        self._backoff_base_s = backoff_base_s
        self._progress = progress

    def download(self, url: str, target: Path) -> Path:
        """Stream ``url`` into ``target``, retrying transient failures."""

        target.parent.mkdir(parents=True, exist_ok=True)
        last_error: Exception | None = None

        for attempt in range(self._max_retries + 1):
            try:
                with self._session.get(
                    url, timeout=self._timeout_s, stream=True
                ) as resp:
                    if (
                        resp.status_code in TRANSIENT_HTTP_STATUSES
                        and attempt < self._max_retries
                    ):
                        retry_after = _retry_after_seconds(dict(resp.headers))
                        wait_s = (
                            retry_after
                            if retry_after is not None
                            else self._backoff_base_s * (2**attempt)
                        )
                        time.sleep(wait_s)
                        continue

                    if resp.status_code >= 400:
                        raise DownloadError(
                            f"Failed to download {url}: HTTP {resp.status_code}"
                        )

                    self._write_body(resp, target, desc=target.name)
                    return target
            except req_exc.RequestException as e:
                last_error = e
                if attempt >= self._max_retries:
                    break
                time.sleep(self._backoff_base_s * (2**attempt))

        raise DownloadError(f"Failed to download {url}: {last_error}")

    def _write_body(self, resp: requests.Response, target: Path, *, desc: str) -> None:
        total = int(resp.headers.get("Content-Length") or 0) or None
        try:
            with target.open("wb") as fh, tqdm(
                total=total,
                desc=desc,
                unit="B",
                unit_scale=True,
                disable=not self._progress,
            ) as bar:
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    fh.write(chunk)
                    bar.update(len(chunk))
        except OSError as e:
            raise DownloadError(f"Failed to write {target}: {e}") from e
