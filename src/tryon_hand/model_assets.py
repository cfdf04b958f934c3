from __future__ import annotations

import logging
import os
import ssl
import subprocess
import urllib.request


logger = logging.getLogger(__name__)

HAND_LANDMARKER_TASK_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/latest/hand_landmarker.task"
)


def _ssl_context() -> ssl.SSLContext:
    # python.org macOS builds can ship without root certificates; certifi fixes that when present.
    try:
        import certifi  # type: ignore
    except ImportError:
        return ssl.create_default_context()
    return ssl.create_default_context(cafile=certifi.where())


def _download_urllib(url: str, model_path: str, timeout_s: int) -> None:
    with urllib.request.urlopen(url, context=_ssl_context(), timeout=timeout_s) as r, open(model_path, "wb") as f:
        f.write(r.read())


def _download_curl(url: str, model_path: str, timeout_s: int) -> None:
    proc = subprocess.run(
        ["curl", "-fL", "--max-time", str(timeout_s), "-o", model_path, url],
        check=False,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    if proc.returncode != 0:
        raise OSError(f"curl exited with {proc.returncode}: {proc.stderr.strip()}")


def _remove_partial(model_path: str) -> None:
    if os.path.exists(model_path):
        os.remove(model_path)


def ensure_hand_landmarker_task(model_path: str, *, url: str = HAND_LANDMARKER_TASK_URL, timeout_s: int = 30) -> str:
    """
    Return `model_path`, downloading the MediaPipe hand landmarker model there first if needed.

    Tries urllib, then curl (which often works when Python's certificate store
    does not). Raises RuntimeError with manual download instructions if both fail.
    """

    if os.path.exists(model_path):
        return model_path

    os.makedirs(os.path.dirname(model_path) or ".", exist_ok=True)
    logger.info(f"Downloading hand landmarker model to {model_path}")

    errors = []
    for download in (_download_urllib, _download_curl):
        try:
            download(url, model_path, timeout_s)
        except (OSError, ValueError) as e:
            logger.warning(f"{download.__name__} failed: {e}")
            errors.append(f"{download.__name__}: {e}")
            _remove_partial(model_path)
            continue
        if os.path.exists(model_path) and os.path.getsize(model_path) > 0:
            return model_path
        _remove_partial(model_path)

    raise RuntimeError(
        "Missing MediaPipe Tasks model file and auto-download failed.\n\n"
        f"Expected model at: {model_path}\n"
        f"URL: {url}\n\n"
        "Download it manually:\n"
        f'  mkdir -p "{os.path.dirname(model_path) or "."}"\n'
        f'  curl -L -o "{model_path}" "{url}"\n\n'
        "Errors:\n  " + "\n  ".join(errors)
    )
