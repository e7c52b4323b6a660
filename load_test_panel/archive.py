"""Extract the JSON results payload from a zipped workflow artifact."""

import io
import json
import logging
import zipfile
import zlib
from typing import Any

log = logging.getLogger(__name__)


def is_results_entry(name: str) -> bool:
    """Check if an archive entry holds the results payload."""
    return "results" in name and name.endswith(".json")


def extract_results(data: bytes) -> dict[str, Any] | None:
    """Return the parsed results object from artifact ZIP bytes.

    The first entry whose name contains ``results`` and ends with ``.json``
    is used. Results are a best-effort enrichment, so every failure is
    logged and reported as None.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            entry = next(
                (name for name in archive.namelist() if is_results_entry(name)), None
            )
            if entry is None:
                log.info("Artifact archive contains no results file")
                return None
            content = archive.read(entry)
    except (
        zipfile.BadZipFile,
        zlib.error,
        EOFError,
        NotImplementedError,
        RuntimeError,
        OSError,
        ValueError,
    ) as exc:
        log.warning("Could not read artifact archive: %s", exc)
        return None

    try:
        payload = json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        log.warning("Could not parse results file %s: %s", entry, exc)
        return None

    if not isinstance(payload, dict):
        log.warning("Results file %s is not a JSON object", entry)
        return None

    return payload
