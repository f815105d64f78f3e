"""Optional attestation field vocabulary.

The vocabulary maps field keys (e.g. ``chamber_of_commerce_kvk_nummer``) to
human-readable labels. It is read from a JSON file of the form::

    {"attestation_schema": {"<field key>": "<label>", ...}}

A missing or malformed file is not an error: the classifier then falls back
to its generic prompt.
"""

import json
from functools import lru_cache
from pathlib import Path

import logfire

from rvo_agent.config import get_settings


def load_attestation_vocabulary(path: str | Path) -> dict[str, str] | None:
    """Read the vocabulary at *path*.

    Returns:
        Mapping of field key to label, or None if unavailable
    """
    schema_path = Path(path)
    try:
        data = json.loads(schema_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logfire.info("No attestation vocabulary found", path=str(schema_path))
        return None
    except (OSError, json.JSONDecodeError) as e:
        logfire.warning(
            "Attestation vocabulary unreadable", path=str(schema_path), error=str(e)
        )
        return None

    schema = data.get("attestation_schema") if isinstance(data, dict) else None
    if not isinstance(schema, dict) or not schema:
        logfire.warning(
            "Attestation vocabulary has no attestation_schema object",
            path=str(schema_path),
        )
        return None

    vocabulary = {str(key): str(label) for key, label in schema.items()}
    logfire.info(
        "Attestation vocabulary loaded", path=str(schema_path), fields=len(vocabulary)
    )
    return vocabulary


@lru_cache()
def get_attestation_vocabulary() -> dict[str, str] | None:
    """Vocabulary from ``settings.attestation_schema_path``, loaded once."""
    return load_attestation_vocabulary(get_settings().attestation_schema_path)
