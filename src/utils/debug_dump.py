from pathlib import Path

import structlog

from src.config.settings import get_settings

log = structlog.get_logger()


def write_debug_text(filename: str, text: str, directory: str | None = None) -> str:
    """Best-effort dump of extracted text for diagnosis.

    Returns the written path, or an empty string if anything goes wrong.
    """
    try:
        target_dir = Path(directory or get_settings().debug_dump_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / filename
        target.write_text(text, encoding="utf-8")
    except Exception as e:
        log.debug("debug_dump_failed", filename=filename, error=str(e))
        return ""
    return str(target)
