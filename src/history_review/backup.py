"""Export and import progress backups as JSON or YAML files."""
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def export_to_file(store, file_path: str) -> dict:
    """Write a full progress snapshot to ``file_path``; the suffix picks the format."""
    path = Path(file_path)
    snapshot = store.export_all()
    if path.suffix.lower() in YAML_SUFFIXES:
        import yaml
        path.write_text(yaml.safe_dump(snapshot, sort_keys=False, allow_unicode=True), encoding="utf-8")
    else:
        path.write_text(json.dumps(snapshot, indent=2), encoding="utf-8")
    return {"filename": path.name, "fields": len(snapshot) - 2}


def read_snapshot(file_path: str):
    """Parse a backup file. Raises ValueError if its contents can't be parsed."""
    path = Path(file_path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in YAML_SUFFIXES:
        import yaml
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(str(e)) from e
    return json.loads(text)


def import_from_file(store, file_path: str) -> bool:
    """Load a backup file into the store. Unreadable files are rejected."""
    try:
        snapshot = read_snapshot(file_path)
    except (OSError, ValueError) as e:
        logger.warning("Could not read backup %s: %s", file_path, e)
        return False
    return store.import_all(snapshot)
