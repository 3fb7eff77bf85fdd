import json
import logging
from pathlib import Path

from .models import CustomizationState, FunnelRecord

logger = logging.getLogger(__name__)


def _write_json(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def save_customization(path: str | Path, state: CustomizationState) -> None:
    _write_json(Path(path), state.to_dict())


def load_customization(path: str | Path) -> CustomizationState:
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a customization object")
    return CustomizationState.from_dict(data)


def save_funnel(path: str | Path, record: FunnelRecord) -> None:
    _write_json(Path(path), record.to_dict())
    logger.debug("Saved funnel %s to %s", record.id or record.name, path)


def load_funnel(path: str | Path) -> FunnelRecord:
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a funnel object")
    return FunnelRecord.from_dict(data)
