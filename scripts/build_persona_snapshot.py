"""
Persona 스냅샷 생성 스크립트.

역할:
- 시그널 JSON(camelCase/snake_case 모두 허용)을 읽어 PersonaSnapshot 생성
- 결과를 stdout에 출력, --out 지정 시 파일로 저장(임시 파일 → rename)

입력 예:
  {"signals": {"playtimeByGenre": {"RPG": 80}, ...}, "moodEntry": {"moodId": "chill", "intensity": 6}}
  또는 signals 객체만
"""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from gamepilot.core.config import Settings
from gamepilot.core.errors import SignalValidationError
from gamepilot.core.logging_config import configure_logging
from gamepilot.persona.snapshot import build_persona_snapshot, get_snapshot_summary, is_high_confidence_snapshot
from gamepilot.schemas.persona import PersonaSnapshotRequest

logger = logging.getLogger(__name__)


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _atomic_write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2, default=str)
    tmp.replace(path)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Build a persona snapshot from a signals JSON file.")
    parser.add_argument("signals_path", help="JSON file with {signals, moodEntry?} or a bare signals object")
    parser.add_argument("--out", default=None, help="Write the snapshot JSON here")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    root = Path(__file__).resolve().parents[1]
    load_dotenv(root / ".env")
    configure_logging(args.log_level or Settings().LOG_LEVEL)

    raw = _read_json(Path(args.signals_path))
    if not isinstance(raw, dict):
        raise SystemExit(f"{args.signals_path}: expected a JSON object")
    request = PersonaSnapshotRequest.model_validate(raw if "signals" in raw else {"signals": raw})

    try:
        snapshot = build_persona_snapshot(
            request.signals.to_signal_mapping() if request.signals else None,
            request.mood_entry.to_entry() if request.mood_entry else None,
        )
    except SignalValidationError as e:
        raise SystemExit(f"invalid signals ({e.field}): {e}")

    payload = {
        "summary": get_snapshot_summary(snapshot),
        "high_confidence": is_high_confidence_snapshot(snapshot),
        "snapshot": asdict(snapshot),
    }

    print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))
    if args.out:
        out_path = Path(args.out)
        _atomic_write_json(out_path, payload)
        logger.info("wrote persona snapshot: %s", out_path)


if __name__ == "__main__":
    main()
