"""
どこで: `src/jenvek/export/metadata.py`。
何を: 最後の生成結果（options・集約統計・キャプチャ座標）を JSON スナップショットとして保存する。
なぜ: SVG 本体とは別に、同じ結果を再現・比較するためのメタデータを残せるようにするため。
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jenvek.core.options import GenerationOptions
from jenvek.core.report import SceneReport


def metadata_payload(
    *,
    report: SceneReport | None,
    options: GenerationOptions | None,
    generation_count: int = 0,
    timestamp: datetime | None = None,
) -> dict[str, Any]:
    """JSON スナップショット用の dict を返す。"""

    ts = timestamp if timestamp is not None else datetime.now(timezone.utc)
    vector = options.captured_vector if options is not None else None
    return {
        "timestamp": ts.isoformat(),
        "generationCount": int(generation_count),
        "optionsUsed": options.to_dict() if options is not None else None,
        "mathProperties": report.to_dict() if report is not None else None,
        "capturedCoordinates": {
            "x": options.captured_x if options is not None else None,
            "y": options.captured_y if options is not None else None,
            "vector": {"x": vector[0], "y": vector[1]} if vector is not None else None,
        },
    }


def export_metadata(
    path: str | Path,
    *,
    report: SceneReport | None,
    options: GenerationOptions | None,
    generation_count: int = 0,
    timestamp: datetime | None = None,
) -> Path:
    """メタデータ JSON を保存する。

    Parameters
    ----------
    path : str | Path
        出力先パス。
    report : SceneReport | None
        最後の集約統計。
    options : GenerationOptions | None
        最後に使った options。
    generation_count : int
        セッション内の生成回数。
    timestamp : datetime | None
        記録する時刻。None なら現在時刻（UTC）。

    Returns
    -------
    Path
        保存先パス。
    """

    _path = Path(path)
    payload = metadata_payload(
        report=report,
        options=options,
        generation_count=generation_count,
        timestamp=timestamp,
    )
    _path.parent.mkdir(parents=True, exist_ok=True)
    with _path.open("w", encoding="utf-8", newline="\n") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
        f.write("\n")
    return _path


__all__ = ["export_metadata", "metadata_payload"]
