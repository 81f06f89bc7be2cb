"""
どこで: `src/jenvek/core/report.py`。
何を: 生成器 1 回分の GenerationReport と、レイヤー集約後の SceneReport を定義する。
なぜ: UI/エクスポートへ渡す統計を、描画面とは独立した値として保持するため。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from jenvek.core.scene import Scene

MetricValue = int | float | str


@dataclass(frozen=True, slots=True)
class GenerationReport:
    """パターン生成器 1 回分の統計。

    Parameters
    ----------
    element_count : int
        生成した要素数。
    metrics : Mapping[str, MetricValue]
        パターン固有の指標（深さ・グリッドサイズ・黄金角など）。
    """

    element_count: int
    metrics: Mapping[str, MetricValue] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"elementCount": int(self.element_count), **dict(self.metrics)}


@dataclass(frozen=True, slots=True)
class SceneReport:
    """Layer Compositor 1 回分の集約統計。

    Notes
    -----
    `error` が None でない場合、生成は途中で打ち切られている。
    `total_elements` / `per_layer` は完了したレイヤー分だけを含む。
    """

    pattern: str
    layers: int
    viewport: tuple[int, int]
    total_elements: int
    per_layer: Mapping[int, GenerationReport]
    error: str | None = None
    scene: "Scene | None" = field(default=None, compare=False, repr=False)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """JSON 化できる dict を返す。"""

        out: dict[str, Any] = {
            "pattern": self.pattern,
            "layers": int(self.layers),
            "totalElements": int(self.total_elements),
            "viewport": {"width": int(self.viewport[0]), "height": int(self.viewport[1])},
            "perLayer": {str(k): v.to_dict() for k, v in sorted(self.per_layer.items())},
        }
        if self.error is not None:
            out["error"] = self.error
        return out


__all__ = ["GenerationReport", "MetricValue", "SceneReport"]
