"""
どこで: `src/jenvek/api/export.py`。
何を: 1 回分の生成とファイル出力をまとめて行うヘッドレス導線 `Export` を提供する。
なぜ: Session や対話ループを立ち上げずに、options から SVG / JSON を直接保存できるようにするため。
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from jenvek.core.compositor import generate
from jenvek.core.options import GenerationOptions, default_options
from jenvek.core.palette import resolve_palette
from jenvek.core.report import SceneReport
from jenvek.core.runtime_config import runtime_config
from jenvek.export.metadata import export_metadata
from jenvek.export.svg import export_svg


class Export:
    """options から 1 シーンを生成し、指定フォーマットで書き出す。"""

    def __init__(
        self,
        options: GenerationOptions | None,
        fmt: str,
        path: str | Path,
        *,
        palette: Sequence[str] | None = None,
        category: str = "warm",
        selector: str | None = None,
        seed: float | None = None,
    ) -> None:
        """export を実行する。

        Parameters
        ----------
        options : GenerationOptions | None
            生成パラメータ。None なら config の viewport を使う既定値。
        fmt : str
            出力フォーマット。`"svg"` または `"json"`。
        path : str or Path
            出力先パス。
        palette : Sequence[str] | None
            色リスト。None なら category/selector から解決する。
        category, selector : str
            palette 未指定時のパレット選択。
        seed : float | None
            明示 seed（seeded mode を強制）。

        Raises
        ------
        ValueError
            未対応のフォーマットが指定された場合。
        """
        self.path = Path(path)
        self.fmt = str(fmt).lower().strip()
        if self.fmt not in {"svg", "json"}:
            raise ValueError(f"未対応の export 形式です: {fmt!r}")

        if options is None:
            options = default_options()
        colors = tuple(palette) if palette is not None else resolve_palette(category, selector)
        self.report: SceneReport = generate(options, colors, seed=seed)

        if self.fmt == "json":
            export_metadata(self.path, report=self.report, options=options.sanitized(), generation_count=1)
            return

        scene = self.report.scene
        if scene is None:
            raise RuntimeError("生成結果に Scene がありません")
        export_svg(scene, self.path, decimals=runtime_config().float_decimals)


__all__ = ["Export"]
