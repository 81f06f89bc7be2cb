"""
どこで: `src/jenvek/core/scene.py`。
何を: 生成器が描き込む描画面（Scene）と、レイヤーごとの要素コンテナ（SceneGroup）を定義する。
なぜ: 生成・アニメーション・エクスポートの全経路で共通のシーン表現を使えるようにするため。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from jenvek.core.animation import AnimatedAttributes, apply_attributes
from jenvek.core.fill import DefinitionsRegistry
from jenvek.core.primitives import Primitive

ElementKey = tuple[int, int]


@dataclass(slots=True)
class SceneGroup:
    """1 レイヤー分の要素列。

    Notes
    -----
    要素は追記のみ。削除は `Scene.reset()` による全消去だけ。
    """

    index: int
    definitions: DefinitionsRegistry
    elements: list[Primitive] = field(default_factory=list)

    @property
    def id(self) -> str:
        return f"layer-{self.index}"

    def add(self, primitive: Primitive) -> Primitive:
        """要素を末尾へ追加し、そのまま返す。"""

        self.elements.append(primitive)
        return primitive

    def extend(self, primitives: list[Primitive]) -> None:
        self.elements.extend(primitives)

    def __len__(self) -> int:
        return len(self.elements)


class Scene:
    """生成結果を保持する描画面。

    Parameters
    ----------
    width, height : int
        ビューポート寸法。
    background_color : str
        背景色。

    Notes
    -----
    - `definitions` はグラデーション/タイル定義の共有コンテナ。
    - `frame` はアニメーションの派生属性（(layer, index) -> AnimatedAttributes）。
      基底の要素は書き換えず、描画時に `current_elements()` で合成する。
    """

    def __init__(self, width: int, height: int, background_color: str = "#ffffff") -> None:
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError(f"Scene の寸法は正の値である必要がある: got={(width, height)}")
        self.width = int(width)
        self.height = int(height)
        self.background_color = str(background_color)
        self.definitions = DefinitionsRegistry()
        self.groups: list[SceneGroup] = []
        self.error: str | None = None
        self.frame: dict[ElementKey, AnimatedAttributes] = {}

    @property
    def viewport(self) -> tuple[int, int]:
        return self.width, self.height

    def reset(
        self,
        *,
        width: int | None = None,
        height: int | None = None,
        background_color: str | None = None,
    ) -> None:
        """全要素・定義・エラー・アニメーション状態を消去する。"""

        if width is not None:
            self.width = int(width)
        if height is not None:
            self.height = int(height)
        if background_color is not None:
            self.background_color = str(background_color)
        self.definitions.clear()
        self.groups.clear()
        self.error = None
        self.frame.clear()

    def add_group(self) -> SceneGroup:
        """次のレイヤー用のグループを追加して返す。"""

        group = SceneGroup(index=len(self.groups), definitions=self.definitions)
        self.groups.append(group)
        return group

    def iter_elements(self) -> Iterator[tuple[ElementKey, Primitive]]:
        """((layer, index), 基底要素) を描画順に返す。"""

        for group in self.groups:
            for i, primitive in enumerate(group.elements):
                yield (group.index, i), primitive

    def current_elements(self) -> Iterator[tuple[ElementKey, Primitive]]:
        """アニメーションの派生属性を反映した要素を描画順に返す。"""

        for key, primitive in self.iter_elements():
            attrs = self.frame.get(key)
            yield key, primitive if attrs is None else apply_attributes(primitive, attrs)

    @property
    def element_count(self) -> int:
        return sum(len(g) for g in self.groups)


__all__ = ["ElementKey", "Scene", "SceneGroup"]
