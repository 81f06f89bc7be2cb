# src/jenvek/core/pattern_registry.py
# PatternKind に対応するパターン生成関数レジストリ。
# compositor は文字列分岐ではなく、このテーブルから生成器を引く。

from __future__ import annotations

from collections.abc import ItemsView
from typing import Callable, Protocol, Sequence

from jenvek.core.options import GenerationOptions, PatternKind
from jenvek.core.random_source import RandomSource
from jenvek.core.recursion import RecursionGovernor
from jenvek.core.report import GenerationReport
from jenvek.core.scene import SceneGroup


class PatternFunc(Protocol):
    def __call__(
        self,
        group: SceneGroup,
        options: GenerationOptions,
        palette: Sequence[str],
        *,
        rng: RandomSource,
        governor: RecursionGovernor,
    ) -> GenerationReport: ...


class PatternRegistry:
    """PatternKind と生成関数を対応付けるレジストリ。

    Notes
    -----
    登録された関数のシグネチャは
    ``func(group, options, palette, *, rng, governor) -> GenerationReport`` を想定する。
    options はレイヤー減衰・クランプ済みのものを受け取る。
    """

    def __init__(self) -> None:
        """空のレジストリを初期化する。"""
        self._items: dict[PatternKind, PatternFunc] = {}

    def _register(self, kind: PatternKind, func: PatternFunc, *, overwrite: bool = True) -> None:
        """生成器を登録する（内部用）。

        Notes
        -----
        登録は `@pattern` デコレータ経由に統一する。
        """
        if not overwrite and kind in self._items:
            raise ValueError(f"pattern '{kind.value}' は既に登録されている")
        self._items[kind] = func

    def get(self, kind: PatternKind) -> PatternFunc:
        """PatternKind に対応する生成器を取得する。

        Raises
        ------
        KeyError
            未登録の種類が指定された場合。
        """
        return self._items[kind]

    def __contains__(self, kind: object) -> bool:
        """指定された種類が登録済みかどうかを返す。"""
        return kind in self._items

    def __getitem__(self, kind: PatternKind) -> PatternFunc:
        return self.get(kind)

    def items(self) -> ItemsView[PatternKind, PatternFunc]:
        """登録済みエントリの (kind, func) ビューを返す。"""
        return self._items.items()


pattern_registry = PatternRegistry()
"""グローバルなパターンレジストリインスタンス。"""


def pattern(kind: PatternKind | str, *, overwrite: bool = True) -> Callable[[PatternFunc], PatternFunc]:
    """グローバルパターンレジストリ用デコレータ。

    Parameters
    ----------
    kind : PatternKind | str
        登録する種類。
    overwrite : bool, optional
        既存エントリがある場合に上書きするかどうか。

    Examples
    --------
    @pattern(PatternKind.GRID)
    def grid(group, options, palette, *, rng, governor):
        ...
    """

    resolved = PatternKind.parse(kind)
    if resolved is None:
        raise ValueError(f"未知の pattern 種別: {kind!r}")

    def decorator(func: PatternFunc) -> PatternFunc:
        pattern_registry._register(resolved, func, overwrite=overwrite)
        return func

    return decorator


__all__ = ["PatternFunc", "PatternRegistry", "pattern", "pattern_registry"]
