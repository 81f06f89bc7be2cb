"""
どこで: `src/jenvek/core/options.py`。
何を: 1 回の生成呼び出しに渡す GenerationOptions（不変の値オブジェクト）と各種列挙を定義する。
なぜ: UI から来る生の値を 1 か所でクランプし、生成器側が NaN や 0 除算を気にせず済むようにするため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Mapping

from jenvek.core.runtime_config import runtime_config

Point = tuple[float, float]

MAX_RECURSION_DEPTH = 64


class PatternKind(str, Enum):
    """パターン生成器の種類。"""

    RANDOM = "random"
    RECURSIVE = "recursive"
    GRID = "grid"
    QUADTREE = "quadtree"
    FIBONACCI = "fibonacci"
    MANDELBROT = "mandelbrot"
    PRIME = "prime"
    TRIG = "trig"
    BEZIER = "bezier"
    LISSAJOUS = "lissajous"

    @classmethod
    def parse(cls, value: object) -> "PatternKind | None":
        """文字列/列挙値を PatternKind に変換する。未知の値なら None を返す。"""

        if isinstance(value, PatternKind):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class FillMode(str, Enum):
    """塗りの解決モード。"""

    NONE = "none"
    SOLID = "solid"
    GRADIENT = "gradient"
    PATTERN = "pattern"


class AnimationKind(str, Enum):
    """属性アニメーションの種類。"""

    PULSE = "pulse"
    ROTATE = "rotate"
    OPACITY = "opacity"
    MORPH = "morph"


@dataclass(frozen=True, slots=True)
class GenerationOptions:
    """1 回の生成パスで使うパラメータ一式。

    Parameters
    ----------
    pattern : str
        パターン名。未知の名前は compositor 側で random にフォールバックする。
    complexity : float
        形状数・分岐数・反復上限を駆動する値。1 以上。
    density : float
        確率/個数のスケール（1..100）。
    max_recursion_depth : int
        再帰系生成器の深さ上限。
    stroke_weight, opacity, scale : float
        線幅・不透明度・スケール。いずれも正の値。
    layer_count, repetition : int
        レイヤー数と要素数の倍率。1 以上。
    fill_mode : FillMode
        塗りモード。
    background_color, stroke_color : str
        背景色と線色（hex）。
    use_cursor_seed, use_time_seed : bool
        どちらかが True なら seeded mode で生成する。
    animation : bool
        生成後に属性アニメーションを開始するかどうか。
    animation_kind : AnimationKind
        アニメーションの種類。
    width, height : int
        ビューポート寸法。
    pointer : Point | None
        現在のカーソル位置（seed 用）。
    captured_x, captured_y : float | None
        キャプチャ済みの単一座標。Bezier の始点を上書きする。
    captured_vector : Point | None
        キャプチャ済みの 2 成分ベクトル。Bezier の終点を上書きする。

    Notes
    -----
    インスタンスは生の値を保持する。生成器へ渡す前に `sanitized()` を通す。
    """

    pattern: str = PatternKind.RANDOM.value
    complexity: float = 5.0
    density: float = 50.0
    max_recursion_depth: int = 5
    stroke_weight: float = 1.0
    opacity: float = 0.8
    scale: float = 1.0
    layer_count: int = 1
    repetition: int = 1
    fill_mode: FillMode = FillMode.SOLID
    background_color: str = "#ffffff"
    stroke_color: str = "#000000"
    use_cursor_seed: bool = False
    use_time_seed: bool = False
    animation: bool = False
    animation_kind: AnimationKind = AnimationKind.PULSE
    width: int = 800
    height: int = 600
    pointer: Point | None = None
    captured_x: float | None = None
    captured_y: float | None = None
    captured_vector: Point | None = None

    @property
    def seeded(self) -> bool:
        """seeded mode で生成すべきなら True を返す。"""

        return bool(self.use_cursor_seed or self.use_time_seed)

    @property
    def viewport(self) -> tuple[int, int]:
        return int(self.width), int(self.height)

    def sanitized(self) -> "GenerationOptions":
        """全数値フィールドをクランプした新しいインスタンスを返す。

        Notes
        -----
        非有限値・非正値は例外にせず、既定値または下限へ寄せる。
        """

        d = _DEFAULTS
        return replace(
            self,
            pattern=_pattern_name(self.pattern) or d.pattern,
            complexity=max(1.0, _finite(self.complexity, d.complexity)),
            density=_clamp(_finite(self.density, d.density), 1.0, 100.0),
            max_recursion_depth=int(
                _clamp(_finite(self.max_recursion_depth, d.max_recursion_depth), 1, MAX_RECURSION_DEPTH)
            ),
            stroke_weight=max(0.01, _finite(self.stroke_weight, d.stroke_weight)),
            opacity=_clamp(_finite(self.opacity, d.opacity), 0.01, 1.0),
            scale=max(0.01, _finite(self.scale, d.scale)),
            layer_count=int(max(1, _finite(self.layer_count, d.layer_count))),
            repetition=int(max(1, _finite(self.repetition, d.repetition))),
            fill_mode=_enum(FillMode, self.fill_mode, d.fill_mode),
            animation_kind=_enum(AnimationKind, self.animation_kind, d.animation_kind),
            width=int(max(1, _finite(self.width, d.width))),
            height=int(max(1, _finite(self.height, d.height))),
            pointer=_point(self.pointer),
            captured_x=_optional_float(self.captured_x),
            captured_y=_optional_float(self.captured_y),
            captured_vector=_point(self.captured_vector),
        )

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "GenerationOptions":
        """UI から来た dict（文字列値を含む）を GenerationOptions に変換する。

        未知のキーは無視し、欠損キーは既定値を使う。戻り値は sanitized 済み。
        """

        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in payload.items():
            if key not in known:
                continue
            kwargs[key] = _coerce_field(key, value)
        return cls(**kwargs).sanitized()

    def to_dict(self) -> dict[str, Any]:
        """JSON 化できる dict を返す。"""

        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, tuple):
                value = list(value)
            out[f.name] = value
        return out


def default_options() -> GenerationOptions:
    """config の `generation.viewport` を寸法に使う既定の GenerationOptions を返す。"""

    width, height = runtime_config().viewport
    return GenerationOptions(width=width, height=height)


_DEFAULTS = GenerationOptions()

_BOOL_FIELDS = {"use_cursor_seed", "use_time_seed", "animation"}
_STR_FIELDS = {"pattern", "background_color", "stroke_color", "fill_mode", "animation_kind"}
_POINT_FIELDS = {"pointer", "captured_vector"}


def _coerce_field(key: str, value: Any) -> Any:
    if key in _BOOL_FIELDS:
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)
    if key in _STR_FIELDS:
        if isinstance(value, Enum):
            return value.value
        return "" if value is None else str(value)
    if key in _POINT_FIELDS:
        return _point(value)
    if key in {"captured_x", "captured_y"}:
        return _optional_float(value)
    return _parse_number(value)


def _pattern_name(value: Any) -> str:
    # 未知の名前は小文字化して残す。compositor がフォールバックをログに出す。
    kind = PatternKind.parse(value)
    if kind is not None:
        return kind.value
    return str(value).strip().lower()


def _parse_number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def _finite(value: Any, default: float) -> float:
    v = _parse_number(value)
    if not math.isfinite(v):
        return float(default)
    return v


def _clamp(value: float, lo: float, hi: float) -> float:
    return lo if value < lo else hi if value > hi else value


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    v = _parse_number(value)
    return v if math.isfinite(v) else None


def _point(value: Any) -> Point | None:
    if value is None:
        return None
    if isinstance(value, Mapping):
        value = (value.get("x"), value.get("y"))
    try:
        x, y = value
    except (TypeError, ValueError):
        return None
    fx = _optional_float(x)
    fy = _optional_float(y)
    if fx is None or fy is None:
        return None
    return fx, fy


def _enum(enum_cls: type[Enum], value: Any, default: Any) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return default


__all__ = [
    "AnimationKind",
    "FillMode",
    "GenerationOptions",
    "MAX_RECURSION_DEPTH",
    "PatternKind",
    "Point",
]
