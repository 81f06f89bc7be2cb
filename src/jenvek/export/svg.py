"""
どこで: `src/jenvek/export/svg.py`。
何を: 生成済み Scene を SVG マークアップへ直列化し、ファイルへ保存する関数を提供する。
なぜ: interactive 依存なしの headless export（SVG）を用意し、同じ Scene から決定的な出力を得るため。
"""

from __future__ import annotations

from html import escape
from pathlib import Path

from jenvek.core.fill import FillDefinition, GradientStop, LinearGradient, RadialGradient, TilePattern
from jenvek.core.primitives import Circle, Ellipse, Line, Path as PathPrimitive, Polygon, Primitive, Rect
from jenvek.core.scene import Scene

_SVG_NS = "http://www.w3.org/2000/svg"
_FLOAT_DECIMALS = 3
_WHITE = {"#ffffff", "#fff", "white"}


def _fmt(value: float, *, decimals: int = _FLOAT_DECIMALS) -> str:
    """SVG 出力向けに float を決定的な文字列へ変換して返す。"""
    text = f"{float(value):.{int(decimals)}f}"
    if text.startswith("-0") and float(text) == 0.0:
        return text[1:]
    return text


def _attr(name: str, value: str) -> str:
    return f'{name}="{escape(str(value), quote=True)}"'


def _style_attrs(p: Primitive, decimals: int) -> list[str]:
    s = p.style
    out = [
        _attr("fill", s.fill),
        _attr("stroke", s.stroke),
        _attr("stroke-width", _fmt(s.stroke_width, decimals=decimals)),
        _attr("opacity", _fmt(s.opacity, decimals=decimals)),
    ]
    if p.rotation is not None:
        r = p.rotation
        out.append(
            _attr(
                "transform",
                f"rotate({_fmt(r.angle, decimals=decimals)} "
                f"{_fmt(r.cx, decimals=decimals)} {_fmt(r.cy, decimals=decimals)})",
            )
        )
    return out


def _path_d(p: PathPrimitive, decimals: int) -> str:
    parts: list[str] = []
    for cmd, args in p.commands:
        if cmd == "A":
            rx, ry, rot, large, sweep, x, y = args
            parts.append(
                f"A {_fmt(rx, decimals=decimals)} {_fmt(ry, decimals=decimals)} "
                f"{_fmt(rot, decimals=decimals)} {int(large)} {int(sweep)} "
                f"{_fmt(x, decimals=decimals)} {_fmt(y, decimals=decimals)}"
            )
        else:
            parts.append(cmd + " " + " ".join(_fmt(v, decimals=decimals) for v in args))
    return " ".join(parts)


def element_markup(p: Primitive, *, decimals: int = _FLOAT_DECIMALS) -> str:
    """プリミティブ 1 つを SVG 要素文字列へ変換して返す。

    Raises
    ------
    TypeError
        未対応の型が渡された場合。
    """

    def f(v: float) -> str:
        return _fmt(v, decimals=decimals)

    if isinstance(p, Circle):
        geom = [_attr("cx", f(p.cx)), _attr("cy", f(p.cy)), _attr("r", f(p.r))]
    elif isinstance(p, Rect):
        geom = [
            _attr("x", f(p.x)),
            _attr("y", f(p.y)),
            _attr("width", f(p.width)),
            _attr("height", f(p.height)),
        ]
    elif isinstance(p, Ellipse):
        geom = [_attr("cx", f(p.cx)), _attr("cy", f(p.cy)), _attr("rx", f(p.rx)), _attr("ry", f(p.ry))]
    elif isinstance(p, Polygon):
        geom = [_attr("points", " ".join(f"{f(x)},{f(y)}" for x, y in p.points))]
    elif isinstance(p, Line):
        geom = [_attr("x1", f(p.x1)), _attr("y1", f(p.y1)), _attr("x2", f(p.x2)), _attr("y2", f(p.y2))]
    elif isinstance(p, PathPrimitive):
        geom = [_attr("d", _path_d(p, decimals))]
    else:
        raise TypeError(f"SVG へ変換できない型: {type(p)!r}")
    return f"<{p.kind} " + " ".join(geom + _style_attrs(p, decimals)) + " />"


def _stops_markup(stops: tuple[GradientStop, ...], decimals: int) -> list[str]:
    return [
        "      <stop "
        + " ".join(
            [
                _attr("offset", f"{int(s.offset)}%"),
                _attr("stop-color", s.color),
                _attr("stop-opacity", _fmt(s.opacity, decimals=decimals)),
            ]
        )
        + " />"
        for s in stops
    ]


def definition_markup(d: FillDefinition, *, decimals: int = _FLOAT_DECIMALS) -> list[str]:
    """グラデーション/タイル定義を `<defs>` 内の行リストへ変換して返す。"""

    if isinstance(d, LinearGradient):
        head = (
            f'    <linearGradient {_attr("id", d.id)} x1="{d.x1}%" y1="{d.y1}%" '
            f'x2="{d.x2}%" y2="{d.y2}%">'
        )
        return [head, *_stops_markup(d.stops, decimals), "    </linearGradient>"]
    if isinstance(d, RadialGradient):
        head = (
            f'    <radialGradient {_attr("id", d.id)} cx="{d.cx}%" cy="{d.cy}%" r="{d.r}%" '
            f'fx="{d.fx}%" fy="{d.fy}%">'
        )
        return [head, *_stops_markup(d.stops, decimals), "    </radialGradient>"]
    if isinstance(d, TilePattern):
        head = (
            f'    <pattern {_attr("id", d.id)} patternUnits="userSpaceOnUse" '
            f'width="{d.size}" height="{d.size}" '
            f'patternTransform="rotate({d.rotation}) scale({_fmt(d.scale, decimals=decimals)})">'
        )
        body = [f"      {element_markup(d.background, decimals=decimals)}"]
        body.extend(f"      {element_markup(e, decimals=decimals)}" for e in d.elements)
        return [head, *body, "    </pattern>"]
    raise TypeError(f"SVG へ変換できない定義型: {type(d)!r}")


def svg_markup(scene: Scene, *, decimals: int = _FLOAT_DECIMALS, animated: bool = True) -> str:
    """Scene を SVG 文書文字列に変換して返す。

    Parameters
    ----------
    scene : Scene
        生成済みの Scene。
    decimals : int, optional
        座標などの小数桁数。
    animated : bool, optional
        True ならアニメーションの派生属性を反映した現在の見た目を出力する。

    Notes
    -----
    出力順は `<defs>` → 背景 rect（白以外のとき）→ `layer-<i>` グループ → エラー表示。
    """

    w, h = scene.viewport
    lines: list[str] = []
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')
    lines.append(f'<svg xmlns="{_SVG_NS}" viewBox="0 0 {w} {h}" width="{w}" height="{h}">')

    lines.append("  <defs>")
    for d in scene.definitions:
        lines.extend(definition_markup(d, decimals=decimals))
    lines.append("  </defs>")

    if scene.background_color.strip().lower() not in _WHITE:
        lines.append(
            f'  <rect x="0" y="0" width="100%" height="100%" {_attr("fill", scene.background_color)} />'
        )

    elements = scene.current_elements() if animated else scene.iter_elements()
    by_layer: dict[int, list[str]] = {g.index: [] for g in scene.groups}
    for (layer, _), p in elements:
        by_layer[layer].append(f"    {element_markup(p, decimals=decimals)}")
    for group in scene.groups:
        lines.append(f'  <g {_attr("id", group.id)}>')
        lines.extend(by_layer[group.index])
        lines.append("  </g>")

    if scene.error is not None:
        lines.append(
            '  <text x="10" y="50" fill="red" font-family="sans-serif" font-size="16px">'
            f"Error: {escape(scene.error)}</text>"
        )

    lines.append("</svg>")
    return "\n".join(lines) + "\n"


def export_svg(scene: Scene, path: str | Path, *, decimals: int = _FLOAT_DECIMALS) -> Path:
    """Scene を SVG として保存する。

    Returns
    -------
    Path
        保存先パス。
    """
    _path = Path(path)
    text = svg_markup(scene, decimals=decimals)

    _path.parent.mkdir(parents=True, exist_ok=True)
    with _path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(text)

    return _path


__all__ = ["definition_markup", "element_markup", "export_svg", "svg_markup"]
