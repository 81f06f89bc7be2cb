# どこで: `src/jenvek/__init__.py`。
# 何を: ルート `jenvek` パッケージを定義する。
# なぜ: import 起点を `jenvek` に統一するため。

from __future__ import annotations

from jenvek.api import Export, Session, generate, pattern
from jenvek.core.options import AnimationKind, FillMode, GenerationOptions, PatternKind
from jenvek.core.palette import resolve_palette

__all__ = [
    "AnimationKind",
    "Export",
    "FillMode",
    "GenerationOptions",
    "PatternKind",
    "Session",
    "generate",
    "pattern",
    "resolve_palette",
]
