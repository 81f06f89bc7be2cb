# どこで: `src/jenvek/api/__init__.py`。
# 何を: 公開 API パッケージのエントリポイントとして generate/Session/Export と、ユーザー定義登録用の pattern を再エクスポートする。
# なぜ: ユーザーコードからシンプルに API を import できるようにするため。

from __future__ import annotations

from .export import Export
from .session import Session
from jenvek.core.compositor import generate
from jenvek.core.pattern_registry import pattern

__all__ = ["Export", "Session", "generate", "pattern"]
