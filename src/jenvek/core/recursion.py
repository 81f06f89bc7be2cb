# どこで: `src/jenvek/core/recursion.py`。
# 何を: 再帰/反復ノードの訪問数を数え、ハード上限で打ち切る RecursionGovernor を提供する。
# なぜ: ユーザー指定の深さ/複雑度に関係なく、1 パスの生成が必ず有限時間で終わるようにするため。

from __future__ import annotations

import logging

_logger = logging.getLogger(__name__)

MAX_RECURSION_SAFETY = 10_000


class RecursionGovernor:
    """1 レイヤー分の生成パスに閉じた訪問カウンタ。

    Notes
    -----
    インスタンスはパスごとに作り直す（グローバルに共有しない）。
    上限到達は例外ではなく、以降の `visit()` が False を返すだけ。
    """

    def __init__(self, ceiling: int = MAX_RECURSION_SAFETY) -> None:
        if int(ceiling) <= 0:
            raise ValueError("ceiling は正の値である必要がある")
        self._ceiling = int(ceiling)
        self._count = 0
        self._deepest = -1
        self._halted = False

    @property
    def ceiling(self) -> int:
        return self._ceiling

    @property
    def count(self) -> int:
        """これまでに許可した訪問数。"""

        return self._count

    @property
    def deepest(self) -> int:
        """訪問したノードの最大深さ。未訪問なら -1。"""

        return self._deepest

    @property
    def halted(self) -> bool:
        """上限に達して以降の訪問を拒否したことがあるかどうか。"""

        return self._halted

    def visit(self, depth: int = 0) -> bool:
        """ノード訪問を 1 件申請する。

        Parameters
        ----------
        depth : int
            訪問するノードの深さ。

        Returns
        -------
        bool
            許可なら True（カウンタを 1 進める）。上限到達なら False。
        """

        if self._count >= self._ceiling:
            if not self._halted:
                self._halted = True
                _logger.warning(
                    "再帰の安全上限に達したため以降の分岐を打ち切ります: ceiling=%d",
                    self._ceiling,
                )
            return False
        self._count += 1
        if depth > self._deepest:
            self._deepest = int(depth)
        return True


__all__ = ["MAX_RECURSION_SAFETY", "RecursionGovernor"]
