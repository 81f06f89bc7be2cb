"""
どこで: リポジトリ直下 `main.py`。
何を: API を用いた簡単な生成スクリプトを定義し、SVG と JSON を書き出す。
なぜ: 動作確認用の最小エントリポイントとして利用するため。
"""

import logging
import sys

sys.path.append("src")

from jenvek import Export, GenerationOptions, Session, resolve_palette

CANVAS_WIDTH = 800
CANVAS_HEIGHT = 600


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    options = GenerationOptions(
        pattern="fibonacci",
        complexity=6,
        density=60,
        layer_count=2,
        fill_mode="gradient",
        background_color="#101018",
        width=CANVAS_WIDTH,
        height=CANVAS_HEIGHT,
    )

    session = Session(options, category="neon")
    report = session.generate(seed=42)
    print(report.to_dict())
    print(session.save_svg())
    print(session.save_json())

    Export(
        GenerationOptions(pattern="mandelbrot", complexity=8, density=90),
        "svg",
        "mandelbrot.svg",
        palette=resolve_palette("cool"),
        seed=7,
    )


if __name__ == "__main__":
    main()
