"""
どこで: リポジトリ直下 `main.py`。
何を: 同梱フィギュアを三角格子で埋め、回転アニメーションをプレビュー表示する。
なぜ: 動作確認用の最小エントリポイントとして利用するため。
"""

import logging

from trilattice import run

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run(render_scale=1.0, fps=60.0)
