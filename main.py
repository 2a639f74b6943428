"""
どこで: リポジトリ直下 `main.py`。
何を: ウィンドウを開き、ドラッグで描いたストロークをループ再生する。
なぜ: 動作確認用の最小エントリポイントとして利用するため。
"""

import logging
import sys

sys.path.append("src")

from yellowtail import run

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run()
