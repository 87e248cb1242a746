"""キーワードギャップ分析モジュール.

競合の商品テキスト（タイトル + 箇条書き）から n-gram を抽出し、ユーザー商品に
存在しないものを集計する。検索ボリュームは実測ではなく、出現頻度と語数から
算出した推定値（乱数ゆらぎ付き）。
"""

from __future__ import annotations

import logging
import random
import re
from collections import Counter

from listing_intel.models import KeywordGap, ProductRecord

logger = logging.getLogger(__name__)

STOP_WORDS = frozenset({
    "and", "the", "with", "for", "from", "this", "that", "into", "under",
    "premium", "best", "quality", "product", "item",
})

MAX_NGRAM = 3
MIN_WORD_LENGTH = 3
MAX_GAPS = 15

# 推定ボリューム = 頻度 * 900 + 語数 * 350 + [0, 200) のゆらぎ
VOLUME_PER_COMPETITOR = 900
VOLUME_PER_WORD = 350
VOLUME_JITTER = 200

_PUNCTUATION_PATTERN = re.compile(r"[^\w\s]")


def tokenize(text: str) -> list[str]:
    text = _PUNCTUATION_PATTERN.sub("", text.lower())
    return [w for w in text.split() if len(w) >= MIN_WORD_LENGTH]


def extract_phrases(text: str) -> frozenset[str]:
    """1〜3 語の連続 n-gram 集合を返す.

    構成語がすべてストップワードの n-gram のみ除外する。
    """
    words = tokenize(text)
    phrases: set[str] = set()
    for n in range(1, MAX_NGRAM + 1):
        for i in range(len(words) - n + 1):
            gram = words[i:i + n]
            if all(w in STOP_WORDS for w in gram):
                continue
            phrases.add(" ".join(gram))
    return frozenset(phrases)


def product_text(product: ProductRecord) -> str:
    return " ".join([product.title, *product.bullets])


def estimate_volume(frequency: int, word_count: int, rng: random.Random) -> int:
    base = frequency * VOLUME_PER_COMPETITOR + word_count * VOLUME_PER_WORD
    return round(base + rng.uniform(0, VOLUME_JITTER))


def find_keyword_gaps(
    user: ProductRecord,
    competitors: list[ProductRecord],
    rng: random.Random | None = None,
) -> list[KeywordGap]:
    """競合のみが使っている n-gram を重要度・推定ボリューム付きで返す."""
    if not competitors:
        return []
    rng = rng or random.Random()

    user_phrases = extract_phrases(product_text(user))
    frequency: Counter[str] = Counter()
    for competitor in competitors:
        # 競合ごとに重複排除済みの集合で数える
        for phrase in extract_phrases(product_text(competitor)):
            if phrase not in user_phrases:
                frequency[phrase] += 1

    gaps: list[KeywordGap] = []
    # ゆらぎの割り当てをシード固定で再現できるよう語順で処理する
    for keyword, freq in sorted(frequency.items()):
        word_count = len(keyword.split())
        is_phrase = word_count > 1
        is_mandatory = freq == len(competitors)

        if is_mandatory:
            importance = "high"
        elif freq >= 2 or is_phrase:
            importance = "medium"
        else:
            importance = "low"

        if importance == "low" and not is_mandatory:
            continue

        gaps.append(KeywordGap(
            keyword=keyword,
            competitor_frequency=freq,
            volume=estimate_volume(freq, word_count, rng),
            type="Phrase" if is_phrase else "Broad",
            importance=importance,
            is_mandatory=is_mandatory,
        ))

    gaps.sort(key=lambda g: g.volume, reverse=True)
    logger.info("キーワードギャップ: 候補 %d 件中 上位 %d 件", len(gaps), min(len(gaps), MAX_GAPS))
    return gaps[:MAX_GAPS]
