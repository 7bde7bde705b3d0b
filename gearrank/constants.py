from __future__ import annotations

"""Shared vocabularies for the desk-setup and camera verticals.

Category names are the site's display labels (Japanese), exactly as stored in
the products table, so lookups work on raw catalog values without a mapping
step.
"""

from typing import Dict, List, Tuple

# ---------------------------------------------------------------------------
# Price brackets, cheapest first.  Index distance drives price proximity.
# ---------------------------------------------------------------------------

DESKTOUR_PRICE_RANGE_ORDER: Tuple[str, ...] = (
    "under_5000",
    "5000_10000",
    "10000_30000",
    "30000_50000",
    "over_50000",
)

CAMERA_PRICE_RANGE_ORDER: Tuple[str, ...] = (
    "under_5000",
    "5000_10000",
    "10000_30000",
    "30000_50000",
    "50000_100000",
    "100000_300000",
    "over_300000",
)

# ---------------------------------------------------------------------------
# Categories that are commonly bought together ("goes well with").
# ---------------------------------------------------------------------------

DESKTOUR_COMPATIBLE_CATEGORIES: Dict[str, List[str]] = {
    "ディスプレイ・モニター": ["モニターアーム", "モニター台", "デスク", "照明・ライト", "ウェブカメラ", "PCスタンド・ノートPCスタンド"],
    "モニターアーム": ["ディスプレイ・モニター", "デスク", "ケーブル・ハブ"],
    "モニター台": ["ディスプレイ・モニター", "デスク", "収納・整理"],
    "キーボード": ["マウス", "デスクマット", "PCスタンド・ノートPCスタンド", "左手デバイス"],
    "マウス": ["キーボード", "デスクマット", "マウス"],
    "デスク": ["チェア", "モニターアーム", "モニター台", "デスクマット", "収納・整理", "照明・ライト"],
    "チェア": ["デスク", "照明・ライト"],
    "マイク": ["オーディオインターフェース", "ヘッドホン・イヤホン", "ウェブカメラ", "照明・ライト"],
    "ウェブカメラ": ["マイク", "照明・ライト", "ディスプレイ・モニター"],
    "ヘッドホン・イヤホン": ["オーディオインターフェース", "マイク", "スピーカー"],
    "スピーカー": ["オーディオインターフェース", "ヘッドホン・イヤホン"],
    "照明・ライト": ["デスク", "ディスプレイ・モニター", "ウェブカメラ"],
    "PCスタンド・ノートPCスタンド": ["キーボード", "マウス", "ディスプレイ・モニター", "ドッキングステーション", "USBハブ"],
    "ケーブル・ハブ": ["充電器・電源", "ドッキングステーション", "デスク", "USBハブ"],
    "USBハブ": ["PC本体", "ドッキングステーション", "充電器・電源", "ケーブル・ハブ"],
    "デスクマット": ["キーボード", "マウス", "デスク"],
    "収納・整理": ["デスク", "ケーブル・ハブ", "モニター台"],
    "PC本体": ["ディスプレイ・モニター", "キーボード", "マウス", "ドッキングステーション", "USBハブ"],
    "タブレット": ["PCスタンド・ノートPCスタンド", "キーボード", "充電器・電源", "ペンタブ"],
    "ペンタブ": ["タブレット", "ディスプレイ・モニター", "左手デバイス", "PCスタンド・ノートPCスタンド"],
    "充電器・電源": ["ケーブル・ハブ", "ドッキングステーション", "USBハブ"],
    "オーディオインターフェース": ["マイク", "ヘッドホン・イヤホン", "スピーカー"],
    "ドッキングステーション": ["PC本体", "ディスプレイ・モニター", "充電器・電源", "ケーブル・ハブ", "USBハブ"],
    "左手デバイス": ["キーボード", "マウス", "ペンタブ"],
    "HDD・SSD": ["PC本体", "ドッキングステーション"],
}

CAMERA_COMPATIBLE_CATEGORIES: Dict[str, List[str]] = {
    "カメラ": ["レンズ", "マイク・音声", "三脚", "ジンバル", "ストレージ", "バッグ・収納"],
    "レンズ": ["カメラ", "三脚", "カメラ装着アクセサリー", "バッグ・収納"],
    "三脚": ["カメラ", "レンズ", "ジンバル", "照明"],
    "ジンバル": ["カメラ", "三脚", "カメラ装着アクセサリー"],
    "マイク・音声": ["カメラ", "収録・制御機器", "カメラ装着アクセサリー"],
    "照明": ["カメラ", "三脚", "カメラ装着アクセサリー", "収録・制御機器"],
    "ストレージ": ["カメラ", "収録・制御機器", "カメラ装着アクセサリー"],
    "カメラ装着アクセサリー": ["カメラ", "レンズ", "照明", "収録・制御機器"],
    "収録・制御機器": ["カメラ", "マイク・音声", "照明", "カメラ装着アクセサリー"],
    "バッグ・収納": ["カメラ", "レンズ", "三脚"],
    "ドローンカメラ": ["ストレージ", "バッグ・収納", "カメラ装着アクセサリー"],
}

# list-valued catalog columns
TAG_COLUMNS = ["tags", "lens_tags", "body_tags"]

# optional scalar catalog columns; blanks are coerced to None
OPTIONAL_TEXT_COLUMNS = [
    "slug",
    "brand",
    "subcategory",
    "price_range",
    "asin",
    "amazon_image_url",
]

PRODUCT_REQUIRED_COLUMNS = ["id", "name", "category"]
MENTION_REQUIRED_COLUMNS = ["product_id"]
