"""Simple two-language (en/ja) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "en": "FujiView",
        "ja": "富士山ビュー",
    },
    "region_north": {
        "en": "North",
        "ja": "北側",
    },
    "region_south": {
        "en": "South",
        "ja": "南側",
    },
    "time_morning": {
        "en": "Morning",
        "ja": "午前",
    },
    "time_afternoon": {
        "en": "Afternoon",
        "ja": "午後",
    },
    "score_visible": {
        "en": "Visible",
        "ja": "よく見える",
    },
    "score_partly_visible": {
        "en": "Partly Visible",
        "ja": "一部見える",
    },
    "score_barely_visible": {
        "en": "Barely Visible",
        "ja": "かすかに見える",
    },
    "score_not_visible": {
        "en": "Not Visible",
        "ja": "見えない",
    },
    "score_unknown": {
        "en": "No data",
        "ja": "データなし",
    },
    "btn_refresh_all": {
        "en": "Refresh all",
        "ja": "すべて更新",
    },
    "btn_refresh_single": {
        "en": "Refresh",
        "ja": "更新",
    },
    "btn_switch_region": {
        "en": "Switch region",
        "ja": "地域を切り替え",
    },
    "loading": {
        "en": "Loading... ({done}/{total})",
        "ja": "読み込み中... ({done}/{total})",
    },
    "error_protocol": {
        "en": "Request rejected: {error}",
        "ja": "リクエストが拒否されました: {error}",
    },
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key
