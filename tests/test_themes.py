from __future__ import annotations

from newsdesk.themes import THEMES, classify_title


def test_classify_title_matches_keywords_in_declaration_order() -> None:
    themes = classify_title("Bitcoin rallies as Fed signals pause; Nasdaq shares climb")
    assert themes == ["Markets", "Stocks", "Crypto", "Economy"]


def test_classify_title_is_case_insensitive_and_total() -> None:
    assert classify_title("") == []
    assert classify_title(None) == []
    assert classify_title("BITCOIN hits record") == ["Crypto"]
    assert classify_title("Local bakery opens second shop") == []


def test_classify_title_results_are_known_themes() -> None:
    titles = [
        "Treasury yields jump after gold slides",
        "Euro weakens against the dollar",
        "JPMorgan and Goldman beat estimates",
        "S&P 500 index closes flat",
    ]
    for title in titles:
        themes = classify_title(title)
        assert set(themes).issubset(THEMES.keys())
        assert len(themes) == len(set(themes))


def test_theme_dictionary_is_read_only() -> None:
    try:
        THEMES["Custom"] = ("anything",)  # type: ignore[index]
    except TypeError:
        pass
    else:  # pragma: no cover
        raise AssertionError("THEMES should reject mutation")
