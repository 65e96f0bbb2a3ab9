from image_finder.extraction import (
    ExtractionRule,
    dedupe_preserve_order,
    extract_candidates,
)
from image_finder.models import CandidateUrl

BING_RULES = (ExtractionRule("a.iusc", json_attribute="m"), ExtractionRule(".mimg", json_attribute="m"))


def test_extracts_url_from_json_attribute() -> None:
    html = """
    <a class="iusc" m='{"murl":"https://img.example.com/cat.jpg","turl":"https://tse.example/t.jpg"}'>
      <img src="https://tse.example/thumb.jpg">
    </a>
    """
    candidates = extract_candidates(html, BING_RULES, backend="bing", limit=5)
    assert candidates == [CandidateUrl(url="https://img.example.com/cat.jpg", backend="bing")]


def test_falls_back_to_regex_when_json_is_broken() -> None:
    html = """<a class="iusc" m='{"murl":"https://img.example.com/dog.png", broken'></a>"""
    candidates = extract_candidates(html, BING_RULES, backend="bing", limit=5)
    assert [item.url for item in candidates] == ["https://img.example.com/dog.png"]


def test_falls_back_to_embedded_image_source() -> None:
    html = """
    <a class="iusc" m='{"murl":"https://img.example.com/site-logo.png"}'>
      <img data-src="https://thumbs.example.com/real-photo.jpg">
    </a>
    """
    candidates = extract_candidates(html, BING_RULES, backend="bing", limit=5)
    assert [item.url for item in candidates] == ["https://thumbs.example.com/real-photo.jpg"]


def test_accumulates_across_rules_up_to_limit_and_dedupes() -> None:
    anchors = "".join(
        f"""<a class="iusc" m='{{"murl":"https://img.example.com/{index}.jpg"}}'></a>"""
        for index in range(4)
    )
    html = anchors + """<div class="mimg" m='{"murl":"https://img.example.com/0.jpg"}'></div>"""
    html += """<div class="mimg" m='{"murl":"https://img.example.com/extra.jpg"}'></div>"""
    candidates = extract_candidates(html, BING_RULES, backend="bing", limit=5)
    assert [item.url for item in candidates] == [
        "https://img.example.com/0.jpg",
        "https://img.example.com/1.jpg",
        "https://img.example.com/2.jpg",
        "https://img.example.com/3.jpg",
        "https://img.example.com/extra.jpg",
    ]


def test_only_first_limit_elements_per_rule_are_scanned() -> None:
    tiles = "".join('<img class="tile--img__img" src="https://x.com/icon.png">' for _ in range(3))
    tiles += '<img class="tile--img__img" src="https://x.com/photo.jpg">'
    rules = (ExtractionRule(".tile--img__img", own_source=True),)
    assert extract_candidates(tiles, rules, backend="duckduckgo", limit=3) == []


def test_rejects_blacklisted_and_relative_urls() -> None:
    html = """
    <img class="mimg" src="/relative/photo.jpg">
    <img class="mimg" src="data:image/gif;base64,R0lGOD">
    <img class="mimg" src="https://x.com/avatar.jpg">
    """
    rules = (ExtractionRule(".mimg", own_source=True),)
    assert extract_candidates(html, rules, backend="duckduckgo", limit=5) == []


def test_empty_html_yields_nothing() -> None:
    assert extract_candidates("", BING_RULES, backend="bing", limit=5) == []


def test_dedupe_preserve_order() -> None:
    assert dedupe_preserve_order(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


def test_regex_is_not_used_when_json_parses() -> None:
    html = """<a class="iusc" m='{"meta":{"murl":"https://img.example.com/nested.jpg"}}'></a>"""
    assert extract_candidates(html, BING_RULES, backend="bing", limit=5) == []


def test_own_source_is_read_only_when_rule_allows_it() -> None:
    html = '<img class="mimg" src="https://img.example.com/thumb.jpg">'
    assert extract_candidates(html, BING_RULES, backend="bing", limit=5) == []

    rules = (ExtractionRule(".mimg", own_source=True),)
    candidates = extract_candidates(html, rules, backend="duckduckgo", limit=5)
    assert candidates == [
        CandidateUrl(url="https://img.example.com/thumb.jpg", backend="duckduckgo")
    ]
