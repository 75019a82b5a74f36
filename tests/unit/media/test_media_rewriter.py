from __future__ import annotations

import pytest

from src.anything_md.media.media_rewriter import rewrite

pytestmark = pytest.mark.unit

ALLOW = ("qpic.cn",)
BASE = "https://cdn.example/pub"


def test_absorbs_entity_escaped_query_tail():
    text = "![x](https://mmbiz.qpic.cn/img/1?wx_fmt=png&amp;tp=1)"

    result = rewrite(text, ["https://mmbiz.qpic.cn/img/1?wx_fmt=png"], BASE, ALLOW)

    assert result == "![x](https://cdn.example/pub/mmbiz_qpic_cn/img/1.png)"


def test_absorbs_plain_ampersand_query_tail_and_all_occurrences():
    url = "https://mmbiz.qpic.cn/img/2?wx_fmt=gif"
    text = f"![a]({url}&tp=webp&wxfrom=5) and ![b]({url})"

    result = rewrite(text, [url], BASE, ALLOW)

    expected = f"{BASE}/mmbiz_qpic_cn/img/2.gif"
    assert result == f"![a]({expected}) and ![b]({expected})"


def test_rewrite_is_idempotent():
    urls = ["https://mmbiz.qpic.cn/img/1?wx_fmt=png", "https://mmbiz.qpic.cn/img/3"]
    text = (
        "![](https://mmbiz.qpic.cn/img/1?wx_fmt=png&amp;tp=1)\n"
        "<img src=\"https://mmbiz.qpic.cn/img/3\">"
    )

    once = rewrite(text, urls, BASE, ALLOW)
    twice = rewrite(once, urls, BASE, ALLOW)

    assert once == twice
    assert "mmbiz.qpic.cn" not in once


def test_urls_without_key_are_left_untouched():
    text = "![](https://example.com/a.png?x=1&amp;y=2)"
    assert rewrite(text, ["https://example.com/a.png?x=1"], BASE, ALLOW) == text


def test_special_characters_are_matched_literally():
    url = "https://mmbiz.qpic.cn/a+b/(1)?wx_fmt=png"
    lookalike = "https://mmbiz.qpic.cn/aab/(1)?wx_fmt=png"
    result = rewrite(f"{url} {lookalike}", [url], BASE, ALLOW)
    assert result == f"{BASE}/mmbiz_qpic_cn/a+b/(1).png {lookalike}"


def test_longer_url_sharing_a_prefix_is_rewritten_whole():
    short = "https://mmbiz.qpic.cn/a/640"
    long = "https://mmbiz.qpic.cn/a/640?wx_fmt=png"
    result = rewrite(f"![]({long}) ![]({short})", [short, long], BASE, ALLOW)
    assert result == f"![]({BASE}/mmbiz_qpic_cn/a/640.png) ![]({BASE}/mmbiz_qpic_cn/a/640.jpg)"


def test_trailing_slash_on_base_url_is_ignored():
    url = "https://mmbiz.qpic.cn/img/1"
    assert rewrite(url, [url], BASE + "/", ALLOW) == f"{BASE}/mmbiz_qpic_cn/img/1.jpg"


def test_single_plain_ampersand_tail_is_absorbed():
    url = "https://mmbiz.qpic.cn/img/2?wx_fmt=gif"

    result = rewrite(f"![a]({url}&tp=webp)", [url], BASE, ALLOW)

    assert result == f"![a]({BASE}/mmbiz_qpic_cn/img/2.gif)"


def test_mixed_entity_and_plain_tails_are_absorbed():
    url = "https://mmbiz.qpic.cn/img/4?wx_fmt=png"
    text = f'<img src="{url}&amp;tp=webp&wxfrom=5"> ![]({url}&tp=webp&amp;from=appmsg)'

    result = rewrite(text, [url], BASE, ALLOW)

    expected = f"{BASE}/mmbiz_qpic_cn/img/4.png"
    assert result == f'<img src="{expected}"> ![]({expected})'
