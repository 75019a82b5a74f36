from __future__ import annotations

import pytest

from src.anything_md.media.media_keys import derive_key, infer_extension

pytestmark = pytest.mark.unit

ALLOW = ("qpic.cn",)


def test_derives_key_from_format_query_parameter():
    cache_key = derive_key("https://mmbiz.qpic.cn/sz_mmbiz_png/abc/640?wx_fmt=png", ALLOW)

    assert cache_key is not None
    assert cache_key.key == "mmbiz_qpic_cn/sz_mmbiz_png/abc/640.png"
    assert cache_key.inferred_extension == "png"


def test_key_derivation_is_deterministic():
    url = "https://mmbiz.qpic.cn/mmbiz_jpg/xyz/0?wx_fmt=jpeg&from=appmsg"
    assert derive_key(url, ALLOW) == derive_key(url, ALLOW)
    assert derive_key(url, ALLOW).key == "mmbiz_qpic_cn/mmbiz_jpg/xyz/0.jpg"


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/image.png",
        "https://qpic.cn.attacker.net/a/640",
        "not a url",
        "ftp://mmbiz.qpic.cn/a/640",
    ],
)
def test_disallowed_or_invalid_urls_have_no_key(url):
    assert derive_key(url, ALLOW) is None


def test_empty_allow_list_rejects_everything():
    assert derive_key("https://mmbiz.qpic.cn/a/640", ()) is None


def test_multiple_suffixes():
    allow = ("qpic.cn", "qlogo.cn")
    cache_key = derive_key("https://mmbiz.qlogo.cn/mmbiz/abc/0", allow)
    assert cache_key is not None
    assert cache_key.key == "mmbiz_qlogo_cn/mmbiz/abc/0.jpg"
    assert derive_key("https://wx.qlogo.cn/x", allow) is not None
    assert derive_key("https://example.org/x", allow) is None


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://mmbiz.qpic.cn/a/640?wx_fmt=gif", "gif"),
        ("https://mmbiz.qpic.cn/a/640?wx_fmt=jpeg", "jpg"),
        ("https://mmbiz.qpic.cn/a/640?wx_fmt=avif", "avif"),
        ("https://mmbiz.qpic.cn/sz_mmbiz_webp/a/640", "webp"),
        ("https://mmbiz.qpic.cn/mmbiz_svg/a/640", "svg"),
        ("https://mmbiz.qpic.cn/sz_mmbiz_gif/a/640?wx_fmt=png", "png"),
        ("https://mmbiz.qpic.cn/a/640", "jpg"),
    ],
)
def test_extension_priority(url, expected):
    assert infer_extension(url) == expected
