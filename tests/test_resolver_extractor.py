"""
页面提取单元测试

验证标题提取和音频链接的多模式优先级匹配，不访问网络。
"""

from gasmplaylist.resolver.extractor import extract_audio_url, extract_title, unescape_candidate


def test_bare_url_wins_over_json_url():
    """页面同时包含 JSON 链接和裸链接时，先检查的裸链接胜出"""
    html = (
        '<script>var data = {"url":"https:\\/\\/cdn.example\\/json.m4a"};</script>'
        '<a href="https://media.soundgasm.net/sounds/bare.mp3">download</a>'
    )

    assert extract_audio_url(html) == "https://media.soundgasm.net/sounds/bare.mp3"


def test_bare_url_keeps_query_string():
    html = "m4a: 'https://media.soundgasm.net/sounds/abc.m4a?token=1&x=2' }"

    assert extract_audio_url(html) == "https://media.soundgasm.net/sounds/abc.m4a?token=1&x=2"


def test_bare_url_is_case_insensitive():
    html = '<source src="HTTPS://MEDIA.EXAMPLE/TRACK.MP3">'

    assert extract_audio_url(html) == "HTTPS://MEDIA.EXAMPLE/TRACK.MP3"


def test_json_url_is_unescaped():
    """JSON 风格链接中的 \\/ 和 \\u0026 被还原"""
    html = '{"title":"x","url" : "https:\\/\\/cdn.example\\/a.ogg?a=1\\u0026b=2"}'

    assert extract_audio_url(html) == "https://cdn.example/a.ogg?a=1&b=2"


def test_audio_src_fallback():
    html = '<audio controls src="/stream/track-42"></audio>'

    assert extract_audio_url(html) == "/stream/track-42"


def test_audio_src_with_media_url():
    html = '<html><audio preload="none" src="https://media.example/a.m4a"></audio></html>'

    assert extract_audio_url(html) == "https://media.example/a.m4a"


def test_no_pattern_matches():
    html = "<html><body><p>Nothing to play here.</p></body></html>"

    assert extract_audio_url(html) is None


def test_extract_title_is_trimmed():
    html = "<head><TITLE>\n   Soundgasm - My Audio  \n</TITLE></head>"

    assert extract_title(html) == "Soundgasm - My Audio"


def test_extract_title_missing():
    assert extract_title("<head></head>") is None


def test_unescape_candidate():
    assert unescape_candidate("https:\\/\\/a\\/b?x=1\\u0026y=2") == "https://a/b?x=1&y=2"
