"""Tests for splitting model replies into English text and Chinese translation."""

from lingua_bridge.tutor.translation import (
    DEFAULT_TRANSLATION,
    FALLBACK_TEXT,
    FALLBACK_TRANSLATION,
    UNEXTRACTED_TRANSLATION,
    extract_translation,
    split_translation,
)


class TestDivExtraction:
    """The <div class="translation"> marker has top priority."""

    def test_basic(self):
        raw = 'Hello.\n<div class="translation">你好。</div>'
        assert extract_translation(raw) == ("Hello.", "你好。")

    def test_multiline_translation(self):
        raw = (
            "Use 'it' to refer to a thing.\n\n"
            '<div class="translation">\n用 it 指代事物。\n例如：It is raining.\n</div>'
        )
        english, chinese = split_translation(raw)
        assert english == "Use 'it' to refer to a thing."
        assert chinese == "用 it 指代事物。\n例如：It is raining."

    def test_div_wins_over_label(self):
        raw = (
            "Translation: is a noun meaning conversion.\n"
            '<div class="translation">翻译是一个名词。</div>'
        )
        english, chinese = split_translation(raw)
        assert english == "Translation: is a noun meaning conversion."
        assert chinese == "翻译是一个名词。"

    def test_only_first_div_is_removed(self):
        raw = (
            'Example sentence here.\n<div class="translation">一</div>\n'
            '<div class="translation">二</div>'
        )
        english, chinese = extract_translation(raw)
        assert chinese == "一"
        assert english == 'Example sentence here.\n\n<div class="translation">二</div>'

    def test_text_after_div_is_kept(self):
        raw = 'Before the div.\n<div class="translation">中文</div>\nAfter the div.'
        english, _ = extract_translation(raw)
        assert english == "Before the div.\n\nAfter the div."


class TestLabelExtraction:
    """A Translation: / 翻译： line is the second strategy."""

    def test_english_label(self):
        raw = "Line1\nLine2\nTranslation: 翻译内容"
        assert extract_translation(raw) == ("Line1\nLine2", "翻译内容")

    def test_chinese_label_keeps_following_lines(self):
        raw = "The word 'apple' is a fruit.\n翻译：\n苹果是一种水果。\n很好吃。"
        english, chinese = split_translation(raw)
        assert english == "The word 'apple' is a fruit."
        assert chinese == "苹果是一种水果。\n很好吃。"

    def test_splits_at_first_label_line(self):
        raw = "Some explanation text.\nTranslation: 第一\nTranslation: 第二"
        english, chinese = extract_translation(raw)
        assert english == "Some explanation text."
        # Only the first occurrence of each label is stripped
        assert chinese == "第一\nTranslation: 第二"

    def test_label_mid_line(self):
        raw = "Intro line.\nHere is the Translation: 中文部分"
        english, chinese = extract_translation(raw)
        assert english == "Intro line."
        assert chinese == "Here is the  中文部分"


class TestLastLineExtraction:
    """Without markers, a Chinese last line is taken as the translation."""

    def test_chinese_last_line(self):
        raw = "This is the first line.\nThis is the second line.\n这是中文翻译示例"
        english, chinese = split_translation(raw)
        assert english == "This is the first line.\nThis is the second line."
        assert chinese == "这是中文翻译示例"

    def test_last_line_is_trimmed(self):
        raw = "First line of text.\nSecond line.\n   这是中文翻译示例   "
        _, chinese = extract_translation(raw)
        assert chinese == "这是中文翻译示例"

    def test_non_chinese_last_line_uses_default(self):
        raw = "First line of text.\nSecond line of text.\nThird line of text."
        assert split_translation(raw) == (raw, DEFAULT_TRANSLATION)

    def test_short_chinese_last_line_uses_default(self):
        raw = "First line of text.\nSecond line of text.\n你好"
        assert split_translation(raw) == (raw, DEFAULT_TRANSLATION)

    def test_exactly_five_chars_is_too_short(self):
        raw = "First line of text.\nSecond line of text.\n我们是学生"
        _, chinese = extract_translation(raw)
        assert chinese == DEFAULT_TRANSLATION

    def test_two_lines_keeps_unextracted_notice(self):
        raw = "A single paragraph answer.\n这是一个很长的中文句子"
        assert split_translation(raw) == (raw, UNEXTRACTED_TRANSLATION)

    def test_single_line(self):
        raw = "Just one line of English."
        assert split_translation(raw) == (raw, UNEXTRACTED_TRANSLATION)


class TestFallback:
    """Too-short English output is replaced by a fixed apology pair."""

    def test_empty_reply(self):
        assert split_translation("") == (FALLBACK_TEXT, FALLBACK_TRANSLATION)

    def test_short_english_after_div(self):
        raw = 'Hello.\n<div class="translation">你好。</div>'
        assert split_translation(raw) == (FALLBACK_TEXT, FALLBACK_TRANSLATION)

    def test_only_translation_div(self):
        raw = '<div class="translation">只有中文翻译，没有英文内容。</div>'
        assert split_translation(raw) == (FALLBACK_TEXT, FALLBACK_TRANSLATION)

    def test_ten_chars_is_enough(self):
        raw = 'Ten chars!\n<div class="translation">十个字符</div>'
        assert split_translation(raw) == ("Ten chars!", "十个字符")

    def test_whitespace_only(self):
        assert split_translation("   \n  \n ") == (FALLBACK_TEXT, FALLBACK_TRANSLATION)
