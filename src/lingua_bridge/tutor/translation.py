"""
Split a model answer into its English part and its Chinese translation.

The model is asked to append ``<div class="translation">...</div>``, but it
does not always comply, so three strategies are tried in order:

1. the translation div,
2. a ``翻译：`` / ``Translation:`` label line,
3. a last line that looks Chinese.

If none applies, the whole answer is kept as English and a static Chinese
notice stands in for the translation.
"""

import logging
import re

logger = logging.getLogger(__name__)

TRANSLATION_DIV_RE = re.compile(r'<div class="translation">([\s\S]*?)</div>')
CJK_RE = re.compile(r"[\u4e00-\u9fa5]")
TRANSLATION_LABELS = ("翻译：", "Translation:")

MIN_ENGLISH_LENGTH = 10
MIN_LAST_LINE_LENGTH = 5

UNEXTRACTED_TRANSLATION = "中文翻译未能正确提取，请查看英文回复内容。"
DEFAULT_TRANSLATION = "请参考上面的英文解释。如果需要更准确的中文翻译，请重新提问或联系管理员。"
FALLBACK_TEXT = (
    "I apologize, but I couldn't generate a proper response. "
    "Please try asking your question again or rephrase it."
)
FALLBACK_TRANSLATION = "抱歉，我未能生成正确的回复。请重新提问或换一种方式表达您的问题。"


def _from_div(raw: str) -> tuple[str, str] | None:
    match = TRANSLATION_DIV_RE.search(raw)
    if match is None:
        return None
    english = raw.replace(match.group(0), "", 1).strip()
    return english, match.group(1).strip()


def _from_label(raw: str) -> tuple[str, str] | None:
    lines = raw.split("\n")
    for index, line in enumerate(lines):
        if any(label in line for label in TRANSLATION_LABELS):
            english = "\n".join(lines[:index]).strip()
            chinese = "\n".join(lines[index:])
            for label in TRANSLATION_LABELS:
                chinese = chinese.replace(label, "", 1)
            return english, chinese.strip()
    return None


def _from_last_line(raw: str) -> tuple[str, str]:
    lines = raw.split("\n")
    if len(lines) <= 2:
        return raw, UNEXTRACTED_TRANSLATION

    last_line = lines[-1].strip()
    if CJK_RE.search(last_line) and len(last_line) > MIN_LAST_LINE_LENGTH:
        logger.info("Translation extracted from last line (Chinese detected)")
        return "\n".join(lines[:-1]).strip(), last_line

    logger.info("Using default translation")
    return raw, DEFAULT_TRANSLATION


def extract_translation(raw: str) -> tuple[str, str]:
    """
    Apply the three extraction strategies in priority order.

    Example:
        >>> extract_translation('Hello.\\n<div class="translation">你好。</div>')
        ('Hello.', '你好。')
    """
    parts = _from_div(raw)
    if parts is not None:
        logger.info("Translation extracted from div tag")
    else:
        parts = _from_label(raw)
        if parts is not None:
            logger.info("Translation extracted from text marker")
        else:
            parts = _from_last_line(raw)
    return parts[0].strip(), parts[1].strip()


def split_translation(raw: str) -> tuple[str, str]:
    """
    Separate the English answer from its Chinese translation.

    Args:
        raw: The model's full reply text

    Returns:
        ``(english, chinese)``, both trimmed. If the English part ends up
        shorter than 10 characters, both are replaced with a fixed apology.
    """
    english, chinese = extract_translation(raw)
    if len(english) < MIN_ENGLISH_LENGTH:
        logger.warning("English part too short (%d chars), using fallback reply", len(english))
        return FALLBACK_TEXT, FALLBACK_TRANSLATION
    return english, chinese
