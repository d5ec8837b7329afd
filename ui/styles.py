from rich.style import Style
from rich.text import Text
from rich.theme import Theme

from models import RenderTag, WordType

# Muted "Morandi" palette
SAGE = "#8FA9A6"
INK = "#5E5A55"
STONE = "#9E978E"
SUCCESS_GREEN = "#4E8F5A"
ERROR_RED = "#C0392B"
INFO_BLUE = "#5B7893"
MUTED_GRAY = "#9E978E"

WORD_TYPE_STYLES = {
    WordType.VERB: Style(color="#8C5E5E", bgcolor="#EBCBCB", bold=True),
    WordType.NOUN: Style(color="#5B7893", bgcolor="#C4D7E5", bold=True),
    WordType.ADJECTIVE: Style(color="#96834A", bgcolor="#F2E6C2", bold=True),
    WordType.PREPOSITION: Style(color="#617A5D", bgcolor="#C8DBC3", bold=True),
}

RENDER_TAG_STYLES = {
    RenderTag.COMPLETED: Style(color=SUCCESS_GREEN, bold=True, underline=True),
    RenderTag.CURRENT: Style(color=SAGE, bold=True, blink=True),
    RenderTag.FUTURE: Style(color=STONE, dim=True),
}

DEFAULT_THEME = Theme(
    {
        "primary": Style(color=SAGE, bold=True),
        "text": Style(color=INK),
        "success": Style(color=SUCCESS_GREEN, bold=True),
        "error": Style(color=ERROR_RED, bold=True),
        "info": Style(color=INFO_BLUE),
        "muted": Style(color=MUTED_GRAY),
        "title": Style(color=SAGE, bold=True),
        "task_label": Style(color="white", bgcolor=SAGE, bold=True),
    }
)


def get_word_style(word_type: WordType) -> Style:
    """Get chip style for a word type, falling back to the noun color."""
    return WORD_TYPE_STYLES.get(word_type, WORD_TYPE_STYLES[WordType.NOUN])


def get_tag_style(tag: RenderTag) -> Style:
    return RENDER_TAG_STYLES[tag]


def create_welcome_banner() -> Text:
    """Create the welcome banner text."""
    banner = Text()
    banner.append("╔══════════════════════════════════════╗\n", Style(color=SAGE))
    banner.append("║          Phrase Master  Pro          ║\n", Style(color=INK, bold=True))
    banner.append("╚══════════════════════════════════════╝", Style(color=SAGE))
    return banner


def create_session_complete_header() -> Text:
    """Create session complete header."""
    header = Text()
    header.append("🎉 ", Style(color=SAGE))
    header.append("Lesson Complete!", Style(color=SUCCESS_GREEN, bold=True))
    return header
