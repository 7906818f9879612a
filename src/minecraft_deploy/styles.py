"""Styling for questionary prompts."""

from questionary import Style

# ANSI 256 colours, grass and dirt tones
PROMPT_STYLE = Style(
    [
        ("qmark", "fg:#5faf00 bold"),
        ("question", "bold"),
        ("answer", "fg:#87d700 bold"),
        ("pointer", "fg:#87d700 bold"),
        ("highlighted", "fg:#1c1c1c bg:#87d700 bold"),
        ("selected", "fg:#af875f"),
        ("separator", "fg:#6c6c6c"),
        ("instruction", "fg:#6c6c6c italic"),
        ("text", ""),
        ("disabled", "fg:#585858 italic"),
    ]
)

POINTER = "▶ "
QMARK = "? "
