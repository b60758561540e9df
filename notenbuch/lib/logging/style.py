from pygments.style import Style
from pygments.token import Keyword, Name, Number, Punctuation, String


class LogStyle(Style):
    """Muted JSON colors that stay readable next to colorlog's level colors."""

    styles = {
        Name.Tag: "#5f87af",
        String: "#87af87",
        Number: "#d7af5f",
        Keyword.Constant: "#af87af",
        Punctuation: "#6c6c6c",
    }
