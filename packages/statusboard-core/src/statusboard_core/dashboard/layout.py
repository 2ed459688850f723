"""
Layout factory for the status board.

Layout structure:
+-----------------------------------------------+
|  Header (title, subtitle, progress/countdown) |
+-----------------------------------------------+
|  Board (one panel per displayed group, flex)  |
+-----------------------------------------------+
|  Footer (key hints, page footer)              |
+-----------------------------------------------+
"""

from rich.console import RenderableType
from rich.layout import Layout
from rich.panel import Panel


def create_layout() -> Layout:
    """
    Create the three-region dashboard layout.

    Access regions via layout["header"], layout["board"], layout["footer"].
    """
    layout = Layout(name="root")
    layout.split_column(
        Layout(name="header", size=5),
        Layout(name="board", ratio=1),
        Layout(name="footer", size=4),
    )
    return layout


def make_panel(content: RenderableType, title: str, style: str = "blue") -> Panel:
    """
    Create a styled panel with content.

    Args:
        content: Markup string or renderable
        title: Panel title (will be bolded)
        style: Border style color (default "blue")
    """
    return Panel(
        content,
        title=f"[bold]{title}[/bold]",
        border_style=style,
        padding=(0, 1),
    )
