from __future__ import annotations

from typing import Literal, Optional, Protocol


StatusStyle = Literal["animated", "success", "failure"]


class PresenterPort(Protocol):
    """What the lookup flows need from whatever is drawing the screen."""

    def show_status(self, style: StatusStyle, title: str, message: Optional[str] = None) -> None:
        ...
