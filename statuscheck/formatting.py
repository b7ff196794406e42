from __future__ import annotations

from http import HTTPStatus

from statuscheck.models import CheckState


def status_text(code: int) -> str:
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return ""


def render(state: CheckState) -> str:
    # An error replaces the whole view
    if state.error is not None:
        return f"\n We had some trouble: {state.error}\n\n"

    line = f"Checking {state.target}... "
    if state.status is not None:
        line += f"{state.status} {status_text(state.status)}!"
    return "\n" + line + "\n\n"
