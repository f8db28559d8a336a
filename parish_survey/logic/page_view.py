"""Page view assembly.

Provides a single function building the view of the visible page for the GET
route and for the responses of every navigation call, so restored values,
visibility and error annotations are derived the same way everywhere.
"""

from __future__ import annotations

from parish_survey.logic.draft_store import restore_page
from parish_survey.logic.navigator import Navigator
from parish_survey.logic.visibility_rules import compute_visible_fields
from parish_survey.models.api import FieldView, PageView


def assemble_page_view(navigator: Navigator, consume_scroll: bool = True) -> PageView:
    """Build the view of the current page.

    The scroll-to-top flag is reported once after a transition and then
    reset, so re-viewing the page does not scroll again.
    """
    session = navigator.session
    page = navigator.current_page
    section = navigator.visible_section()
    restored = restore_page(page, session.answers)
    visible = compute_visible_fields(page, section)
    fields = [
        FieldView(
            field_id=f.field_id,
            kind=f.kind,
            label=f.label,
            required=f.required,
            options=list(f.options),
            value=restored.get(f.field_id),
            visible=f.field_id in visible,
            error=session.errors.get(f.field_id),
        )
        for f in page.fields
    ]
    view = PageView(
        page_key=page.key,
        title=page.title,
        index=session.current_page,
        total=len(navigator.pages),
        progress=round(navigator.progress(), 2),
        is_terminal=navigator.is_terminal,
        visible_section=section,
        scroll_to_top=session.scroll_to_top,
        fields=fields,
        errors=dict(session.errors),
    )
    if consume_scroll:
        session.scroll_to_top = False
    return view


__all__ = ["assemble_page_view"]
