"""Notification text for assignment records.

Single assignments address a brother, paired assignments a sister with her
assistant; the template is chosen from the record's role.
"""

from src.notifier.models import (
    AssignmentRecord,
    MessageTemplates,
    RenderedMessage,
    Role,
)

DEFAULT_TEMPLATES = MessageTemplates(
    single=(
        "{participant}{marker}，您好！\n"
        "您在传道与生活聚会中有一项节目安排：\n"
        "📅 日期：{localized_date}\n"
        "📝 节目：第{slot_number}项\n"
        "请预先做好准备，谢谢！\n"
        "—— 传道与生活聚会监督"
    ),
    paired=(
        "{participant}{marker}，您好！\n"
        "您在传道与生活聚会中有一项节目安排：\n"
        "📅 日期：{localized_date}\n"
        "📝 节目：第{slot_number}项\n"
        "👥 助手：{co_participant}\n"
        "请预先做好准备，谢谢！\n"
        "—— 传道与生活聚会监督"
    ),
    title_single="{marker} · 第{slot_number}项 · {participant}",
    title_paired="{marker} · 第{slot_number}项 · {participant} / {co_participant}",
    male_marker="弟兄",
    female_marker="姊妹",
)


def _fields(record: AssignmentRecord, templates: MessageTemplates) -> dict[str, object]:
    marker = (
        templates.female_marker if record.role is Role.PAIRED else templates.male_marker
    )
    return {
        "participant": record.participant,
        "co_participant": record.co_participant or "",
        "marker": marker,
        "localized_date": record.localized_date,
        "slot_number": record.slot_number,
    }


def render(
    record: AssignmentRecord, templates: MessageTemplates = DEFAULT_TEMPLATES
) -> str:
    """Full notification text for one record."""
    template = templates.paired if record.role is Role.PAIRED else templates.single
    return template.format(**_fields(record, templates))


def display_title(
    record: AssignmentRecord, templates: MessageTemplates = DEFAULT_TEMPLATES
) -> str:
    """One-line summary for list views, e.g. ``"姊妹 · 第4项 · Alice / Bob"``."""
    template = (
        templates.title_paired if record.role is Role.PAIRED else templates.title_single
    )
    return template.format(**_fields(record, templates))


def render_all(
    records: list[AssignmentRecord], templates: MessageTemplates = DEFAULT_TEMPLATES
) -> list[RenderedMessage]:
    return [
        RenderedMessage(
            title=display_title(record, templates),
            text=render(record, templates),
            record=record,
        )
        for record in records
    ]
