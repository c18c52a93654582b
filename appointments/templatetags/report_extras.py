from django import template

from ..services.report_renderer import EMPTY_VALUE

register = template.Library()


@register.filter
def add_class(field, css_class):
    """Return field rendered with an extra CSS class."""
    existing = field.field.widget.attrs.get("class", "")
    classes = f"{existing} {css_class}".strip()
    return field.as_widget(attrs={**field.field.widget.attrs, "class": classes})


@register.filter
def or_na(value):
    """Render empty report values as N/A."""
    if value is None or str(value).strip() == "":
        return EMPTY_VALUE
    return value
