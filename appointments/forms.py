from django import forms

from .documents import SUPPORTED_EXTENSIONS


class StyledForm(forms.Form):
    """Apply basic Bootstrap classes to all widgets."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            widget = field.widget
            css = widget.attrs.get("class", "")
            widget.attrs["class"] = f"form-control {css}".strip()
            if isinstance(widget, forms.Textarea):
                widget.attrs.setdefault("rows", 14)


class DocumentForm(StyledForm):
    text = forms.CharField(
        label="Texto del documento (OCR)",
        required=False,
        widget=forms.Textarea(attrs={"placeholder": "Pegue aquí el texto de las dos páginas del formulario"}),
    )
    document = forms.FileField(
        label="o suba un archivo (.txt / .pdf)",
        required=False,
        widget=forms.ClearableFileInput(attrs={"accept": ",".join(sorted(SUPPORTED_EXTENSIONS))}),
    )

    def clean(self):
        cleaned = super().clean()
        text = (cleaned.get("text") or "").strip()
        cleaned["text"] = text
        if not text and not cleaned.get("document"):
            raise forms.ValidationError("Pegue el texto del documento o suba un archivo.")
        return cleaned
