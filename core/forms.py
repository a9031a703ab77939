"""Forms for core UI and API workflows.

- a spreadsheet upload form (extension + size checks),
- a chart configuration form bound to the current upload's columns,
- a credential form for the JSON login endpoint.
"""

from __future__ import annotations

from django import forms
from django.conf import settings
from django.core.validators import RegexValidator

from analysis.chart_config import (
    CHART_KIND_LABELS,
    CHART_KINDS,
    COLOR_PRESETS,
    DEFAULT_CHART_KIND,
    DEFAULT_COLOR,
    ZOOM_DEFAULT,
    ZOOM_MAX,
    ZOOM_MIN,
    ZOOM_STEP,
    ChartConfig,
)
from analysis.columns import numeric_columns
from analysis.tabular import TabularData
from core.parsers.spreadsheet import file_extension

USERNAME_PATTERN = r"^[a-zA-Z0-9_]{3,20}$"


def _allowed_extensions() -> tuple[str, ...]:
    return tuple(ext.lower() for ext in settings.BANK_UPLOAD_EXTENSIONS)


def _size_label(num_bytes: int) -> str:
    megabytes = num_bytes / (1024 * 1024)
    return f"{megabytes:g}MB"


class SpreadsheetUploadForm(forms.Form):
    """Validate an uploaded Excel workbook before parsing."""

    file = forms.FileField(
        label="Excel file",
        help_text="Upload a .xls or .xlsx file (max 10MB).",
        widget=forms.ClearableFileInput(attrs={"accept": ".xls,.xlsx"}),
    )

    def clean_file(self):
        """Validate extension and size.

        Returns:
            The uploaded file.
        """

        upload = self.cleaned_data["file"]
        allowed = _allowed_extensions()
        if file_extension(upload.name) not in allowed:
            listed = " and ".join(allowed)
            raise forms.ValidationError(f"Invalid file type. Only {listed} files are allowed.")

        max_bytes = settings.BANK_UPLOAD_MAX_BYTES
        if upload.size > max_bytes:
            raise forms.ValidationError(f"File size exceeds {_size_label(max_bytes)} limit.")
        return upload


class ChartConfigForm(forms.Form):
    """Validate chart controls against the current upload's columns."""

    chart_kind = forms.ChoiceField(
        required=False,
        choices=tuple((kind, CHART_KIND_LABELS[kind]) for kind in CHART_KINDS),
        label="Chart type",
    )
    category_column = forms.ChoiceField(required=False, choices=(), label="X-axis (category)")
    value_column = forms.ChoiceField(required=False, choices=(), label="Y-axis (value)")
    min_value = forms.FloatField(required=False, label="Minimum value")
    max_value = forms.FloatField(required=False, label="Maximum value")
    color = forms.ChoiceField(
        required=False,
        choices=tuple((name, name) for name, _value in COLOR_PRESETS),
        label="Color",
    )
    zoom = forms.IntegerField(
        required=False,
        min_value=ZOOM_MIN,
        max_value=ZOOM_MAX,
        step_size=ZOOM_STEP,
        label="Zoom (%)",
    )

    def __init__(self, *args, table: TabularData | None = None, **kwargs) -> None:
        """Bind column choices to `table`.

        Args:
            table: Current upload; None leaves the axis pickers empty.
        """

        super().__init__(*args, **kwargs)
        self.table = table
        blank = [("", "Select column")]
        headers = table.headers if table is not None else ()
        values = numeric_columns(table) if table is not None else ()
        self.fields["category_column"].choices = blank + [(h, h) for h in headers]
        self.fields["value_column"].choices = blank + [(h, h) for h in values]

    def clean(self) -> dict[str, object]:
        """Validate that the filter bounds are ordered."""

        cleaned = super().clean()
        low = cleaned.get("min_value")
        high = cleaned.get("max_value")
        if low is not None and high is not None and low > high:
            raise forms.ValidationError("Minimum value must be less than or equal to maximum value.")
        return cleaned

    def to_config(self) -> ChartConfig:
        """Return a ChartConfig from cleaned data, using defaults for gaps.

        Invalid fields fall back to their defaults so the page can still
        render while showing the form errors.
        """

        data = getattr(self, "cleaned_data", {}) if self.is_bound else {}
        return ChartConfig(
            chart_kind=data.get("chart_kind") or DEFAULT_CHART_KIND,
            category_column=data.get("category_column") or None,
            value_column=data.get("value_column") or None,
            min_filter=data.get("min_value"),
            max_filter=data.get("max_value"),
            color=data.get("color") or DEFAULT_COLOR,
            zoom=data.get("zoom") or ZOOM_DEFAULT,
        )


class ApiLoginForm(forms.Form):
    """Validate JSON credential payloads for the REST login endpoint."""

    username = forms.CharField(
        max_length=150,
        validators=[RegexValidator(USERNAME_PATTERN, message="Invalid username format")],
    )
    password = forms.CharField(max_length=128, strip=False)
