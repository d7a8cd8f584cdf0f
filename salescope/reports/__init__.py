"""Report generators: JSON payloads and Excel workbooks."""
from .analysis_report import (
    generate_json,
    generate_view_json,
    generate_comparison_json,
    generate_excel,
    write_workbook,
)
