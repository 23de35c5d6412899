# callaudit/export/__init__.py
# =============================
# Export Layer — CallAudit
#
# Tabular CSV export of an audit session.

from callaudit.export.csv_export import (  # noqa: F401
    content_disposition,
    export_csv,
    export_filename,
)
