# callaudit/api/__init__.py
# ==========================
# API Layer — CallAudit
#
# FastAPI application exposing upload-and-audit, recompute after human
# overrides, CSV export, and timestamp segmentation.
