"""Flat-file interchange formats."""

from dolt_issue_sync.export.jsonl import ExportError, export_issues_jsonl

__all__ = ["ExportError", "export_issues_jsonl"]
