from __future__ import annotations

import csv
import io
import logging
from typing import Any, Dict, List, Optional, Tuple

import openpyxl
from django.db import transaction

from notifications.models import Notification, PartnerNotification
from notifications.services import create_notification, create_partner_notification

from .models import Lead
from .serializers import LeadUploadRowSerializer

logger = logging.getLogger(__name__)

# Spreadsheet header -> model field
UPLOAD_COLUMNS = {
    "name": "name",
    "mobileNo": "mobile_no",
    "email": "email",
    "city": "city",
    "platform": "platform",
}


class LeadUploadError(Exception):
    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


def notify_lead_assigned(lead: Lead) -> None:
    if not lead.assigned_to_id:
        return
    create_partner_notification(
        type=PartnerNotification.LEAD_ALLOTED,
        message=f"Lead '{lead.name}' ({lead.city}) has been allotted to you (Lead ID: {lead.id})",
        partner=lead.assigned_to,
        lead=lead,
    )


def notify_lead_status_changed(lead: Lead, old_status: str, actor) -> None:
    create_notification(
        type=Notification.LEAD_STATUS_UPDATE,
        message=f"Partner {actor.name or actor.email} changed lead '{lead.name}' from {old_status} to {lead.status} (Lead ID: {lead.id})",
        partner=actor,
        lead=lead,
    )


def _cell(value) -> str:
    if value is None:
        return ""
    # Excel stores phone numbers as floats: 9876543210.0
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _rows_from_xlsx(content: bytes) -> List[List[str]]:
    try:
        wb = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as e:
        raise LeadUploadError(f"Could not read spreadsheet: {e}")
    try:
        ws = wb.worksheets[0]
        return [[_cell(v) for v in row] for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()


def _rows_from_csv(content: bytes) -> List[List[str]]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise LeadUploadError("CSV file must be UTF-8 encoded")
    return [[_cell(v) for v in row] for row in csv.reader(io.StringIO(text))]


def read_lead_rows(filename: str, content: bytes) -> List[Tuple[int, Dict[str, str]]]:
    """
    Parse the first sheet (or a CSV) into (row number, record) pairs, records
    keyed by model field. Row numbers are as shown in the spreadsheet, header
    being row 1. The header must carry every column in UPLOAD_COLUMNS; extra
    columns are ignored and blank rows skipped.
    """
    name = (filename or "").lower()
    if name.endswith(".csv"):
        rows = _rows_from_csv(content)
    elif name.endswith((".xlsx", ".xlsm")):
        rows = _rows_from_xlsx(content)
    else:
        raise LeadUploadError("Unsupported file type. Upload an .xlsx or .csv file")

    if not rows:
        raise LeadUploadError("The uploaded file is empty")

    header = {h.strip().lower(): idx for idx, h in enumerate(rows[0]) if h}
    missing = [col for col in UPLOAD_COLUMNS if col.lower() not in header]
    if missing:
        raise LeadUploadError(
            "Invalid file format. Required columns: " + ", ".join(UPLOAD_COLUMNS),
            [{"missing": missing}],
        )

    out: List[Tuple[int, Dict[str, str]]] = []
    for row_no, raw in enumerate(rows[1:], start=2):
        if not any(raw):
            continue
        rec = {}
        for col, field in UPLOAD_COLUMNS.items():
            idx = header[col.lower()]
            rec[field] = raw[idx] if idx < len(raw) else ""
        out.append((row_no, rec))
    return out


def import_leads(filename: str, content: bytes) -> List[Lead]:
    """
    Validate every row, then insert all of them in one go. A single bad row
    rejects the whole file so a re-upload never duplicates the good half.
    """
    records = read_lead_rows(filename, content)
    if not records:
        raise LeadUploadError("No lead rows found in the uploaded file")

    errors = []
    leads = []
    for row_no, rec in records:
        ser = LeadUploadRowSerializer(data=rec)
        if not ser.is_valid():
            errors.append({"row": row_no, "errors": ser.errors})
            continue
        leads.append(Lead(status=Lead.STATUS_NEW, **ser.validated_data))

    if errors:
        raise LeadUploadError(f"{len(errors)} invalid row(s); nothing was imported", errors)

    with transaction.atomic():
        created = Lead.objects.bulk_create(leads, batch_size=500)
    logger.info("Imported %s leads from %s", len(created), filename)
    return created
