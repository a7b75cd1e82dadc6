from __future__ import annotations

import logging
from typing import Dict

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from .composer import RenderError, ReportComposer
from .configuration import build_config_metadata, make_report_config
from .models import ConfigMetadata, InspectionRecord
from .utils import build_report_filename

logger = logging.getLogger(__name__)

app = FastAPI(title="Vehicle Inspection Report API", version="0.1.0")

allowed_origins = ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

report_config = make_report_config()
composer = ReportComposer(report_config)


def get_composer() -> ReportComposer:
    return composer


@app.get("/healthz")
def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/config/defaults", response_model=ConfigMetadata)
def get_config_defaults() -> ConfigMetadata:
    return build_config_metadata()


@app.post("/generate-pdf", response_class=Response)
@app.post("/api/generate-pdf", response_class=Response)
def generate_pdf(record: InspectionRecord, renderer: ReportComposer = Depends(get_composer)) -> Response:
    naming = renderer.config.filename
    filename = build_report_filename(
        record.customer.license_plate,
        record.date,
        prefix=naming.prefix,
        fallback_plate=naming.fallback_plate,
        date_format=naming.date_format,
    )
    logger.info(f"Generating {filename} with {len(record.inspection)} inspection item(s)")

    try:
        pdf = renderer.compose(record)
    except RenderError as exc:
        raise HTTPException(status_code=500, detail=f"Failed to generate PDF: {exc}") from exc

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
