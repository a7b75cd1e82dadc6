"""
Inspection Report Backend - PDF export for vehicle inspection intake forms

This package provides a FastAPI-based web service that turns a submitted
vehicle handover inspection into a downloadable PDF report. It covers:

- Validation of the submitted record (customer, checklist, signature)
- Paginated PDF composition with embedded photos and signature
- Per-item degradation of broken image payloads into inline notes
- Configurable labels, layout and terms through a YAML config file

Key Components:
    - main: FastAPI application and HTTP endpoint definitions
    - composer: ReportComposer, the paginated PDF composition routine
    - images: Data URL decoding and image verification
    - models: Pydantic models for request/response validation
    - configuration: Config loading and merging logic
    - utils: Filename and display helpers

Usage:
    Run the API server with:
        uvicorn inspection_report_backend.main:app --reload --host 0.0.0.0 --port 8000

    Or use the development script:
        uv run uvicorn inspection_report_backend.main:app --reload
"""
