"""
Upload form: POST a saved WebReg page plus term dates, get courses.ics back.
"""
from __future__ import annotations

import argparse
import logging
from datetime import date

import uvicorn
from fastapi import FastAPI, File, Form, HTTPException, Response, UploadFile
from fastapi.responses import HTMLResponse

from . import __version__
from .export import to_ical
from .webreg_html import parse_webreg_html

log = logging.getLogger(__name__)

DEFAULT_TERM_START = "2024-01-08"
DEFAULT_TERM_END = "2024-03-16"

INDEX_HTML = f"""<!doctype html>
<html>
<head>
    <title>Webreg to ics</title>
    <link href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.2/dist/css/bootstrap.min.css" rel="stylesheet">
</head>
<body class="container">
    <br />
    <h1>UCSD Webreg to Calendar</h1>
    <p>Converts an html download from the webreg list view to an iCal file that can be imported to Google Calendar.</p>
    <p>Uses repeating events to avoid flooding the calendar with events.</p>
    <p>Includes all scheduled course meetings including exams.</p>
    <p>Upload the html file saved from <a href="https://act.ucsd.edu/webreg2/start" target="_blank">webreg</a>
       after you select a term (stay in list view). Save the full page contents.</p>
    <hr />
    <form class="d-grid gap-3" method="post" enctype="multipart/form-data">
        <label class="form-label" for="startDate">Term start date</label>
        <input class="form-control" type="date" id="startDate" name="startDate" value="{DEFAULT_TERM_START}" />

        <label class="form-label" for="endDate">Term end date</label>
        <input class="form-control" type="date" id="endDate" name="endDate" value="{DEFAULT_TERM_END}" />

        <label class="form-label" for="file">webregMain.html file</label>
        <input class="form-control" type="file" id="file" name="file" />

        <button class="btn btn-primary" type="submit">Upload</button>
    </form>
</body>
</html>
"""

app = FastAPI(title="WebReg to ICS", version=__version__)


@app.get("/", response_class=HTMLResponse)
async def index():
    return INDEX_HTML


@app.post("/")
async def generate_calendar(
    startDate: date = Form(...),
    endDate: date = Form(...),
    file: UploadFile = File(...),
):
    html = (await file.read()).decode("utf-8", errors="replace")
    try:
        courses = parse_webreg_html(
            html_content=html, start_date=startDate, end_date=endDate
        )
    except ValueError as e:
        log.info("Rejected upload %r: %s", file.filename, e)
        raise HTTPException(status_code=400, detail=str(e))

    log.info("Converted %d course(s) from %r", len(courses), file.filename)
    return Response(
        content=to_ical(courses),
        media_type="application/octet-stream",
        headers={"Content-Disposition": "attachment; filename=courses.ics"},
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the WebReg → ICS upload form.")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address. Default: 0.0.0.0")
    parser.add_argument("--port", type=int, default=3000, help="Port. Default: 3000")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
