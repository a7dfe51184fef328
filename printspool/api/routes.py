"""
API routes for the spooler binding.

Base URL: /v1
"""

import base64
import logging
from typing import Literal

from fastapi import APIRouter, File, HTTPException, Query, UploadFile
from pydantic import BaseModel, ConfigDict, Field

from printspool.api.dependencies import get_spooler
from printspool.errors import ArgumentError, NotFoundError, SpoolerError
from printspool.printers.base import DEFAULT_DATA_TYPE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1")


class PrintRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    printer_name: str = Field(alias="printerName")
    data: str
    data_type: str = Field(default=DEFAULT_DATA_TYPE, alias="dataType")
    encoding: Literal["text", "base64"] = "text"


async def _run(operation, *args, **kwargs):
    """Call a facade operation and translate spooler errors to HTTP errors."""
    try:
        return await operation(*args, **kwargs)
    except ArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SpoolerError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "backend": get_spooler().backend.name}


@router.get("/printers")
async def list_printers():
    """List all local and connected printers."""
    spooler = get_spooler()
    printers = await _run(spooler.get_printers)
    return {"printers": [record.to_dict() for record in printers]}


@router.get("/printers/default")
async def get_default_printer():
    """Get the OS default printer."""
    spooler = get_spooler()
    record = await _run(spooler.get_system_default_printer)
    return record.to_dict()


@router.get("/printers/{printer_name}")
async def get_printer_status(printer_name: str):
    """Get live status of one printer."""
    spooler = get_spooler()
    record = await _run(spooler.get_status_printer, {"printerName": printer_name})
    return record.to_dict()


@router.post("/print")
async def print_direct(request: PrintRequest):
    """
    Send a raw job to a printer.

    `data` is sent as UTF-8 text, or decoded first when `encoding` is
    "base64" (for binary printer languages).
    """
    spooler = get_spooler()

    if request.encoding == "base64":
        try:
            data = base64.b64decode(request.data, validate=True)
        except ValueError:
            raise HTTPException(status_code=400, detail="data is not valid base64")
    else:
        data = request.data

    message = await _run(
        spooler.print_direct,
        {"printerName": request.printer_name, "data": data, "dataType": request.data_type},
    )
    return {"message": message}


@router.post("/print/raw")
async def print_raw_file(
    file: UploadFile = File(...),
    printer_name: str = Query(..., description="Target printer name"),
    data_type: str = Query(default=DEFAULT_DATA_TYPE, description="Spooler data type"),
):
    """Send an uploaded file to a printer without interpretation."""
    spooler = get_spooler()

    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Empty file")

    message = await _run(spooler.print_direct, printer_name, data, data_type)
    return {"message": message}
