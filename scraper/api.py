"""FastAPI entrypoint: register and carrier lookup endpoints."""
import logging
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .carrier import fetch_carrier_snapshot
from .config import LOG_LEVEL, PORT
from .errors import CarrierNotFound, InvalidRegisterResponse, MissingDateError, NoEntriesFound
from .insurance import fetch_insurance
from .register import SourceKind
from .safety import fetch_safety_profile
from .service import fetch_register

logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

REGISTER_FAILURE_MESSAGES = {
    SourceKind.HTML: 'Failed to scrape FMCSA register data',
    SourceKind.PDF: 'Failed to scrape FMCSA PDF. The file might not be generated yet for this date.',
}

app = FastAPI(title="fmcsa-register")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class RegisterRequest(BaseModel):
    date: Optional[str] = None
    source: SourceKind = SourceKind.HTML


def _register_error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    content: Dict[str, Any] = {'success': False, 'error': error}
    if details is not None:
        content['details'] = details
    content['entries'] = []
    return JSONResponse(status_code=status_code, content=content)


@app.post("/api/fmcsa-register")
async def fmcsa_register(payload: Optional[RegisterRequest] = None):
    """
    Scrape one edition of the FMCSA Register.

    ``source`` selects the HTML detail page (default, date optional) or the
    daily PDF (date required, YYYY-MM-DD).
    """
    payload = payload or RegisterRequest()
    try:
        result = await fetch_register(payload.date, payload.source)
    except MissingDateError as e:
        return _register_error(400, str(e))
    except InvalidRegisterResponse as e:
        return _register_error(400, str(e))
    except NoEntriesFound as e:
        logger.warning(f"[REGISTER] {e}")
        return _register_error(404, str(e))
    except Exception as e:
        logger.error(f"[REGISTER] {payload.source.value.upper()} scrape error: {e}")
        return _register_error(500, REGISTER_FAILURE_MESSAGES[payload.source], str(e))
    return result.to_dict()


@app.get("/api/scrape/carrier/{mc_number}")
async def scrape_carrier(mc_number: str):
    try:
        return await fetch_carrier_snapshot(mc_number)
    except CarrierNotFound:
        return JSONResponse(status_code=404, content={'error': 'Carrier not found'})
    except Exception as e:
        logger.error(f"[SAFER] Carrier scrape error: {e}")
        return JSONResponse(status_code=500, content={'error': 'Failed to scrape carrier data', 'details': str(e)})


@app.get("/api/scrape/safety/{dot_number}")
async def scrape_safety(dot_number: str):
    try:
        return await fetch_safety_profile(dot_number)
    except Exception as e:
        logger.error(f"[SMS] Safety scrape error: {e}")
        return JSONResponse(status_code=500, content={'error': 'Failed to scrape safety data', 'details': str(e)})


@app.get("/api/scrape/insurance/{dot_number}")
async def scrape_insurance(dot_number: str):
    try:
        return await fetch_insurance(dot_number)
    except Exception as e:
        logger.error(f"[INSURANCE] Insurance scrape error: {e}")
        return JSONResponse(status_code=500, content={'error': 'Failed to scrape insurance data', 'details': str(e)})


@app.get("/health")
async def health():
    return {'status': 'ok', 'message': 'FMCSA Scraper Backend is running'}


def main():
    logger.info(f"Backend server running on http://localhost:{PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)


if __name__ == "__main__":
    main()
