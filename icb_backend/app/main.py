# main.py: backend entrypoint
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from icb_backend.app.config import APP_ENV, CORS_ORIGINS, validate_manifest
from icb_backend.app.routers import tools
from icb_backend.app.utils.req_id import REQUEST_ID_HEADER, request_id_from

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title="IndianCoffeeBeans Tools API")

# --- CORS for the Next.js frontend --------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Request ids ---------------------------------------------------------------
@app.middleware("http")
async def _stamp_request_id(request: Request, call_next):
    rid = request_id_from(request.headers)
    response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = rid
    return response

# --- Routers under /api --------------------------------------------------------
app.include_router(tools.router, prefix="/api")

# --- Health --------------------------------------------------------------------
@app.get("/health")
async def health():
    return {"ok": True}

@app.get("/api/health")
async def api_health():
    # mirror the non-prefixed /health so the FE's /api/health succeeds
    return {"ok": True, "env": APP_ENV, "rules": validate_manifest()}

# Print final routes for sanity check
@app.on_event("startup")
async def _log_routes():
    from fastapi.routing import APIRoute
    logger.info("-- Routes mounted --")
    for r in app.router.routes:
        if isinstance(r, APIRoute):
            methods = ",".join(sorted(r.methods))
            logger.info(f"{methods:10s} {r.path}")
    logger.info("-- End routes --")
