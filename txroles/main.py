from fastapi import FastAPI
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from txroles.api.routes import router
from txroles.observability.logging import log
from txroles.settings import settings

app = FastAPI(title="Transaction Role Pipeline API")

origins = [x.strip() for x in settings.CORS_ORIGINS.split(",") if x.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/")
def root():
    return {
        "status": "ok",
        "message": "Pipeline API is running. POST /api/proposals, /api/authorizations, /api/payments.",
    }


@app.get("/health")
def health():
    return {"status": "ok"}


# Internal faults still answer in the error-result shape
@app.exception_handler(Exception)
async def universal_exception_handler(request: Request, exc: Exception):
    log(event="unhandled_exception", path=request.url.path, errorType=type(exc).__name__, error=str(exc)[:500])
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": f"Internal error: {type(exc).__name__}"},
    )


log(event="boot", ledgerMode=settings.LEDGER_MODE, storeRecords=bool(settings.STORE_RECORDS))
