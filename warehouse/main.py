import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from warehouse.api.routes.warehouse import router as warehouse_router
from warehouse.core.config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title=settings.app_name)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(warehouse_router)


@app.get("/health", tags=["System"])
def health_check():
    return {"status": "ok"}
