import logging

from fastapi import FastAPI

from prepscore.api.v1.analysis import router as analysis_router
from prepscore.api.v1.health import router as health_router
from prepscore.core.config import settings
from prepscore.core.lifespan import lifespan

logging.basicConfig(level=settings.log_level, format="%(message)s")

app = FastAPI(title="Prepscore API", version="0.1.0", lifespan=lifespan)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(analysis_router, prefix="/v1", tags=["Analysis"])
