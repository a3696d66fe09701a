from contextlib import asynccontextmanager
import logging

from prepscore.core.config.scoring import get_scoring_config
from prepscore.taxonomy import get_ontology

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    get_scoring_config()
    ontology = get_ontology()
    logger.info("startup_ontology_ready version=%s skills=%s", ontology.version, len(ontology.canonical_skills))
    yield
