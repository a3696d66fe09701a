from fastapi import APIRouter

from prepscore.taxonomy import get_ontology

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    return {"status": "healthy", "ontology_version": get_ontology().version}
