from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check(request: Request):
    analyzer = getattr(request.app.state, "analyzer", None)
    return {
        "status": "healthy",
        "analyzer": analyzer.model if analyzer is not None else "not_ready",
    }
