from application.rest.schemas.output.common_output import HealthResponse
from fastapi import APIRouter, status
from utils.config import SERVICE_NAME

router = APIRouter()


@router.get(
    path="/health",
    description="Liveness probe. Does not touch the database.",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": HealthResponse,
            "description": "The service process is up.",
            "content": {
                "application/json": {
                    "example": {"status": "healthy", "service": "user-tags-service"}
                }
            },
        },
    },
)
async def health_check() -> HealthResponse:
    """Report that the service is running, with the configured service name."""
    return HealthResponse(status="healthy", service=SERVICE_NAME)
